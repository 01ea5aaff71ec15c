from __future__ import annotations

import logging

import httpx

from nevmo.errors import AuthError

logger = logging.getLogger(__name__)


class TokenProvider:
    """
    Client-credentials grant against the MTN disbursement token endpoint.

    Tokens are not cached: every transfer or status query asks for a fresh
    one, which keeps expiry handling out of the picture for this
    low-volume, human-triggered flow.
    """

    TOKEN_PATH = "/disbursement/token/"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        subscription_key: str,
        target_environment: str,
    ) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(consumer_key, consumer_secret)
        self.subscription_key = subscription_key
        self.target_environment = target_environment

    async def acquire_token(self) -> str:
        url = f"{self.base_url}{self.TOKEN_PATH}"
        headers = {
            "Ocp-Apim-Subscription-Key": self.subscription_key,
            "X-Target-Environment": self.target_environment,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            resp = await self._client.post(
                url,
                data={"grant_type": "client_credentials"},
                headers=headers,
                auth=self._auth,
            )
        except httpx.HTTPError as e:
            logger.error("MTN auth error: %s", e)
            raise AuthError(payload=str(e)) from e

        if resp.is_error:
            payload = response_body(resp)
            logger.error("MTN auth error: HTTP %s %s", resp.status_code, payload)
            raise AuthError(payload=payload, status_code=resp.status_code)

        body = response_body(resp)
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            logger.error("MTN auth error: access_token missing in response")
            raise AuthError(payload="access_token missing in response", status_code=resp.status_code)
        return token


def response_body(resp: httpx.Response):
    """JSON body when there is one, raw text otherwise."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    return data if data is not None else {}
