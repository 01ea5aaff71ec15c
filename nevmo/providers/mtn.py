from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import quote

import httpx

from nevmo.config import Settings
from nevmo.errors import StatusError, TransferError, provider_message
from nevmo.providers.auth import TokenProvider, response_body
from nevmo.providers.base import DisbursementProvider

logger = logging.getLogger(__name__)

PAYEE_NOTE = "From Akin NevMo"


def format_amount(amount: float) -> str:
    """MoMo wants amounts as strings; whole numbers go without a trailing .0"""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


class MtnDisbursementProvider(DisbursementProvider):
    """
    MTN MoMo Disbursement API (v1_0).

    Transfer: POST /disbursement/v1_0/transfer, answered with 202 Accepted
    and an empty body; the outcome is read later with
    GET /disbursement/v1_0/transfer/{referenceId}.
    """

    TRANSFER_PATH = "/disbursement/v1_0/transfer"

    def __init__(self, client: httpx.AsyncClient, token_provider: TokenProvider, settings: Settings) -> None:
        self._client = client
        self._tokens = token_provider
        self.base_url = settings.base_url.rstrip("/")
        self.subscription_key = settings.subscription_key
        self.target_environment = settings.target_environment

    @classmethod
    def from_settings(cls, settings: Settings) -> "MtnDisbursementProvider":
        client = httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds))
        tokens = TokenProvider(
            client,
            base_url=settings.base_url,
            consumer_key=settings.consumer_key,
            consumer_secret=settings.consumer_secret,
            subscription_key=settings.subscription_key,
            target_environment=settings.target_environment,
        )
        return cls(client, tokens, settings)

    @property
    def provider_name(self) -> str:
        return "mtn"

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Ocp-Apim-Subscription-Key": self.subscription_key,
            "X-Target-Environment": self.target_environment,
        }

    async def create_transfer(
        self,
        reference_id: str,
        amount: float,
        currency: str,
        payee: str,
        message: str,
    ) -> Dict[str, Any]:
        token = await self._tokens.acquire_token()
        headers = self._headers(token)
        headers["X-Reference-Id"] = reference_id
        body = {
            "amount": format_amount(amount),
            "currency": currency,
            "externalId": reference_id,
            "payee": {"partyIdType": "MSISDN", "partyId": payee},
            "payerMessage": message,
            "payeeNote": PAYEE_NOTE,
        }
        url = f"{self.base_url}{self.TRANSFER_PATH}"
        try:
            resp = await self._client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error("MTN transfer error ref=%s: %s", reference_id, e)
            raise TransferError(payload=str(e)) from e

        payload = response_body(resp)
        if resp.is_error:
            logger.error("MTN transfer error ref=%s: HTTP %s %s", reference_id, resp.status_code, payload)
            raise TransferError(
                provider_message(payload, TransferError.default_message),
                payload=payload,
                status_code=resp.status_code,
            )
        logger.info("MTN transfer accepted ref=%s HTTP %s", reference_id, resp.status_code)
        return payload if isinstance(payload, dict) else {}

    async def get_transfer(self, reference_id: str) -> Dict[str, Any]:
        token = await self._tokens.acquire_token()
        url = f"{self.base_url}{self.TRANSFER_PATH}/{quote(reference_id, safe='')}"
        try:
            resp = await self._client.get(url, headers=self._headers(token))
        except httpx.HTTPError as e:
            logger.error("MTN status error ref=%s: %s", reference_id, e)
            raise StatusError(payload=str(e)) from e

        payload = response_body(resp)
        if resp.is_error:
            logger.error("MTN status error ref=%s: HTTP %s %s", reference_id, resp.status_code, payload)
            raise StatusError(
                provider_message(payload, StatusError.default_message),
                payload=payload,
                status_code=resp.status_code,
            )
        if not isinstance(payload, dict):
            raise StatusError("Unexpected status response from MTN", payload=payload, status_code=resp.status_code)
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()
