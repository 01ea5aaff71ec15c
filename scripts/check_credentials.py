"""
Checks that the configured MTN credentials can obtain a disbursement token.

Reads the same environment / .env as the service. Exits 0 when a token was
issued, 1 otherwise. The token itself is never printed.
"""
import asyncio
import os
import sys

import httpx

# Allow running from project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nevmo.config import settings  # noqa: E402
from nevmo.errors import AuthError  # noqa: E402
from nevmo.providers.auth import TokenProvider  # noqa: E402


async def _check() -> bool:
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    async with httpx.AsyncClient(timeout=timeout) as client:
        tokens = TokenProvider(
            client,
            base_url=settings.base_url,
            consumer_key=settings.consumer_key,
            consumer_secret=settings.consumer_secret,
            subscription_key=settings.subscription_key,
            target_environment=settings.target_environment,
        )
        try:
            await tokens.acquire_token()
        except AuthError as e:
            print(f"token request failed: {e} ({e.payload})", file=sys.stderr)
            return False
    return True


def main() -> int:
    if settings.uses_placeholder_credentials:
        print("MTN credentials are still placeholders, edit .env first", file=sys.stderr)
        return 1
    if not asyncio.run(_check()):
        return 1
    print(f"ok: token issued by {settings.base_url} ({settings.target_environment})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
