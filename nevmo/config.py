from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True), override=False)


PLACEHOLDER_PREFIX = "YOUR_"


def _float(raw: str, default: float) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    app_env: str = os.getenv("APP_ENV", "production")

    # MTN MoMo disbursement API
    consumer_key: str = os.getenv("MTN_CONSUMER_KEY", "YOUR_CONSUMER_KEY")
    consumer_secret: str = os.getenv("MTN_CONSUMER_SECRET", "YOUR_CONSUMER_SECRET")
    subscription_key: str = os.getenv("MTN_SUBSCRIPTION_KEY", "YOUR_SUBSCRIPTION_KEY")
    base_url: str = os.getenv("BASE_URL", "https://sandbox.momodeveloper.mtn.com")
    target_environment: str = os.getenv("TARGET_ENVIRONMENT", "sandbox")
    currency: str = os.getenv("MOMO_CURRENCY", "XAF")
    http_timeout_seconds: float = _float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"), 30.0)

    # mtn | sandbox
    provider: str = os.getenv("MOMO_PROVIDER", "mtn")

    # Where donations and savings are paid to, and withdrawals paid from
    platform_phone: str = os.getenv("PLATFORM_PHONE", "231887716973")

    # memory | sql
    ledger_backend: str = os.getenv("LEDGER_BACKEND", "memory")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./nevmo.db")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    @property
    def uses_placeholder_credentials(self) -> bool:
        return any(
            value.startswith(PLACEHOLDER_PREFIX)
            for value in (self.consumer_key, self.consumer_secret, self.subscription_key)
        )


settings = Settings()


def get_settings() -> Settings:
    return settings
