"""
Process-wide collaborators handed to routes through FastAPI's Depends.

Tests swap them out with app.dependency_overrides.
"""
from typing import Optional

from nevmo.config import Settings, settings
from nevmo.providers.base import DisbursementProvider
from nevmo.providers.mtn import MtnDisbursementProvider
from nevmo.providers.sandbox import SandboxProvider
from nevmo.services.ledger import InMemoryTransactionStore, SqlTransactionStore, TransactionStore
from nevmo.services.transfers import TransferClient

_store: Optional[TransactionStore] = None
_client: Optional[TransferClient] = None


def build_provider(cfg: Settings) -> DisbursementProvider:
    if cfg.provider == "sandbox":
        return SandboxProvider()
    if cfg.provider == "mtn":
        return MtnDisbursementProvider.from_settings(cfg)
    raise ValueError(f"Unknown MOMO_PROVIDER: {cfg.provider}")


def build_store(cfg: Settings) -> TransactionStore:
    if cfg.ledger_backend == "memory":
        return InMemoryTransactionStore()
    if cfg.ledger_backend == "sql":
        from nevmo.database import Base, SessionLocal, engine

        Base.metadata.create_all(bind=engine)
        return SqlTransactionStore(SessionLocal)
    raise ValueError(f"Unknown LEDGER_BACKEND: {cfg.ledger_backend}")


def get_store() -> TransactionStore:
    global _store
    if _store is None:
        _store = build_store(settings)
    return _store


def get_transfer_client() -> TransferClient:
    global _client
    if _client is None:
        _client = TransferClient(build_provider(settings), get_store(), currency=settings.currency)
    return _client


async def aclose_shared() -> None:
    global _client
    if _client is not None:
        await _client.provider.aclose()
        _client = None
