"""
Shared pytest fixtures for all test modules.

The provider is an AsyncMock so tests can assert on call counts without any
network; the ledger is a fresh in-memory store per test. The SQL store
fixture uses an in-memory SQLite database (StaticPool) so every test gets a
clean, isolated table.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nevmo import models  # noqa: F401  (registers the transfers table)
from nevmo.database import Base
from nevmo.deps import get_transfer_client
from nevmo.providers.base import DisbursementProvider
from nevmo.services.ledger import InMemoryTransactionStore, SqlTransactionStore
from nevmo.services.transfers import TransferClient


def mock_provider(transfer_payload=None, status_payload=None):
    """AsyncMock provider: accepts every transfer, reports `status_payload` on lookups."""
    m = AsyncMock(spec=DisbursementProvider)
    m.provider_name = "mock"
    m.create_transfer = AsyncMock(return_value=transfer_payload if transfer_payload is not None else {})
    m.get_transfer = AsyncMock(
        return_value=status_payload if status_payload is not None else {"status": "SUCCESSFUL"}
    )
    return m


@pytest.fixture
def provider():
    return mock_provider()


@pytest.fixture
def store():
    return InMemoryTransactionStore()


@pytest.fixture
def transfer_client(provider, store):
    return TransferClient(provider, store, currency="XAF")


@pytest.fixture
def sql_store():
    """SqlTransactionStore over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield SqlTransactionStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(transfer_client):
    """
    FastAPI TestClient with the shared TransferClient overridden.
    Not used as a context manager, so the lifespan hook is skipped.
    """
    from nevmo.main import app

    app.dependency_overrides[get_transfer_client] = lambda: transfer_client
    yield TestClient(app)
    app.dependency_overrides.clear()
