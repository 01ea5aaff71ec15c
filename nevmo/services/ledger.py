"""
Transaction ledger: the locally known transfer records, keyed by reference id.

Handlers and the TransferClient only see the TransactionStore interface.
InMemoryTransactionStore is the default (process-local, lost on restart);
SqlTransactionStore keeps the same records in a SQLAlchemy table.
"""
import threading
from abc import ABC, abstractmethod
from datetime import timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from nevmo import models
from nevmo.errors import DuplicateReferenceError, NotFoundError
from nevmo.records import TransferRecord, utcnow


# Fields update() may change; reference_id is fixed once stored
UPDATABLE_FIELDS = (
    "amount", "currency", "recipient_party", "message", "kind", "status",
    "created_at", "updated_at", "provider_response", "provider_error", "status_details",
)


def _check_fields(changes) -> None:
    for name in changes:
        if name not in UPDATABLE_FIELDS:
            raise AttributeError(f"Unknown transfer field: {name}")


class TransactionStore(ABC):
    """Abstract base for ledger backends."""

    @abstractmethod
    def get(self, reference_id: str) -> Optional[TransferRecord]:
        """Return a copy of the record, or None."""

    @abstractmethod
    def put(self, record: TransferRecord) -> TransferRecord:
        """
        Insert a new record.

        Raises:
            DuplicateReferenceError: if the reference id is already stored
        """

    @abstractmethod
    def update(self, reference_id: str, **changes) -> TransferRecord:
        """
        Apply field changes and bump updated_at.

        Raises:
            NotFoundError: if the reference id is not stored
            AttributeError: if a change names a field outside UPDATABLE_FIELDS
        """

    @abstractmethod
    def list(self) -> List[TransferRecord]:
        """All records, oldest first."""

    def count(self) -> int:
        return len(self.list())


class InMemoryTransactionStore(TransactionStore):
    def __init__(self):
        self._records: Dict[str, TransferRecord] = {}
        self._lock = threading.Lock()

    def get(self, reference_id: str) -> Optional[TransferRecord]:
        with self._lock:
            record = self._records.get(reference_id)
        return record.copy() if record else None

    def put(self, record: TransferRecord) -> TransferRecord:
        with self._lock:
            if record.reference_id in self._records:
                raise DuplicateReferenceError(record.reference_id)
            self._records[record.reference_id] = record.copy()
        return record.copy()

    def update(self, reference_id: str, **changes) -> TransferRecord:
        with self._lock:
            current = self._records.get(reference_id)
            if current is None:
                raise NotFoundError(f"Transaction {reference_id} not found")
            _check_fields(changes)
            changes.setdefault("updated_at", utcnow())
            updated = current.copy(**changes)
            self._records[reference_id] = updated
        return updated.copy()

    def list(self) -> List[TransferRecord]:
        with self._lock:
            records = list(self._records.values())
        return sorted((r.copy() for r in records), key=lambda r: r.created_at)

    def count(self) -> int:
        with self._lock:
            return len(self._records)


def _aware(dt):
    # SQLite hands back naive datetimes even for timezone=True columns
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _to_record(row: models.Transfer) -> TransferRecord:
    return TransferRecord(
        reference_id=row.reference_id,
        amount=row.amount,
        currency=row.currency,
        recipient_party=row.recipient_party,
        message=row.message,
        kind=row.kind,
        status=row.status,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        provider_response=row.provider_response,
        provider_error=row.provider_error,
        status_details=row.status_details,
    )


class SqlTransactionStore(TransactionStore):
    """Ledger backed by the `transfers` table; one session per operation."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get(self, reference_id: str) -> Optional[TransferRecord]:
        with self._session_factory() as db:
            row = db.get(models.Transfer, reference_id)
            return _to_record(row) if row else None

    def put(self, record: TransferRecord) -> TransferRecord:
        row = models.Transfer(reference_id=record.reference_id)
        for column in UPDATABLE_FIELDS:
            setattr(row, column, getattr(record, column))
        with self._session_factory() as db:
            if db.get(models.Transfer, record.reference_id) is not None:
                raise DuplicateReferenceError(record.reference_id)
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise DuplicateReferenceError(record.reference_id)
            db.refresh(row)
            return _to_record(row)

    def update(self, reference_id: str, **changes) -> TransferRecord:
        changes.setdefault("updated_at", utcnow())
        with self._session_factory() as db:
            row = db.get(models.Transfer, reference_id)
            if row is None:
                raise NotFoundError(f"Transaction {reference_id} not found")
            _check_fields(changes)
            for column, value in changes.items():
                setattr(row, column, value)
            db.commit()
            db.refresh(row)
            return _to_record(row)

    def list(self) -> List[TransferRecord]:
        with self._session_factory() as db:
            rows = db.query(models.Transfer).order_by(models.Transfer.created_at).all()
            return [_to_record(row) for row in rows]

    def count(self) -> int:
        with self._session_factory() as db:
            return db.query(models.Transfer).count()
