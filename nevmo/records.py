from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional


INITIATED = "INITIATED"
ACCEPTED = "ACCEPTED"
FAILED = "FAILED"

NON_TERMINAL_STATUSES = (INITIATED, ACCEPTED)
# Provider statuses that mean "still in flight"; they never move a record
PROVIDER_IN_FLIGHT_STATUSES = ("PENDING", "CREATED")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_terminal(status: str) -> bool:
    return status not in NON_TERMINAL_STATUSES


def can_transition(current: str, new: str) -> bool:
    """
    Forward-only status moves:
    INITIATED -> ACCEPTED -> {terminal}, INITIATED -> FAILED.
    A provider status query may settle an INITIATED record directly.
    """
    if current == new or is_terminal(current):
        return False
    if new == INITIATED or new in PROVIDER_IN_FLIGHT_STATUSES:
        return False
    return True


@dataclass
class TransferRecord:
    reference_id: str
    amount: float
    recipient_party: str
    message: str
    currency: str = "XAF"
    kind: Optional[str] = None
    status: str = INITIATED
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    provider_response: Optional[Any] = None
    provider_error: Optional[Any] = None
    status_details: Optional[Dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)

    def copy(self, **changes) -> "TransferRecord":
        return replace(self, **changes)
