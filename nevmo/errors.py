"""
Error types shared by the provider clients, the ledger and the HTTP layer.

Routes never build error bodies by hand: the exception handlers registered in
nevmo.main map each type to a status code and a `{success: false, error}` body.
"""
from typing import Any, Optional


class ValidationError(ValueError):
    """Bad or missing caller input. Rendered as HTTP 400."""


class DuplicateReferenceError(ValidationError):
    def __init__(self, reference_id: str):
        super().__init__(f"Reference id {reference_id} has already been used")
        self.reference_id = reference_id


class NotFoundError(LookupError):
    """Neither the ledger nor the provider knows the reference id. HTTP 404."""


class MomoError(RuntimeError):
    """
    Base class for failures that originate at the payment provider.

    `payload` is the raw error body (or transport error text) for diagnostics,
    `status_code` the provider's HTTP status when a response was received.
    """

    default_message = "Mobile money provider error"

    def __init__(
        self,
        message: Optional[str] = None,
        payload: Any = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message or self.default_message)
        self.payload = payload
        self.status_code = status_code


class AuthError(MomoError):
    default_message = "Failed to authenticate with MTN API"


class TransferError(MomoError):
    default_message = "Transfer failed"


class StatusError(MomoError):
    default_message = "Failed to get transfer status"


def provider_message(payload: Any, fallback: str) -> str:
    """Pick the human readable part of a provider error body, if any."""
    if isinstance(payload, dict):
        for key in ("error", "message", "reason"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and value.get("message"):
                return str(value["message"])
    return fallback
