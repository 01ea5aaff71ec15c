"""
Transfer client.

Orchestrates one money movement:
1. Record the transfer as INITIATED (before any network call)
2. Ask the provider to pay (token exchange happens inside the provider)
3. Mark ACCEPTED with the provider payload, or FAILED with the error payload

and status refreshes for known references.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from nevmo.errors import MomoError
from nevmo.providers.base import DisbursementProvider
from nevmo.records import ACCEPTED, FAILED, TransferRecord, can_transition
from nevmo.services.ledger import TransactionStore

logger = logging.getLogger(__name__)


def new_reference_id() -> str:
    # MoMo requires X-Reference-Id to be a UUID4
    return str(uuid.uuid4())


class TransferResult:
    def __init__(self, reference_id: str, provider_payload: Dict[str, Any]):
        self.reference_id = reference_id
        self.provider_payload = provider_payload


class TransferClient:
    def __init__(self, provider: DisbursementProvider, store: TransactionStore, currency: str = "XAF"):
        self.provider = provider
        self.store = store
        self.currency = currency

    async def transfer(
        self,
        amount: float,
        recipient_party: str,
        message: str,
        reference_id: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> TransferResult:
        """
        Pay `amount` to `recipient_party`.

        Raises:
            DuplicateReferenceError: if reference_id was used before
            AuthError: if the token exchange failed (record marked FAILED)
            TransferError: if the provider rejected the transfer (record marked FAILED)
            Any other exception from the provider, including cancellation, also
            marks the record FAILED before propagating.
        """
        reference_id = reference_id or new_reference_id()
        self.store.put(TransferRecord(
            reference_id=reference_id,
            amount=amount,
            currency=self.currency,
            recipient_party=recipient_party,
            message=message,
            kind=kind,
        ))
        logger.info("Transfer %s initiated: %s %s to %s", reference_id, amount, self.currency, recipient_party)

        try:
            payload = await self.provider.create_transfer(
                reference_id, amount, self.currency, recipient_party, message,
            )
        except MomoError as e:
            logger.error("Transfer %s failed: %s payload=%s", reference_id, e, e.payload)
            self.store.update(reference_id, status=FAILED, provider_error=e.payload or str(e))
            raise
        except BaseException as e:
            # cancellation or a provider bug; the record must not stay INITIATED
            logger.exception("Transfer %s aborted: %r", reference_id, e)
            self.store.update(reference_id, status=FAILED, provider_error=str(e) or type(e).__name__)
            raise

        self.store.update(reference_id, status=ACCEPTED, provider_response=payload)
        return TransferResult(reference_id, payload)

    async def query_status(self, reference_id: str) -> Dict[str, Any]:
        """
        Ask the provider for the transfer's status and refresh the local record.

        Raises:
            StatusError: if the provider lookup failed
            AuthError: if the token exchange failed
        """
        payload = await self.provider.get_transfer(reference_id)

        record = self.store.get(reference_id)
        if record is not None:
            changes: Dict[str, Any] = {"status_details": payload}
            reported = payload.get("status")
            if isinstance(reported, str) and can_transition(record.status, reported):
                changes["status"] = reported
                logger.info("Transfer %s: %s -> %s", reference_id, record.status, reported)
            self.store.update(reference_id, **changes)
        return payload
