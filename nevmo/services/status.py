import logging
from typing import Any, Dict, Optional

from nevmo.errors import NotFoundError, StatusError
from nevmo.records import TransferRecord
from nevmo.services.transfers import TransferClient

logger = logging.getLogger(__name__)

# Provider answers meaning "no such reference"; MoMo uses 400 for ids that are not UUIDs
UNKNOWN_REFERENCE_STATUS_CODES = (400, 404)


class StatusView:
    def __init__(
        self,
        transaction: Optional[TransferRecord] = None,
        provider_status: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        self.transaction = transaction
        self.provider_status = provider_status
        self.message = message


async def get_status(reference_id: str, client: TransferClient) -> StatusView:
    """
    Combined local + provider view of one transfer.

    - known, still in flight: re-query the provider, refresh, return both
    - known, terminal: cached record only, no provider call
    - unknown locally: ask the provider directly

    Raises:
        NotFoundError: if neither the ledger nor the provider knows the id
        StatusError / AuthError: if the provider could not be queried
    """
    record = client.store.get(reference_id)

    if record is not None:
        if record.is_terminal:
            return StatusView(transaction=record)
        provider_status = await client.query_status(reference_id)
        return StatusView(transaction=client.store.get(reference_id), provider_status=provider_status)

    try:
        provider_status = await client.query_status(reference_id)
    except StatusError as e:
        if e.status_code in UNKNOWN_REFERENCE_STATUS_CODES:
            logger.info("Reference %s unknown to ledger and provider", reference_id)
            raise NotFoundError(f"Transaction {reference_id} not found") from e
        raise
    return StatusView(provider_status=provider_status, message="Transaction found in MTN system")
