from fastapi import APIRouter, Depends

from nevmo.deps import get_transfer_client
from nevmo.schemas.responses import TransactionListResponse, TransactionOut, TransactionStatusResponse
from nevmo.services.status import get_status
from nevmo.services.transfers import TransferClient

router = APIRouter()


@router.get("/transaction/{reference_id}", response_model=TransactionStatusResponse, response_model_exclude_none=True)
async def get_transaction(reference_id: str, client: TransferClient = Depends(get_transfer_client)):
    """
    Look up one transfer.

    - Known and still INITIATED/ACCEPTED: refreshed from MTN, both views returned
    - Known and settled: cached record, MTN is not called
    - Unknown locally: looked up in MTN directly (404 if MTN does not know it either)
    """
    view = await get_status(reference_id, client)
    return TransactionStatusResponse(
        message=view.message,
        transaction=TransactionOut.model_validate(view.transaction) if view.transaction else None,
        mtm_status=view.provider_status,
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(client: TransferClient = Depends(get_transfer_client)):
    """All locally known transfers, keyed by reference id (admin/debugging)."""
    records = client.store.list()
    return TransactionListResponse(
        count=len(records),
        transactions={r.reference_id: TransactionOut.model_validate(r) for r in records},
    )
