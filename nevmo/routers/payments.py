from fastapi import APIRouter, Depends

from nevmo.config import Settings, get_settings
from nevmo.deps import get_transfer_client
from nevmo.schemas.requests import DonateRequest, SaveRequest, WithdrawRequest
from nevmo.schemas.responses import OperationResponse
from nevmo.services import operations
from nevmo.services.transfers import TransferClient

router = APIRouter()


@router.post("/donate", response_model=OperationResponse, response_model_exclude_none=True)
async def donate(
    request: DonateRequest,
    client: TransferClient = Depends(get_transfer_client),
    settings: Settings = Depends(get_settings),
):
    """
    Donate to the platform.

    The payee is always the platform number; the caller's phone only ends up
    in the transfer message.
    """
    result = await operations.donate(client, settings.platform_phone, request.phone, request.amount, request.message)
    return OperationResponse(
        message=result.message,
        transaction_id=result.transaction_id,
        status=f"Check status using /api/transaction/{result.transaction_id}",
    )


@router.post("/save", response_model=OperationResponse, response_model_exclude_none=True)
async def save(
    request: SaveRequest,
    client: TransferClient = Depends(get_transfer_client),
    settings: Settings = Depends(get_settings),
):
    """Put money towards a savings goal (paid to the platform number)."""
    result = await operations.save(client, settings.platform_phone, request.goal, request.amount, request.frequency)
    return OperationResponse(message=result.message, transaction_id=result.transaction_id)


@router.post("/withdraw", response_model=OperationResponse, response_model_exclude_none=True)
async def withdraw(request: WithdrawRequest, client: TransferClient = Depends(get_transfer_client)):
    """Pay out from the platform to the caller's phone."""
    result = await operations.withdraw(client, request.phone, request.amount)
    return OperationResponse(message=result.message, transaction_id=result.transaction_id)
