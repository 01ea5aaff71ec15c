from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TransactionOut(CamelModel):
    reference_id: str
    amount: float
    currency: str
    recipient_party: str
    message: str
    kind: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
    provider_response: Optional[Any] = None
    provider_error: Optional[Any] = None
    status_details: Optional[Dict[str, Any]] = None


class OperationResponse(CamelModel):
    success: bool = True
    message: str
    transaction_id: str
    status: Optional[str] = None  # hint where to poll


class TransactionStatusResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    transaction: Optional[TransactionOut] = None
    # provider's raw status payload; the key name is what the web page reads
    mtm_status: Optional[Dict[str, Any]] = None


class TransactionListResponse(CamelModel):
    success: bool = True
    count: int
    transactions: Dict[str, TransactionOut]


class HealthResponse(CamelModel):
    status: str
    platform_phone: str
    target_environment: str
    provider: str
    transaction_count: int
    timestamp: datetime


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
