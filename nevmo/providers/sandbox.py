import asyncio
import random
from datetime import datetime, timezone
from typing import Any, Dict

from nevmo.errors import StatusError, TransferError
from nevmo.providers.base import DisbursementProvider


class SandboxProvider(DisbursementProvider):
    """
    Offline stand-in for the MTN disbursement API.
    Accepts every transfer and reports it SUCCESSFUL on the next status query.
    Latency: 10-200ms (configurable)
    Error rate: `failure_rate`, 0 by default
    """

    def __init__(self, failure_rate: float = 0.0, latency: tuple = (0.01, 0.2)):
        self.failure_rate = failure_rate
        self.latency = latency
        self._transfers: Dict[str, Dict[str, Any]] = {}

    @property
    def provider_name(self) -> str:
        return "sandbox"

    async def _simulate_network(self) -> bool:
        await asyncio.sleep(random.uniform(*self.latency))
        return random.random() < self.failure_rate

    async def create_transfer(
        self,
        reference_id: str,
        amount: float,
        currency: str,
        payee: str,
        message: str,
    ) -> Dict[str, Any]:
        if await self._simulate_network():
            raise TransferError(
                "Sandbox: 503 Service Unavailable",
                payload={"code": "SERVICE_UNAVAILABLE"},
                status_code=503,
            )
        self._transfers[reference_id] = {
            "amount": str(amount),
            "currency": currency,
            "financialTransactionId": str(random.randint(10**8, 10**9 - 1)),
            "externalId": reference_id,
            "payee": {"partyIdType": "MSISDN", "partyId": payee},
            "payerMessage": message,
            "payeeNote": "From Akin NevMo",
            "status": "SUCCESSFUL",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        return {}

    async def get_transfer(self, reference_id: str) -> Dict[str, Any]:
        if await self._simulate_network():
            raise StatusError("Sandbox: connection timeout")
        transfer = self._transfers.get(reference_id)
        if transfer is None:
            raise StatusError(
                "Resource not found",
                payload={"code": "RESOURCE_NOT_FOUND", "message": "Requested resource was not found."},
                status_code=404,
            )
        return dict(transfer)
