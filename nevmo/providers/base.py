from abc import ABC, abstractmethod
from typing import Any, Dict


class DisbursementProvider(ABC):
    """Abstract base for mobile money disbursement backends."""

    @abstractmethod
    async def create_transfer(
        self,
        reference_id: str,
        amount: float,
        currency: str,
        payee: str,
        message: str,
    ) -> Dict[str, Any]:
        """
        Ask the provider to pay `amount` to the `payee` MSISDN.
        Returns the provider's raw (possibly empty) response body.

        Raises:
            AuthError: if no access token could be obtained
            TransferError: if the provider rejects the transfer or is unreachable
        """
        pass

    @abstractmethod
    async def get_transfer(self, reference_id: str) -> Dict[str, Any]:
        """
        Fetch the provider's view of a transfer (`{status, ...}`).

        Raises:
            AuthError: if no access token could be obtained
            StatusError: if the lookup fails; status_code is set when the
                provider answered (404 for an unknown reference)
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    async def aclose(self) -> None:
        """Release network resources, if any."""
