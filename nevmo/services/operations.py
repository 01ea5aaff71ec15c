"""
Donate, save and withdraw.

Donations and savings are paid to the platform's own number; the two differ
only in the message attached to the transfer. Withdrawals go the other way,
from the platform to the caller's phone.
"""
from typing import Any, Optional

from nevmo.services.transfers import TransferClient
from nevmo.services.validation import check_amount, normalize_phone, require_text

DEFAULT_DONATION_MESSAGE = "Donation from Akin NevMo"
DEFAULT_FREQUENCY = "monthly"
WITHDRAWAL_MESSAGE = "Withdrawal from Akin NevMo savings"


class OperationResult:
    def __init__(self, transaction_id: str, message: str):
        self.transaction_id = transaction_id
        self.message = message


def _display_amount(amount: float) -> str:
    return str(int(amount)) if amount.is_integer() else str(amount)


async def donate(
    client: TransferClient,
    platform_phone: str,
    phone: Any,
    amount: Any,
    message: Optional[str] = None,
) -> OperationResult:
    amount = check_amount(amount)
    clean_phone = normalize_phone(phone)
    note = (message or "").strip() or DEFAULT_DONATION_MESSAGE

    result = await client.transfer(amount, platform_phone, f"{note} from {clean_phone}", kind="donate")
    return OperationResult(
        result.reference_id,
        f"Donation of {_display_amount(amount)} {client.currency} initiated!",
    )


async def save(
    client: TransferClient,
    platform_phone: str,
    goal: Any,
    amount: Any,
    frequency: Optional[str] = None,
) -> OperationResult:
    amount = check_amount(amount)
    goal = require_text(goal, "Goal")
    frequency = (frequency or "").strip() or DEFAULT_FREQUENCY

    result = await client.transfer(amount, platform_phone, f'Savings for "{goal}" ({frequency})', kind="save")
    return OperationResult(
        result.reference_id,
        f'Savings of {_display_amount(amount)} {client.currency} initiated for "{goal}"!',
    )


async def withdraw(client: TransferClient, phone: Any, amount: Any) -> OperationResult:
    amount = check_amount(amount)
    clean_phone = normalize_phone(phone)

    result = await client.transfer(amount, clean_phone, WITHDRAWAL_MESSAGE, kind="withdraw")
    return OperationResult(
        result.reference_id,
        f"Withdrawal of {_display_amount(amount)} {client.currency} initiated!",
    )
