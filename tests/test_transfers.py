"""
Unit tests for nevmo/services/transfers.py and the donate/save/withdraw operations.

The provider is always a mock; assertions are made on what it was asked to do
and on what ended up in the ledger.
"""
import asyncio
from unittest.mock import AsyncMock
import uuid

import pytest

from nevmo.errors import AuthError, DuplicateReferenceError, StatusError, TransferError, ValidationError
from nevmo.records import ACCEPTED, FAILED, INITIATED
from nevmo.services import operations
from nevmo.services.transfers import TransferClient

PLATFORM = "231887716973"


class TestTransfer:
    async def test_success_marks_record_accepted(self, transfer_client, provider, store):
        result = await transfer_client.transfer(500, "231880000001", "hello")

        record = store.get(result.reference_id)
        assert record.status == ACCEPTED
        assert record.amount == 500
        assert record.recipient_party == "231880000001"
        assert record.provider_response == {}
        provider.create_transfer.assert_awaited_once_with(
            result.reference_id, 500, "XAF", "231880000001", "hello",
        )

    async def test_generated_reference_is_uuid4(self, transfer_client):
        result = await transfer_client.transfer(500, PLATFORM, "hello")
        assert uuid.UUID(result.reference_id).version == 4

    async def test_caller_supplied_reference_returned_unchanged(self, transfer_client, store):
        result = await transfer_client.transfer(500, PLATFORM, "hello", reference_id="my-ref")
        assert result.reference_id == "my-ref"
        assert store.get("my-ref").status == ACCEPTED

    async def test_reused_reference_rejected_without_provider_call(self, transfer_client, provider):
        await transfer_client.transfer(500, PLATFORM, "hello", reference_id="my-ref")
        with pytest.raises(DuplicateReferenceError):
            await transfer_client.transfer(700, PLATFORM, "again", reference_id="my-ref")
        assert provider.create_transfer.await_count == 1

    async def test_record_written_before_provider_call(self, store, provider):
        seen = {}

        async def create_transfer(reference_id, *args):
            seen["status"] = store.get(reference_id).status
            return {}

        provider.create_transfer = AsyncMock(side_effect=create_transfer)
        await TransferClient(provider, store).transfer(500, PLATFORM, "hello")
        assert seen["status"] == INITIATED

    async def test_provider_rejection_marks_failed(self, transfer_client, provider, store):
        provider.create_transfer = AsyncMock(side_effect=TransferError(
            "PAYEE_NOT_FOUND", payload={"code": "PAYEE_NOT_FOUND"}, status_code=409,
        ))
        with pytest.raises(TransferError):
            await transfer_client.transfer(500, "231880000001", "hello", reference_id="r1")

        record = store.get("r1")
        assert record.status == FAILED
        assert record.provider_error == {"code": "PAYEE_NOT_FOUND"}

    async def test_failed_token_exchange_still_recorded(self, transfer_client, provider, store):
        provider.create_transfer = AsyncMock(side_effect=AuthError(payload={"error": "invalid_client"}))
        with pytest.raises(AuthError):
            await transfer_client.transfer(500, PLATFORM, "hello", reference_id="r1")
        assert store.get("r1").status == FAILED
        assert store.get("r1").provider_error == {"error": "invalid_client"}

    async def test_cancellation_marks_failed(self, transfer_client, provider, store):
        provider.create_transfer = AsyncMock(side_effect=asyncio.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await transfer_client.transfer(500, PLATFORM, "hello", reference_id="r1")

        record = store.get("r1")
        assert record.status == FAILED
        assert record.provider_error == "CancelledError"

    async def test_unexpected_provider_error_marks_failed(self, transfer_client, provider, store):
        provider.create_transfer = AsyncMock(side_effect=RuntimeError("connection pool closed"))
        with pytest.raises(RuntimeError):
            await transfer_client.transfer(500, PLATFORM, "hello", reference_id="r1")

        record = store.get("r1")
        assert record.status == FAILED
        assert record.provider_error == "connection pool closed"


class TestQueryStatus:
    async def test_refreshes_known_record(self, transfer_client, provider, store):
        result = await transfer_client.transfer(500, PLATFORM, "hello")
        provider.get_transfer = AsyncMock(return_value={"status": "SUCCESSFUL", "financialTransactionId": "42"})

        payload = await transfer_client.query_status(result.reference_id)

        assert payload["status"] == "SUCCESSFUL"
        record = store.get(result.reference_id)
        assert record.status == "SUCCESSFUL"
        assert record.status_details["financialTransactionId"] == "42"

    async def test_pending_keeps_record_accepted(self, transfer_client, provider, store):
        result = await transfer_client.transfer(500, PLATFORM, "hello")
        provider.get_transfer = AsyncMock(return_value={"status": "PENDING"})

        await transfer_client.query_status(result.reference_id)

        record = store.get(result.reference_id)
        assert record.status == ACCEPTED
        assert record.status_details == {"status": "PENDING"}

    async def test_terminal_status_never_moves_back(self, transfer_client, provider, store):
        result = await transfer_client.transfer(500, PLATFORM, "hello")
        provider.get_transfer = AsyncMock(return_value={"status": "FAILED", "reason": "NOT_ENOUGH_FUNDS"})
        await transfer_client.query_status(result.reference_id)
        provider.get_transfer = AsyncMock(return_value={"status": "SUCCESSFUL"})
        await transfer_client.query_status(result.reference_id)

        assert store.get(result.reference_id).status == "FAILED"

    async def test_unknown_record_returns_payload_without_writing(self, transfer_client, store):
        payload = await transfer_client.query_status("elsewhere")
        assert payload == {"status": "SUCCESSFUL"}
        assert store.get("elsewhere") is None

    async def test_provider_error_propagates(self, transfer_client, provider):
        provider.get_transfer = AsyncMock(side_effect=StatusError(status_code=500))
        with pytest.raises(StatusError):
            await transfer_client.query_status("r1")


class TestOperations:
    async def test_donate_pays_platform_with_caller_in_message(self, transfer_client, provider):
        result = await operations.donate(transfer_client, PLATFORM, "+231 880-000-001", 500)

        args = provider.create_transfer.await_args.args
        assert args[3] == PLATFORM
        assert args[4] == "Donation from Akin NevMo from 231880000001"
        assert result.message == "Donation of 500 XAF initiated!"

    async def test_donate_custom_message(self, transfer_client, provider):
        await operations.donate(transfer_client, PLATFORM, "231880000001", 500, message="For the kids")
        assert provider.create_transfer.await_args.args[4] == "For the kids from 231880000001"

    async def test_save_pays_platform_with_goal_message(self, transfer_client, provider):
        result = await operations.save(transfer_client, PLATFORM, "School fees", 1000)

        args = provider.create_transfer.await_args.args
        assert args[3] == PLATFORM
        assert args[4] == 'Savings for "School fees" (monthly)'
        assert result.message == 'Savings of 1000 XAF initiated for "School fees"!'

    async def test_save_custom_frequency(self, transfer_client, provider):
        await operations.save(transfer_client, PLATFORM, "Rent", 250.5, frequency="weekly")
        assert provider.create_transfer.await_args.args[4] == 'Savings for "Rent" (weekly)'

    async def test_withdraw_pays_caller(self, transfer_client, provider, store):
        result = await operations.withdraw(transfer_client, "231-880-000-001", 300)

        args = provider.create_transfer.await_args.args
        assert args[3] == "231880000001"
        assert args[4] == "Withdrawal from Akin NevMo savings"
        assert store.get(result.transaction_id).kind == "withdraw"

    @pytest.mark.parametrize("amount", [0, 50, 99.5])
    async def test_small_amounts_rejected_everywhere(self, transfer_client, provider, store, amount):
        with pytest.raises(ValidationError):
            await operations.donate(transfer_client, PLATFORM, "231880000001", amount)
        with pytest.raises(ValidationError):
            await operations.save(transfer_client, PLATFORM, "Goal", amount)
        with pytest.raises(ValidationError):
            await operations.withdraw(transfer_client, "231880000001", amount)
        provider.create_transfer.assert_not_awaited()
        assert store.count() == 0

    async def test_short_phone_rejected(self, transfer_client, provider):
        with pytest.raises(ValidationError):
            await operations.withdraw(transfer_client, "123", 500)
        with pytest.raises(ValidationError):
            await operations.donate(transfer_client, PLATFORM, "12-34", 500)
        provider.create_transfer.assert_not_awaited()
