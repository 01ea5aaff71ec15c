import pytest

from nevmo.errors import StatusError, TransferError
from nevmo.providers.sandbox import SandboxProvider
from nevmo.services.status import get_status
from nevmo.services.transfers import TransferClient


@pytest.fixture
def sandbox():
    return SandboxProvider(latency=(0, 0))


async def test_accepted_transfer_reports_successful(sandbox):
    await sandbox.create_transfer("ref-1", 500, "XAF", "231887716973", "hello")
    status = await sandbox.get_transfer("ref-1")
    assert status["status"] == "SUCCESSFUL"
    assert status["payee"]["partyId"] == "231887716973"


async def test_unknown_reference_is_404(sandbox):
    with pytest.raises(StatusError) as exc:
        await sandbox.get_transfer("nope")
    assert exc.value.status_code == 404


async def test_failure_rate_one_always_fails():
    sandbox = SandboxProvider(failure_rate=1.0, latency=(0, 0))
    with pytest.raises(TransferError):
        await sandbox.create_transfer("ref-1", 500, "XAF", "231887716973", "hello")


async def test_full_flow_through_transfer_client(sandbox, store):
    client = TransferClient(sandbox, store)
    result = await client.transfer(500, "231887716973", "hello")

    view = await get_status(result.reference_id, client)
    assert view.transaction.status == "SUCCESSFUL"
