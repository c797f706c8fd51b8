from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from seed_farm.constants import APPROVAL_AMOUNT
from seed_farm.exceptions import InvalidAmount, NotConnected, SubmissionFailure
from seed_farm.ledger.signer import SubmittedTransaction
from seed_farm.session.manager import WalletSession
from seed_farm.session.store import MemorySessionStore
from seed_farm.transactions.controller import TransactionController

USER = "0x1111111111111111111111111111111111111111"
FARM = "0x9C09E8307dB9D20B836Cb2bBF84D3BD503D61ee5"


def _submitted(action: str) -> SubmittedTransaction:
    return SubmittedTransaction(action=action, account=USER, tx_hash="0xabc")


@pytest.fixture
def signer() -> MagicMock:
    signer = MagicMock()
    signer.approve = AsyncMock(return_value=_submitted("approve"))
    signer.stake = AsyncMock(return_value=_submitted("stake"))
    signer.exit = AsyncMock(return_value=_submitted("exit"))
    return signer


@pytest.fixture
def ledger(signer) -> MagicMock:
    ledger = MagicMock()
    ledger.farm_address = FARM
    ledger.signer.return_value = signer
    return ledger


def _session(account: str | None) -> WalletSession:
    session = WalletSession(provider=None, store=MemorySessionStore())
    session.account = account
    return session


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "invoke",
    [
        lambda c: c.approve(),
        lambda c: c.stake("1"),
        lambda c: c.exit(),
    ],
    ids=["approve", "stake", "exit"],
)
async def test_actions_without_account_raise_not_connected(ledger, invoke):
    controller = TransactionController(_session(None), ledger)

    with pytest.raises(NotConnected, match="connect your wallet"):
        await invoke(controller)

    assert ledger.mock_calls == []


@pytest.mark.asyncio
async def test_approve_grants_large_allowance_to_farm(ledger, signer):
    controller = TransactionController(_session(USER), ledger)

    tx = await controller.approve()

    ledger.signer.assert_called_once_with(USER)
    signer.approve.assert_awaited_once_with(FARM, APPROVAL_AMOUNT)
    assert APPROVAL_AMOUNT == 10**9 * 10**18
    assert tx.action == "approve"


@pytest.mark.asyncio
async def test_stake_converts_input_to_raw(ledger, signer):
    controller = TransactionController(_session(USER), ledger)

    await controller.stake("12.5")

    signer.stake.assert_awaited_once_with(12_500_000_000_000_000_000)


@pytest.mark.asyncio
async def test_stake_rejects_bad_input_before_submitting(ledger, signer):
    controller = TransactionController(_session(USER), ledger)

    with pytest.raises(InvalidAmount):
        await controller.stake("-5")

    signer.stake.assert_not_awaited()


@pytest.mark.asyncio
async def test_exit_submits_without_arguments(ledger, signer):
    controller = TransactionController(_session(USER), ledger)

    tx = await controller.exit()

    signer.exit.assert_awaited_once_with()
    assert tx.status.value == "submitted"


@pytest.mark.asyncio
async def test_submission_failure_propagates(ledger, signer):
    signer.exit.side_effect = SubmissionFailure("exit", RuntimeError("rejected"))
    controller = TransactionController(_session(USER), ledger)

    with pytest.raises(SubmissionFailure):
        await controller.exit()
