from __future__ import annotations

import asyncio
import math
from unittest.mock import AsyncMock, MagicMock

import pytest

from seed_farm.domain import FarmSnapshot
from seed_farm.exceptions import LedgerReadFailure
from seed_farm.sync.poller import SyncPoller
from seed_farm.view import FarmState

USER = "0x1111111111111111111111111111111111111111"
FARM = "0x9C09E8307dB9D20B836Cb2bBF84D3BD503D61ee5"


@pytest.fixture
def ledger() -> MagicMock:
    ledger = MagicMock()
    ledger.farm_address = FARM
    ledger.get_reserves = AsyncMock(return_value=(3 * 10**18, 4 * 10**18))
    ledger.farm_total_supply = AsyncMock(return_value=10**24)
    ledger.farm_reward_rate = AsyncMock(return_value=1000)
    ledger.token_balance_of = AsyncMock(return_value=1234500000000000000000)
    ledger.token_allowance = AsyncMock(return_value=200 * 10**18)
    ledger.farm_balance_of = AsyncMock(return_value=5 * 10**18)
    ledger.farm_earned = AsyncMock(return_value=10**17)
    return ledger


@pytest.mark.asyncio
async def test_account_cycle_reads_in_order_and_replaces_snapshot(ledger):
    calls: list[str] = []
    for name in ("token_balance_of", "token_allowance", "farm_balance_of", "farm_earned"):
        mock = getattr(ledger, name)
        value = mock.return_value
        mock.side_effect = lambda *args, _name=name, _value=value: (
            calls.append(_name) or _value
        )
    state = FarmState()
    poller = SyncPoller(ledger, state)

    assert await poller.account_cycle(USER) is True

    assert calls == ["token_balance_of", "token_allowance", "farm_balance_of", "farm_earned"]
    ledger.token_allowance.assert_awaited_once_with(USER, FARM)
    assert state.snapshot == FarmSnapshot(
        user_balance=1234500000000000000000,
        user_stake=5 * 10**18,
        user_approved=200 * 10**18,
        user_reward=10**17,
    )


@pytest.mark.asyncio
async def test_account_cycle_without_account_reads_nothing(ledger):
    poller = SyncPoller(ledger, FarmState())

    assert await poller.account_cycle(None) is False

    ledger.token_balance_of.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_allowance_read_keeps_previous_snapshot(ledger):
    previous = FarmSnapshot(user_balance=1, user_stake=2, user_approved=3, user_reward=4)
    state = FarmState(snapshot=previous)
    ledger.token_allowance.side_effect = LedgerReadFailure(
        "token.allowance", RuntimeError("reverted")
    )
    poller = SyncPoller(ledger, state)

    assert await poller.account_cycle(USER) is False

    assert state.snapshot is previous
    ledger.farm_balance_of.assert_not_awaited()
    ledger.farm_earned.assert_not_awaited()


@pytest.mark.asyncio
async def test_price_cycle_uses_previous_price_for_apr(ledger):
    state = FarmState()
    poller = SyncPoller(ledger, state)

    await poller.price_cycle()

    assert state.price == 0.75
    assert math.isnan(state.apr)

    await poller.price_cycle()

    assert state.apr == (0.75 * (1000.0 * 604800)) / (0.75 * 1e24)


@pytest.mark.asyncio
async def test_price_cycle_can_use_fresh_price(ledger):
    state = FarmState()
    poller = SyncPoller(ledger, state, apr_uses_previous_price=False)

    await poller.price_cycle()

    assert state.apr == (0.75 * (1000.0 * 604800)) / (0.75 * 1e24)


@pytest.mark.asyncio
async def test_failed_price_cycle_keeps_last_price_and_apr(ledger):
    state = FarmState(price=0.5, apr=0.25)
    ledger.farm_reward_rate.side_effect = LedgerReadFailure(
        "farm.rewardRate", RuntimeError("timeout")
    )
    poller = SyncPoller(ledger, state)

    assert await poller.price_cycle() is False

    assert state.price == 0.5
    assert state.apr == 0.25


@pytest.mark.asyncio
async def test_tick_runs_price_then_account_cycle(ledger):
    order: list[str] = []
    ledger.get_reserves.side_effect = lambda: order.append("price") or (1, 1)
    ledger.token_balance_of.side_effect = lambda _a: order.append("account") or 0
    poller = SyncPoller(ledger, FarmState())

    await poller.tick(USER)

    assert order == ["price", "account"]


@pytest.mark.asyncio
async def test_rebind_fetches_account_immediately_then_polls(ledger):
    state = FarmState()
    poller = SyncPoller(ledger, state, interval=0.01)

    await poller.rebind(USER)
    await asyncio.sleep(0.05)
    await poller.stop()

    assert state.snapshot.user_balance == 1234500000000000000000
    assert ledger.token_balance_of.await_count >= 2
    assert ledger.get_reserves.await_count >= 1
    assert poller.running is False


@pytest.mark.asyncio
async def test_rebind_cancels_previous_schedule(ledger):
    poller = SyncPoller(ledger, FarmState(), interval=3600)

    await poller.rebind(USER)
    first = poller._task
    await poller.rebind(None)

    assert first is not None and first.cancelled()
    assert poller.account is None
    assert poller.running is True

    await poller.stop()
    await poller.stop()
    assert poller.running is False


@pytest.mark.asyncio
async def test_listener_error_does_not_stop_polling(ledger):
    state = FarmState()
    published: list[object] = []

    def flaky_renderer(view):
        published.append(view)
        if len(published) == 1:
            raise RuntimeError("renderer glitch")

    state.subscribe(flaky_renderer)
    poller = SyncPoller(ledger, state, interval=0.01)

    await poller.rebind(USER)
    await asyncio.sleep(0.1)

    assert poller.running is True
    assert ledger.token_balance_of.await_count >= 2
    assert len(published) >= 2

    await poller.stop()
    assert poller.running is False


@pytest.mark.asyncio
async def test_malformed_ledger_result_is_logged_and_skipped(ledger, caplog):
    ledger.get_reserves.return_value = None
    state = FarmState(price=0.5, apr=0.25)
    poller = SyncPoller(ledger, state, interval=0.01)

    await poller.rebind(USER)
    await asyncio.sleep(0.05)

    assert poller.running is True
    assert state.price == 0.5
    assert "Poll tick for" in caplog.text
    await poller.stop()


@pytest.mark.asyncio
async def test_stop_logs_error_of_finished_task(ledger, caplog):
    async def crashed() -> None:
        raise RuntimeError("boom")

    poller = SyncPoller(ledger, FarmState())
    poller._task = asyncio.create_task(crashed())
    await asyncio.sleep(0)

    await poller.stop()

    assert poller.running is False
    assert "Poller task ended with an error" in caplog.text
