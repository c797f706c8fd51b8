from __future__ import annotations

import asyncio
from typing import Awaitable

from ..constants import POLL_INTERVAL_SECONDS
from ..domain import FarmSnapshot
from ..exceptions import LedgerReadFailure
from ..ledger.client import LedgerClient
from ..logger import get_logger
from ..view import FarmState
from .apr import estimate_apr, pool_price

logger = get_logger(__name__)


class SyncPoller:
    """Periodically reads farm state from the ledger into a FarmState.

    Each tick runs a price cycle and then, when an account is bound, an
    account cycle. A cycle either commits all of its values or none: any
    failed read discards the cycle and the previous values stay on display
    until the next tick. No retry is scheduled in between.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        state: FarmState,
        interval: float = POLL_INTERVAL_SECONDS,
        apr_uses_previous_price: bool = True,
    ):
        self.ledger = ledger
        self.state = state
        self.interval = interval
        self.apr_uses_previous_price = apr_uses_previous_price
        self.account: str | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def price_cycle(self) -> bool:
        """Read reserves, supply and reward rate; commit price and APR together."""
        try:
            reserve0, reserve1 = await self.ledger.get_reserves()
            price = pool_price(reserve0, reserve1)
            total_supply = await self.ledger.farm_total_supply()
            reward_rate = await self.ledger.farm_reward_rate()
        except LedgerReadFailure as e:
            logger.warning("Price cycle aborted: %s", e)
            return False

        # The dapp derives APR from the price held before this cycle
        apr_price = self.state.price if self.apr_uses_previous_price else price
        apr = estimate_apr(apr_price, reward_rate, total_supply)
        logger.debug(
            "Price %r (reserves %d/%d), APR %r (rate %d, supply %d)",
            price,
            reserve0,
            reserve1,
            apr,
            reward_rate,
            total_supply,
        )
        self.state.set_market(price, apr)
        return True

    async def account_cycle(self, account: str | None) -> bool:
        """Read balance, allowance, stake and reward for ``account``, in that order."""
        if not account:
            return False

        logger.debug("Fetching farm data for %s", account)
        try:
            balance = await self.ledger.token_balance_of(account)
            approved = await self.ledger.token_allowance(
                account, self.ledger.farm_address
            )
            stake = await self.ledger.farm_balance_of(account)
            reward = await self.ledger.farm_earned(account)
        except LedgerReadFailure as e:
            logger.warning("Account cycle for %s aborted: %s", account, e)
            return False

        self.state.set_snapshot(
            FarmSnapshot(
                user_balance=balance,
                user_stake=stake,
                user_approved=approved,
                user_reward=reward,
            )
        )
        return True

    async def tick(self, account: str | None) -> None:
        await self.price_cycle()
        await self.account_cycle(account)

    async def _guarded(self, cycle: Awaitable[object], account: str | None) -> None:
        # Only cancellation ends the schedule; anything else waits for the next tick
        try:
            await cycle
        except Exception:
            logger.exception("Poll tick for %s failed", account or "no account")

    async def _run(self, account: str | None) -> None:
        await self._guarded(self.account_cycle(account), account)
        while True:
            await asyncio.sleep(self.interval)
            await self._guarded(self.tick(account), account)

    async def rebind(self, account: str | None) -> None:
        """Cancel the current schedule and start a fresh one for ``account``."""
        await self.stop()
        self.account = account
        self._task = asyncio.create_task(self._run(account), name="seed-farm-poller")
        logger.debug("Poller bound to %s", account or "no account")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Poller task ended with an error")
