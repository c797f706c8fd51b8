"""View model: the only state offered to a renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .constants import (
    APPROVAL_THRESHOLD,
    APR_DISPLAY_PLACES,
    BALANCE_DISPLAY_PLACES,
    PRICE_DISPLAY_PLACES,
    REWARD_DISPLAY_PLACES,
    STAKE_DISPLAY_PLACES,
    TOKEN_DECIMALS,
)
from .domain import FarmAction, FarmSnapshot
from .units import format_ratio, to_display

ViewListener = Callable[["FarmView"], None]


def offered_actions(user_approved: int) -> tuple[FarmAction, ...]:
    """Unlock gate: stake once the allowance exceeds the threshold, else approve.

    Compares raw integers exactly; exit is always offered.
    """
    if user_approved > APPROVAL_THRESHOLD:
        return (FarmAction.STAKE, FarmAction.EXIT)
    return (FarmAction.APPROVE, FarmAction.EXIT)


def shorten_address(address: str) -> str:
    """Shorten an address to ``0x23D . . . fd391`` form for display."""
    return f"{address[:5]} . . . {address[-5:]}"


@dataclass(frozen=True)
class FarmView:
    account: str | None
    snapshot: FarmSnapshot
    price: float
    apr: float
    actions: tuple[FarmAction, ...]

    @property
    def connected(self) -> bool:
        return self.account is not None

    @property
    def account_label(self) -> str:
        return shorten_address(self.account) if self.account else "connect"

    @property
    def balance_display(self) -> str:
        return to_display(
            self.snapshot.user_balance, TOKEN_DECIMALS, BALANCE_DISPLAY_PLACES
        )

    @property
    def stake_display(self) -> str:
        return to_display(self.snapshot.user_stake, TOKEN_DECIMALS, STAKE_DISPLAY_PLACES)

    @property
    def reward_display(self) -> str:
        return to_display(
            self.snapshot.user_reward, TOKEN_DECIMALS, REWARD_DISPLAY_PLACES
        )

    @property
    def apr_display(self) -> str:
        return format_ratio(self.apr, APR_DISPLAY_PLACES)

    @property
    def price_display(self) -> str:
        return format_ratio(self.price, PRICE_DISPLAY_PLACES, exact=True)


def build_view(
    account: str | None, snapshot: FarmSnapshot, price: float, apr: float
) -> FarmView:
    return FarmView(
        account=account,
        snapshot=snapshot,
        price=price,
        apr=apr,
        actions=offered_actions(snapshot.user_approved),
    )


@dataclass
class FarmState:
    """Latest upstream values; publishes a fresh FarmView on every change.

    Values persist as "last known" until replaced. The snapshot is replaced
    wholesale, never merged field by field.
    """

    account: str | None = None
    snapshot: FarmSnapshot = field(default_factory=FarmSnapshot)
    price: float = 0.0
    apr: float = 0.0
    _listeners: list[ViewListener] = field(default_factory=list, repr=False)

    @property
    def view(self) -> FarmView:
        return build_view(self.account, self.snapshot, self.price, self.apr)

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def _publish(self) -> None:
        view = self.view
        for listener in self._listeners:
            listener(view)

    def set_account(self, account: str | None) -> None:
        if account == self.account:
            return
        self.account = account
        self._publish()

    def set_snapshot(self, snapshot: FarmSnapshot) -> None:
        self.snapshot = snapshot
        self._publish()

    def set_market(self, price: float, apr: float) -> None:
        """Commit a price and APR pair from one completed price cycle."""
        self.price = price
        self.apr = apr
        self._publish()
