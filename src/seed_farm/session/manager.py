from __future__ import annotations

from enum import Enum
from typing import Awaitable, Callable

from ..exceptions import FarmError
from ..logger import get_logger
from ..wallet.provider import WalletProvider
from .store import SessionStore

logger = get_logger(__name__)

AccountListener = Callable[[str | None], Awaitable[None] | None]


class SessionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class WalletSession:
    """Owns the connect / reconnect / disconnect lifecycle.

    Connection failures never propagate: they are logged and the session
    falls back to DISCONNECTED. A connect attempt while another one is in
    flight is ignored, and a disconnect during one discards its result.
    """

    def __init__(self, provider: WalletProvider | None, store: SessionStore):
        self.provider = provider
        self.store = store
        self.status = SessionStatus.DISCONNECTED
        self.account: str | None = None
        self._listeners: list[AccountListener] = []
        # Bumped by disconnect() so in-flight connects can tell they were superseded
        self._generation = 0

    @property
    def is_connected(self) -> bool:
        return self.status is SessionStatus.CONNECTED

    def subscribe(self, listener: AccountListener) -> None:
        """Register a callback invoked with the new account on every change."""
        self._listeners.append(listener)

    async def _notify(self) -> None:
        for listener in self._listeners:
            result = listener(self.account)
            if result is not None:
                await result

    async def _set_account(self, account: str | None) -> None:
        changed = account != self.account
        self.account = account
        self.status = (
            SessionStatus.CONNECTED if account else SessionStatus.DISCONNECTED
        )
        if changed:
            await self._notify()

    async def _open(self, request_permissions: bool) -> bool:
        if self.status is SessionStatus.CONNECTING:
            logger.debug("Connect already in progress, ignoring")
            return False

        previous_status = self.status
        generation = self._generation
        self.status = SessionStatus.CONNECTING
        try:
            if self.provider is None:
                raise FarmError("no wallet provider available")
            if request_permissions:
                await self.provider.request_permissions()
            accounts = await self.provider.request_accounts()
            account = accounts[0]
        except Exception as e:
            logger.warning("Wallet connection failed: %s", e)
            if generation != self._generation:
                return False
            self.status = (
                previous_status
                if previous_status is SessionStatus.CONNECTED
                else SessionStatus.DISCONNECTED
            )
            return False

        if generation != self._generation:
            logger.info("Disconnected while connecting, discarding %s", account)
            return False

        try:
            self.store.mark_connected()
        except OSError as e:
            logger.error("Could not persist session flag: %s", e)
        await self._set_account(account)
        logger.info("Wallet connected: %s", account)
        return True

    async def connect(self) -> bool:
        """Request permission and accounts; first account becomes active."""
        return await self._open(request_permissions=True)

    async def reconnect(self) -> bool:
        """Request accounts assuming permission was granted earlier."""
        return await self._open(request_permissions=False)

    async def disconnect(self) -> None:
        """Forget the active account and the persisted flag."""
        self._generation += 1
        try:
            self.store.clear()
        except OSError as e:
            logger.error("Could not clear session flag: %s", e)
        await self._set_account(None)
        logger.info("Wallet disconnected")

    async def restore(self) -> bool:
        """Reconnect at startup only if the previous session was connected."""
        if not self.store.was_connected():
            logger.debug("No previous wallet session")
            return False
        return await self.reconnect()
