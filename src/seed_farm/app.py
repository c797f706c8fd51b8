"""Application context: builds and owns every collaborator explicitly."""

from __future__ import annotations

from dataclasses import dataclass

from web3 import Web3

from .exceptions import WalletUnavailable
from .ledger.client import LedgerClient, make_web3
from .logger import get_logger
from .session.manager import WalletSession
from .session.store import FileSessionStore, SessionStore
from .settings import FarmSettings
from .sync.poller import SyncPoller
from .transactions.controller import TransactionController
from .view import FarmState
from .wallet.provider import WalletProvider, build_wallet_provider

logger = get_logger(__name__)


@dataclass
class FarmApp:
    """Wires session, poller and controller around one ledger client.

    The session drives the poller: every account change rebinds the poll
    schedule to the new account once the app has started.
    """

    settings: FarmSettings
    ledger: LedgerClient
    session: WalletSession
    farm_state: FarmState
    poller: SyncPoller
    controller: TransactionController
    started: bool = False

    @classmethod
    def build(
        cls,
        settings: FarmSettings,
        w3: Web3 | None = None,
        ledger: LedgerClient | None = None,
        provider: WalletProvider | None = None,
        store: SessionStore | None = None,
    ) -> "FarmApp":
        if ledger is None:
            ledger = LedgerClient.from_settings(
                settings, w3 if w3 is not None else make_web3(settings.rpc_url)
            )
        if provider is None:
            try:
                provider = build_wallet_provider(settings, ledger.w3)
            except WalletUnavailable as e:
                logger.warning("%s", e)
        if store is None:
            store = FileSessionStore(settings.session_path)

        session = WalletSession(provider, store)
        farm_state = FarmState()
        poller = SyncPoller(
            ledger,
            farm_state,
            interval=settings.poll_interval,
            apr_uses_previous_price=settings.apr_uses_previous_price,
        )
        app = cls(
            settings=settings,
            ledger=ledger,
            session=session,
            farm_state=farm_state,
            poller=poller,
            controller=TransactionController(session, ledger),
        )
        session.subscribe(app._on_account_changed)
        return app

    async def _on_account_changed(self, account: str | None) -> None:
        self.farm_state.set_account(account)
        if self.started:
            await self.poller.rebind(account)

    async def start(self) -> None:
        """Restore the previous session, then start polling."""
        await self.session.restore()
        self.started = True
        await self.poller.rebind(self.session.account)

    async def close(self) -> None:
        self.started = False
        await self.poller.stop()
