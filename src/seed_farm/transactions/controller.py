"""Approve, stake and exit actions gated on the active account."""

from __future__ import annotations

from ..constants import APPROVAL_AMOUNT, TOKEN_DECIMALS
from ..exceptions import NotConnected
from ..ledger.client import LedgerClient
from ..ledger.signer import LedgerSigner, SubmittedTransaction
from ..logger import get_logger
from ..session.manager import WalletSession
from ..units import to_raw

logger = get_logger(__name__)


class TransactionController:
    """Submits farm transactions for the session's account.

    Every action resolves once the node accepts the transaction. Nothing
    waits for it to be mined; the next poll tick shows its effect.
    """

    def __init__(self, session: WalletSession, ledger: LedgerClient):
        self.session = session
        self.ledger = ledger

    def _signer(self) -> LedgerSigner:
        account = self.session.account
        if not account:
            raise NotConnected()
        return self.ledger.signer(account)

    def _log_submitted(self, tx: SubmittedTransaction) -> SubmittedTransaction:
        logger.info("%s submitted from %s: %s", tx.action, tx.account, tx.tx_hash)
        return tx

    async def approve(self) -> SubmittedTransaction:
        """Grant the farm a one-time allowance of 10^9 tokens.

        Raises:
            NotConnected: If no account is active.
            SubmissionFailure: If the node refuses the transaction.
        """
        signer = self._signer()
        tx = await signer.approve(self.ledger.farm_address, APPROVAL_AMOUNT)
        return self._log_submitted(tx)

    async def stake(self, amount_text: str) -> SubmittedTransaction:
        """Stake the amount typed by the user.

        Raises:
            NotConnected: If no account is active.
            InvalidAmount: If ``amount_text`` is not a non-negative decimal.
            SubmissionFailure: If the node refuses the transaction.
        """
        signer = self._signer()
        amount = to_raw(amount_text, TOKEN_DECIMALS)
        tx = await signer.stake(amount)
        return self._log_submitted(tx)

    async def exit(self) -> SubmittedTransaction:
        """Withdraw the whole stake and claim rewards in one transaction."""
        signer = self._signer()
        tx = await signer.exit()
        return self._log_submitted(tx)
