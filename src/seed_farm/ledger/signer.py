"""Signing context that submits farm transactions for the active account."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract

from ..exceptions import SubmissionFailure
from ..logger import get_logger

logger = get_logger(__name__)


class TxStatus(str, Enum):
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class SubmittedTransaction:
    """Handle for a transaction accepted by the node; not a receipt."""

    action: str
    account: str
    tx_hash: str
    status: TxStatus = TxStatus.SUBMITTED


class LedgerSigner:
    """Submits approve/stake/exit for one account.

    With a local key the transaction is built, signed and sent raw;
    otherwise the node signs for its own unlocked account.
    """

    def __init__(
        self,
        w3: Web3,
        token: Contract,
        farm: Contract,
        account: str,
        local_account: LocalAccount | None = None,
    ):
        self.w3 = w3
        self.token = token
        self.farm = farm
        self.account = account
        self._local_account = local_account

    def _send(self, fn_call: Any) -> str:
        if self._local_account is None:
            tx_hash = fn_call.transact({"from": self.account})
            return Web3.to_hex(tx_hash)

        tx = fn_call.build_transaction(
            {
                "from": self.account,
                "nonce": self.w3.eth.get_transaction_count(self.account, "pending"),
                "chainId": self.w3.eth.chain_id,
            }
        )
        signed = self._local_account.sign_transaction(tx)
        return Web3.to_hex(self.w3.eth.send_raw_transaction(signed.raw_transaction))

    async def _submit(self, action: str, fn_call: Any) -> SubmittedTransaction:
        try:
            tx_hash = await asyncio.to_thread(self._send, fn_call)
        except Exception as e:
            raise SubmissionFailure(action, e) from e
        logger.debug("Submitted %s from %s: %s", action, self.account, tx_hash)
        return SubmittedTransaction(action=action, account=self.account, tx_hash=tx_hash)

    async def approve(self, spender: str, amount: int) -> SubmittedTransaction:
        fn_call = self.token.functions.approve(Web3.to_checksum_address(spender), amount)
        return await self._submit("approve", fn_call)

    async def stake(self, amount: int) -> SubmittedTransaction:
        return await self._submit("stake", self.farm.functions.stake(amount))

    async def exit(self) -> SubmittedTransaction:
        return await self._submit("exit", self.farm.functions.exit())
