"""Read-only façade over the token, farm and pair contracts."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import URI
from web3 import Web3
from web3.contract import Contract

from ..abi import load_erc20_abi, load_farm_abi, load_pair_abi
from ..exceptions import LedgerReadFailure
from ..logger import TRACE, get_logger
from ..settings import FarmSettings
from .signer import LedgerSigner

logger = get_logger(__name__)


def make_web3(rpc_url: str) -> Web3:
    """Build a Web3 instance over HTTP for the given RPC endpoint."""
    return Web3(Web3.HTTPProvider(URI(rpc_url)))


class LedgerClient:
    """Thin async wrapper over the three contracts the dashboard reads.

    Each read runs the blocking web3 call in a worker thread, so every
    read is a suspension point for the event loop. No timeout or retry is
    applied; a hung provider hangs the caller.
    """

    def __init__(
        self,
        w3: Web3,
        token_address: str,
        farm_address: str,
        pair_address: str,
        local_account: LocalAccount | None = None,
    ):
        self.w3 = w3
        self.farm_address = Web3.to_checksum_address(farm_address)
        self.token: Contract = w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=load_erc20_abi()
        )
        self.farm: Contract = w3.eth.contract(
            address=self.farm_address, abi=load_farm_abi()
        )
        self.pair: Contract = w3.eth.contract(
            address=Web3.to_checksum_address(pair_address), abi=load_pair_abi()
        )
        self._local_account = local_account

    @classmethod
    def from_settings(cls, settings: FarmSettings, w3: Web3 | None = None) -> "LedgerClient":
        local_account = (
            Account.from_key(settings.private_key.get_secret_value())
            if settings.private_key
            else None
        )
        return cls(
            w3 if w3 is not None else make_web3(settings.rpc_url),
            token_address=settings.token_address,
            farm_address=settings.farm_address,
            pair_address=settings.pair_address,
            local_account=local_account,
        )

    async def _read(self, call: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Run one contract read, wrapping any failure in LedgerReadFailure."""
        try:
            result = await asyncio.to_thread(lambda: fn(*args).call())
        except Exception as e:
            raise LedgerReadFailure(call, e) from e
        logger.log(TRACE, "%s%s -> %s", call, args, result)
        return result

    async def get_reserves(self) -> tuple[int, int]:
        reserve0, reserve1, _ = await self._read(
            "pair.getReserves", self.pair.functions.getReserves
        )
        return int(reserve0), int(reserve1)

    async def farm_total_supply(self) -> int:
        return int(await self._read("farm.totalSupply", self.farm.functions.totalSupply))

    async def farm_reward_rate(self) -> int:
        return int(await self._read("farm.rewardRate", self.farm.functions.rewardRate))

    async def token_balance_of(self, address: str) -> int:
        return int(
            await self._read(
                "token.balanceOf",
                self.token.functions.balanceOf,
                Web3.to_checksum_address(address),
            )
        )

    async def token_allowance(self, owner: str, spender: str) -> int:
        return int(
            await self._read(
                "token.allowance",
                self.token.functions.allowance,
                Web3.to_checksum_address(owner),
                Web3.to_checksum_address(spender),
            )
        )

    async def farm_balance_of(self, address: str) -> int:
        return int(
            await self._read(
                "farm.balanceOf",
                self.farm.functions.balanceOf,
                Web3.to_checksum_address(address),
            )
        )

    async def farm_earned(self, address: str) -> int:
        return int(
            await self._read(
                "farm.earned",
                self.farm.functions.earned,
                Web3.to_checksum_address(address),
            )
        )

    def signer(self, account: str) -> LedgerSigner:
        """Return a signing context bound to ``account``."""
        return LedgerSigner(
            self.w3,
            token=self.token,
            farm=self.farm,
            account=Web3.to_checksum_address(account),
            local_account=self._local_account,
        )
