from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.types import RPCEndpoint

from ..exceptions import PermissionDenied, UserRejected, WalletUnavailable
from ..logger import get_logger
from ..settings import FarmSettings

logger = get_logger(__name__)

# EIP-1193 provider error codes
USER_REJECTED_CODE = 4001
UNAUTHORIZED_CODE = 4100
METHOD_NOT_FOUND_CODE = -32601


class MethodNotSupported(WalletUnavailable):
    """The endpoint does not implement a wallet RPC method."""


class WalletProvider(ABC):
    """Abstract wallet: grants permission and lists accounts."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this provider."""
        ...

    @abstractmethod
    async def request_permissions(self) -> None:
        """Ask the wallet to let the dapp see accounts."""
        ...

    @abstractmethod
    async def request_accounts(self) -> list[str]:
        """Return the accounts the wallet exposes, active one first."""
        ...


class RpcWalletProvider(WalletProvider):
    """Wallet backed by the JSON-RPC endpoint (EIP-2255 / EIP-1102 methods)."""

    def __init__(self, w3: Web3):
        self.w3 = w3

    @property
    def name(self) -> str:
        return "rpc"

    async def _request(self, method: str, params: list[Any]) -> Any:
        try:
            response = await asyncio.to_thread(
                self.w3.provider.make_request, RPCEndpoint(method), params
            )
        except Exception as e:
            raise WalletUnavailable(f"{method} failed: {e}") from e

        error = response.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", error) if isinstance(error, dict) else error
            if code == USER_REJECTED_CODE:
                raise UserRejected(f"{method}: {message}")
            if code == UNAUTHORIZED_CODE:
                raise PermissionDenied(f"{method}: {message}")
            if code == METHOD_NOT_FOUND_CODE:
                raise MethodNotSupported(method)
            raise WalletUnavailable(f"{method}: {message}")
        return response.get("result")

    async def request_permissions(self) -> None:
        try:
            await self._request("wallet_requestPermissions", [{"eth_accounts": {}}])
        except MethodNotSupported:
            # Plain nodes have no permission layer; accounts are already visible
            logger.debug("wallet_requestPermissions unsupported, treating as granted")

    async def request_accounts(self) -> list[str]:
        try:
            accounts = await self._request("eth_requestAccounts", [])
        except MethodNotSupported:
            accounts = await self._request("eth_accounts", [])
        if not accounts:
            raise PermissionDenied("wallet returned no accounts")
        return [Web3.to_checksum_address(account) for account in accounts]


class LocalKeyWalletProvider(WalletProvider):
    """Wallet holding a single private key; permission is implicit."""

    def __init__(self, account: LocalAccount):
        self.account = account

    @property
    def name(self) -> str:
        return "local-key"

    async def request_permissions(self) -> None:
        return None

    async def request_accounts(self) -> list[str]:
        return [self.account.address]


def build_wallet_provider(settings: FarmSettings, w3: Web3 | None) -> WalletProvider:
    """Pick the wallet for the configured signing mode.

    Raises:
        WalletUnavailable: If neither a private key nor an RPC endpoint is set.
    """
    if settings.private_key is not None:
        return LocalKeyWalletProvider(
            Account.from_key(settings.private_key.get_secret_value())
        )
    if w3 is None or not settings.rpc_url:
        raise WalletUnavailable("no wallet provider configured")
    return RpcWalletProvider(w3)
