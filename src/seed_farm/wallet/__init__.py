"""Wallet providers that expose the active account."""

from .provider import (
    LocalKeyWalletProvider,
    RpcWalletProvider,
    WalletProvider,
    build_wallet_provider,
)

__all__ = [
    "LocalKeyWalletProvider",
    "RpcWalletProvider",
    "WalletProvider",
    "build_wallet_provider",
]
