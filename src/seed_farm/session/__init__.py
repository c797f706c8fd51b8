"""Wallet session lifecycle and its persisted flag."""

from .manager import SessionStatus, WalletSession
from .store import FileSessionStore, MemorySessionStore, SessionStore

__all__ = [
    "FileSessionStore",
    "MemorySessionStore",
    "SessionStatus",
    "SessionStore",
    "WalletSession",
]
