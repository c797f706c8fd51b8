"""Persistence of the single "previously connected" flag."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

from ..constants import SESSION_FLAG_KEY
from ..logger import get_logger

logger = get_logger(__name__)


class SessionStore(ABC):
    @abstractmethod
    def was_connected(self) -> bool: ...

    @abstractmethod
    def mark_connected(self) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class MemorySessionStore(SessionStore):
    """Flag kept in memory only; used for ephemeral runs and tests."""

    def __init__(self, connected: bool = False):
        self._connected = connected

    def was_connected(self) -> bool:
        return self._connected

    def mark_connected(self) -> None:
        self._connected = True

    def clear(self) -> None:
        self._connected = False


class FileSessionStore(SessionStore):
    """Flag stored as ``{"walletConnected": "true"}`` in a JSON file.

    The key is absent (file removed) when disconnected; no other field is
    ever written.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def was_connected(self) -> bool:
        if not self.path.exists():
            return False
        try:
            with self.path.open() as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return False
        return isinstance(data, dict) and data.get(SESSION_FLAG_KEY) == "true"

    def mark_connected(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w") as f:
            json.dump({SESSION_FLAG_KEY: "true"}, f)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
