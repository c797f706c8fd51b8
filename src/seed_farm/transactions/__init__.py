from __future__ import annotations

from .controller import TransactionController

__all__ = ["TransactionController"]
