from __future__ import annotations

from .apr import estimate_apr, ieee_divide, pool_price
from .poller import SyncPoller

__all__ = ["SyncPoller", "estimate_apr", "ieee_divide", "pool_price"]
