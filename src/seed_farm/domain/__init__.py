"""Domain models for the farm dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class FarmSnapshot:
    """Account-scoped raw amounts fetched together in one poll cycle."""

    user_balance: int = 0
    user_stake: int = 0
    user_approved: int = 0
    user_reward: int = 0


class FarmAction(str, Enum):
    APPROVE = "approve"
    STAKE = "stake"
    EXIT = "exit"
