"""
Storage layer for group data.
No business logic: only the owned in-memory state and read/write interfaces.
"""
from .state import GroupState, new_state, load_demo_data
from .repositories import (
    PlayerRepository,
    CourtRepository,
    MatchRepository,
    QueueRepository,
    TransactionRepository,
)

__all__ = [
    "GroupState",
    "new_state",
    "load_demo_data",
    "PlayerRepository",
    "CourtRepository",
    "MatchRepository",
    "QueueRepository",
    "TransactionRepository",
]
