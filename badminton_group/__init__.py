"""
Badminton group manager core: roster, queue, match lifecycle, ledger, standings.
The presentation layer talks to GroupManager; everything else is internal.
"""
from .api import GroupManager, SearchResults
from .errors import GroupError, NotFoundError, ValidationError

__all__ = [
    "GroupManager",
    "SearchResults",
    "GroupError",
    "NotFoundError",
    "ValidationError",
]
