"""
Error taxonomy for group commands.
Every command either applies fully or raises one of these with a reason the
presentation layer can show as-is.
"""
from __future__ import annotations


class GroupError(ValueError):
    """Base for rejected commands. State is unchanged when one is raised."""


class ValidationError(GroupError):
    """Invalid, missing or conflicting input (e.g. repeated player, blank name)."""


class NotFoundError(GroupError):
    """Command referenced a player, court, match or team that does not exist."""
