"""
Data models for the badminton group manager.
Domain objects only; no storage or facade logic.

Group-centric architecture: players and courts form the roster; teams of two wait
in the queue; matches put two teams on a court; every balance change is a
transaction in the ledger.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from badminton_group.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- Match state (state machine) ----------
class MatchState(str, Enum):
    """Match lifecycle: unscored ⇄ scored."""
    UNSCORED = "unscored"  # On court, no result yet
    SCORED = "scored"      # Both scores recorded, fee charged


# ---------- Player status (derived, never stored) ----------
class PlayerStatus(str, Enum):
    AVAILABLE = "Available"
    IN_QUEUE = "In Queue"
    PLAYING = "Playing"


# ---------- Player ----------
@dataclass
class Player:
    """
    A group member. seq is the human-facing number shown next to the name.
    balance > 0: group owes the player; balance < 0: player owes the group.
    Only the ledger changes balance.
    """
    id: str
    seq: int
    name: str
    balance: Decimal = Decimal("0")

    @property
    def display_name(self) -> str:
        return f"{self.name} #{self.seq}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "seq": self.seq,
            "name": self.name,
            "display_name": self.display_name,
            "balance": str(self.balance),
        }


# ---------- Court ----------
@dataclass
class Court:
    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


# ---------- Team (queue entry) ----------
@dataclass
class Team:
    """Two players waiting together. Position in the queue list is the FIFO order."""
    id: str
    players: tuple[str, str]
    created_at: datetime

    def __post_init__(self) -> None:
        if len(self.players) != 2:
            raise ValidationError("A team needs exactly two players.")
        if self.players[0] == self.players[1]:
            raise ValidationError("Please select two different players.")

    def includes_any(self, player_ids: set[str] | list[str] | tuple[str, ...]) -> bool:
        return any(p in player_ids for p in self.players)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "players": list(self.players),
            "created_at": self.created_at.isoformat(),
        }


# ---------- Match ----------
@dataclass
class Match:
    """
    Two teams of two on a court.
    Scores are both None (unscored) or both non-negative ints (scored).
    The four player slots are pairwise distinct.
    """
    id: str
    court_id: str
    team_a: tuple[str, str]
    team_b: tuple[str, str]
    team_a_score: int | None
    team_b_score: int | None
    created_at: datetime

    def __post_init__(self) -> None:
        if len(self.team_a) != 2 or len(self.team_b) != 2:
            raise ValidationError("Each team needs exactly two players.")
        if len(set(self.player_ids)) != 4:
            raise ValidationError("All four players must be unique.")
        if (self.team_a_score is None) != (self.team_b_score is None):
            raise ValidationError("Please enter scores for both teams or leave both blank.")
        if self.team_a_score is not None and (self.team_a_score < 0 or self.team_b_score < 0):
            raise ValidationError("Scores must be valid, non-negative numbers.")

    @property
    def player_ids(self) -> tuple[str, str, str, str]:
        return (*self.team_a, *self.team_b)

    @property
    def state(self) -> MatchState:
        return MatchState.UNSCORED if self.team_a_score is None else MatchState.SCORED

    @property
    def is_scored(self) -> bool:
        return self.state == MatchState.SCORED

    def winners(self) -> tuple[str, str] | None:
        """Winning team's players; None while unscored or tied."""
        if not self.is_scored or self.team_a_score == self.team_b_score:
            return None
        return self.team_a if self.team_a_score > self.team_b_score else self.team_b

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "court_id": self.court_id,
            "team_a": list(self.team_a),
            "team_b": list(self.team_b),
            "team_a_score": self.team_a_score,
            "team_b_score": self.team_b_score,
            "state": self.state.value,
            "created_at": self.created_at.isoformat(),
        }


# ---------- Transaction ----------
@dataclass
class Transaction:
    """One ledger entry. Append-only; amount is signed."""
    id: str
    player_id: str
    amount: Decimal
    reason: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "amount": str(self.amount),
            "reason": self.reason,
            "created_at": self.created_at.isoformat(),
        }


# ---------- Derived views ----------
@dataclass
class Ranking:
    player_id: str
    player_name: str
    matches_played: int
    wins: int
    win_percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "matches_played": self.matches_played,
            "wins": self.wins,
            "win_percentage": self.win_percentage,
        }


@dataclass
class PlayerView:
    """Player row for the roster screen: stored fields plus derived status."""
    player: Player
    status: PlayerStatus

    def to_dict(self) -> dict[str, Any]:
        d = self.player.to_dict()
        d["status"] = self.status.value
        return d


@dataclass
class FinancialSummary:
    total_credit: Decimal = Decimal("0")
    total_owed: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return {"total_credit": str(self.total_credit), "total_owed": str(self.total_owed)}


@dataclass
class MatchReadyEvent:
    """Raised once per match the scheduler puts on a court."""
    match_id: str
    court_name: str
    team_a: tuple[str, str]
    team_b: tuple[str, str]
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "court_name": self.court_name,
            "team_a": list(self.team_a),
            "team_b": list(self.team_b),
        }
