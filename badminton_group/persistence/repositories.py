"""
Repository interfaces for group data.
No business logic, only read/write operations on a GroupState.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from badminton_group.models import Court, Match, Player, Team, Transaction, utcnow
from badminton_group.persistence.state import GroupState


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------- PlayerRepository ----------


class PlayerRepository:
    """CRUD for players. Balance is only touched through adjust_balance (ledger)."""

    def create(self, state: GroupState, name: str, seq: int, id: str | None = None) -> Player:
        player = Player(id=id or _new_id(), seq=seq, name=name)
        state.players.append(player)
        state.last_seq = max(state.last_seq, seq)
        return player

    def get(self, state: GroupState, player_id: str) -> Player | None:
        for p in state.players:
            if p.id == player_id:
                return p
        return None

    def list_all(self, state: GroupState) -> list[Player]:
        return list(state.players)

    def next_seq(self, state: GroupState) -> int:
        """Next player number: one past the highest ever issued (1 for an empty roster)."""
        highest = max((p.seq for p in state.players), default=0)
        return max(highest, state.last_seq) + 1

    def update_name(self, state: GroupState, player_id: str, name: str) -> None:
        player = self.get(state, player_id)
        if player is not None:
            player.name = name

    def adjust_balance(self, state: GroupState, player_id: str, amount: Decimal) -> None:
        player = self.get(state, player_id)
        if player is not None:
            player.balance += amount

    def delete(self, state: GroupState, player_id: str) -> None:
        state.players[:] = [p for p in state.players if p.id != player_id]


# ---------- CourtRepository ----------


class CourtRepository:
    """CRUD for courts. No business logic."""

    def create(self, state: GroupState, name: str, id: str | None = None) -> Court:
        court = Court(id=id or _new_id(), name=name)
        state.courts.append(court)
        return court

    def get(self, state: GroupState, court_id: str) -> Court | None:
        for c in state.courts:
            if c.id == court_id:
                return c
        return None

    def list_all(self, state: GroupState) -> list[Court]:
        return list(state.courts)

    def update_name(self, state: GroupState, court_id: str, name: str) -> None:
        court = self.get(state, court_id)
        if court is not None:
            court.name = name

    def delete(self, state: GroupState, court_id: str) -> None:
        state.courts[:] = [c for c in state.courts if c.id != court_id]


# ---------- MatchRepository ----------


class MatchRepository:
    """Stores matches oldest first. Replace swaps a record in place (edit keeps position)."""

    def insert(self, state: GroupState, match: Match) -> Match:
        state.matches.append(match)
        return match

    def insert_many(self, state: GroupState, matches: list[Match]) -> None:
        state.matches.extend(matches)

    def get(self, state: GroupState, match_id: str) -> Match | None:
        for m in state.matches:
            if m.id == match_id:
                return m
        return None

    def list_all(self, state: GroupState) -> list[Match]:
        return list(state.matches)

    def list_recent(self, state: GroupState, limit: int | None = None) -> list[Match]:
        """Newest first."""
        recent = list(reversed(state.matches))
        return recent if limit is None else recent[:limit]

    def list_unscored(self, state: GroupState) -> list[Match]:
        return [m for m in state.matches if not m.is_scored]

    def list_scored(self, state: GroupState) -> list[Match]:
        return [m for m in state.matches if m.is_scored]

    def replace(self, state: GroupState, match: Match) -> None:
        for i, m in enumerate(state.matches):
            if m.id == match.id:
                state.matches[i] = match
                return

    def delete(self, state: GroupState, match_id: str) -> None:
        state.matches[:] = [m for m in state.matches if m.id != match_id]


# ---------- QueueRepository ----------


class QueueRepository:
    """Ordered waiting list of teams. Index 0 is the front of the queue."""

    def append(self, state: GroupState, players: tuple[str, str], id: str | None = None) -> Team:
        team = Team(id=id or _new_id(), players=players, created_at=utcnow())
        state.queue.append(team)
        return team

    def get(self, state: GroupState, team_id: str) -> Team | None:
        for t in state.queue:
            if t.id == team_id:
                return t
        return None

    def list_all(self, state: GroupState) -> list[Team]:
        return list(state.queue)

    def remove(self, state: GroupState, team_ids: set[str]) -> list[Team]:
        """Drop teams by id; returns the removed teams in queue order."""
        removed = [t for t in state.queue if t.id in team_ids]
        state.queue[:] = [t for t in state.queue if t.id not in team_ids]
        return removed

    def remove_containing(self, state: GroupState, player_ids: set[str]) -> list[Team]:
        """Drop every team with at least one of player_ids; returns what was dropped."""
        removed = [t for t in state.queue if t.includes_any(player_ids)]
        if removed:
            state.queue[:] = [t for t in state.queue if not t.includes_any(player_ids)]
        return removed


# ---------- TransactionRepository ----------


class TransactionRepository:
    """Append-only ledger log."""

    def append(
        self,
        state: GroupState,
        player_id: str,
        amount: Decimal,
        reason: str,
        created_at: datetime | None = None,
    ) -> Transaction:
        txn = Transaction(
            id=_new_id(),
            player_id=player_id,
            amount=amount,
            reason=reason,
            created_at=created_at or utcnow(),
        )
        state.transactions.append(txn)
        return txn

    def list_by_player(self, state: GroupState, player_id: str) -> list[Transaction]:
        return [t for t in state.transactions if t.player_id == player_id]

    def list_all(self, state: GroupState) -> list[Transaction]:
        return list(state.transactions)
