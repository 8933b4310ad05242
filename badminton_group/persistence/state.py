"""
Owned in-memory state for one group session.
Created at process start, mutated only through the services, discarded at exit.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from badminton_group.config import FeeSettings
from badminton_group.models import Court, Match, Player, Team, Transaction


@dataclass
class GroupState:
    """
    Everything the group manager knows, in stored order.
    matches is oldest first; the facade reverses it for history views.
    last_seq is the highest player number ever issued, so numbers are never reused.
    """
    players: list[Player] = field(default_factory=list)
    courts: list[Court] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)
    queue: list[Team] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    fees: FeeSettings = field(default_factory=FeeSettings)
    last_seq: int = 0


def new_state(fees: FeeSettings | None = None) -> GroupState:
    """Return an empty state with the given (or default) fee settings."""
    return GroupState(fees=fees.model_copy() if fees is not None else FeeSettings())


# Demo roster the presentation layer can start from.
DEMO_PLAYERS: list[tuple[str, int, str, str]] = [
    ("p1", 1, "Alice", "10"),
    ("p2", 2, "Bob", "-5"),
    ("p3", 3, "Charlie", "20"),
    ("p4", 4, "Diana", "0"),
    ("p5", 5, "Ethan", "0"),
    ("p6", 6, "Fiona", "15"),
    ("p7", 7, "George", "-2.5"),
    ("p8", 8, "Heidi", "0"),
]

DEMO_COURTS: list[tuple[str, str]] = [
    ("c1", "Court 1"),
    ("c2", "Court 2"),
    ("c3", "Court 3"),
]

DEMO_MATCHES: list[tuple[str, str, tuple[str, str], tuple[str, str], int, int]] = [
    ("m1", "c1", ("p1", "p2"), ("p3", "p4"), 21, 18),
    ("m2", "c2", ("p5", "p6"), ("p1", "p3"), 15, 21),
    ("m3", "c1", ("p2", "p4"), ("p5", "p6"), 22, 20),
]


def load_demo_data(state: GroupState, now: datetime) -> None:
    """
    Fill an empty state with the demo roster, courts and scored match history.
    Starting balances go through the log as "Initial balance" entries; the demo
    history is imported as already settled, so no match fees are applied.
    """
    if state.players or state.courts or state.matches:
        raise ValueError("Demo data can only be loaded into an empty state")
    from badminton_group.persistence.repositories import (
        CourtRepository,
        MatchRepository,
        PlayerRepository,
        TransactionRepository,
    )

    player_repo = PlayerRepository()
    txn_repo = TransactionRepository()
    for pid, seq, name, balance in DEMO_PLAYERS:
        player_repo.create(state, name, seq, id=pid)
        amount = Decimal(balance)
        if amount != 0:
            txn_repo.append(state, pid, amount, "Initial balance", now)
            player_repo.adjust_balance(state, pid, amount)
    court_repo = CourtRepository()
    for cid, name in DEMO_COURTS:
        court_repo.create(state, name, id=cid)
    match_repo = MatchRepository()
    for mid, cid, team_a, team_b, score_a, score_b in DEMO_MATCHES:
        match_repo.insert(
            state,
            Match(
                id=mid, court_id=cid, team_a=team_a, team_b=team_b,
                team_a_score=score_a, team_b_score=score_b, created_at=now,
            ),
        )
