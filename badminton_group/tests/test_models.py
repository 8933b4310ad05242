"""
Model invariants and serialization.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from badminton_group.errors import ValidationError
from badminton_group.models import Match, MatchState, Player, PlayerStatus, PlayerView, Team

NOW = datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc)


def _match(a=21, b=15, team_b=("p3", "p4")):
    return Match(id="m1", court_id="c1", team_a=("p1", "p2"), team_b=team_b,
                 team_a_score=a, team_b_score=b, created_at=NOW)


def test_match_state_and_winners():
    assert _match().state == MatchState.SCORED
    assert _match().winners() == ("p1", "p2")
    assert _match(10, 21).winners() == ("p3", "p4")
    assert _match(20, 20).winners() is None
    assert _match(None, None).state == MatchState.UNSCORED
    assert _match(None, None).winners() is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"team_b": ("p1", "p4")},
        {"a": 21, "b": None},
        {"a": -1, "b": 5},
    ],
)
def test_match_invariants(kwargs):
    with pytest.raises(ValidationError):
        _match(**kwargs)


def test_team_needs_two_different_players():
    with pytest.raises(ValidationError):
        Team(id="t1", players=("p1", "p1"), created_at=NOW)
    team = Team(id="t1", players=("p1", "p2"), created_at=NOW)
    assert team.includes_any({"p2", "p9"})
    assert not team.includes_any(["p3"])


def test_to_dict():
    d = _match().to_dict()
    assert d["state"] == "scored"
    assert d["team_a"] == ["p1", "p2"]
    assert d["created_at"] == NOW.isoformat()
    view = PlayerView(player=Player(id="p1", seq=3, name="Alice", balance=Decimal("-2.50")),
                      status=PlayerStatus.IN_QUEUE)
    assert view.to_dict() == {
        "id": "p1",
        "seq": 3,
        "name": "Alice",
        "display_name": "Alice #3",
        "balance": "-2.50",
        "status": "In Queue",
    }
