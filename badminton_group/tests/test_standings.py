"""
Tests for standings: played/wins over scored matches, ties, sort order.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from badminton_group.persistence import new_state
from badminton_group.services import MatchService, RosterService, compute_rankings, win_percentage


@pytest.fixture
def state():
    return new_state()


@pytest.fixture
def setup(state):
    svc = RosterService()
    players = {n: svc.add_player(state, n) for n in "ABCDE"}
    court = svc.add_court(state, "Court 1")
    return players, court


def _by_name(rankings):
    return {r.player_name.split(" #")[0]: r for r in rankings}


def test_single_scored_match(state, setup):
    players, court = setup
    p = players
    MatchService().create(state, court.id, [p["A"].id, p["B"].id], [p["C"].id, p["D"].id], 21, 15)
    rows = _by_name(compute_rankings(state))
    assert (rows["A"].matches_played, rows["A"].wins, rows["A"].win_percentage) == (1, 1, 100.0)
    assert (rows["C"].matches_played, rows["C"].wins, rows["C"].win_percentage) == (1, 0, 0.0)
    assert (rows["E"].matches_played, rows["E"].win_percentage) == (0, 0.0)


def test_tie_counts_as_played_not_won(state, setup):
    p, court = setup
    MatchService().create(state, court.id, [p["A"].id, p["B"].id], [p["C"].id, p["D"].id], 20, 20)
    rows = _by_name(compute_rankings(state))
    for name in "ABCD":
        assert rows[name].matches_played == 1
        assert rows[name].wins == 0


def test_unscored_matches_ignored(state, setup):
    p, court = setup
    MatchService().create(state, court.id, [p["A"].id, p["B"].id], [p["C"].id, p["D"].id])
    assert all(r.matches_played == 0 for r in compute_rankings(state))


def test_sorted_by_percentage_then_wins(state, setup):
    p, court = setup
    svc = MatchService()
    # A+B win twice, C wins once with E, D never wins
    svc.create(state, court.id, [p["A"].id, p["B"].id], [p["C"].id, p["D"].id], 21, 10)
    svc.create(state, court.id, [p["A"].id, p["B"].id], [p["D"].id, p["E"].id], 21, 10)
    svc.create(state, court.id, [p["C"].id, p["E"].id], [p["A"].id, p["D"].id], 21, 19)
    order = [r.player_name.split(" #")[0] for r in compute_rankings(state)]
    # B 2/2, A 2/3, C 1/2 and E 1/2 tie (roster order), D 0/3
    assert order == ["B", "A", "C", "E", "D"]


def test_deleted_player_has_no_row(state, setup):
    p, court = setup
    MatchService().create(state, court.id, [p["A"].id, p["B"].id], [p["C"].id, p["D"].id], 21, 15)
    RosterService().delete_player(state, p["A"].id)
    rows = _by_name(compute_rankings(state))
    assert "A" not in rows
    assert rows["B"].wins == 1


def test_win_percentage():
    assert win_percentage(0, 0) == 0.0
    assert win_percentage(1, 4) == 25.0
