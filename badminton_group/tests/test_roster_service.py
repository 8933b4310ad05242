"""
Tests for roster CRUD: sequence numbers, initial balances, deletes that keep history.
"""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from badminton_group.config import FeeSettings
from badminton_group.display import UNKNOWN, court_name, match_label, player_display_name
from badminton_group.errors import NotFoundError, ValidationError
from badminton_group.persistence import new_state
from badminton_group.services import LedgerService, MatchService, QueueService, RosterService


@pytest.fixture
def state():
    return new_state(FeeSettings(joining_fee=Decimal("10"), per_game_fee=Decimal("2.5")))


@pytest.fixture
def ledger():
    return LedgerService()


@pytest.fixture
def roster(ledger):
    return RosterService(ledger)


def test_sequence_numbers_start_at_one_and_increase(state, roster):
    a = roster.add_player(state, "Alice")
    b = roster.add_player(state, "Bob")
    assert (a.seq, b.seq) == (1, 2)
    assert b.display_name == "Bob #2"


def test_sequence_numbers_never_reused(state, roster):
    roster.add_player(state, "Alice")
    bob = roster.add_player(state, "Bob")
    roster.delete_player(state, bob.id)
    carol = roster.add_player(state, "Carol")
    assert carol.seq == 3


def test_name_is_trimmed_and_required(state, roster):
    p = roster.add_player(state, "  Alice  ")
    assert p.name == "Alice"
    with pytest.raises(ValidationError):
        roster.add_player(state, "   ")
    with pytest.raises(ValidationError):
        roster.add_court(state, "")
    assert len(state.players) == 1
    assert state.courts == []


def test_initial_balance_logged(state, roster, ledger):
    p = roster.add_player(state, "Alice", "15")
    txns = ledger.transactions_for(state, p.id)
    assert [(t.amount, t.reason) for t in txns] == [(Decimal("15"), "Initial balance")]
    assert p.balance == Decimal("15")


def test_zero_initial_balance_not_logged(state, roster):
    roster.add_player(state, "Alice", 0)
    assert state.transactions == []


def test_unpaid_joining_fee(state, roster):
    p = roster.add_player(state, "Alice", joining_fee_paid=False)
    assert p.balance == Decimal("-10")
    paid = roster.add_player(state, "Bob", joining_fee_paid=True)
    assert paid.balance == 0


def test_edit_player_logs_balance_adjustment(state, roster, ledger):
    p = roster.add_player(state, "Alice", "5")
    roster.edit_player(state, p.id, "Alicia", "8")
    assert p.name == "Alicia"
    assert p.balance == Decimal("8")
    assert ledger.transactions_for(state, p.id)[-1].reason == "Balance adjustment"
    assert ledger.balance_from_log(state, p.id) == p.balance


def test_edit_player_same_balance_no_entry(state, roster):
    p = roster.add_player(state, "Alice", "5")
    roster.edit_player(state, p.id, "Alice", "5")
    assert len(state.transactions) == 1


def test_edit_player_errors_leave_state(state, roster):
    p = roster.add_player(state, "Alice")
    with pytest.raises(ValidationError):
        roster.edit_player(state, p.id, " ", "3")
    assert p.name == "Alice"
    assert p.balance == 0
    with pytest.raises(NotFoundError):
        roster.edit_player(state, "ghost", "Bob")


def test_delete_player_purges_queue_keeps_matches(state, roster, ledger):
    players = [roster.add_player(state, n) for n in ("A", "B", "C", "D", "E", "F")]
    court = roster.add_court(state, "Court 1")
    match = MatchService(ledger).create(
        state, court.id, [players[0].id, players[1].id], [players[2].id, players[3].id], 21, 15
    )
    queue = QueueService()
    team = queue.enqueue(state, players[4].id, players[5].id)

    roster.delete_player(state, players[0].id)
    roster.delete_player(state, players[4].id)

    assert players[0].id not in {p.id for p in state.players}
    assert team.id not in {t.id for t in state.queue}
    assert state.matches == [match]
    assert player_display_name(state, players[0].id) == UNKNOWN
    assert "Unknown & B #2" in match_label(state, match)


def test_delete_court_keeps_matches(state, roster, ledger):
    players = [roster.add_player(state, n) for n in "ABCD"]
    court = roster.add_court(state, "Court 1")
    match = MatchService(ledger).create(
        state, court.id, [players[0].id, players[1].id], [players[2].id, players[3].id], 21, 15
    )
    roster.delete_court(state, court.id)
    assert state.courts == []
    assert state.matches == [match]
    assert court_name(state, match.court_id) == UNKNOWN


def test_edit_and_delete_court(state, roster):
    court = roster.add_court(state, "Court 1")
    roster.edit_court(state, court.id, " Centre ")
    assert court.name == "Centre"
    with pytest.raises(NotFoundError):
        roster.edit_court(state, "nope", "X")
    with pytest.raises(NotFoundError):
        roster.delete_court(state, "nope")
    with pytest.raises(NotFoundError):
        roster.delete_player(state, "nope")
