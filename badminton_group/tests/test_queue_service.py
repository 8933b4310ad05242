"""
Tests for the waiting queue and derived player status.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from badminton_group.errors import NotFoundError, ValidationError
from badminton_group.models import PlayerStatus
from badminton_group.persistence import QueueRepository, new_state
from badminton_group.services import (
    MatchService,
    QueueService,
    RosterService,
    player_status,
    player_statuses,
)


@pytest.fixture
def state():
    return new_state()


@pytest.fixture
def queue():
    return QueueService()


@pytest.fixture
def players(state):
    svc = RosterService()
    return [svc.add_player(state, n) for n in ("Ann", "Ben", "Cat", "Dan", "Eve", "Fay")]


def test_status_defaults_to_available(state, players):
    assert all(s == PlayerStatus.AVAILABLE for s in player_statuses(state).values())
    assert PlayerStatus.IN_QUEUE.value == "In Queue"


def test_enqueue_appends_in_order(state, queue, players):
    t1 = queue.enqueue(state, players[0].id, players[1].id)
    t2 = queue.enqueue(state, players[2].id, players[3].id)
    assert [t.id for t in state.queue] == [t1.id, t2.id]
    assert t1.players == (players[0].id, players[1].id)
    assert player_status(state, players[0].id) == PlayerStatus.IN_QUEUE
    assert player_statuses(state)[players[4].id] == PlayerStatus.AVAILABLE


@pytest.mark.parametrize("pair", [("", "x"), ("same", "same")])
def test_enqueue_needs_two_different_players(state, queue, players, pair):
    ids = [players[0].id if p else "" for p in pair]
    with pytest.raises(ValidationError, match="two different players"):
        queue.enqueue(state, *ids)
    assert state.queue == []


def test_enqueue_unknown_player(state, queue, players):
    with pytest.raises(NotFoundError):
        queue.enqueue(state, players[0].id, "ghost")
    assert state.queue == []


def test_enqueue_rejects_queued_player(state, queue, players):
    queue.enqueue(state, players[0].id, players[1].id)
    with pytest.raises(ValidationError, match="not available"):
        queue.enqueue(state, players[1].id, players[2].id)
    assert len(state.queue) == 1


def test_enqueue_rejects_playing_player(state, queue, players):
    court = RosterService().add_court(state, "Court 1")
    MatchService().create(state, court.id, [players[0].id, players[1].id], [players[2].id, players[3].id])
    assert player_status(state, players[0].id) == PlayerStatus.PLAYING
    with pytest.raises(ValidationError, match="not available"):
        queue.enqueue(state, players[0].id, players[4].id)
    assert state.queue == []


def test_scored_match_frees_players(state, queue, players):
    court = RosterService().add_court(state, "Court 1")
    MatchService().create(state, court.id, [players[0].id, players[1].id], [players[2].id, players[3].id], 21, 9)
    assert player_status(state, players[0].id) == PlayerStatus.AVAILABLE
    queue.enqueue(state, players[0].id, players[1].id)


def test_match_drops_overlapping_team(state, queue, players):
    queue.enqueue(state, players[0].id, players[4].id)
    court = RosterService().add_court(state, "Court 1")
    MatchService().create(state, court.id, [players[0].id, players[1].id], [players[2].id, players[3].id])
    assert state.queue == []
    assert player_statuses(state)[players[0].id] == PlayerStatus.PLAYING
    assert player_statuses(state)[players[4].id] == PlayerStatus.AVAILABLE


def test_playing_beats_in_queue(state, players):
    court = RosterService().add_court(state, "Court 1")
    MatchService().create(state, court.id, [players[0].id, players[1].id], [players[2].id, players[3].id])
    # Only reachable by writing the queue directly
    QueueRepository().append(state, (players[0].id, players[4].id))
    assert player_status(state, players[0].id) == PlayerStatus.PLAYING
    assert player_statuses(state)[players[0].id] == PlayerStatus.PLAYING
    assert player_statuses(state)[players[4].id] == PlayerStatus.IN_QUEUE


def test_dequeue(state, queue, players):
    t1 = queue.enqueue(state, players[0].id, players[1].id)
    t2 = queue.enqueue(state, players[2].id, players[3].id)
    removed = queue.dequeue(state, t1.id)
    assert removed.id == t1.id
    assert [t.id for t in state.queue] == [t2.id]
    assert player_status(state, players[0].id) == PlayerStatus.AVAILABLE
    assert state.transactions == []
    with pytest.raises(NotFoundError):
        queue.dequeue(state, t1.id)


def test_suggest_from_queue(state, queue, players):
    assert queue.suggest_from_queue(state) is None
    t1 = queue.enqueue(state, players[0].id, players[1].id)
    assert queue.suggest_from_queue(state) is None
    t2 = queue.enqueue(state, players[2].id, players[3].id)
    queue.enqueue(state, players[4].id, players[5].id)
    first, second = queue.suggest_from_queue(state)
    assert (first.id, second.id) == (t1.id, t2.id)
    assert len(state.queue) == 3
