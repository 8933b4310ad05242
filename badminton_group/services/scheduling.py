"""
Auto-assign: greedy FIFO pairing of queued teams onto free courts.

Free courts are taken in stored order, teams in queue order. Each free court gets
the next two teams as one unscored match, until courts or pairs of teams run out.
There is no other ordering criterion (skill, waiting time beyond FIFO): same state
in, same matches out.

No fee is charged here; fees apply only when a match is scored.
"""
from __future__ import annotations

import uuid

from badminton_group.logging_config import get_logger
from badminton_group.models import Court, Match, Team, utcnow
from badminton_group.persistence.repositories import MatchRepository, QueueRepository
from badminton_group.persistence.state import GroupState
from badminton_group.services.match_service import MatchService

log = get_logger(__name__)


def pair_courts_with_teams(
    courts: list[Court], teams: list[Team]
) -> list[tuple[Court, Team, Team]]:
    """
    Return (court, team_a, team_b) for each court that can be filled.
    Pure: inputs are not modified. Leftover teams (odd count or no court) stay out.
    """
    pairings: list[tuple[Court, Team, Team]] = []
    for i, court in enumerate(courts):
        first = 2 * i
        if first + 1 >= len(teams):
            break
        pairings.append((court, teams[first], teams[first + 1]))
    return pairings


def can_auto_assign(state: GroupState) -> bool:
    """At least two teams queued and one court free."""
    return len(state.queue) >= 2 and bool(MatchService().free_courts(state))


def auto_assign(state: GroupState) -> list[Match]:
    """
    Fill free courts from the queue. Returns the new matches (oldest pairing first).
    The consumed teams leave the queue in the same step the matches are stored.
    """
    if len(state.queue) < 2:
        return []
    courts = MatchService().free_courts(state)
    if not courts:
        return []
    pairings = pair_courts_with_teams(courts, QueueRepository().list_all(state))
    now = utcnow()
    new_matches = [
        Match(
            id=str(uuid.uuid4()),
            court_id=court.id,
            team_a=team_a.players,
            team_b=team_b.players,
            team_a_score=None,
            team_b_score=None,
            created_at=now,
        )
        for court, team_a, team_b in pairings
    ]
    consumed = {t.id for _, a, b in pairings for t in (a, b)}
    QueueRepository().remove(state, consumed)
    MatchRepository().insert_many(state, new_matches)
    log.info(
        "Auto-assigned %d match(es); %d team(s) still queued", len(new_matches), len(state.queue)
    )
    return new_matches
