"""
Waiting queue of two-player teams, plus the derived player status that gates it.
Status is recomputed from current state on every call; nothing is cached.
"""
from __future__ import annotations

from badminton_group.errors import NotFoundError, ValidationError
from badminton_group.logging_config import get_logger
from badminton_group.models import PlayerStatus, Team
from badminton_group.persistence.repositories import (
    MatchRepository,
    PlayerRepository,
    QueueRepository,
)
from badminton_group.persistence.state import GroupState

log = get_logger(__name__)


def player_statuses(state: GroupState) -> dict[str, PlayerStatus]:
    """PLAYING beats IN_QUEUE beats AVAILABLE, for every roster player."""
    playing: set[str] = set()
    for m in MatchRepository().list_unscored(state):
        playing.update(m.player_ids)
    queued: set[str] = set()
    for t in state.queue:
        queued.update(t.players)
    statuses: dict[str, PlayerStatus] = {}
    for p in state.players:
        if p.id in playing:
            statuses[p.id] = PlayerStatus.PLAYING
        elif p.id in queued:
            statuses[p.id] = PlayerStatus.IN_QUEUE
        else:
            statuses[p.id] = PlayerStatus.AVAILABLE
    return statuses


def player_status(state: GroupState, player_id: str) -> PlayerStatus:
    for m in state.matches:
        if not m.is_scored and player_id in m.player_ids:
            return PlayerStatus.PLAYING
    for t in state.queue:
        if player_id in t.players:
            return PlayerStatus.IN_QUEUE
    return PlayerStatus.AVAILABLE


class QueueService:
    """FIFO queue of teams waiting for a court."""

    def __init__(self) -> None:
        self._queue_repo = QueueRepository()
        self._player_repo = PlayerRepository()

    def enqueue(self, state: GroupState, player1_id: str, player2_id: str) -> Team:
        """Append a new team. Both players must be on the roster and AVAILABLE."""
        if not player1_id or not player2_id or player1_id == player2_id:
            raise ValidationError("Please select two different players.")
        for pid in (player1_id, player2_id):
            if self._player_repo.get(state, pid) is None:
                raise NotFoundError(f"Player not found: {pid}")
        if (
            player_status(state, player1_id) != PlayerStatus.AVAILABLE
            or player_status(state, player2_id) != PlayerStatus.AVAILABLE
        ):
            raise ValidationError(
                "One or both selected players are not available (already playing or in queue)."
            )
        team = self._queue_repo.append(state, (player1_id, player2_id))
        log.debug("Enqueued team %s %s at position %d", team.id, team.players, len(state.queue))
        return team

    def dequeue(self, state: GroupState, team_id: str) -> Team:
        """Remove a team without matching it. The ledger is not touched."""
        if self._queue_repo.get(state, team_id) is None:
            raise NotFoundError(f"Team not found in queue: {team_id}")
        removed = self._queue_repo.remove(state, {team_id})
        log.debug("Dequeued team %s", team_id)
        return removed[0]

    def suggest_from_queue(self, state: GroupState) -> tuple[Team, Team] | None:
        """Front two teams, to prefill a manually recorded match. Does not change the queue."""
        teams = self._queue_repo.list_all(state)
        if len(teams) < 2:
            return None
        return teams[0], teams[1]
