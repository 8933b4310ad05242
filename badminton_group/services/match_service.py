"""
Match lifecycle: state machine, guards, fee application.
Unscored -> scored charges the per-game fee; scored -> unscored refunds it.
Every check runs before the first write, so a rejected command changes nothing.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from badminton_group.display import court_name, match_label
from badminton_group.errors import NotFoundError, ValidationError
from badminton_group.logging_config import get_logger
from badminton_group.models import Court, Match, MatchState, utcnow
from badminton_group.persistence.repositories import (
    CourtRepository,
    MatchRepository,
    PlayerRepository,
    QueueRepository,
)
from badminton_group.persistence.state import GroupState
from badminton_group.services.ledger_service import LedgerService

log = get_logger(__name__)


# ---------- Fee transitions ----------


class FeeAction(str, Enum):
    NONE = "none"
    CHARGE = "charge"
    REFUND = "refund"


_FEE_TRANSITIONS: dict[tuple[MatchState | None, MatchState | None], FeeAction] = {
    (None, MatchState.UNSCORED): FeeAction.NONE,  # New match on court
    (None, MatchState.SCORED): FeeAction.CHARGE,  # Result recorded directly
    (MatchState.UNSCORED, MatchState.UNSCORED): FeeAction.NONE,
    (MatchState.UNSCORED, MatchState.SCORED): FeeAction.CHARGE,
    (MatchState.SCORED, MatchState.SCORED): FeeAction.NONE,  # Score correction
    (MatchState.SCORED, MatchState.UNSCORED): FeeAction.REFUND,
    (MatchState.UNSCORED, None): FeeAction.NONE,  # Deleted before a result
    (MatchState.SCORED, None): FeeAction.REFUND,
}


def fee_action(before: MatchState | None, after: MatchState | None) -> FeeAction:
    """Ledger effect of moving a match from `before` to `after` (None = no record)."""
    return _FEE_TRANSITIONS[(before, after)]


# ---------- Input parsing ----------


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_score(value: object) -> int:
    if isinstance(value, bool):
        raise ValidationError("Scores must be valid, non-negative numbers.")
    if isinstance(value, int):
        score = value
    elif isinstance(value, float) and value.is_integer():
        score = int(value)
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        # ASCII only: isdigit() also accepts superscripts that int() rejects
        score = int(value.strip())
    else:
        raise ValidationError("Scores must be valid, non-negative numbers.")
    if score < 0:
        raise ValidationError("Scores must be valid, non-negative numbers.")
    return score


@dataclass
class MatchInput:
    """Validated match fields, ready to become a Match record."""
    court_id: str
    team_a: tuple[str, str]
    team_b: tuple[str, str]
    team_a_score: int | None
    team_b_score: int | None

    @property
    def player_ids(self) -> tuple[str, str, str, str]:
        return (*self.team_a, *self.team_b)

    @property
    def state(self) -> MatchState:
        return MatchState.UNSCORED if self.team_a_score is None else MatchState.SCORED


def validate_match_input(
    court_id: str | None,
    team_a: Sequence[str | None],
    team_b: Sequence[str | None],
    score_a: object = None,
    score_b: object = None,
) -> MatchInput:
    """Shape checks only (no state lookups). Raises ValidationError with a form-ready message."""
    if _is_blank(court_id):
        raise ValidationError("Please select a court.")
    if len(team_a) != 2 or len(team_b) != 2:
        raise ValidationError("Please select all 4 players for the match.")
    players = [*team_a, *team_b]
    if any(_is_blank(p) for p in players):
        raise ValidationError("Please select all 4 players for the match.")
    if len(set(players)) != 4:
        raise ValidationError("All four players must be unique.")
    a_entered, b_entered = not _is_blank(score_a), not _is_blank(score_b)
    if a_entered != b_entered:
        raise ValidationError("Please enter scores for both teams or leave both blank.")
    final_a = _parse_score(score_a) if a_entered else None
    final_b = _parse_score(score_b) if b_entered else None
    return MatchInput(
        court_id=court_id,
        team_a=(team_a[0], team_a[1]),
        team_b=(team_b[0], team_b[1]),
        team_a_score=final_a,
        team_b_score=final_b,
    )


# ---------- MatchService ----------


class MatchService:
    """
    Domain logic for matches: validation, court guard, fees, queue clean-up.
    Storage is delegated to repositories.
    """

    def __init__(self, ledger: LedgerService | None = None) -> None:
        self._match_repo = MatchRepository()
        self._court_repo = CourtRepository()
        self._player_repo = PlayerRepository()
        self._queue_repo = QueueRepository()
        self._ledger = ledger or LedgerService()

    # ---------- Guards ----------

    def free_courts(self, state: GroupState) -> list[Court]:
        """Courts with no unscored match, in stored order."""
        busy = {m.court_id for m in self._match_repo.list_unscored(state)}
        return [c for c in self._court_repo.list_all(state) if c.id not in busy]

    def is_court_occupied(self, state: GroupState, court_id: str, ignore_match_id: str | None = None) -> bool:
        return any(
            m.court_id == court_id and m.id != ignore_match_id
            for m in self._match_repo.list_unscored(state)
        )

    def assert_references_exist(
        self, state: GroupState, data: MatchInput, previous: Match | None = None
    ) -> None:
        """
        Court and players must be on the roster. On edit, ids carried over
        unchanged from the stored match may point at removed records.
        """
        kept_players = set(previous.player_ids) if previous else set()
        if self._court_repo.get(state, data.court_id) is None and (
            previous is None or previous.court_id != data.court_id
        ):
            raise NotFoundError(f"Court not found: {data.court_id}")
        for pid in data.player_ids:
            if pid not in kept_players and self._player_repo.get(state, pid) is None:
                raise NotFoundError(f"Player not found: {pid}")

    def assert_court_free(
        self, state: GroupState, data: MatchInput, ignore_match_id: str | None = None
    ) -> None:
        """An unscored match needs a court with no other unscored match."""
        if data.state == MatchState.UNSCORED and self.is_court_occupied(state, data.court_id, ignore_match_id):
            raise ValidationError(
                f"{court_name(state, data.court_id)} already has a match in progress."
            )

    # ---------- Commands ----------

    def create(
        self,
        state: GroupState,
        court_id: str | None,
        team_a: Sequence[str | None],
        team_b: Sequence[str | None],
        score_a: object = None,
        score_b: object = None,
    ) -> Match:
        """
        Record a new match. Queued teams that share a player with it are consumed.
        A match recorded with scores is charged straight away.
        """
        data = validate_match_input(court_id, team_a, team_b, score_a, score_b)
        self.assert_references_exist(state, data)
        self.assert_court_free(state, data)
        match = Match(
            id=str(uuid.uuid4()),
            court_id=data.court_id,
            team_a=data.team_a,
            team_b=data.team_b,
            team_a_score=data.team_a_score,
            team_b_score=data.team_b_score,
            created_at=utcnow(),
        )
        dropped = self._queue_repo.remove_containing(state, set(match.player_ids))
        self._match_repo.insert(state, match)
        self._apply_fee(state, fee_action(None, match.state), match, match)
        log.debug(
            "Created %s match %s (%s); consumed %d queued team(s)",
            match.state.value, match.id, match_label(state, match), len(dropped),
        )
        return match

    def edit(
        self,
        state: GroupState,
        match_id: str,
        court_id: str | None,
        team_a: Sequence[str | None],
        team_b: Sequence[str | None],
        score_a: object = None,
        score_b: object = None,
    ) -> Match:
        """
        Replace court, players and scores. Only a change of state touches the ledger:
        charge on unscored -> scored, refund on scored -> unscored.
        """
        previous = self._match_repo.get(state, match_id)
        if previous is None:
            raise NotFoundError(f"Match not found: {match_id}")
        data = validate_match_input(court_id, team_a, team_b, score_a, score_b)
        self.assert_references_exist(state, data, previous)
        self.assert_court_free(state, data, ignore_match_id=match_id)
        updated = Match(
            id=previous.id,
            court_id=data.court_id,
            team_a=data.team_a,
            team_b=data.team_b,
            team_a_score=data.team_a_score,
            team_b_score=data.team_b_score,
            created_at=previous.created_at,
        )
        self._queue_repo.remove_containing(state, set(updated.player_ids))
        self._match_repo.replace(state, updated)
        action = fee_action(previous.state, updated.state)
        self._apply_fee(state, action, previous, updated)
        log.debug("Edited match %s: %s -> %s (%s)", match_id, previous.state.value, updated.state.value, action.value)
        return updated

    def delete(self, state: GroupState, match_id: str) -> Match:
        """Remove a match record; a scored one refunds its players first."""
        match = self._match_repo.get(state, match_id)
        if match is None:
            raise NotFoundError(f"Match not found: {match_id}")
        if fee_action(match.state, None) == FeeAction.REFUND:
            self._ledger.apply_to_players(
                state, match.player_ids, state.fees.per_game_fee,
                f"Refund for deleted match on {court_name(state, match.court_id)}",
            )
        self._match_repo.delete(state, match_id)
        log.debug("Deleted match %s", match_id)
        return match

    # ---------- Fees ----------

    def _apply_fee(self, state: GroupState, action: FeeAction, previous: Match, current: Match) -> None:
        """Charge the current players, or refund the players stored before the change."""
        fee = state.fees.per_game_fee
        if action == FeeAction.CHARGE:
            self._ledger.apply_to_players(
                state, current.player_ids, -fee,
                f"Match fee on {court_name(state, current.court_id)}",
            )
        elif action == FeeAction.REFUND:
            self._ledger.apply_to_players(
                state, previous.player_ids, fee,
                f"Refund for match on {court_name(state, previous.court_id)}",
            )
