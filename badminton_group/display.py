"""
Display helpers shared by ledger reasons, notifications and search.
Ids that no longer resolve (deleted player or court) render as UNKNOWN.
"""
from __future__ import annotations

from decimal import Decimal

from badminton_group.models import Match
from badminton_group.persistence.repositories import CourtRepository, PlayerRepository
from badminton_group.persistence.state import GroupState

UNKNOWN = "Unknown"


def player_display_name(state: GroupState, player_id: str) -> str:
    player = PlayerRepository().get(state, player_id)
    return player.display_name if player is not None else UNKNOWN


def court_name(state: GroupState, court_id: str) -> str:
    court = CourtRepository().get(state, court_id)
    return court.name if court is not None else UNKNOWN


def team_names(state: GroupState, team: tuple[str, str]) -> tuple[str, str]:
    return player_display_name(state, team[0]), player_display_name(state, team[1])


def match_label(state: GroupState, match: Match) -> str:
    a1, a2 = team_names(state, match.team_a)
    b1, b2 = team_names(state, match.team_b)
    label = f"{court_name(state, match.court_id)}: {a1} & {a2} vs {b1} & {b2}"
    if match.is_scored:
        label += f" ({match.team_a_score}-{match.team_b_score})"
    return label


def money(amount: Decimal) -> str:
    return f"${amount:.2f}" if amount >= 0 else f"-${-amount:.2f}"
