"""
Search-box filtering over the query views.
Case-insensitive substring match on display names ("Alice #1") and court names.
An empty term returns the input unchanged.
"""
from __future__ import annotations

from badminton_group.display import court_name, player_display_name
from badminton_group.models import Court, Match, Player, Ranking, Team
from badminton_group.persistence.state import GroupState


def _norm(term: str | None) -> str:
    return (term or "").strip().lower()


def filter_rankings(rankings: list[Ranking], term: str | None) -> list[Ranking]:
    needle = _norm(term)
    if not needle:
        return rankings
    return [r for r in rankings if needle in r.player_name.lower()]


def filter_players(players: list[Player], term: str | None) -> list[Player]:
    needle = _norm(term)
    if not needle:
        return players
    return [p for p in players if needle in p.display_name.lower()]


def filter_courts(courts: list[Court], term: str | None) -> list[Court]:
    needle = _norm(term)
    if not needle:
        return courts
    return [c for c in courts if needle in c.name.lower()]


def filter_matches(state: GroupState, matches: list[Match], term: str | None) -> list[Match]:
    """Match on court name or any of the four player names."""
    needle = _norm(term)
    if not needle:
        return matches

    def _hit(m: Match) -> bool:
        names = [court_name(state, m.court_id)] + [player_display_name(state, p) for p in m.player_ids]
        return any(needle in n.lower() for n in names)

    return [m for m in matches if _hit(m)]


def filter_queue(state: GroupState, teams: list[Team], term: str | None) -> list[Team]:
    needle = _norm(term)
    if not needle:
        return teams
    return [
        t for t in teams
        if any(needle in player_display_name(state, p).lower() for p in t.players)
    ]
