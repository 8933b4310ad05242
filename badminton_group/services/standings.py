"""
Standings derived from scored matches. Recomputed in full on every call.
"""
from __future__ import annotations

from badminton_group.models import Ranking
from badminton_group.persistence.repositories import MatchRepository, PlayerRepository
from badminton_group.persistence.state import GroupState


def win_percentage(wins: int, matches_played: int) -> float:
    return (wins / matches_played) * 100 if matches_played > 0 else 0.0


def compute_rankings(state: GroupState) -> list[Ranking]:
    """
    One row per roster player. Played counts every scored match the player is in;
    a win needs a strictly higher team score, so a tie is played but not won.
    Sorted by win percentage, then wins, both descending; roster order otherwise.
    """
    players = PlayerRepository().list_all(state)
    stats: dict[str, list[int]] = {p.id: [0, 0] for p in players}  # [played, wins]
    for match in MatchRepository().list_scored(state):
        for pid in match.player_ids:
            if pid in stats:
                stats[pid][0] += 1
        winners = match.winners()
        if winners is not None:
            for pid in winners:
                if pid in stats:
                    stats[pid][1] += 1
    rankings = [
        Ranking(
            player_id=p.id,
            player_name=p.display_name,
            matches_played=stats[p.id][0],
            wins=stats[p.id][1],
            win_percentage=win_percentage(stats[p.id][1], stats[p.id][0]),
        )
        for p in players
    ]
    # sorted() is stable, so equal keys keep roster order
    return sorted(rankings, key=lambda r: (-r.win_percentage, -r.wins))
