"""
Match-ready notifications: one event per match the scheduler puts on a court.

Subscribers are called synchronously as events are published. The presentation
layer can also poll pop_alert(), which hands out the first match of the latest
round exactly once (the "your match is ready" banner).
"""
from __future__ import annotations

from typing import Callable

from badminton_group.display import court_name, team_names
from badminton_group.logging_config import get_logger
from badminton_group.models import Match, MatchReadyEvent
from badminton_group.persistence.state import GroupState

log = get_logger(__name__)

Subscriber = Callable[[MatchReadyEvent], None]


def match_ready_event(state: GroupState, match: Match) -> MatchReadyEvent:
    """Resolve court and player names at the moment the match is created."""
    return MatchReadyEvent(
        match_id=match.id,
        court_name=court_name(state, match.court_id),
        team_a=team_names(state, match.team_a),
        team_b=team_names(state, match.team_b),
    )


class MatchReadyNotifier:
    """Fan-out to subscribers plus a one-shot alert slot."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._alert: MatchReadyEvent | None = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, events: list[MatchReadyEvent]) -> None:
        """Deliver events to subscribers. A failing subscriber is logged, not raised."""
        if events:
            self._alert = events[0]
        for event in events:
            log.info(
                "Match ready on %s: %s & %s vs %s & %s",
                event.court_name, *event.team_a, *event.team_b,
            )
            for callback in list(self._subscribers):
                try:
                    callback(event)
                except Exception:
                    log.exception("Match-ready subscriber failed for match %s", event.match_id)

    def pop_alert(self) -> MatchReadyEvent | None:
        """First event of the last publish, once; None afterwards until the next publish."""
        event, self._alert = self._alert, None
        return event
