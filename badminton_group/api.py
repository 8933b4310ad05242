"""
Command and query surface for the presentation layer.
Thin wrappers around the services: request models validate the payload shape,
services validate against current state and apply the change.

Every command either applies fully or raises ValidationError / NotFoundError
(badminton_group.errors) with a message suitable for display.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from badminton_group.config import FeeSettings, Settings, load_settings
from badminton_group.display import court_name, player_display_name
from badminton_group.errors import ValidationError
from badminton_group.filters import (
    filter_courts,
    filter_matches,
    filter_players,
    filter_queue,
    filter_rankings,
)
from badminton_group.logging_config import get_logger
from badminton_group.models import (
    Court,
    FinancialSummary,
    Match,
    MatchReadyEvent,
    Player,
    PlayerView,
    Ranking,
    Team,
    Transaction,
    utcnow,
)
from badminton_group.notifications import MatchReadyNotifier, match_ready_event
from badminton_group.persistence import (
    CourtRepository,
    GroupState,
    MatchRepository,
    PlayerRepository,
    QueueRepository,
    load_demo_data,
    new_state,
)
from badminton_group.services import (
    LedgerService,
    MatchService,
    QueueService,
    RosterService,
    auto_assign,
    can_auto_assign,
    compute_rankings,
    player_statuses,
)

log = get_logger(__name__)


# ---------- Request models ----------


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class AddPlayerRequest(BaseModel):
    name: str
    initial_balance: Decimal | None = Field(None, description="Explicit start balance; overrides the joining-fee rule")
    joining_fee_paid: bool = Field(True, description="False starts the player at -joining_fee")

    @field_validator("initial_balance", mode="before")
    @classmethod
    def blank_balance_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class EditPlayerRequest(BaseModel):
    player_id: str
    name: str
    balance: Decimal | None = None

    @field_validator("balance", mode="before")
    @classmethod
    def blank_balance_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class CourtRequest(BaseModel):
    name: str


class RecordMatchRequest(BaseModel):
    court_id: str | None = None
    team_a: list[str | None] = Field(default_factory=lambda: [None, None])
    team_b: list[str | None] = Field(default_factory=lambda: [None, None])
    team_a_score: int | None = Field(None, ge=0)
    team_b_score: int | None = Field(None, ge=0)

    @field_validator("team_a_score", "team_b_score", mode="before")
    @classmethod
    def blank_score_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class EnqueueTeamRequest(BaseModel):
    player1_id: str | None = None
    player2_id: str | None = None


class PaymentRequest(BaseModel):
    player_id: str
    amount: Decimal = Field(..., description="Payment received from the player; the ledger rejects non-positive amounts")


class FeeRequest(BaseModel):
    fee: Decimal = Field(..., ge=0)


M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], **data: Any) -> M:
    """Build a request model; pydantic errors surface as the domain ValidationError."""
    try:
        return model(**data)
    except PydanticValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        raise ValidationError(f"{field}: {msg}" if field else msg) from None


# ---------- Search results ----------


@dataclass
class SearchResults:
    rankings: list[Ranking]
    players: list[PlayerView]
    courts: list[Court]
    matches: list[Match]
    queue: list[Team]


# ---------- GroupManager ----------


class GroupManager:
    """
    One group session: owns the state, the services and the notifier.
    Reactive auto-assign (Settings.reactive_auto_assign) runs the scheduler after
    commands that can free a court or grow the queue.
    """

    def __init__(self, settings: Settings | None = None, state: GroupState | None = None) -> None:
        self.settings = settings or load_settings()
        self.state = state or new_state(self.settings.fees)
        self.notifier = MatchReadyNotifier()
        self._ledger = LedgerService()
        self._roster = RosterService(self._ledger)
        self._queue = QueueService()
        self._matches = MatchService(self._ledger)
        self._player_repo = PlayerRepository()
        self._court_repo = CourtRepository()
        self._match_repo = MatchRepository()
        self._queue_repo = QueueRepository()

    @classmethod
    def with_demo_data(cls, settings: Settings | None = None) -> "GroupManager":
        """Session pre-filled with the demo roster, courts and match history."""
        manager = cls(settings=settings)
        load_demo_data(manager.state, utcnow())
        return manager

    def subscribe(self, callback: Callable[[MatchReadyEvent], None]) -> Callable[[], None]:
        return self.notifier.subscribe(callback)

    def pop_match_alert(self) -> MatchReadyEvent | None:
        return self.notifier.pop_alert()

    # ---------- Queries ----------

    def list_players(self) -> list[PlayerView]:
        statuses = player_statuses(self.state)
        return [PlayerView(player=p, status=statuses[p.id]) for p in self._player_repo.list_all(self.state)]

    def get_player(self, player_id: str) -> Player | None:
        return self._player_repo.get(self.state, player_id)

    def list_courts(self) -> list[Court]:
        return self._court_repo.list_all(self.state)

    def free_courts(self) -> list[Court]:
        return self._matches.free_courts(self.state)

    def list_matches(self) -> list[Match]:
        """History, newest first."""
        return self._match_repo.list_recent(self.state)

    def get_match(self, match_id: str) -> Match | None:
        return self._match_repo.get(self.state, match_id)

    def list_queue(self) -> list[Team]:
        return self._queue_repo.list_all(self.state)

    def rankings(self) -> list[Ranking]:
        return compute_rankings(self.state)

    def fee_settings(self) -> FeeSettings:
        return self.state.fees.model_copy()

    def financial_summary(self) -> FinancialSummary:
        return self._ledger.financial_summary(self.state)

    def transactions(self, player_id: str) -> list[Transaction]:
        return self._ledger.transactions_for(self.state, player_id)

    def player_display_name(self, player_id: str) -> str:
        return player_display_name(self.state, player_id)

    def court_name(self, court_id: str) -> str:
        return court_name(self.state, court_id)

    def can_auto_assign(self) -> bool:
        return can_auto_assign(self.state)

    def suggest_from_queue(self) -> tuple[Team, Team] | None:
        return self._queue.suggest_from_queue(self.state)

    def search(self, term: str | None) -> SearchResults:
        """All list views narrowed by the search box term."""
        players = self.list_players()
        kept = {p.id for p in filter_players([v.player for v in players], term)}
        return SearchResults(
            rankings=filter_rankings(self.rankings(), term),
            players=[v for v in players if v.player.id in kept],
            courts=filter_courts(self.list_courts(), term),
            matches=filter_matches(self.state, self.list_matches(), term),
            queue=filter_queue(self.state, self.list_queue(), term),
        )

    # ---------- Roster commands ----------

    def add_player(
        self,
        name: str,
        initial_balance: Decimal | int | float | str | None = None,
        joining_fee_paid: bool = True,
    ) -> Player:
        req = _parse(AddPlayerRequest, name=name, initial_balance=initial_balance, joining_fee_paid=joining_fee_paid)
        return self._roster.add_player(self.state, req.name, req.initial_balance, req.joining_fee_paid)

    def edit_player(
        self, player_id: str, name: str, balance: Decimal | int | float | str | None = None
    ) -> Player:
        req = _parse(EditPlayerRequest, player_id=player_id, name=name, balance=balance)
        return self._roster.edit_player(self.state, req.player_id, req.name, req.balance)

    def delete_player(self, player_id: str) -> Player:
        return self._roster.delete_player(self.state, player_id)

    def add_court(self, name: str) -> Court:
        req = _parse(CourtRequest, name=name)
        court = self._roster.add_court(self.state, req.name)
        self._react()
        return court

    def edit_court(self, court_id: str, name: str) -> Court:
        req = _parse(CourtRequest, name=name)
        return self._roster.edit_court(self.state, court_id, req.name)

    def delete_court(self, court_id: str) -> Court:
        return self._roster.delete_court(self.state, court_id)

    # ---------- Match commands ----------

    def record_match(
        self,
        court_id: str | None,
        team_a: list[str | None] | tuple[str | None, str | None],
        team_b: list[str | None] | tuple[str | None, str | None],
        team_a_score: int | str | None = None,
        team_b_score: int | str | None = None,
    ) -> Match:
        req = _parse(
            RecordMatchRequest, court_id=court_id, team_a=list(team_a), team_b=list(team_b),
            team_a_score=team_a_score, team_b_score=team_b_score,
        )
        return self._matches.create(
            self.state, req.court_id, req.team_a, req.team_b, req.team_a_score, req.team_b_score
        )

    def edit_match(
        self,
        match_id: str,
        court_id: str | None,
        team_a: list[str | None] | tuple[str | None, str | None],
        team_b: list[str | None] | tuple[str | None, str | None],
        team_a_score: int | str | None = None,
        team_b_score: int | str | None = None,
    ) -> Match:
        req = _parse(
            RecordMatchRequest, court_id=court_id, team_a=list(team_a), team_b=list(team_b),
            team_a_score=team_a_score, team_b_score=team_b_score,
        )
        match = self._matches.edit(
            self.state, match_id, req.court_id, req.team_a, req.team_b, req.team_a_score, req.team_b_score
        )
        self._react()
        return match

    def delete_match(self, match_id: str) -> Match:
        match = self._matches.delete(self.state, match_id)
        self._react()
        return match

    # ---------- Queue commands ----------

    def enqueue_team(self, player1_id: str | None, player2_id: str | None) -> Team:
        req = _parse(EnqueueTeamRequest, player1_id=player1_id, player2_id=player2_id)
        team = self._queue.enqueue(self.state, req.player1_id, req.player2_id)
        self._react()
        return team

    def dequeue_team(self, team_id: str) -> Team:
        return self._queue.dequeue(self.state, team_id)

    def auto_assign(self) -> list[Match]:
        """Fill free courts from the queue and announce each new match."""
        created = auto_assign(self.state)
        self.notifier.publish([match_ready_event(self.state, m) for m in created])
        return created

    # ---------- Ledger commands ----------

    def record_payment(self, player_id: str, amount: Decimal | int | float | str) -> Transaction:
        req = _parse(PaymentRequest, player_id=player_id, amount=amount)
        return self._ledger.record_payment(self.state, req.player_id, req.amount)

    def set_joining_fee(self, fee: Decimal | int | float | str) -> None:
        req = _parse(FeeRequest, fee=fee)
        self._ledger.set_joining_fee(self.state, req.fee)

    def set_per_game_fee(self, fee: Decimal | int | float | str) -> None:
        req = _parse(FeeRequest, fee=fee)
        self._ledger.set_per_game_fee(self.state, req.fee)

    # ---------- Internals ----------

    def _react(self) -> None:
        if self.settings.reactive_auto_assign and can_auto_assign(self.state):
            self.auto_assign()
