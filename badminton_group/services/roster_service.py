"""
Roster: players and courts.
Deleting either never rewrites match history; old matches keep the dangling id.
"""
from __future__ import annotations

from decimal import Decimal

from badminton_group.errors import NotFoundError, ValidationError
from badminton_group.logging_config import get_logger
from badminton_group.models import Court, Player
from badminton_group.persistence.repositories import (
    CourtRepository,
    PlayerRepository,
    QueueRepository,
)
from badminton_group.persistence.state import GroupState
from badminton_group.services.ledger_service import (
    BALANCE_ADJUSTMENT_REASON,
    INITIAL_BALANCE_REASON,
    LedgerService,
    to_amount,
)

log = get_logger(__name__)


def _clean_name(name: str | None, what: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} name cannot be empty.")
    return cleaned


class RosterService:
    """Player and court CRUD. Balances move only through the ledger."""

    def __init__(self, ledger: LedgerService | None = None) -> None:
        self._player_repo = PlayerRepository()
        self._court_repo = CourtRepository()
        self._queue_repo = QueueRepository()
        self._ledger = ledger or LedgerService()

    # ---------- Players ----------

    def add_player(
        self,
        state: GroupState,
        name: str,
        initial_balance: Decimal | int | float | str | None = None,
        joining_fee_paid: bool = True,
    ) -> Player:
        """
        Add a player with the next sequence number.
        Without an explicit balance, an unpaid joining fee starts the player at
        -joining_fee. A nonzero start is logged as an "Initial balance" entry.
        """
        cleaned = _clean_name(name, "Player")
        if initial_balance is None:
            balance = Decimal("0") if joining_fee_paid else -state.fees.joining_fee
        else:
            balance = to_amount(initial_balance)
        seq = self._player_repo.next_seq(state)
        player = self._player_repo.create(state, cleaned, seq)
        if balance != 0:
            self._ledger.apply_transaction(state, player.id, balance, INITIAL_BALANCE_REASON)
        log.debug("Added player %s as #%d (%s)", cleaned, seq, player.id)
        return player

    def edit_player(
        self,
        state: GroupState,
        player_id: str,
        name: str,
        balance: Decimal | int | float | str | None = None,
    ) -> Player:
        """Rename, and if balance differs, log the difference as an adjustment."""
        player = self._player_repo.get(state, player_id)
        if player is None:
            raise NotFoundError(f"Player not found: {player_id}")
        cleaned = _clean_name(name, "Player")
        delta = Decimal("0")
        if balance is not None:
            delta = to_amount(balance) - player.balance
        self._player_repo.update_name(state, player_id, cleaned)
        if delta != 0:
            self._ledger.apply_transaction(state, player_id, delta, BALANCE_ADJUSTMENT_REASON)
        return player

    def delete_player(self, state: GroupState, player_id: str) -> Player:
        """Remove from roster and queue. Matches and ledger entries stay."""
        player = self._player_repo.get(state, player_id)
        if player is None:
            raise NotFoundError(f"Player not found: {player_id}")
        dropped = self._queue_repo.remove_containing(state, {player_id})
        self._player_repo.delete(state, player_id)
        log.debug("Deleted player %s; dropped %d queued team(s)", player_id, len(dropped))
        return player

    # ---------- Courts ----------

    def add_court(self, state: GroupState, name: str) -> Court:
        court = self._court_repo.create(state, _clean_name(name, "Court"))
        log.debug("Added court %s (%s)", court.name, court.id)
        return court

    def edit_court(self, state: GroupState, court_id: str, name: str) -> Court:
        court = self._court_repo.get(state, court_id)
        if court is None:
            raise NotFoundError(f"Court not found: {court_id}")
        self._court_repo.update_name(state, court_id, _clean_name(name, "Court"))
        return court

    def delete_court(self, state: GroupState, court_id: str) -> Court:
        """Remove the court. Matches on it remain and show the court as Unknown."""
        court = self._court_repo.get(state, court_id)
        if court is None:
            raise NotFoundError(f"Court not found: {court_id}")
        self._court_repo.delete(state, court_id)
        log.debug("Deleted court %s", court_id)
        return court
