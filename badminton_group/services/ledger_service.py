"""
Ledger service: every balance change is an appended transaction.
The log is the source of truth; Player.balance is a cache kept in step with it.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterable

from badminton_group.display import money
from badminton_group.errors import NotFoundError, ValidationError
from badminton_group.logging_config import get_logger
from badminton_group.models import FinancialSummary, Transaction
from badminton_group.persistence.repositories import PlayerRepository, TransactionRepository
from badminton_group.persistence.state import GroupState

log = get_logger(__name__)

INITIAL_BALANCE_REASON = "Initial balance"
BALANCE_ADJUSTMENT_REASON = "Balance adjustment"
MANUAL_PAYMENT_REASON = "Manual payment"


def to_amount(value: Decimal | int | float | str) -> Decimal:
    """Coerce user input to a finite Decimal; floats go through str to keep 2.5 exact."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"Not a valid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Not a valid amount: {value!r}")
    return amount


class LedgerService:
    """Append-only money movements per player."""

    def __init__(self) -> None:
        self._player_repo = PlayerRepository()
        self._txn_repo = TransactionRepository()

    def apply_transaction(
        self, state: GroupState, player_id: str, amount: Decimal, reason: str
    ) -> Transaction:
        """Append one entry and move the cached balance by the same amount."""
        if self._player_repo.get(state, player_id) is None:
            raise NotFoundError(f"Player not found: {player_id}")
        txn = self._txn_repo.append(state, player_id, amount, reason)
        self._player_repo.adjust_balance(state, player_id, amount)
        log.debug("Ledger %s %s (%s)", player_id, money(amount), reason)
        return txn

    def apply_to_players(
        self, state: GroupState, player_ids: Iterable[str], amount: Decimal, reason: str
    ) -> list[Transaction]:
        """
        Same entry for several players (match fee or refund).
        Players no longer on the roster are skipped: they have nothing to charge.
        """
        txns: list[Transaction] = []
        for pid in player_ids:
            if self._player_repo.get(state, pid) is None:
                log.debug("Ledger skip %s: not on roster (%s)", pid, reason)
                continue
            txns.append(self.apply_transaction(state, pid, amount, reason))
        return txns

    def record_payment(
        self, state: GroupState, player_id: str, amount: Decimal | int | float | str
    ) -> Transaction:
        """Credit a manual payment. Amount must be strictly positive."""
        value = to_amount(amount)
        if value <= 0:
            raise ValidationError("Please enter a valid positive amount.")
        if self._player_repo.get(state, player_id) is None:
            raise NotFoundError(f"Player not found: {player_id}")
        return self.apply_transaction(state, player_id, value, MANUAL_PAYMENT_REASON)

    # ---------- Fees ----------

    def set_joining_fee(self, state: GroupState, fee: Decimal | int | float | str) -> None:
        value = to_amount(fee)
        if value < 0:
            raise ValidationError("Joining fee cannot be negative.")
        state.fees.joining_fee = value
        log.info("Joining fee set to %s", value)

    def set_per_game_fee(self, state: GroupState, fee: Decimal | int | float | str) -> None:
        value = to_amount(fee)
        if value < 0:
            raise ValidationError("Per-game fee cannot be negative.")
        state.fees.per_game_fee = value
        log.info("Per-game fee set to %s", value)

    # ---------- Queries ----------

    def transactions_for(self, state: GroupState, player_id: str) -> list[Transaction]:
        return self._txn_repo.list_by_player(state, player_id)

    def balance_from_log(self, state: GroupState, player_id: str) -> Decimal:
        return sum((t.amount for t in self._txn_repo.list_by_player(state, player_id)), Decimal("0"))

    def financial_summary(self, state: GroupState) -> FinancialSummary:
        """Credit the group holds for players vs. what players owe, over the current roster."""
        summary = FinancialSummary()
        for p in self._player_repo.list_all(state):
            if p.balance > 0:
                summary.total_credit += p.balance
            elif p.balance < 0:
                summary.total_owed += -p.balance
        return summary
