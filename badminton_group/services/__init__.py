"""
Service layer: domain logic, match state machine, scheduler, standings.
Services take the GroupState explicitly; storage goes through the repositories.
"""
from .ledger_service import LedgerService
from .roster_service import RosterService
from .queue_service import QueueService, player_status, player_statuses
from .match_service import MatchService, FeeAction, fee_action, validate_match_input
from .scheduling import auto_assign, can_auto_assign, pair_courts_with_teams
from .standings import compute_rankings, win_percentage

__all__ = [
    "LedgerService",
    "RosterService",
    "QueueService",
    "player_status",
    "player_statuses",
    "MatchService",
    "FeeAction",
    "fee_action",
    "validate_match_input",
    "auto_assign",
    "can_auto_assign",
    "pair_courts_with_teams",
    "compute_rankings",
    "win_percentage",
]
