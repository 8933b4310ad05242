"""
Process configuration read from the environment.

JOINING_FEE / PER_GAME_FEE seed the fee settings at start-up; after that the fees
are process state changed only through the facade. AUTO_ASSIGN_REACTIVE turns on
auto-assign after every command that can free a court or grow the queue.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field

from badminton_group.logging_config import get_logger

log = get_logger(__name__)

DEFAULT_JOINING_FEE = Decimal("10.00")
DEFAULT_PER_GAME_FEE = Decimal("2.50")


class FeeSettings(BaseModel):
    """Current fee magnitudes. Read at the moment a fee is applied, never retroactively."""
    model_config = ConfigDict(validate_assignment=True)

    joining_fee: Decimal = Field(default=DEFAULT_JOINING_FEE, ge=0, description="Charged to new players who have not paid")
    per_game_fee: Decimal = Field(default=DEFAULT_PER_GAME_FEE, ge=0, description="Charged to each player of a scored match")


def _fee_from_env(name: str, default: Decimal) -> Decimal:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        log.warning("Invalid %s value %r, using default %s", name, raw, default)
        return default
    if value < 0 or not value.is_finite():
        log.warning("%s must be a non-negative amount, using default %s", name, default)
        return default
    return value


def _flag_from_env(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    fees: FeeSettings = field(default_factory=FeeSettings)
    reactive_auto_assign: bool = False


def load_settings() -> Settings:
    """Build Settings from JOINING_FEE, PER_GAME_FEE and AUTO_ASSIGN_REACTIVE."""
    fees = FeeSettings(
        joining_fee=_fee_from_env("JOINING_FEE", DEFAULT_JOINING_FEE),
        per_game_fee=_fee_from_env("PER_GAME_FEE", DEFAULT_PER_GAME_FEE),
    )
    return Settings(fees=fees, reactive_auto_assign=_flag_from_env("AUTO_ASSIGN_REACTIVE"))
