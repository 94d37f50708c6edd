"""
Purpose: Central configuration for fortnightly bin alternation (single source of truth).
What it does:

Stores the knobs that decide which fortnight a bin colour is collected in:

PARITY_EPOCH = None (continuous week count, ISO-numbered from 2024-W01)

BASE_PARITY = ODD (non-flipped fortnightly colours go out on odd weeks)

SUNDAY_JOINS_NEXT_WEEK = False

Overrides can come from the environment (.env supported):
BIN_PARITY_EPOCH=2024-08-04
BIN_BASE_PARITY=odd
BIN_SUNDAY_JOINS_NEXT_WEEK=false

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dotenv import load_dotenv

from .models import WeekParity

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SchedulePolicy:
    """
    Central configuration for week parity.

    Notes:
    - With no epoch, parity is the parity of a week count that never resets
      at year end (bins.weeks.continuous_week_number).
    - With an epoch, parity is the parity of whole weeks elapsed since the
      epoch date (the epoch's own week is week 0, i.e. EVEN).
    - 'flip' always selects the opposite of base_parity.
    """

    # --- Parity anchor ---
    parity_epoch: Optional[date] = None

    # Parity in which non-flipped fortnightly colours are collected.
    base_parity: WeekParity = WeekParity.ODD

    # --- Operational calendar ---
    # The crew week runs Monday-Saturday; when True a Sunday is counted
    # as part of the following week.
    sunday_joins_next_week: bool = False

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if not isinstance(self.base_parity, WeekParity):
            raise ValueError("base_parity must be a WeekParity")

        if self.parity_epoch is not None and not isinstance(self.parity_epoch, date):
            raise ValueError("parity_epoch must be a date or None")


def default_schedule_policy() -> SchedulePolicy:
    """
    Convenience factory for the default policy, with environment overrides.
    """
    epoch_raw = (os.getenv("BIN_PARITY_EPOCH") or "").strip()
    parity_raw = (os.getenv("BIN_BASE_PARITY") or "").strip().lower()
    sunday_raw = (os.getenv("BIN_SUNDAY_JOINS_NEXT_WEEK") or "").strip().lower()

    epoch: Optional[date] = None
    if epoch_raw:
        try:
            epoch = date.fromisoformat(epoch_raw)
        except ValueError:
            raise ValueError(f"BIN_PARITY_EPOCH must be an ISO date, got {epoch_raw!r}")

    base_parity = WeekParity.ODD
    if parity_raw:
        try:
            base_parity = WeekParity(parity_raw)
        except ValueError:
            raise ValueError(f"BIN_BASE_PARITY must be 'odd' or 'even', got {parity_raw!r}")

    p = SchedulePolicy(
        parity_epoch=epoch,
        base_parity=base_parity,
        sunday_joins_next_week=sunday_raw in _TRUTHY,
    )
    p.validate()
    return p
