"""
Purpose: Decides which bin colours go out in the week of a reference date.
What it does:
- WEEKLY colours are always collected.
- FORTNIGHTLY colours are collected when the week's parity matches the
  policy's base parity, or the opposite parity when flipped.
- Unset/garbled settings are never collected.

Typical public function signature:

- compute_active_colors(settings, reference_date, policy) -> BinSchedule
  where BinSchedule contains:
   - active_colors: List[BinColor] (declared order)
   - status: Dict[BinColor, bool] (every colour present)

Rule: Pure function. Never raises, never reads the clock.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from .models import (
    BIN_COLORS,
    BinColor,
    BinFrequencySetting,
    BinSchedule,
    Frequency,
    settings_from_row,
)
from .policy import SchedulePolicy, default_schedule_policy
from .weeks import DateLike, week_parity

logger = logging.getLogger(__name__)


def is_scheduled_this_week(
    setting: Optional[BinFrequencySetting],
    reference_date: Optional[DateLike],
    policy: Optional[SchedulePolicy] = None,
) -> bool:
    if not isinstance(setting, BinFrequencySetting):
        return False

    if setting.frequency is Frequency.WEEKLY:
        return True

    if setting.frequency is not Frequency.FORTNIGHTLY:
        return False

    if not isinstance(reference_date, date):
        logger.debug(f"No usable reference date ({reference_date!r}); fortnightly bin treated as inactive")
        return False

    policy = policy or default_schedule_policy()
    active_parity = policy.base_parity.opposite if setting.is_flipped else policy.base_parity

    return week_parity(reference_date, policy) is active_parity


def compute_active_colors(
    settings: Mapping[BinColor, BinFrequencySetting],
    reference_date: Optional[DateLike],
    policy: Optional[SchedulePolicy] = None,
) -> BinSchedule:
    """
    Main schedule entry point.

    Parameters
    ----------
    settings:
        BinColor -> BinFrequencySetting. Colours missing from the mapping are unset.
    reference_date:
        Any date or datetime inside the week being rendered. Callers resolving a
        batch of properties must pass the same value to every call.
    policy:
        SchedulePolicy controlling the parity anchor.

    Returns
    -------
    BinSchedule with a boolean per colour and the active colours in declared order.
    """
    policy = policy or default_schedule_policy()
    settings = settings if isinstance(settings, Mapping) else {}

    status: Dict[BinColor, bool] = {}
    for color in BIN_COLORS:
        status[color] = is_scheduled_this_week(settings.get(color), reference_date, policy)

    active: List[BinColor] = [color for color in BIN_COLORS if status[color]]
    return BinSchedule(active_colors=active, status=status)


def compute_row_schedule(
    row: Mapping[str, Any],
    reference_date: Optional[DateLike],
    policy: Optional[SchedulePolicy] = None,
) -> BinSchedule:
    """
    Convenience wrapper for a raw property row ({red,yellow,green}_freq/_flip/_bins).
    """
    return compute_active_colors(settings_from_row(row), reference_date, policy)
