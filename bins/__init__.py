"""
Bin schedule domain package.

Public API:
- Domain models: BinColor, Frequency, Flip, WeekParity, BinFrequencySetting, BinSchedule
- Schedule entry: compute_active_colors, compute_row_schedule
- Policy: SchedulePolicy, default_schedule_policy
"""
from .models import (
    BIN_COLORS,
    BinColor,
    BinFrequencySetting,
    BinSchedule,
    Flip,
    Frequency,
    WeekParity,
    settings_from_row,
)
from .policy import SchedulePolicy, default_schedule_policy
from .schedule import compute_active_colors, compute_row_schedule, is_scheduled_this_week
from .weeks import continuous_week_number, iso_week_number, rotation_week_key, week_parity
from .labels import bins_summary, describe_bin_frequency, format_bin_label, normalise_bin_list

__all__ = [
    "BIN_COLORS",
    "BinColor",
    "BinFrequencySetting",
    "BinSchedule",
    "Flip",
    "Frequency",
    "WeekParity",
    "settings_from_row",
    "SchedulePolicy",
    "default_schedule_policy",
    "compute_active_colors",
    "compute_row_schedule",
    "is_scheduled_this_week",
    "continuous_week_number",
    "iso_week_number",
    "rotation_week_key",
    "week_parity",
    "bins_summary",
    "describe_bin_frequency",
    "format_bin_label",
    "normalise_bin_list",
]
