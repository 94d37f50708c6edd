"""
Purpose: Week arithmetic for fortnightly alternation.
What it does:
- ISO week number of a reference date (optionally with Sunday rolled into
  the following week, matching the crew's Monday-Saturday cycle).
- Week parity, either by a continuous week count (numbered like ISO weeks
  from 2024 on, but never restarting at a year boundary) or by weeks
  elapsed since a configured epoch.
- Rotation week key ("2025-Week-10") used to label a service week.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

from .models import WeekParity
from .policy import SchedulePolicy, default_schedule_policy

DateLike = Union[date, datetime]

# Monday of ISO 2024-W01. Counting from here matches ISO week numbers until
# the first 53-week year (2026) and keeps alternating straight through it.
WEEK_COUNT_ANCHOR = date(2024, 1, 1)


def operational_date(reference: DateLike, policy: Optional[SchedulePolicy] = None) -> date:
    """
    Calendar date the reference falls on for scheduling purposes.
    """
    policy = policy or default_schedule_policy()

    day = reference.date() if isinstance(reference, datetime) else reference
    if policy.sunday_joins_next_week and day.isoweekday() == 7:
        day = day + timedelta(days=1)
    return day


def iso_week_number(reference: DateLike, policy: Optional[SchedulePolicy] = None) -> int:
    return operational_date(reference, policy).isocalendar()[1]


def weeks_since_epoch(reference: DateLike, epoch: date, policy: Optional[SchedulePolicy] = None) -> int:
    """
    Whole weeks between the epoch and the reference (negative before the epoch).
    Floor division keeps parity alternating across the epoch boundary.
    """
    day = operational_date(reference, policy)
    return (day - epoch).days // 7


def continuous_week_number(reference: DateLike, policy: Optional[SchedulePolicy] = None) -> int:
    """
    Week count that never resets, numbered so that 2024-W01 is week 1.
    Two dates one week apart always differ by exactly one.
    """
    return weeks_since_epoch(reference, WEEK_COUNT_ANCHOR, policy) + 1


def week_parity(reference: DateLike, policy: Optional[SchedulePolicy] = None) -> WeekParity:
    policy = policy or default_schedule_policy()

    if policy.parity_epoch is not None:
        return WeekParity.of(weeks_since_epoch(reference, policy.parity_epoch, policy))

    return WeekParity.of(continuous_week_number(reference, policy))


def rotation_week_key(reference: DateLike, policy: Optional[SchedulePolicy] = None) -> str:
    iso_year, iso_week, _ = operational_date(reference, policy).isocalendar()[:3]
    return f"{iso_year}-Week-{iso_week}"
