"""
Purpose: Turns a job's weekday name into a concrete start time.
What it does:
- parse_weekday: "Monday", " tues,", "THURS" -> 0..6 (Monday=0), else None
- scheduled_start: the nominal start for the job relative to `now`, per
  StatusPolicy.anchor (current service week, or next occurrence)
- next_occurrence: today-or-next matching weekday, used for display ETAs

`now` is always injected; timezone info on `now` is carried onto the result.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Optional

from .policy import ScheduleAnchor, StatusPolicy, default_status_policy

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

DAY_ALIASES = {
    "mon": 0,
    "monday": 0,
    "tue": 1,
    "tues": 1,
    "tuesday": 1,
    "wed": 2,
    "weds": 2,
    "wednesday": 2,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "thursday": 3,
    "fri": 4,
    "friday": 4,
    "sat": 5,
    "saturday": 5,
    "sun": 6,
    "sunday": 6,
}


def parse_weekday(value: Any) -> Optional[int]:
    if not isinstance(value, str):
        return None
    key = re.sub(r"[,.\s]+", "", value).lower()
    return DAY_ALIASES.get(key)


def _at_start_time(day: datetime, policy: StatusPolicy) -> datetime:
    return day.replace(hour=policy.scheduled_hour, minute=policy.scheduled_minute, second=0, microsecond=0)


def next_occurrence(day_of_week: Any, now: datetime, policy: Optional[StatusPolicy] = None) -> datetime:
    """
    Today at the start time if today matches, otherwise the next matching weekday.
    Unparseable weekdays fall back to now + unscheduled_offset_minutes.
    """
    policy = policy or default_status_policy()

    weekday = parse_weekday(day_of_week)
    if weekday is None:
        return now + timedelta(minutes=policy.unscheduled_offset_minutes)

    days_ahead = (weekday - now.weekday()) % 7
    return _at_start_time(now + timedelta(days=days_ahead), policy)


def service_week_occurrence(day_of_week: Any, now: datetime, policy: Optional[StatusPolicy] = None) -> datetime:
    """
    The weekday inside the Monday-Sunday week containing `now`.
    Unparseable weekdays fall back to now + unscheduled_offset_minutes.
    """
    policy = policy or default_status_policy()

    weekday = parse_weekday(day_of_week)
    if weekday is None:
        return now + timedelta(minutes=policy.unscheduled_offset_minutes)

    return _at_start_time(now + timedelta(days=weekday - now.weekday()), policy)


def scheduled_start(day_of_week: Any, now: datetime, policy: Optional[StatusPolicy] = None) -> datetime:
    policy = policy or default_status_policy()

    if policy.anchor is ScheduleAnchor.NEXT_OCCURRENCE:
        return next_occurrence(day_of_week, now, policy)
    return service_week_occurrence(day_of_week, now, policy)
