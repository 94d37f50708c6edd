"""
Purpose: ETA estimation policy.
Converts a job's status and timing into the short label clients see:
"Completed", "Skipped", "Arriving now", "~15 min", "~3 h out".

Rules, in priority order:
1. completed / skipped -> fixed words
2. started: baseline ETA minus minutes since start
3. explicit eta_minutes
4. scheduled in the future: minutes until (at least 5), hours when over 120
5. otherwise a fixed 20 minute window

Keeps ETA wording separate from status derivation. Pure; never raises.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .models import JobStatus, parse_datetime, parse_optional_float
from .policy import EtaPolicy, default_eta_policy


@dataclass(frozen=True)
class EtaInput:
    status: JobStatus
    scheduled_at: Optional[datetime] = None
    eta_minutes: Optional[float] = None
    started_at: Optional[datetime] = None


def _align(value: Optional[datetime], now: datetime) -> Optional[datetime]:
    """
    Makes `value` comparable with `now` when exactly one of them is timezone aware.
    A naive side is read as UTC, never as the host's local time.
    """
    if value is None:
        return None
    if (value.tzinfo is None) == (now.tzinfo is None):
        return value
    if now.tzinfo is None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(tzinfo=timezone.utc)


def _whole_minutes(later: datetime, earlier: datetime) -> int:
    # Truncates toward zero, so 4m59s is 4 minutes either way round.
    return int((later - earlier).total_seconds() / 60)


def _minutes_label(minutes: int, policy: EtaPolicy) -> str:
    minutes = max(0, minutes)
    if minutes <= policy.arriving_now_minutes:
        return "Arriving now"
    return f"~{minutes} min"


def _field(job: Any, name: str) -> Any:
    if isinstance(job, Mapping):
        return job.get(name)
    return getattr(job, name, None)


def _as_minutes(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def compute_eta_label(
    job: Any,
    now: datetime,
    *,
    policy: Optional[EtaPolicy] = None,
    default_eta_minutes: Optional[int] = None,
) -> str:
    """
    Parameters
    ----------
    job:
        EtaInput, a mapping, or any object with status / scheduled_at / eta_minutes / started_at.
    now:
        The rendering pass's clock value.
    policy:
        EtaPolicy with the defaults and thresholds.
    default_eta_minutes:
        Caller-specific baseline for started jobs without an explicit ETA
        (e.g. 30 on the crew screen); falls back to policy.default_eta_minutes.
    """
    policy = policy or default_eta_policy()

    status = JobStatus.parse(_field(job, "status"))
    if status is JobStatus.COMPLETED:
        return "Completed"
    if status is JobStatus.SKIPPED:
        return "Skipped"

    eta_minutes = _as_minutes(parse_optional_float(_field(job, "eta_minutes")))
    started_at = _align(parse_datetime(_field(job, "started_at")), now)
    scheduled_at = _align(parse_datetime(_field(job, "scheduled_at")), now) or now

    if started_at is not None:
        baseline = eta_minutes if eta_minutes is not None else default_eta_minutes
        if baseline is None:
            baseline = policy.default_eta_minutes
        minutes_since_start = max(0, _whole_minutes(now, started_at))
        return _minutes_label(baseline - minutes_since_start, policy)

    if eta_minutes is not None:
        return _minutes_label(eta_minutes, policy)

    if scheduled_at > now:
        minutes_until = max(policy.min_future_minutes, _whole_minutes(scheduled_at, now))
        if minutes_until > policy.hours_threshold_minutes:
            hours = int(math.floor(minutes_until / 60 + 0.5))
            return f"~{hours} h out"
        return f"~{minutes_until} min"

    return f"~{policy.fallback_window_minutes} min"
