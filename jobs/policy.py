"""
Purpose: Central configuration for job status and ETA heuristics (single source of truth).
What it does:

Stores all tunable thresholds:

SCHEDULED_HOUR = 9 (nominal start of a run, local time of `now`)

ON_SITE_AFTER_MINUTES = 60

UNSCHEDULED_OFFSET_MINUTES = 120 (jobs with no usable weekday)

DEFAULT_ETA_MINUTES = 20

Overrides can come from the environment (.env supported), see
default_status_policy() and default_eta_policy().

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ScheduleAnchor(str, Enum):
    """
    How a job's weekday is turned into a concrete start time.
    """
    # That weekday inside the current Monday-Sunday week (may be in the past).
    SERVICE_WEEK = "service_week"
    # Today if the weekday matches, otherwise the next matching day (never in the past).
    NEXT_OCCURRENCE = "next_occurrence"


@dataclass(frozen=True)
class StatusPolicy:
    """
    Central configuration for derived job status.

    Notes:
    - There is no "arrived" telemetry. Non-completed status is inferred purely
      from how far `now` is past the nominal start.
    - address_fallback matches logs without a job id to jobs by address. It can
      conflate two jobs at one address; turn it off once logs always carry job ids.
    """

    # --- Nominal start ---
    scheduled_hour: int = 9
    scheduled_minute: int = 0
    anchor: ScheduleAnchor = ScheduleAnchor.SERVICE_WEEK

    # --- Heuristic thresholds ---
    # Past the start by more than this -> on_site.
    on_site_after_minutes: int = 60

    # Jobs with no parseable weekday are treated as starting this far in the future.
    unscheduled_offset_minutes: int = 120

    # --- Log matching ---
    address_fallback: bool = True

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if not 0 <= self.scheduled_hour <= 23:
            raise ValueError("scheduled_hour must be within 0..23")

        if not 0 <= self.scheduled_minute <= 59:
            raise ValueError("scheduled_minute must be within 0..59")

        if self.on_site_after_minutes < 0:
            raise ValueError("on_site_after_minutes must be >= 0")

        if self.unscheduled_offset_minutes < 0:
            raise ValueError("unscheduled_offset_minutes must be >= 0")

        if not isinstance(self.anchor, ScheduleAnchor):
            raise ValueError("anchor must be a ScheduleAnchor")


@dataclass(frozen=True)
class EtaPolicy:
    """
    Central configuration for the human ETA label.
    """

    # Baseline when a job has started but carries no explicit ETA.
    default_eta_minutes: int = 20

    # Future scheduled jobs never show less than this.
    min_future_minutes: int = 5

    # Above this, future ETAs are shown in hours.
    hours_threshold_minutes: int = 120

    # Shown when nothing better is known.
    fallback_window_minutes: int = 20

    # At or below this many minutes the label reads "Arriving now".
    arriving_now_minutes: int = 1

    def validate(self) -> None:
        if self.default_eta_minutes < 0:
            raise ValueError("default_eta_minutes must be >= 0")

        if self.min_future_minutes < 0:
            raise ValueError("min_future_minutes must be >= 0")

        if self.hours_threshold_minutes < self.min_future_minutes:
            raise ValueError("hours_threshold_minutes must be >= min_future_minutes")

        if self.fallback_window_minutes < 0:
            raise ValueError("fallback_window_minutes must be >= 0")


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def default_status_policy() -> StatusPolicy:
    """
    Convenience factory for the default policy, with environment overrides:
    JOB_SCHEDULED_HOUR, JOB_ON_SITE_AFTER_MINUTES, JOB_SCHEDULE_ANCHOR, JOB_ADDRESS_FALLBACK.
    """
    anchor_raw = (os.getenv("JOB_SCHEDULE_ANCHOR") or "").strip().lower()
    fallback_raw = (os.getenv("JOB_ADDRESS_FALLBACK") or "").strip().lower()

    anchor = ScheduleAnchor.SERVICE_WEEK
    if anchor_raw:
        try:
            anchor = ScheduleAnchor(anchor_raw)
        except ValueError:
            raise ValueError(f"JOB_SCHEDULE_ANCHOR must be one of service_week/next_occurrence, got {anchor_raw!r}")

    if fallback_raw and fallback_raw not in _TRUTHY | _FALSY:
        raise ValueError(f"JOB_ADDRESS_FALLBACK must be a boolean, got {fallback_raw!r}")

    p = StatusPolicy(
        scheduled_hour=_env_int("JOB_SCHEDULED_HOUR", 9),
        on_site_after_minutes=_env_int("JOB_ON_SITE_AFTER_MINUTES", 60),
        anchor=anchor,
        address_fallback=fallback_raw not in _FALSY,
    )
    p.validate()
    return p


def default_eta_policy() -> EtaPolicy:
    """
    Convenience factory for the default policy, with ETA_DEFAULT_MINUTES override.
    """
    p = EtaPolicy(default_eta_minutes=_env_int("ETA_DEFAULT_MINUTES", 20))
    p.validate()
    return p
