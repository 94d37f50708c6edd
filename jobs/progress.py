"""
Purpose: Explicit job progress markings and the job state machine.
What it does:
- fold_progress: replays a job's ProgressEvents in time order and promotes
  the status by priority (scheduled < en_route < on_site < completed < skipped),
  recording when the job started, arrived and finished.
- transition_job: validates an explicit marking before the caller writes it
  (forward-only along scheduled -> en_route -> on_site -> completed, skipped
  from any non-terminal state).

Read-time derivation never raises; only transition_job does.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .models import JobStatus, ProgressEvent


class JobStateException(Exception):
    """Raised when an invalid job status transition is attempted."""
    pass


@dataclass(frozen=True)
class ProgressSnapshot:
    status: JobStatus = JobStatus.SCHEDULED
    started_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    status_updated_at: Optional[datetime] = None


def _instant(when: Optional[datetime]) -> Optional[float]:
    # Naive timestamps are read as UTC so they order against "...Z" ones.
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.timestamp()


def _sort_key(event: ProgressEvent) -> float:
    # Events without a timestamp replay first.
    instant = _instant(event.occurred_at)
    return float("-inf") if instant is None else instant


def fold_progress(events: Iterable[ProgressEvent]) -> Optional[ProgressSnapshot]:
    """
    Returns None when there are no events, so callers can tell
    "never marked" apart from "marked scheduled".
    """
    ordered: List[ProgressEvent] = sorted(
        (event for event in events or [] if isinstance(event, ProgressEvent)),
        key=_sort_key,
    )
    if not ordered:
        return None

    status = JobStatus.SCHEDULED
    started_at = arrived_at = completed_at = updated_at = None
    updated_instant: Optional[float] = None

    for event in ordered:
        when = event.occurred_at
        instant = _instant(when)
        is_newer = instant is not None and (updated_instant is None or instant > updated_instant)
        if event.status is JobStatus.EN_ROUTE and when:
            started_at = when
        if event.status is JobStatus.ON_SITE and when:
            arrived_at = when
        if event.status.is_terminal and when:
            completed_at = when

        promote = event.status.priority > status.priority or (event.status.priority == status.priority and is_newer)
        if promote:
            status = event.status
        if (promote or is_newer) and when is not None:
            updated_at, updated_instant = when, instant

    return ProgressSnapshot(
        status=status,
        started_at=started_at,
        arrived_at=arrived_at,
        completed_at=completed_at,
        status_updated_at=updated_at,
    )


_FORWARD_ORDER = [JobStatus.SCHEDULED, JobStatus.EN_ROUTE, JobStatus.ON_SITE, JobStatus.COMPLETED]


def transition_job(current: JobStatus, target: JobStatus) -> JobStatus:
    """
    Validates an explicit status marking and returns the new status.
    Re-marking the current status is a no-op.
    """
    if current == target:
        return target

    if current.is_terminal:
        raise JobStateException(f"Cannot move job from terminal status {current.value} to {target.value}")

    if target is JobStatus.SKIPPED:
        return target

    if _FORWARD_ORDER.index(target) < _FORWARD_ORDER.index(current):
        raise JobStateException(f"Cannot move job backwards from {current.value} to {target.value}")

    return target


def mark_skipped(current: JobStatus) -> JobStatus:
    """
    Called when staff skip a job for the week (bins not out, access blocked ...).
    """
    return transition_job(current, JobStatus.SKIPPED)
