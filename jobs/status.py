"""
Purpose: Derives a job's lifecycle status at read time.
What it does:

Evaluated fresh on every call (nothing is stored):

1. match the job's completion logs (matching.py)
2. any matched log with a photo -> completed (the only unambiguous signal)
3. explicit progress events for the job, if any -> their folded status
   (the only way a job becomes skipped)
4. otherwise infer from the nominal start time:
   - more than on_site_after_minutes past it -> on_site
   - at or past it -> en_route
   - still ahead -> scheduled

Typical public function signature:

- resolve_status(job, logs, now) -> JobStatus
- resolve_job(job, logs, now) -> ResolvedJob (status + the facts behind it)

Rule: `now` is injected, never read from the system clock. Never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from .matching import match_logs, photo_paths
from .models import Job, JobStatus, LogRecord, ProgressEvent
from .policy import StatusPolicy, default_status_policy
from .progress import ProgressSnapshot, fold_progress
from .weekdays import scheduled_start


@dataclass(frozen=True)
class ResolvedJob:
    """
    A job as it should be displayed for one rendering pass.
    """
    job: Job
    status: JobStatus
    scheduled_at: datetime
    matched_logs: List[LogRecord] = field(default_factory=list)
    proof_photos: List[str] = field(default_factory=list)
    completed_on: Optional[date] = None
    started_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None
    eta_minutes: Optional[int] = None


def infer_status_from_schedule(scheduled_at: datetime, now: datetime, policy: StatusPolicy) -> JobStatus:
    if scheduled_at < now - timedelta(minutes=policy.on_site_after_minutes):
        return JobStatus.ON_SITE
    if scheduled_at <= now:
        return JobStatus.EN_ROUTE
    return JobStatus.SCHEDULED


def _job_progress(job: Job, progress: Optional[Iterable[ProgressEvent]]) -> Optional[ProgressSnapshot]:
    if not progress:
        return None
    return fold_progress(event for event in progress if event.job_id == job.job_id)


def _derive(
    job: Job,
    matched: List[LogRecord],
    snapshot: Optional[ProgressSnapshot],
    scheduled_at: datetime,
    now: datetime,
    policy: StatusPolicy,
) -> JobStatus:
    if any(log.has_photo for log in matched):
        return JobStatus.COMPLETED

    if snapshot is not None:
        return snapshot.status

    return infer_status_from_schedule(scheduled_at, now, policy)


def resolve_status(
    job: Job,
    logs: Iterable[LogRecord],
    now: datetime,
    *,
    progress: Optional[Iterable[ProgressEvent]] = None,
    policy: Optional[StatusPolicy] = None,
) -> JobStatus:
    """
    Main status entry point.

    Parameters
    ----------
    job:
        The job to resolve.
    logs:
        Candidate completion logs (any job's; matching happens here).
    now:
        The rendering pass's clock value. Use the same value for every job in a pass.
    progress:
        Optional explicit progress events (any job's).
    policy:
        StatusPolicy controlling the start time, thresholds and log matching.
    """
    policy = policy or default_status_policy()

    matched = match_logs(job, logs, policy)
    snapshot = _job_progress(job, progress)
    scheduled_at = scheduled_start(job.day_of_week, now, policy)

    return _derive(job, matched, snapshot, scheduled_at, now, policy)


def resolve_job(
    job: Job,
    logs: Iterable[LogRecord],
    now: datetime,
    *,
    progress: Optional[Iterable[ProgressEvent]] = None,
    policy: Optional[StatusPolicy] = None,
    min_eta_minutes: int = 5,
) -> ResolvedJob:
    """
    Like resolve_status, but also returns what the status was derived from.
    """
    policy = policy or default_status_policy()

    matched = match_logs(job, logs, policy)
    snapshot = _job_progress(job, progress)
    scheduled_at = scheduled_start(job.day_of_week, now, policy)
    status = _derive(job, matched, snapshot, scheduled_at, now, policy)

    photo_dates = [log.done_on for log in matched if log.has_photo and log.done_on]
    completed_on = max(photo_dates) if photo_dates else job.last_completed_on

    eta_minutes: Optional[int] = None
    if status is JobStatus.SCHEDULED and scheduled_at > now:
        eta_minutes = max(min_eta_minutes, int((scheduled_at - now).total_seconds() // 60))

    return ResolvedJob(
        job=job,
        status=status,
        scheduled_at=scheduled_at,
        matched_logs=matched,
        proof_photos=photo_paths(matched),
        completed_on=completed_on,
        started_at=snapshot.started_at if snapshot else None,
        arrived_at=snapshot.arrived_at if snapshot else None,
        eta_minutes=eta_minutes,
    )
