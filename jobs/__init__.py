"""
Jobs domain package.

Public API:
- Domain models: Job, LogRecord, ProgressEvent, JobStatus, JobType
- Status entry: resolve_status, resolve_job
- ETA entry: compute_eta_label
- Policies: StatusPolicy, EtaPolicy, ScheduleAnchor
"""
from .models import Job, JobStatus, JobType, LogRecord, ProgressEvent
from .policy import (
    EtaPolicy,
    ScheduleAnchor,
    StatusPolicy,
    default_eta_policy,
    default_status_policy,
)
from .weekdays import next_occurrence, parse_weekday, scheduled_start
from .matching import match_logs
from .progress import JobStateException, ProgressSnapshot, fold_progress, mark_skipped, transition_job
from .status import ResolvedJob, resolve_job, resolve_status
from .eta import EtaInput, compute_eta_label

__all__ = [
    "Job",
    "JobStatus",
    "JobType",
    "LogRecord",
    "ProgressEvent",
    "EtaPolicy",
    "ScheduleAnchor",
    "StatusPolicy",
    "default_eta_policy",
    "default_status_policy",
    "next_occurrence",
    "parse_weekday",
    "scheduled_start",
    "match_logs",
    "JobStateException",
    "ProgressSnapshot",
    "fold_progress",
    "mark_skipped",
    "transition_job",
    "ResolvedJob",
    "resolve_job",
    "resolve_status",
    "EtaInput",
    "compute_eta_label",
]
