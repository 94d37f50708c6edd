"""
Purpose: The rendering-pass "orchestrator" (single entry point).
What it does:

Coordinates the pipeline end-to-end for one read of the portal:

- parses property / job / log / progress rows into records

- groups properties into accounts (accounts.aggregator)

- computes every property's bin schedule (bins.schedule)

- resolves every job to a property (explicit property_id, else address)

- derives status (jobs.status) and the ETA label (jobs.eta)

- builds each account's completion history: one entry per log with a
  done_on date, newest first, carrying its photo, GPS and notes

Every calculation in one pass uses the same `now`, so a page never shows two
different "current weeks".

Typical public function signature:

- project_portal(property_rows, job_rows, log_rows, now=...) -> ProjectionResult
  where ProjectionResult contains:
   - accounts: List[AccountView]
   - orphan_jobs: List[JobView] (jobs no property could be found for)
   - orphan_history: List[HistoryEntry] (completed logs no account could be found for)

Data-quality problems are logged here at WARNING; the engine underneath stays silent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from accounts.aggregator import group_into_accounts
from accounts.identity import IdentityKeyStrategy, name_identity_key
from accounts.models import Account, PropertyRecord, normalise_address
from bins.labels import bins_summary
from bins.models import BinSchedule
from bins.policy import SchedulePolicy, default_schedule_policy
from bins.schedule import compute_active_colors
from jobs.eta import EtaInput, compute_eta_label
from jobs.models import Job, JobStatus, LogRecord, ProgressEvent
from jobs.policy import EtaPolicy, StatusPolicy, default_eta_policy, default_status_policy
from jobs.progress import fold_progress
from jobs.status import ResolvedJob, resolve_job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyView:
    record: PropertyRecord
    bins: BinSchedule

    @property
    def bins_summary(self) -> Optional[str]:
        return bins_summary(self.bins)


@dataclass(frozen=True)
class JobView:
    resolved: ResolvedJob
    property_id: Optional[str]
    eta_label: str

    @property
    def status(self) -> JobStatus:
        return self.resolved.status


@dataclass(frozen=True)
class HistoryEntry:
    """
    One completed visit, read straight off a completion log.
    """
    log: LogRecord
    completed_on: date
    property_id: Optional[str]
    property_name: str
    job_id: Optional[str] = None
    started_at: Optional[datetime] = None
    arrived_at: Optional[datetime] = None

    @property
    def proof_photos(self) -> List[str]:
        return [self.log.photo_path] if self.log.has_photo else []

    @property
    def gps(self) -> Optional[Tuple[float, float]]:
        if self.log.gps_lat is None or self.log.gps_lng is None:
            return None
        return (self.log.gps_lat, self.log.gps_lng)

    @property
    def notes(self) -> Optional[str]:
        return self.log.notes


@dataclass
class AccountView:
    account: Account
    properties: List[PropertyView] = field(default_factory=list)
    jobs: List[JobView] = field(default_factory=list)
    history: List[HistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectionResult:
    accounts: List[AccountView]
    orphan_jobs: List[JobView]
    now: datetime
    orphan_history: List[HistoryEntry] = field(default_factory=list)


def _parse_properties(rows: Iterable[Any]) -> List[PropertyRecord]:
    records: List[PropertyRecord] = []
    seen: Dict[str, int] = {}

    for row in rows or []:
        record = row if isinstance(row, PropertyRecord) else PropertyRecord.from_row(row)
        if not record.property_id:
            logger.warning(f"Skipping property row without property_id (client={record.client_name!r}, company={record.company!r})")
            continue
        # Later rows for the same property replace earlier ones.
        if record.property_id in seen:
            logger.warning(f"Duplicate property row for {record.property_id}; keeping the last one")
            records[seen[record.property_id]] = record
            continue
        seen[record.property_id] = len(records)
        records.append(record)

    return records


def _parse_jobs(rows: Iterable[Any]) -> List[Job]:
    jobs: List[Job] = []
    for row in rows or []:
        job = row if isinstance(row, Job) else Job.from_row(row)
        if not job.job_id:
            logger.warning("Skipping job row without id")
            continue
        jobs.append(job)
    return jobs


def _parse_logs(rows: Iterable[Any]) -> List[LogRecord]:
    logs: List[LogRecord] = []
    for row in rows or []:
        log = row if isinstance(row, LogRecord) else LogRecord.from_row(row)
        if not log.job_id:
            logger.warning(f"Log {log.log_id or '?'} has no job_id; matching by address ({log.address!r})")
        logs.append(log)
    return logs


def _parse_progress(rows: Optional[Iterable[Any]]) -> List[ProgressEvent]:
    events: List[ProgressEvent] = []
    for row in rows or []:
        event = row if isinstance(row, ProgressEvent) else ProgressEvent.from_row(row)
        if event is None:
            logger.debug(f"Ignoring unrecognised progress row: {row!r}")
            continue
        events.append(event)
    return events


def _locate_property(
    job: Job,
    by_id: Mapping[str, PropertyRecord],
    by_address: Mapping[str, PropertyRecord],
) -> Optional[PropertyRecord]:
    if job.property_id:
        record = by_id.get(job.property_id)
        if record is None:
            logger.warning(f"Job {job.job_id} references unknown property {job.property_id}")
        return record

    logger.warning(f"Job {job.job_id} has no property_id; matching by address ({job.address!r})")
    return by_address.get(normalise_address(job.address))


def _history_entry(
    log: LogRecord,
    property_of_job: Mapping[str, Optional[PropertyRecord]],
    by_address: Mapping[str, PropertyRecord],
    progress: Sequence[ProgressEvent],
) -> Optional[HistoryEntry]:
    """
    Logs without a done_on date never make it into history.
    The property comes from the log's job when known, else from its address.
    """
    if log.done_on is None:
        return None

    record = property_of_job.get(log.job_id) if log.job_id else None
    if record is None:
        record = by_address.get(normalise_address(log.address))

    snapshot = None
    if log.job_id:
        snapshot = fold_progress(event for event in progress if event.job_id == log.job_id)

    if record is not None:
        name = record.address or record.display_name
    else:
        name = log.address or "Property"

    return HistoryEntry(
        log=log,
        completed_on=log.done_on,
        property_id=record.property_id if record else None,
        property_name=name,
        job_id=log.job_id,
        started_at=snapshot.started_at if snapshot else None,
        arrived_at=snapshot.arrived_at if snapshot else None,
    )


def _history_sort_key(entry: HistoryEntry) -> Tuple[date, str]:
    return (entry.completed_on, entry.log.log_id)


def project_portal(
    property_rows: Sequence[Any],
    job_rows: Sequence[Any],
    log_rows: Sequence[Any],
    *,
    now: datetime,
    progress_rows: Optional[Sequence[Any]] = None,
    identity_key: IdentityKeyStrategy = name_identity_key,
    schedule_policy: Optional[SchedulePolicy] = None,
    status_policy: Optional[StatusPolicy] = None,
    eta_policy: Optional[EtaPolicy] = None,
) -> ProjectionResult:
    """
    Main projection entry point (pure apart from logging).

    Parameters
    ----------
    property_rows, job_rows, log_rows, progress_rows:
        Already-fetched rows (mappings) or parsed records.
    now:
        Clock value shared by every schedule, status and ETA in this pass.
    identity_key:
        Account grouping strategy (accounts.identity).
    schedule_policy, status_policy, eta_policy:
        Optional policy overrides; defaults come from the environment.
    """
    schedule_policy = schedule_policy or default_schedule_policy()
    status_policy = status_policy or default_status_policy()
    eta_policy = eta_policy or default_eta_policy()

    properties = _parse_properties(property_rows)
    jobs = _parse_jobs(job_rows)
    logs = _parse_logs(log_rows)
    progress = _parse_progress(progress_rows)

    accounts = group_into_accounts(properties, identity_key=identity_key)

    by_id: Dict[str, PropertyRecord] = {record.property_id: record for record in properties}
    by_address: Dict[str, PropertyRecord] = {}
    for record in properties:
        address = normalise_address(record.address)
        if address and address not in by_address:
            by_address[address] = record

    views: Dict[str, AccountView] = {}
    account_of_property: Dict[str, str] = {}
    for account in accounts:
        view = AccountView(account=account)
        for property_id in account.property_ids:
            record = by_id[property_id]
            view.properties.append(
                PropertyView(record=record, bins=compute_active_colors(record.bins, now, schedule_policy))
            )
            account_of_property[property_id] = account.account_id
        views[account.account_id] = view

    orphans: List[JobView] = []
    property_of_job: Dict[str, Optional[PropertyRecord]] = {}
    for job in jobs:
        record = _locate_property(job, by_id, by_address)
        property_of_job[job.job_id] = record
        if record is not None and not job.address and record.address:
            job = replace(job, address=record.address)

        resolved = resolve_job(job, logs, now, progress=progress, policy=status_policy)
        label = compute_eta_label(
            EtaInput(
                status=resolved.status,
                scheduled_at=resolved.scheduled_at,
                started_at=resolved.started_at,
            ),
            now,
            policy=eta_policy,
        )
        job_view = JobView(resolved=resolved, property_id=record.property_id if record else None, eta_label=label)

        if record is None or record.property_id not in account_of_property:
            logger.warning(f"Job {job.job_id} could not be matched to any account")
            orphans.append(job_view)
            continue

        views[account_of_property[record.property_id]].jobs.append(job_view)

    orphan_history: List[HistoryEntry] = []
    for log in logs:
        entry = _history_entry(log, property_of_job, by_address, progress)
        if entry is None:
            continue
        if entry.property_id not in account_of_property:
            logger.warning(f"Completed log {log.log_id or '?'} could not be matched to any account")
            orphan_history.append(entry)
            continue
        views[account_of_property[entry.property_id]].history.append(entry)

    for view in views.values():
        view.jobs.sort(key=lambda job_view: job_view.resolved.scheduled_at, reverse=True)
        view.history.sort(key=_history_sort_key, reverse=True)
    orphan_history.sort(key=_history_sort_key, reverse=True)

    return ProjectionResult(
        accounts=list(views.values()),
        orphan_jobs=orphans,
        now=now,
        orphan_history=orphan_history,
    )


def project_accounts(
    property_rows: Sequence[Any],
    job_rows: Sequence[Any],
    log_rows: Sequence[Any],
    *,
    now: datetime,
    **kwargs: Any,
) -> List[AccountView]:
    """
    Accounts only; see project_portal for the parameters.
    """
    return project_portal(property_rows, job_rows, log_rows, now=now, **kwargs).accounts
