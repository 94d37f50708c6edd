"""
Purpose: Domain models for the jobs capability.
What it does:
- Defines core data structures:
- Job (job_id, property_id, day_of_week, last_completed_on, job_type, address)
- LogRecord (log_id, job_id, address, done_on, photo_path, gps, notes), append-only
- ProgressEvent (job_id, status, occurred_at), an explicit external marking

Defines enums/constants:
- JobStatus = scheduled | en_route | on_site | completed | skipped
- JobType = put_out | bring_in

Each model has a `from_row` factory that tolerates the loose shapes rows
arrive in (blank strings, NaN, numeric ids, ISO strings with or without "Z").

Rule: No status derivation here. Models only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from accounts.models import clean_text, normalise_identifier


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    EN_ROUTE = "en_route"
    ON_SITE = "on_site"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def priority(self) -> int:
        return _STATUS_PRIORITY[self]

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.SKIPPED)

    @classmethod
    def normalise(cls, value: Any) -> Optional[JobStatus]:
        """
        Maps free-form status words to a JobStatus, or None when unrecognised.
        """
        if isinstance(value, JobStatus):
            return value
        if not isinstance(value, str):
            return None
        key = "_".join(value.strip().lower().replace("-", " ").split())
        return _STATUS_ALIASES.get(key)

    @classmethod
    def parse(cls, value: Any) -> JobStatus:
        return cls.normalise(value) or cls.SCHEDULED


_STATUS_PRIORITY = {
    JobStatus.SCHEDULED: 0,
    JobStatus.EN_ROUTE: 1,
    JobStatus.ON_SITE: 2,
    JobStatus.COMPLETED: 3,
    JobStatus.SKIPPED: 4,
}

_STATUS_ALIASES = {
    "scheduled": JobStatus.SCHEDULED,
    "pending": JobStatus.SCHEDULED,
    "queued": JobStatus.SCHEDULED,
    "unstarted": JobStatus.SCHEDULED,
    "en_route": JobStatus.EN_ROUTE,
    "enroute": JobStatus.EN_ROUTE,
    "start": JobStatus.EN_ROUTE,
    "started": JobStatus.EN_ROUTE,
    "start_run": JobStatus.EN_ROUTE,
    "starting": JobStatus.EN_ROUTE,
    "departed": JobStatus.EN_ROUTE,
    "driving": JobStatus.EN_ROUTE,
    "travelling": JobStatus.EN_ROUTE,
    "transit": JobStatus.EN_ROUTE,
    "in_transit": JobStatus.EN_ROUTE,
    "inprogress": JobStatus.EN_ROUTE,
    "in_progress": JobStatus.EN_ROUTE,
    "on_site": JobStatus.ON_SITE,
    "onsite": JobStatus.ON_SITE,
    "arrived": JobStatus.ON_SITE,
    "arrival": JobStatus.ON_SITE,
    "arrived_on_site": JobStatus.ON_SITE,
    "arrived_at_location": JobStatus.ON_SITE,
    "at_location": JobStatus.ON_SITE,
    "onlocation": JobStatus.ON_SITE,
    "completed": JobStatus.COMPLETED,
    "done": JobStatus.COMPLETED,
    "finished": JobStatus.COMPLETED,
    "wrapped": JobStatus.COMPLETED,
    "marked_done": JobStatus.COMPLETED,
    "skipped": JobStatus.SKIPPED,
    "cancelled": JobStatus.SKIPPED,
    "canceled": JobStatus.SKIPPED,
}


class JobType(str, Enum):
    PUT_OUT = "put_out"
    BRING_IN = "bring_in"

    @classmethod
    def parse(cls, value: Any) -> Optional[JobType]:
        text = clean_text(value)
        if not text:
            return None
        try:
            return cls(text.lower().replace(" ", "_").replace("-", "_"))
        except ValueError:
            return None


# --- Cell parsing helpers ---

def parse_datetime(value: Any) -> Optional[datetime]:
    """
    ISO date/datetime strings (a trailing "Z" is accepted), date and datetime
    objects. Date-only values become midnight. Anything else is None.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = clean_text(value) if isinstance(value, str) else None
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def parse_optional_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _first_present(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if row.get(key) not in (None, ""):
            return row.get(key)
    return None


@dataclass(frozen=True)
class Job:
    """
    A recurring put-out / bring-in job. Generated elsewhere; read-only here.
    """
    job_id: str
    property_id: Optional[str] = None
    day_of_week: Optional[str] = None
    last_completed_on: Optional[date] = None
    job_type: Optional[JobType] = None

    # Only used to match logs that carry no job id.
    address: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Job:
        return cls(
            job_id=normalise_identifier(row.get("id")) or "",
            property_id=normalise_identifier(row.get("property_id")),
            day_of_week=clean_text(row.get("day_of_week")),
            last_completed_on=parse_date(row.get("last_completed_on")),
            job_type=JobType.parse(row.get("job_type")),
            address=clean_text(row.get("address")),
        )


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable completion record written by the crew app.
    """
    log_id: str
    job_id: Optional[str] = None
    address: Optional[str] = None
    done_on: Optional[date] = None
    photo_path: Optional[str] = None
    gps_lat: Optional[float] = None
    gps_lng: Optional[float] = None
    notes: Optional[str] = None

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_path and self.photo_path.strip())

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> LogRecord:
        return cls(
            log_id=normalise_identifier(row.get("id")) or "",
            job_id=normalise_identifier(row.get("job_id")),
            address=clean_text(row.get("address")),
            done_on=parse_date(row.get("done_on")),
            photo_path=clean_text(row.get("photo_path")),
            gps_lat=parse_optional_float(row.get("gps_lat")),
            gps_lng=parse_optional_float(row.get("gps_lng")),
            notes=clean_text(row.get("notes")),
        )


@dataclass(frozen=True)
class ProgressEvent:
    """
    An explicit status marking for a job (crew started the run, arrived, skipped ...).
    """
    job_id: str
    status: JobStatus
    occurred_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Optional[ProgressEvent]:
        """
        Returns None for rows with no job id or no recognisable status.
        """
        job_id = normalise_identifier(row.get("job_id"))
        raw_status = _first_present(row, ["status", "new_status", "action", "event", "type", "transition"])
        status = JobStatus.normalise(raw_status)
        if not job_id or status is None:
            return None

        occurred_at = parse_datetime(
            _first_present(row, ["occurred_at", "created_at", "updated_at", "inserted_at", "timestamp", "event_at"])
        )
        return cls(job_id=job_id, status=status, occurred_at=occurred_at)
