"""
Purpose: Decides which completion logs belong to a job.
What it does:
- Logs carrying the job's id always belong to it.
- When no log links to the job by id, logs with no job id whose normalised
  address equals the job's address are used instead (best effort; two jobs at
  one address will share these logs). StatusPolicy.address_fallback=False
  disables this.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from accounts.models import normalise_address

from .models import Job, LogRecord
from .policy import StatusPolicy, default_status_policy


def match_logs(job: Job, logs: Iterable[LogRecord], policy: Optional[StatusPolicy] = None) -> List[LogRecord]:
    policy = policy or default_status_policy()
    logs = [log for log in logs or [] if isinstance(log, LogRecord)]

    linked = [log for log in logs if job.job_id and log.job_id == job.job_id]
    if linked or not policy.address_fallback:
        return linked

    job_address = normalise_address(job.address)
    if not job_address:
        return []

    return [log for log in logs if not log.job_id and normalise_address(log.address) == job_address]


def photo_paths(logs: Iterable[LogRecord]) -> List[str]:
    return [log.photo_path for log in logs if log.has_photo]
