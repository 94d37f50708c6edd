#Expose the rendering-pass pieces:
#Projection orchestrator (the "one call" entry point)
#CSV loaders for exported table snapshots

from .engine import (
    AccountView,
    HistoryEntry,
    JobView,
    ProjectionResult,
    PropertyView,
    project_accounts,
    project_portal,
)
from .loaders import load_job_rows, load_log_rows, load_progress_rows, load_property_rows, load_rows

__all__ = [
    "AccountView",
    "HistoryEntry",
    "JobView",
    "ProjectionResult",
    "PropertyView",
    "project_accounts",
    "project_portal",
    "load_job_rows",
    "load_log_rows",
    "load_progress_rows",
    "load_property_rows",
    "load_rows",
]
