"""
Purpose: Reads exported table snapshots (CSV) into plain row dicts.
What it does:
- Loads client_list / jobs / logs / job_progress exports with pandas.
- Keeps every column as a string and blanks as "" so the record parsers
  (PropertyRecord.from_row, Job.from_row ...) see the same shapes the
  database hands back, not pandas NaN/float coercions.

Rule: No interpretation of values here. I/O + shape only.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_rows(path: PathLike, *, required_columns: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    """
    Reads a CSV export into a list of row dicts.

    Raises FileNotFoundError for a missing file and ValueError when a required
    column is absent; both are caller configuration errors.
    """
    path = Path(path)
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    missing = [column for column in required_columns or [] if column not in df.columns]
    if missing:
        raise ValueError(f"{path.name} is missing required columns: {', '.join(missing)}")

    rows = df.to_dict(orient="records")
    logger.debug(f"Loaded {len(rows)} rows from {path}")
    return rows


def load_property_rows(path: PathLike) -> List[Dict[str, Any]]:
    return load_rows(path, required_columns=["property_id"])


def load_job_rows(path: PathLike) -> List[Dict[str, Any]]:
    return load_rows(path, required_columns=["id", "day_of_week"])


def load_log_rows(path: PathLike) -> List[Dict[str, Any]]:
    return load_rows(path, required_columns=["id"])


def load_progress_rows(path: PathLike) -> List[Dict[str, Any]]:
    return load_rows(path, required_columns=["job_id"])
