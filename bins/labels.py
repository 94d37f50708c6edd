"""
Purpose: Human-facing bin wording.
What it does:
- Maps free-form bin names from job/log rows ("landfill", "Co-mingled",
  "organics", "red") to the canonical Garbage / Recycling / Compost labels.
- Describes a colour's schedule for property cards ("Recycling (fortnightly), alternate weeks").
- Summarises a BinSchedule as a comma separated list for job generation.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional, Tuple

from .models import BinColor, BinFrequencySetting, BinSchedule, Frequency

# Checked in order; the first label with a matching keyword wins.
BIN_KEYWORDS: List[Tuple[str, List[str]]] = [
    ("Garbage", ["garbage", "landfill", "general", "trash", "rubbish", "red"]),
    ("Recycling", ["recycling", "commingled", "co-mingled", "yellow"]),
    ("Compost", ["compost", "organic", "food", "green"]),
]


def format_bin_label(raw_value: Any) -> Optional[str]:
    if not isinstance(raw_value, str):
        return None

    trimmed = raw_value.strip()
    if not trimmed:
        return None

    lower = trimmed.lower()
    for label, keywords in BIN_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return label

    return re.sub(r"\b\w", lambda match: match.group(0).upper(), trimmed)


def normalise_bin_list(value: Any) -> List[str]:
    """
    Accepts a list or a comma separated string; returns canonical labels,
    de-duplicated in first-seen order.
    """
    if not value:
        return []

    items: Iterable[Any]
    if isinstance(value, (list, tuple)):
        items = value
    elif isinstance(value, str):
        items = value.split(",")
    else:
        return []

    labels: List[str] = []
    for item in items:
        label = format_bin_label(str(item))
        if label and label not in labels:
            labels.append(label)
    return labels


def describe_bin_frequency(color: BinColor, setting: Optional[BinFrequencySetting]) -> Optional[str]:
    if setting is None or setting.frequency is Frequency.UNSET:
        return None

    base = f"{color.label} ({setting.frequency.value})"
    if setting.is_flipped:
        return f"{base}, alternate weeks"
    return base


def bins_summary(schedule: BinSchedule) -> Optional[str]:
    if not schedule.active_colors:
        return None
    return ", ".join(schedule.active_labels)
