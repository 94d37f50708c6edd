"""
Purpose: Domain models for properties and the accounts reconstructed from them.
What it does:
- PropertyRecord: one row of the flat client list (identity, owner fields,
  address, bin settings per colour, put-out and collection days, notes).
- Account: a logical customer (derived id, display name, ordered property ids).
- Cell helpers that turn raw row values (None, "", "  ", NaN, ints) into clean
  Optional[str] values, shared by every row parser.

Rule: No grouping logic here. Models only.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from bins.models import BinColor, BinFrequencySetting, settings_from_row

DEFAULT_ACCOUNT_NAME = "My Properties"


def clean_text(value: Any) -> Optional[str]:
    """
    Trimmed string or None. Blank strings and NaN (pandas empty cells) are None.
    """
    if value is None:
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # 12.0 -> "12" so numeric ids read from CSV keep their natural form
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None


def normalise_identifier(value: Any) -> Optional[str]:
    return clean_text(value)


def normalise_address(value: Any) -> str:
    """
    Lower-cased, trimmed, inner whitespace collapsed. Empty string when unusable.
    """
    text = clean_text(value)
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.lower())


@dataclass(frozen=True)
class PropertyRecord:
    """
    A single serviced property, as staff entered it.
    """
    property_id: Optional[str]
    account_id: Optional[str] = None
    client_name: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None

    bins: Dict[BinColor, BinFrequencySetting] = field(default_factory=dict)

    put_out_day: Optional[str] = None
    collection_day: Optional[str] = None
    notes: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.company or self.client_name or DEFAULT_ACCOUNT_NAME

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> PropertyRecord:
        return cls(
            property_id=normalise_identifier(row.get("property_id")),
            account_id=normalise_identifier(row.get("account_id")),
            client_name=clean_text(row.get("client_name")),
            company=clean_text(row.get("company")),
            address=clean_text(row.get("address")),
            bins=settings_from_row(row),
            put_out_day=clean_text(row.get("put_bins_out")),
            collection_day=clean_text(row.get("collection_day")),
            notes=clean_text(row.get("notes")),
        )


@dataclass
class Account:
    """
    A customer reconstructed from property rows. Lives for one read.
    """
    account_id: str
    name: str
    property_ids: List[str] = field(default_factory=list)

    def add_property(self, property_id: Optional[str]) -> None:
        if property_id and property_id not in self.property_ids:
            self.property_ids.append(property_id)
