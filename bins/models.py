"""
Purpose: Domain models for the bin-schedule capability.
What it does:
- Defines the closed enums every consumer of schedule data works with:
   - BinColor = GARBAGE | RECYCLING | COMPOST (stored as red/yellow/green)
   - Frequency = WEEKLY | FORTNIGHTLY | UNSET
   - Flip = YES | UNSET
   - WeekParity = ODD | EVEN
- Defines BinFrequencySetting (frequency, flip, bin_count) and BinSchedule.
- Centralises parsing of the free-form staff-entered strings ("Weekly",
  " fortnightly ", "Yes", "2", NaN from pandas ...) so malformed input is
  normalised once at the boundary.

Rule: No week arithmetic here. Models + parsing only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class BinColor(str, Enum):
    """
    Bin streams in their declared (stable output) order.
    The value is the service name, `prefix` is the column prefix in property rows.
    """
    GARBAGE = "garbage"
    RECYCLING = "recycling"
    COMPOST = "compost"

    @property
    def prefix(self) -> str:
        return _COLOR_PREFIX[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_COLOR_PREFIX = {
    BinColor.GARBAGE: "red",
    BinColor.RECYCLING: "yellow",
    BinColor.COMPOST: "green",
}

# Declared order, used for every flattened output.
BIN_COLORS: List[BinColor] = [BinColor.GARBAGE, BinColor.RECYCLING, BinColor.COMPOST]


class Frequency(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    UNSET = ""

    @classmethod
    def parse(cls, value: Any) -> Frequency:
        text = _clean_text(value)
        if text == "weekly":
            return cls.WEEKLY
        if text == "fortnightly":
            return cls.FORTNIGHTLY
        return cls.UNSET


class Flip(str, Enum):
    YES = "yes"
    UNSET = ""

    @classmethod
    def parse(cls, value: Any) -> Flip:
        if value is True:
            return cls.YES
        return cls.YES if _clean_text(value) == "yes" else cls.UNSET


class WeekParity(str, Enum):
    ODD = "odd"
    EVEN = "even"

    @property
    def opposite(self) -> WeekParity:
        return WeekParity.EVEN if self is WeekParity.ODD else WeekParity.ODD

    @classmethod
    def of(cls, number: int) -> WeekParity:
        return cls.EVEN if number % 2 == 0 else cls.ODD


def _clean_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def parse_bin_count(value: Any, default: int = 1) -> int:
    """
    Parse a bin count from a row cell.

    Numbers and numeric strings are rounded and clamped to >= 0.
    Anything absent or unparseable (None, "", "two", NaN) returns `default`.
    """
    number: Optional[float] = None

    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            number = None

    if number is None or not math.isfinite(number):
        return max(0, default)

    return max(0, int(math.floor(number + 0.5)))


@dataclass(frozen=True)
class BinFrequencySetting:
    """
    Collection settings for one bin colour at one property.

    `flip` only means something for FORTNIGHTLY schedules. `bin_count` is
    informational and never affects whether the colour is collected.
    """
    frequency: Frequency = Frequency.UNSET
    flip: Flip = Flip.UNSET
    bin_count: int = 0

    @property
    def is_scheduled(self) -> bool:
        return self.frequency is not Frequency.UNSET

    @property
    def is_flipped(self) -> bool:
        return self.frequency is Frequency.FORTNIGHTLY and self.flip is Flip.YES

    @classmethod
    def new(cls, frequency: Any = None, flip: Any = None, bins: Any = None) -> BinFrequencySetting:
        parsed_frequency = frequency if isinstance(frequency, Frequency) else Frequency.parse(frequency)
        parsed_flip = flip if isinstance(flip, Flip) else Flip.parse(flip)

        # A colour with a frequency but no usable count still has one bin.
        default_count = 1 if parsed_frequency is not Frequency.UNSET else 0

        return cls(
            frequency=parsed_frequency,
            flip=parsed_flip,
            bin_count=parse_bin_count(bins, default=default_count),
        )


def settings_from_row(row: Mapping[str, Any]) -> Dict[BinColor, BinFrequencySetting]:
    """
    Reads the {red,yellow,green}_{freq,flip,bins} columns of a property row.
    Missing columns are treated as unset.
    """
    return {
        color: BinFrequencySetting.new(
            frequency=row.get(f"{color.prefix}_freq"),
            flip=row.get(f"{color.prefix}_flip"),
            bins=row.get(f"{color.prefix}_bins"),
        )
        for color in BIN_COLORS
    }


@dataclass(frozen=True)
class BinSchedule:
    """
    Output of the schedule calculator for one property and one reference date.
    """
    active_colors: List[BinColor] = field(default_factory=list)
    status: Dict[BinColor, bool] = field(default_factory=dict)

    @property
    def active_labels(self) -> List[str]:
        return [color.label for color in self.active_colors]

    def is_active(self, color: BinColor) -> bool:
        return self.status.get(color, False)
