"""Value types shared by the calendar value and the humanizer."""

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Dict, Tuple


class Unit(str, enum.Enum):
    """Units accepted by CalendarValue.add()."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    YEAR = "year"
    DECADE = "decade"
    CENTURY = "century"
    MILLENNIUM = "millennium"


class ParseOutcome(str, enum.Enum):
    """How a CalendarValue got its instant."""

    NOW = "now"
    PARSED = "parsed"
    FALLBACK_TO_NOW = "fallback_to_now"


# Interval symbols in largest-to-smallest order
INTERVAL_SYMBOLS: Tuple[str, ...] = ("y", "m", "d", "h", "i", "s")


@dataclass(frozen=True)
class CalendarInterval:
    """Calendar-correct difference between two instants.

    All magnitudes are non-negative. ``invert`` is True when the reference
    lies before the subject, which is what "ago" is rendered from.
    """

    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    invert: bool = False

    def as_symbols(self) -> Dict[str, int]:
        """Return the magnitudes keyed by interval symbol, largest first."""
        return {
            "y": self.years,
            "m": self.months,
            "d": self.days,
            "h": self.hours,
            "i": self.minutes,
            "s": self.seconds,
        }

    @property
    def is_zero(self) -> bool:
        return not any(self.as_symbols().values())


@dataclass(frozen=True)
class HumanizedResult:
    """Rendered relative-time description."""

    text: str
    interval: CalendarInterval
    suffix: str = ""
    is_just_now: bool = False

    def __str__(self) -> str:
        return self.text
