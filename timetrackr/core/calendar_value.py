"""Timezone-bound date/time value with calendar arithmetic and humanized diffs.

Typical use::

    value = CalendarValue.on("Y-m-d H:i:s", "2021-03-14 00:02:00", "UTC")
    value.compare_with("Y-m-d", "2021-01-01", "UTC")
    value.diff_in_human()  # "2 months, 13 days, 2 minutes ago"
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Union

from loguru import logger

from ..config.manager import get_default_timezone, get_settings
from . import engine
from .engine import TimezoneLike
from .formats import DEFAULT_FORMAT
from .humanizer import IntervalHumanizer
from .models import CalendarInterval, HumanizedResult, ParseOutcome, Unit

Number = Union[int, float]

# Symbols exposed by to_array()
ARRAY_SYMBOLS = ("r", "D", "d", "S", "m", "M", "F", "y", "Y", "h", "H", "i", "s", "A", "a")

UNIT_ALIASES: Dict[str, Unit] = {
    "seconds": Unit.SECOND,
    "minutes": Unit.MINUTE,
    "hours": Unit.HOUR,
    "days": Unit.DAY,
    "weeks": Unit.WEEK,
    "years": Unit.YEAR,
    "decades": Unit.DECADE,
    "centuries": Unit.CENTURY,
    "millennia": Unit.MILLENNIUM,
    "millenniums": Unit.MILLENNIUM,
}


def _resolve_unit(unit: Union[Unit, str]) -> Unit:
    if isinstance(unit, Unit):
        return unit
    key = str(unit).strip().lower()
    if key in UNIT_ALIASES:
        return UNIT_ALIASES[key]
    try:
        return Unit(key)
    except ValueError:
        raise ValueError(f"Unknown unit: {unit!r}") from None


def _tz_or_default(timezone: Optional[TimezoneLike]) -> TimezoneLike:
    return get_default_timezone() if timezone is None else timezone


class CalendarValue:
    """A point in time bound to a timezone.

    Values are created with now() or on(), changed in place with the add
    family (each returns self for chaining) and compared against a second
    instant with compare_with() followed by diff_in_human().
    """

    def __init__(
        self,
        instant: datetime,
        timezone: Optional[TimezoneLike] = None,
        outcome: ParseOutcome = ParseOutcome.NOW,
    ):
        """Wrap an instant.

        Args:
            instant: Datetime to wrap; naive values are taken as wall-clock
                time in ``timezone``
            timezone: IANA identifier or tzinfo, defaults to the configured one
            outcome: How the instant was obtained

        Raises:
            ZoneInfoNotFoundError: Unknown timezone identifier
        """
        self._tz = engine.resolve_timezone(_tz_or_default(timezone))
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=self._tz)
        self._instant = instant.astimezone(self._tz)
        self._outcome = outcome
        self._reference: Optional[CalendarValue] = None
        self._interval: Optional[CalendarInterval] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def now(cls, timezone: Optional[TimezoneLike] = None) -> "CalendarValue":
        """Current time in ``timezone`` (or the configured default)."""
        tz = engine.resolve_timezone(_tz_or_default(timezone))
        return cls(engine.current_instant(tz), tz)

    @classmethod
    def on(
        cls, format: str, text: str, timezone: Optional[TimezoneLike] = None
    ) -> "CalendarValue":
        """Parse ``text`` with ``format``.

        Text that does not match the format never raises: the value falls
        back to the current time and ``outcome`` is FALLBACK_TO_NOW.

        Args:
            format: Pattern such as "Y-m-d H:i:s" or "d/m/Y"
            text: Date/time text
            timezone: IANA identifier, defaults to the configured one

        Returns:
            New CalendarValue
        """
        tz = engine.resolve_timezone(_tz_or_default(timezone))
        parsed = engine.parse_instant(format, text, tz)
        if parsed is None:
            logger.warning(f"Could not parse {text!r} with format {format!r}, using now")
            return cls(engine.current_instant(tz), tz, ParseOutcome.FALLBACK_TO_NOW)
        return cls(parsed, tz, ParseOutcome.PARSED)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def datetime(self) -> datetime:
        """The wrapped aware datetime."""
        return self._instant

    @property
    def timezone(self) -> str:
        """Timezone identifier."""
        return engine.timezone_name(self._tz)

    @property
    def timestamp(self) -> int:
        """Whole seconds since the Unix epoch."""
        return engine.epoch_seconds(self._instant)

    @property
    def outcome(self) -> ParseOutcome:
        return self._outcome

    @property
    def reference(self) -> Optional["CalendarValue"]:
        """Value given to the last compare_with() call."""
        return self._reference

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalendarValue):
            return NotImplemented
        return self.timestamp == other.timestamp

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"CalendarValue({self.to_string()!r}, timezone={self.timezone!r})"

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, amount: Number, unit: Union[Unit, str]) -> "CalendarValue":
        """Add a signed amount of a unit in place.

        Args:
            amount: Number of units, may be negative or fractional
            unit: Unit or unit name (singular or plural)

        Returns:
            self
        """
        self._instant = engine.add_field(self._instant, float(amount), _resolve_unit(unit))
        return self

    def add_second(self) -> "CalendarValue":
        return self.add(1, Unit.SECOND)

    def add_seconds(self, seconds: Number) -> "CalendarValue":
        return self.add(seconds, Unit.SECOND)

    def add_minute(self) -> "CalendarValue":
        return self.add(1, Unit.MINUTE)

    def add_minutes(self, minutes: Number) -> "CalendarValue":
        return self.add(minutes, Unit.MINUTE)

    def add_hour(self) -> "CalendarValue":
        return self.add(1, Unit.HOUR)

    def add_hours(self, hours: Number) -> "CalendarValue":
        return self.add(hours, Unit.HOUR)

    def add_day(self) -> "CalendarValue":
        return self.add(1, Unit.DAY)

    def add_days(self, days: Number) -> "CalendarValue":
        return self.add(days, Unit.DAY)

    def add_week(self) -> "CalendarValue":
        return self.add(1, Unit.WEEK)

    def add_weeks(self, weeks: Number) -> "CalendarValue":
        return self.add(weeks, Unit.WEEK)

    def add_year(self) -> "CalendarValue":
        return self.add(1, Unit.YEAR)

    def add_years(self, years: Number) -> "CalendarValue":
        return self.add(years, Unit.YEAR)

    def add_decade(self) -> "CalendarValue":
        """Add ten years."""
        return self.add(1, Unit.DECADE)

    def add_decades(self, decades: Number) -> "CalendarValue":
        return self.add(decades, Unit.DECADE)

    def add_century(self) -> "CalendarValue":
        """Add a hundred years."""
        return self.add(1, Unit.CENTURY)

    def add_centuries(self, centuries: Number) -> "CalendarValue":
        return self.add(centuries, Unit.CENTURY)

    def add_millennium(self) -> "CalendarValue":
        """Add a thousand years."""
        return self.add(1, Unit.MILLENNIUM)

    def add_millennia(self, millennia: Number) -> "CalendarValue":
        return self.add(millennia, Unit.MILLENNIUM)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format(self, pattern: str) -> str:
        """Render with a format pattern."""
        return engine.format_instant(self._instant, pattern)

    def to_string(self) -> str:
        """Render as ``YYYY-MM-DD HH:MM:SS``."""
        return self.format(DEFAULT_FORMAT)

    def __str__(self) -> str:
        return self.to_string()

    def to_array(self) -> Dict[str, str]:
        """Break the value down into individually formatted fields.

        Returns:
            Mapping of format symbol to rendered field, e.g. {"Y": "2021", "M": "Mar"}
        """
        return {symbol: self.format(symbol) for symbol in ARRAY_SYMBOLS}

    # ------------------------------------------------------------------
    # Intervals
    # ------------------------------------------------------------------

    def compare_with(
        self, format: str, text: str, timezone: Optional[TimezoneLike] = None
    ) -> "CalendarValue":
        """Set the instant to compare with and compute the interval to it.

        The reference is parsed like on(), falling back to now on bad input.

        Returns:
            self
        """
        self._reference = CalendarValue.on(format, text, timezone)
        self._interval = engine.field_difference(self._instant, self._reference.datetime)
        logger.debug(f"Interval between {self} and {self._reference}: {self._interval}")
        return self

    def get_interval(self) -> Optional[CalendarInterval]:
        """Interval from the last compare_with(), None before any comparison."""
        return self._interval

    def humanized(
        self,
        just_now_seconds: Optional[int] = None,
        just_now_text: Optional[str] = None,
    ) -> Optional[HumanizedResult]:
        """Like diff_in_human() but returns the full HumanizedResult."""
        if self._interval is None or self._reference is None:
            return None

        config = get_settings().timetrackr
        humanizer = IntervalHumanizer(
            just_now_seconds=config.just_now_seconds if just_now_seconds is None else just_now_seconds,
            just_now_text=config.just_now_text if just_now_text is None else just_now_text,
        )
        delta = self.timestamp - self._reference.timestamp
        return humanizer.render(self._interval, delta)

    def diff_in_human(
        self,
        just_now_seconds: Optional[int] = None,
        just_now_text: Optional[str] = None,
    ) -> Optional[str]:
        """Describe the interval from the last compare_with() in words.

        e.g. "1 hour ago", "1 month, 12 days, 2 minutes ago" or "3 days from now".

        Args:
            just_now_seconds: Largest seconds-only past gap shown as just now
                (configured default: 5)
            just_now_text: Replacement for "just now"

        Returns:
            The description, or None when compare_with() has not been called
        """
        result = self.humanized(just_now_seconds, just_now_text)
        if result is None:
            return None
        return result.text
