"""Calendar engine adapter.

Thin layer over ``datetime``/``zoneinfo`` and ``dateutil.relativedelta``
that provides the handful of operations CalendarValue needs: current time,
parsing with an explicit pattern, field-wise addition, calendar-correct
differences, epoch seconds and formatting.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from datetime import timezone as dt_timezone
import math
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta
from loguru import logger

from . import formats
from .models import CalendarInterval, Unit

TimezoneLike = Union[str, tzinfo]

# Year-based units are applied as whole months
YEAR_FACTORS = {
    Unit.YEAR: 1,
    Unit.DECADE: 10,
    Unit.CENTURY: 100,
    Unit.MILLENNIUM: 1000,
}

# Sub-year units are applied as durations
DURATION_ARGS = {
    Unit.SECOND: "seconds",
    Unit.MINUTE: "minutes",
    Unit.HOUR: "hours",
    Unit.DAY: "days",
    Unit.WEEK: "weeks",
}

# Added as elapsed time; days and weeks keep the wall-clock time of day
ELAPSED_UNITS = frozenset({Unit.SECOND, Unit.MINUTE, Unit.HOUR})


def resolve_timezone(timezone: TimezoneLike) -> tzinfo:
    """Resolve an IANA identifier into a tzinfo.

    Args:
        timezone: Identifier such as "Asia/Kuala_Lumpur", or a tzinfo

    Returns:
        Matching tzinfo

    Raises:
        ZoneInfoNotFoundError: Unknown identifier
        ValueError: Malformed identifier
    """
    if isinstance(timezone, tzinfo):
        return timezone
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        logger.error(f"Invalid timezone {timezone!r}: {e}")
        raise


def timezone_name(tz: tzinfo) -> str:
    """Get the identifier of a tzinfo."""
    key = getattr(tz, "key", None)
    if key:
        return key
    return tz.tzname(None) or "UTC"


def current_instant(tz: tzinfo) -> datetime:
    """Get the current aware datetime in ``tz``."""
    return datetime.now(tz)


def parse_instant(pattern: str, text: str, tz: tzinfo) -> Optional[datetime]:
    """Parse ``text`` with ``pattern`` as a wall-clock time in ``tz``.

    Fields absent from the pattern take strptime's defaults. When the pattern
    carries a UTC offset the parsed instant is converted into ``tz``.

    Returns:
        Aware datetime, or None when the text does not match the pattern
    """
    if not isinstance(pattern, str) or not isinstance(text, str):
        return None

    if pattern == "U":
        try:
            return datetime.fromtimestamp(int(text.strip()), tz)
        except (ValueError, OverflowError, OSError):
            return None

    directive = formats.to_strptime(pattern)
    if directive is None:
        logger.debug(f"Pattern {pattern!r} contains output-only symbols")
        return None

    try:
        parsed = datetime.strptime(text, directive)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def add_field(instant: datetime, amount: float, unit: Unit) -> datetime:
    """Add a signed amount of ``unit`` to ``instant``.

    Sub-year units keep fractional amounts. Seconds, minutes and hours are
    elapsed time, so crossing a DST change shifts the wall clock by the
    offset change. Days and weeks move the calendar date and keep the time
    of day. Year-based units are converted to whole months (any fraction of
    a month is dropped) and follow relativedelta's month-end clamping.
    """
    unit = Unit(unit)
    amount = float(amount)

    if unit in YEAR_FACTORS:
        # round away float noise such as 0.7 * 120 == 83.99999999999999
        months = int(round(amount * 12 * YEAR_FACTORS[unit], 9))
        return instant + relativedelta(months=months)

    delta = timedelta(**{DURATION_ARGS[unit]: amount})
    if unit in ELAPSED_UNITS:
        utc = instant.astimezone(dt_timezone.utc) + delta
        return utc.astimezone(instant.tzinfo)
    return instant + delta


def field_difference(subject: datetime, reference: datetime) -> CalendarInterval:
    """Decompose the difference between two instants into calendar fields.

    Both instants are compared as wall-clock times in the subject's
    timezone. ``invert`` is set when the reference is earlier than the
    subject.
    """
    reference = reference.astimezone(subject.tzinfo)
    invert = reference < subject
    earlier, later = (reference, subject) if invert else (subject, reference)

    delta = relativedelta(
        later.replace(tzinfo=None),
        earlier.replace(tzinfo=None),
    )
    return CalendarInterval(
        years=abs(int(delta.years)),
        months=abs(int(delta.months)),
        days=abs(int(delta.days)),
        hours=abs(int(delta.hours)),
        minutes=abs(int(delta.minutes)),
        seconds=abs(int(delta.seconds)),
        invert=invert,
    )


def epoch_seconds(instant: datetime) -> int:
    """Get whole seconds since the Unix epoch."""
    return math.floor(instant.timestamp())


def format_instant(instant: datetime, pattern: str = formats.DEFAULT_FORMAT) -> str:
    """Render ``instant`` with a format pattern."""
    return formats.render(instant, pattern)
