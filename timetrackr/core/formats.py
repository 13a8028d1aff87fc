"""Date format patterns built from single-character symbols.

Patterns use the ``Y-m-d H:i:s`` vocabulary: each letter stands for one
calendar field and a backslash escapes the character after it. A pattern
containing ``%`` is taken to be a native strftime/strptime pattern and is
used as-is.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from email.utils import format_datetime
import math
from typing import Iterator, Optional, Tuple

DEFAULT_FORMAT = "Y-m-d H:i:s"

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Symbols that have a strptime directive
PARSE_DIRECTIVES = {
    "d": "%d",
    "j": "%d",
    "D": "%a",
    "l": "%A",
    "m": "%m",
    "n": "%m",
    "M": "%b",
    "F": "%B",
    "y": "%y",
    "Y": "%Y",
    "a": "%p",
    "A": "%p",
    "g": "%I",
    "h": "%I",
    "G": "%H",
    "H": "%H",
    "i": "%M",
    "s": "%S",
    "u": "%f",
    "O": "%z",
    "P": "%z",
}

FORMAT_SYMBOLS = frozenset("djDlSmnMFyYaAghGHisuOPeTUr")


def is_native_pattern(pattern: str) -> bool:
    """Check whether a pattern is a strftime/strptime pattern."""
    return "%" in pattern


def tokenize(pattern: str) -> Iterator[Tuple[str, bool]]:
    """Split a pattern into (character, is_symbol) pairs.

    A backslash makes the following character literal. A trailing backslash
    is kept as a literal backslash.
    """
    escaped = False
    for char in pattern:
        if escaped:
            yield char, False
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            yield char, char in FORMAT_SYMBOLS
    if escaped:
        yield "\\", False


def ordinal_suffix(day: int) -> str:
    """English ordinal suffix for a day of month (1st, 2nd, 3rd, 4th...)."""
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _offset(dt: datetime, colon: bool) -> str:
    offset = dt.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    total_minutes = abs(int(offset.total_seconds())) // 60
    hours, minutes = divmod(total_minutes, 60)
    separator = ":" if colon else ""
    return f"{sign}{hours:02d}{separator}{minutes:02d}"


def _timezone_name(dt: datetime) -> str:
    key = getattr(dt.tzinfo, "key", None)
    if key:
        return key
    return dt.tzname() or "UTC"


def render_symbol(dt: datetime, symbol: str) -> str:
    """Render a single format symbol for ``dt``."""
    hour12 = dt.hour % 12 or 12
    if symbol == "d":
        return f"{dt.day:02d}"
    if symbol == "j":
        return str(dt.day)
    if symbol == "D":
        return WEEKDAY_NAMES[dt.weekday()][:3]
    if symbol == "l":
        return WEEKDAY_NAMES[dt.weekday()]
    if symbol == "S":
        return ordinal_suffix(dt.day)
    if symbol == "m":
        return f"{dt.month:02d}"
    if symbol == "n":
        return str(dt.month)
    if symbol == "M":
        return MONTH_NAMES[dt.month - 1][:3]
    if symbol == "F":
        return MONTH_NAMES[dt.month - 1]
    if symbol == "y":
        return f"{dt.year % 100:02d}"
    if symbol == "Y":
        return f"{dt.year:04d}"
    if symbol == "a":
        return "am" if dt.hour < 12 else "pm"
    if symbol == "A":
        return "AM" if dt.hour < 12 else "PM"
    if symbol == "g":
        return str(hour12)
    if symbol == "h":
        return f"{hour12:02d}"
    if symbol == "G":
        return str(dt.hour)
    if symbol == "H":
        return f"{dt.hour:02d}"
    if symbol == "i":
        return f"{dt.minute:02d}"
    if symbol == "s":
        return f"{dt.second:02d}"
    if symbol == "u":
        return f"{dt.microsecond:06d}"
    if symbol == "O":
        return _offset(dt, colon=False)
    if symbol == "P":
        return _offset(dt, colon=True)
    if symbol == "e":
        return _timezone_name(dt)
    if symbol == "T":
        return dt.tzname() or "UTC"
    if symbol == "U":
        return str(math.floor(dt.timestamp()))
    if symbol == "r":
        return format_datetime(dt)
    raise ValueError(f"Unknown format symbol: {symbol!r}")


def render(dt: datetime, pattern: str = DEFAULT_FORMAT) -> str:
    """Render ``dt`` according to ``pattern``."""
    if is_native_pattern(pattern):
        return dt.strftime(pattern)

    parts = []
    for char, is_symbol in tokenize(pattern):
        parts.append(render_symbol(dt, char) if is_symbol else char)
    return "".join(parts)


def to_strptime(pattern: str) -> Optional[str]:
    """Translate a pattern into a strptime pattern.

    Returns None when the pattern uses a symbol that can only be rendered,
    never parsed (S, e, T, U, r).
    """
    if is_native_pattern(pattern):
        return pattern

    directives = []
    for char, is_symbol in tokenize(pattern):
        if not is_symbol:
            directives.append(char)
            continue
        directive = PARSE_DIRECTIVES.get(char)
        if directive is None:
            return None
        directives.append(directive)
    return "".join(directives)
