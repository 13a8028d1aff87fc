"""Human readable rendering of calendar intervals.

Turns a CalendarInterval into text such as "1 month, 12 days, 2 minutes ago",
"3 hours from now" or "just now".
"""

from __future__ import annotations

from typing import List

from loguru import logger

from .models import INTERVAL_SYMBOLS, CalendarInterval, HumanizedResult

AGO = "ago"
FROM_NOW = "from now"

DEFAULT_JUST_NOW_SECONDS = 5
DEFAULT_JUST_NOW_TEXT = "just now"

SYMBOL_LABELS = {
    "y": ("year", "years"),
    "m": ("month", "months"),
    "d": ("day", "days"),
    "h": ("hour", "hours"),
    "i": ("minute", "minutes"),
    "s": ("second", "seconds"),
}


def translate_symbol(symbol: str, singular: bool = True) -> str:
    """Translate an interval symbol into an English label.

    Args:
        symbol: One of y, m, d, h, i, s
        singular: Singular ("year") or plural ("years") label

    Returns:
        The label, or an empty string for an unknown symbol
    """
    labels = SYMBOL_LABELS.get(symbol)
    if labels is None:
        return ""
    return labels[0] if singular else labels[1]


class IntervalHumanizer:
    """Renders intervals, collapsing tiny past gaps into "just now"."""

    def __init__(
        self,
        just_now_seconds: int = DEFAULT_JUST_NOW_SECONDS,
        just_now_text: str = DEFAULT_JUST_NOW_TEXT,
    ):
        """Initialize humanizer.

        Args:
            just_now_seconds: Largest seconds-only gap shown as just_now_text
            just_now_text: Text used for identical or nearly identical instants
        """
        self.just_now_seconds = just_now_seconds
        self.just_now_text = just_now_text

    def parts(self, interval: CalendarInterval) -> List[str]:
        """Get the "<magnitude> <label>" parts for non-zero fields, largest first."""
        magnitudes = interval.as_symbols()
        parts = []
        for symbol in INTERVAL_SYMBOLS:
            magnitude = magnitudes[symbol]
            if magnitude == 0:
                continue
            label = translate_symbol(symbol, singular=magnitude == 1)
            parts.append(f"{magnitude} {label}")
        return parts

    def render(self, interval: CalendarInterval, delta: int) -> HumanizedResult:
        """Render an interval.

        Args:
            interval: Interval between subject and reference
            delta: Subject epoch seconds minus reference epoch seconds

        Returns:
            HumanizedResult with the text and chosen suffix
        """
        parts = self.parts(interval)

        if not parts:
            return self._just_now(interval)

        text = ", ".join(parts)

        if delta < 0:
            suffix = f" {FROM_NOW}"
            return HumanizedResult(text=text + suffix, interval=interval, suffix=suffix)

        # Only a lone seconds field is fuzzed; "1 minute, 2 seconds" is not
        magnitudes = interval.as_symbols()
        if len(parts) == 1 and magnitudes["s"] and magnitudes["s"] <= self.just_now_seconds:
            logger.debug(
                f"{magnitudes['s']}s is within the just-now threshold of {self.just_now_seconds}s"
            )
            return self._just_now(interval)

        suffix = f" {AGO}"
        return HumanizedResult(text=text + suffix, interval=interval, suffix=suffix)

    def _just_now(self, interval: CalendarInterval) -> HumanizedResult:
        return HumanizedResult(text=self.just_now_text, interval=interval, is_just_now=True)

    def humanize(self, interval: CalendarInterval, delta: int) -> str:
        """Render an interval and return only the text."""
        return self.render(interval, delta).text
