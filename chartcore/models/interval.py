"""Chart interval codes.

The chart identifies its candle interval with short codes: minute counts
("1", "15", "240"), "D"/"W"/"M" for daily/weekly/monthly candles, and
"custom_<n><unit>" for locally aggregated intervals (e.g. "custom_2h").
"""

import re

MINUTE_MS = 60_000

INTERVAL_MS: dict[str, int] = {
    "1": 60_000,
    "3": 180_000,
    "5": 300_000,
    "15": 900_000,
    "30": 1_800_000,
    "60": 3_600_000,
    "120": 7_200_000,
    "240": 14_400_000,
    "360": 21_600_000,
    "720": 43_200_000,
    "D": 86_400_000,
    "W": 604_800_000,
    "M": 2_592_000_000,  # 30 days
}

# Unknown codes are treated as 15 minute candles
DEFAULT_INTERVAL_MS = 900_000
DEFAULT_INTERVAL_MINUTES = DEFAULT_INTERVAL_MS / MINUTE_MS

_CUSTOM_UNIT_MS = {
    "s": 1_000,
    "m": 60_000,
    "h": 3_600_000,
    "D": 86_400_000,
    "W": 604_800_000,
}

_CUSTOM_RE = re.compile(r"^(\d+)(s|m|h|D|W)$")


def parse_custom_interval(interval: str) -> tuple[int, str] | None:
    """Parse "custom_<n><unit>" into (n, unit), or None if not a custom code."""
    if not interval.startswith("custom_"):
        return None
    match = _CUSTOM_RE.match(interval[len("custom_"):])
    if match is None:
        return None
    return int(match.group(1)), match.group(2)


def interval_to_ms(interval: str) -> int:
    """Convert an interval code to milliseconds."""
    custom = parse_custom_interval(interval)
    if custom is not None:
        value, unit = custom
        return value * _CUSTOM_UNIT_MS[unit]
    return INTERVAL_MS.get(interval, DEFAULT_INTERVAL_MS)


def interval_to_minutes(interval: str) -> float:
    """Convert an interval code to minutes (fractional for second intervals)."""
    return interval_to_ms(interval) / MINUTE_MS
