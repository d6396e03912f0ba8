"""Tick duration, micro-value scaling and time conversion helpers."""

from __future__ import annotations

# Length of one simulation step in real milliseconds.
TICK_DURATION_MS = 30_000

# Internal stat precision: one displayed point is this many micro points.
MICRO_RATIO = 1000

TICKS_PER_HOUR = 60 * 60 * 1000 // TICK_DURATION_MS
TICKS_PER_DAY = 24 * TICKS_PER_HOUR
TICKS_PER_MONTH = 30 * TICKS_PER_DAY

MS_PER_DAY = 24 * 60 * 60 * 1000

# Longest absence the offline replayer will simulate.
MAX_OFFLINE_DAYS = 7
MAX_OFFLINE_TICKS = MAX_OFFLINE_DAYS * TICKS_PER_DAY


def ms_to_ticks(ms: float) -> int:
    """Return the number of whole ticks contained in ``ms`` milliseconds."""

    if ms <= 0:
        return 0
    return int(ms // TICK_DURATION_MS)


def ticks_to_ms(ticks: int) -> int:
    return int(ticks) * TICK_DURATION_MS


def to_micro(display: float) -> int:
    """Convert a player-facing stat value into micro points."""

    return int(round(display * MICRO_RATIO))


def to_display(micro: int) -> int:
    """Convert micro points into the whole value shown to the player."""

    return int(micro) // MICRO_RATIO


def day_index(ms: int) -> int:
    """Return the UTC day number that ``ms`` (epoch milliseconds) falls in."""

    return int(ms) // MS_PER_DAY


def crosses_day_boundary(previous_ms: int, now_ms: int) -> bool:
    return day_index(now_ms) > day_index(previous_ms)


def format_ticks(ticks: int) -> str:
    """Render a tick count as a compact ``1d 2h 3m`` style duration."""

    total_minutes = max(0, int(ticks)) * TICK_DURATION_MS // 60_000
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes or not parts:
        parts.append(f"{minutes}m")
    return " ".join(parts)


__all__ = [
    "MAX_OFFLINE_DAYS",
    "MAX_OFFLINE_TICKS",
    "MICRO_RATIO",
    "MS_PER_DAY",
    "TICKS_PER_DAY",
    "TICKS_PER_HOUR",
    "TICKS_PER_MONTH",
    "TICK_DURATION_MS",
    "crosses_day_boundary",
    "day_index",
    "format_ticks",
    "ms_to_ticks",
    "ticks_to_ms",
    "to_display",
    "to_micro",
]
