from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date (JSON numbers and other non-strings are invalid)."""
    if not isinstance(value, str):
        raise ValidationError("Fecha no es válida (AAAA-MM-DD)")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Fecha no es válida (AAAA-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_duration(milliseconds: float) -> str:
    """Format a duration as HH:MM:SS, flooring to whole seconds.

    Hours are not wrapped at 24 and may use more than two digits.
    """

    seconds = max(int(milliseconds // 1000), 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    remaining = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{remaining:02d}"


def duration_ms(start: datetime, end: datetime) -> int:
    delta: timedelta = end - start
    return int(delta.total_seconds() * 1000)
