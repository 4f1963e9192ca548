from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mock easier.
    """
    return date.today()


def period_of(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def is_period(value: str) -> bool:
    return bool(value) and bool(_PERIOD_RE.match(value))


def parse_clock(value: Optional[str]) -> Optional[time]:
    """Parse 'HH:MM' or 'HH:MM:SS'; empty means no time registered."""
    if value is None:
        return None
    if isinstance(value, time):
        return value
    text = str(value).strip()
    if not text:
        return None
    parts = text.split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def format_clock(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


MONTHS_PT_BR = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def month_label_long(year: int, month: int) -> str:
    """'janeiro de 2025'"""
    return f"{MONTHS_PT_BR[month - 1]} de {year}"


def month_label_short(month: int) -> str:
    """'jan', 'fev', ..."""
    return MONTHS_PT_BR[month - 1][:3]


def shift_period(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1
