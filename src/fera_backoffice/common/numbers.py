"""Tolerant numeric parsing for form input.

Inputs come from pt-BR forms, so both "12.5" and "12,50" are accepted.
A thousands separator is only recognised together with a decimal comma
("1.234,56").
"""

from __future__ import annotations

import math
from typing import Optional


def parse_number(raw) -> Optional[float]:
    """Return the parsed float, or None when the input is not a finite number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = str(raw).strip().replace("R$", "").replace(" ", "")
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_or(raw, fallback: float) -> float:
    value = parse_number(raw)
    return fallback if value is None else value


def money(value: float) -> float:
    """Round to cents."""
    return round(float(value), 2)
