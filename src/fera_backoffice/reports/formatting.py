"""Number and date formatting.

Export numbers and screen currency are two separate policies and are kept
apart: CSV cells are ``1234,56`` (fixed decimals, no grouping) while the
screen shows ``R$ 1.234,56``.
"""

from __future__ import annotations

from typing import Optional

from ..core.constants import CSV_DECIMALS


def format_csv_number(value: Optional[float], decimals: int = CSV_DECIMALS) -> str:
    return f"{float(value or 0):.{decimals}f}".replace(".", ",")


def format_number_br(value: Optional[float], decimals: int = 2) -> str:
    """1234.5 -> '1.234,50'"""
    text = f"{float(value or 0):,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: Optional[float]) -> str:
    amount = float(value or 0)
    sign = "-" if amount < 0 else ""
    return f"{sign}R$ {format_number_br(abs(amount))}"


def format_date_br(value: Optional[str]) -> str:
    """'2025-01-31' -> '31/01/2025'; anything else is returned unchanged."""
    text = (value or "")[:10]
    parts = text.split("-")
    if len(parts) != 3:
        return value or ""
    return "/".join(reversed(parts))
