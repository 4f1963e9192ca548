"""Composable list filters used by every listing screen.

A predicate is the AND of three independent checks: text, category and an
inclusive date range. An empty category set means "no filter selected" and
matches everything.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Collection, Iterable, Optional, TypeVar

from ..core.exceptions import ValidationError
from ..inventory.model import InventoryItem
from ..production.model import Area

T = TypeVar("T")
Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class DateRange:
    start: Optional[str] = None
    end: Optional[str] = None

    @classmethod
    def open(cls) -> "DateRange":
        return cls()

    @classmethod
    def of(cls, start: Optional[date | str], end: Optional[date | str]) -> "DateRange":
        lo = start.isoformat() if isinstance(start, date) else (start or None)
        hi = end.isoformat() if isinstance(end, date) else (end or None)
        if lo and hi and lo > hi:
            raise ValidationError("Período inválido")
        return cls(lo, hi)

    def contains(self, value: str) -> bool:
        day = (value or "")[:10]
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        return True


def _field(record: Any, name: str) -> Any:
    value = record.get(name) if isinstance(record, dict) else getattr(record, name, None)
    return value.value if isinstance(value, Enum) else value


def build_predicate(
    search_text: str = "",
    categories: Collection[str] = (),
    date_range: Optional[DateRange] = None,
    *,
    text_field: str = "name",
    category_field: Optional[str] = "category",
    date_field: Optional[str] = "date",
) -> Predicate:
    needle = (search_text or "").strip().lower()
    wanted = frozenset(categories or ())
    span = date_range or DateRange.open()

    def predicate(record: Any) -> bool:
        if needle and needle not in str(_field(record, text_field) or "").lower():
            return False
        if wanted and category_field and str(_field(record, category_field)) not in wanted:
            return False
        if date_field and not span.contains(str(_field(record, date_field) or "")):
            return False
        return True

    return predicate


def apply_filter(records: Iterable[T], predicate: Predicate) -> list[T]:
    return [r for r in records if predicate(r)]


def inventory_status_filter(status: str = "all") -> Callable[[InventoryItem], bool]:
    if status == "critical":
        return lambda item: item.is_critical
    if status == "ok":
        return lambda item: not item.is_critical
    if status == "all":
        return lambda item: True
    raise ValidationError("Filtro de estoque inválido")


def area_status_filter(status: str = "all") -> Callable[[Area], bool]:
    if status == "open":
        return lambda area: not area.is_finished
    if status == "closed":
        return lambda area: area.is_finished
    if status == "all":
        return lambda area: True
    raise ValidationError("Filtro de área inválido")
