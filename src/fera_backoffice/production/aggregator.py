"""Monthly production/finance aggregation over a snapshot.

All functions are pure. Month membership is a plain ``YYYY-MM`` prefix match
on the stored date strings, and every bucket is computed on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, Mapping, Optional

from ..common.datetime_utils import is_period, month_label_long, month_label_short, period_of, shift_period
from ..common.numbers import money
from ..core.constants import DEFAULT_SERIES_MONTHS
from ..core.enums import MovementKind, ServiceType
from ..core.exceptions import ValidationError
from ..finance.model import CashEntry
from ..inventory.model import InventoryMovement
from .model import Area, MonthlyGoal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthBucket:
    period: str
    short_label: str
    long_label: str


@dataclass(frozen=True)
class MonthMetrics:
    period: str
    label: str
    production: float
    revenue: float
    cash_in: float
    cash_out: float
    balance: float
    stock_exits: float
    goal_production: float
    goal_revenue: float
    prod_percentage: float
    revenue_percentage: float


@dataclass(frozen=True)
class DashboardTotals:
    """Headline numbers; a metric that failed to compute is None and listed in ``unavailable``."""

    values: Mapping[str, Optional[float]]
    unavailable: tuple[str, ...] = ()
    low_stock_items: tuple[str, ...] = field(default_factory=tuple)

    def get(self, name: str) -> Optional[float]:
        return self.values.get(name)


def build_monthly_series(end_period: str, range_months: int = DEFAULT_SERIES_MONTHS) -> list[MonthBucket]:
    if not is_period(end_period):
        raise ValidationError("Período inválido, use AAAA-MM")
    if range_months < 1:
        raise ValidationError("Quantidade de meses inválida")

    end_year, end_month = int(end_period[:4]), int(end_period[5:7])
    buckets = []
    for offset in range(range_months - 1, -1, -1):
        year, month = shift_period(end_year, end_month, -offset)
        buckets.append(
            MonthBucket(
                period=f"{year:04d}-{month:02d}",
                short_label=month_label_short(month),
                long_label=month_label_long(year, month),
            )
        )
    return buckets


def goal_percentage(actual: float, goal: float) -> float:
    if not goal:
        return 0.0
    return actual / goal * 100


def aggregate_month(
    bucket: MonthBucket,
    areas: Iterable[Area],
    cash_in: Iterable[CashEntry],
    cash_out: Iterable[CashEntry],
    inventory_movements: Iterable[InventoryMovement],
    monthly_goals: Mapping[str, MonthlyGoal],
) -> MonthMetrics:
    prefix = bucket.period
    services = [s for a in areas for s in a.services if s.service_date.startswith(prefix)]
    production = sum(s.quantity for s in services)
    revenue = money(sum(s.total_value for s in services))
    total_in = money(sum(c.value for c in cash_in if c.date.startswith(prefix)))
    total_out = money(sum(c.value for c in cash_out if c.date.startswith(prefix)))
    exits = sum(
        m.quantity for m in inventory_movements if m.kind == MovementKind.EXIT and m.date.startswith(prefix)
    )
    goal = monthly_goals.get(prefix) or MonthlyGoal(period=prefix)

    return MonthMetrics(
        period=prefix,
        label=bucket.short_label,
        production=production,
        revenue=revenue,
        cash_in=total_in,
        cash_out=total_out,
        balance=money(total_in - total_out),
        stock_exits=exits,
        goal_production=goal.production,
        goal_revenue=goal.revenue,
        prod_percentage=goal_percentage(production, goal.production),
        revenue_percentage=goal_percentage(revenue, goal.revenue),
    )


def compute_production_totals_by_service_type(areas: Iterable[Area]) -> dict[ServiceType, float]:
    totals: dict[ServiceType, float] = {}
    for area in areas:
        for service in area.services:
            totals[service.service_type] = totals.get(service.service_type, 0.0) + service.quantity
    return totals


def total_production(areas: Iterable[Area]) -> float:
    return sum(s.quantity for a in areas for s in a.services)


def total_revenue(areas: Iterable[Area]) -> float:
    return money(sum(s.total_value for a in areas for s in a.services))


def cash_balance(cash_in: Iterable[CashEntry], cash_out: Iterable[CashEntry]) -> float:
    return money(sum(c.value for c in cash_in) - sum(c.value for c in cash_out))


def dashboard_totals(snapshot, today: date) -> DashboardTotals:
    """Headline metrics for the dashboard, each one computed in isolation."""
    period = period_of(today)

    def _month_progress() -> float:
        produced = sum(
            s.quantity for a in snapshot.areas for s in a.services if s.service_date.startswith(period)
        )
        return min(goal_percentage(produced, snapshot.goal_for(period).production), 100.0)

    metrics: dict[str, Callable[[], float]] = {
        "totalAreas": lambda: float(len(snapshot.areas)),
        "productionM2": lambda: total_production(snapshot.areas),
        "totalRevenue": lambda: total_revenue(snapshot.areas),
        "cashBalance": lambda: cash_balance(snapshot.cash_in, snapshot.cash_out),
        "lowStockCount": lambda: float(sum(1 for i in snapshot.inventory if i.is_critical)),
        "goalM2": lambda: snapshot.goal_for(period).production,
        "goalProgress": _month_progress,
        "activeEmployees": lambda: float(len(snapshot.active_employees())),
    }

    values: dict[str, Optional[float]] = {}
    unavailable: list[str] = []
    for name, compute in metrics.items():
        try:
            values[name] = compute()
        except Exception:
            logger.warning("dashboard metric %s unavailable", name, exc_info=True)
            values[name] = None
            unavailable.append(name)

    try:
        low_stock = tuple(i.name for i in snapshot.inventory if i.is_critical)
    except Exception:
        logger.warning("dashboard low-stock list unavailable", exc_info=True)
        low_stock = ()
        unavailable.append("lowStockItems")

    return DashboardTotals(values=values, unavailable=tuple(unavailable), low_stock_items=low_stock)
