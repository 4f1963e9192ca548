from __future__ import annotations

from datetime import date
from typing import Any

from ..common.datetime_utils import period_of
from ..production.aggregator import cash_balance, total_production, total_revenue
from ..store.snapshot import AppSnapshot


def build_assistant_context(snapshot: AppSnapshot, today: date) -> dict[str, Any]:
    """Operational figures the assistant sees, built from the dashboard aggregations."""
    return {
        "totalAreas": len(snapshot.areas),
        "productionM2": total_production(snapshot.areas),
        "totalRevenue": total_revenue(snapshot.areas),
        "cashBalance": cash_balance(snapshot.cash_in, snapshot.cash_out),
        "lowStockItems": [i.name for i in snapshot.inventory if i.is_critical],
        "goalM2": snapshot.goal_for(period_of(today)).production,
        "activeEmployees": len(snapshot.active_employees()),
    }
