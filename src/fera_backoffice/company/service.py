from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from ..common.datetime_utils import is_period
from ..common.numbers import parse_number, parse_or
from ..core.enums import Collection, ServiceType
from ..core.exceptions import ValidationError
from ..production.model import MonthlyGoal
from ..store.protocol import RecordStore
from ..sync.runner import SyncRunner
from .model import CompanyConfig


def update_service_rates(config: CompanyConfig, changes: Mapping[str, Any]) -> CompanyConfig:
    """Apply rate edits; unknown service types are rejected, unparseable values become 0.

    Existing services keep the unit value they were entered with.
    """
    rates = dict(config.service_rates)
    for key, raw in changes.items():
        try:
            service_type = ServiceType(key)
        except ValueError as exc:
            raise ValidationError(f"Tipo de serviço inválido: {key}") from exc
        rates[service_type] = parse_or(raw, 0.0)
    return replace(config, service_rates=rates)


def _non_negative(raw: Any, label: str) -> float:
    value = parse_number(raw)
    if value is None or value < 0:
        raise ValidationError(f"{label} inválida")
    return value


class CompanyService:
    def __init__(self, runner: SyncRunner):
        self._runner = runner

    def config(self) -> CompanyConfig:
        return self._runner.snapshot.config

    def _save_config(self, config: CompanyConfig) -> CompanyConfig:
        def _write(store: RecordStore) -> CompanyConfig:
            return CompanyConfig.from_row(config.company_id, store.save(Collection.COMPANY_SETTINGS, config.to_row()))

        return self._runner.run("company-settings", _write)

    def update_service_rates(self, changes: Mapping[str, Any]) -> CompanyConfig:
        return self._save_config(update_service_rates(self.config(), changes))

    def update_categories(self, *, finance: list[str] | None = None, inventory: list[str] | None = None) -> CompanyConfig:
        config = self.config()
        if finance is not None:
            config = replace(config, finance_categories=tuple(c.strip() for c in finance if c and c.strip()))
        if inventory is not None:
            config = replace(config, inventory_categories=tuple(c.strip() for c in inventory if c and c.strip()))
        return self._save_config(config)

    def set_monthly_goal(self, period: str, production: Any, revenue: Any = 0) -> MonthlyGoal:
        if not is_period(period):
            raise ValidationError("Período inválido, use AAAA-MM")
        if not self._runner.company_id:
            raise ValidationError("Usuário sem empresa vinculada")
        current = self._runner.snapshot.goals_by_period.get(period)
        goal = MonthlyGoal(
            period=period,
            production=_non_negative(production, "Meta de produção"),
            revenue=_non_negative(revenue, "Meta de faturamento"),
            id=current.id if current else None,
        )
        company_id = self._runner.company_id

        def _write(store: RecordStore) -> MonthlyGoal:
            return MonthlyGoal.from_row(store.save(Collection.MONTHLY_GOALS, goal.to_row(company_id)))

        return self._runner.run(f"goal:{period}", _write)
