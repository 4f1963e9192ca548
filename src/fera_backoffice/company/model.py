from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..common.numbers import parse_or
from ..core.enums import ServiceType

DEFAULT_SERVICE_RATES: dict[ServiceType, float] = {
    ServiceType.VARRICAO_KM: 150.00,
    ServiceType.CAPINA_MANUAL_M2: 2.50,
    ServiceType.ROCADA_MECANIZADA_M2: 1.80,
    ServiceType.ROCADA_TRATOR_M2: 0.90,
    ServiceType.BOCA_DE_LOBO: 45.00,
    ServiceType.PINTURA_MEIO_FIO: 1.20,
}

DEFAULT_FINANCE_CATEGORIES = ("Faturamento", "1ª parcela", "Pagamento Funcionários", "Combustível", "Geral")
DEFAULT_INVENTORY_CATEGORIES = ("peças", "insumos", "EPIs", "outros")


@dataclass(frozen=True)
class CompanyConfig:
    company_id: str
    service_rates: Mapping[ServiceType, float] = field(default_factory=lambda: dict(DEFAULT_SERVICE_RATES))
    finance_categories: tuple[str, ...] = DEFAULT_FINANCE_CATEGORIES
    inventory_categories: tuple[str, ...] = DEFAULT_INVENTORY_CATEGORIES
    id: Optional[str] = None

    def rate_for(self, service_type: ServiceType) -> float:
        return float(self.service_rates.get(service_type, 0.0))

    @classmethod
    def from_row(cls, company_id: str, row: Mapping[str, Any] | None) -> "CompanyConfig":
        if not row:
            return cls(company_id=company_id)
        rates = dict(DEFAULT_SERVICE_RATES)
        for key, value in (row.get("serviceRates") or {}).items():
            try:
                rates[ServiceType(key)] = parse_or(value, 0.0)
            except ValueError:
                continue
        return cls(
            company_id=company_id,
            service_rates=rates,
            finance_categories=tuple(row.get("financeCategories") or DEFAULT_FINANCE_CATEGORIES),
            inventory_categories=tuple(row.get("inventoryCategories") or DEFAULT_INVENTORY_CATEGORIES),
            id=row.get("id"),
        )

    def to_row(self) -> dict[str, Any]:
        row = {
            "companyId": self.company_id,
            "serviceRates": {k.value: v for k, v in self.service_rates.items()},
            "financeCategories": list(self.finance_categories),
            "inventoryCategories": list(self.inventory_categories),
        }
        if self.id:
            row["id"] = self.id
        return row