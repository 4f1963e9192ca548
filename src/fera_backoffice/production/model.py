from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ..common.numbers import money, parse_or
from ..core.enums import AreaStatus, ServiceType


@dataclass(frozen=True)
class Service:
    """Measurement line of an area.

    ``unit_value`` is a snapshot of the configured rate when the line was
    entered; later rate changes never touch it.
    """

    id: Optional[str]
    area_id: str
    service_type: ServiceType
    quantity: float
    unit_value: float
    service_date: str

    @property
    def total_value(self) -> float:
        return money(self.quantity * self.unit_value)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Service":
        return cls(
            id=row.get("id"),
            area_id=str(row.get("areaId") or ""),
            service_type=ServiceType(row["type"]),
            quantity=parse_or(row.get("quantity", row.get("areaM2")), 0.0),
            unit_value=parse_or(row.get("unitValue"), 0.0),
            service_date=str(row.get("serviceDate") or "")[:10],
        )

    def to_row(self, company_id: str) -> dict[str, Any]:
        row = {
            "companyId": company_id,
            "areaId": self.area_id,
            "type": self.service_type.value,
            "areaM2": self.quantity,
            "unitValue": self.unit_value,
            "totalValue": self.total_value,
            "serviceDate": self.service_date,
        }
        if self.id:
            row["id"] = self.id
        return row


@dataclass(frozen=True)
class Area:
    """Ordem de serviço: executing -> finished, never re-opened."""

    id: Optional[str]
    company_id: str
    name: str
    start_date: str
    start_reference: str
    end_reference: str = ""
    observations: str = ""
    responsible_employee_id: Optional[str] = None
    status: AreaStatus = AreaStatus.EXECUTING
    end_date: Optional[str] = None
    services: tuple[Service, ...] = field(default_factory=tuple)

    @property
    def is_finished(self) -> bool:
        return self.status == AreaStatus.FINISHED

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Area":
        end_date = row.get("endDate") or None
        status = row.get("status") or (AreaStatus.FINISHED.value if end_date else AreaStatus.EXECUTING.value)
        return cls(
            id=row.get("id"),
            company_id=str(row["companyId"]),
            name=row.get("name") or "",
            start_date=str(row.get("startDate") or "")[:10],
            start_reference=row.get("startReference") or "",
            end_reference=row.get("endReference") or "",
            observations=row.get("observations") or "",
            responsible_employee_id=row.get("responsibleEmployeeId"),
            status=AreaStatus(status),
            end_date=end_date,
            services=tuple(Service.from_row(s) for s in row.get("services") or ()),
        )

    def to_row(self) -> dict[str, Any]:
        """Area columns only; services live in their own collection."""
        row = {
            "companyId": self.company_id,
            "name": self.name,
            "startDate": self.start_date,
            "startReference": self.start_reference,
            "endReference": self.end_reference,
            "observations": self.observations,
            "responsibleEmployeeId": self.responsible_employee_id,
            "status": self.status.value,
            "endDate": self.end_date,
        }
        if self.id:
            row["id"] = self.id
        return row

    def with_changes(self, **changes) -> "Area":
        return replace(self, **changes)


@dataclass(frozen=True)
class MonthlyGoal:
    period: str
    production: float = 0.0
    revenue: float = 0.0
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MonthlyGoal":
        return cls(
            period=str(row["period"]),
            production=parse_or(row.get("production"), 0.0),
            revenue=parse_or(row.get("revenue"), 0.0),
            id=row.get("id"),
        )

    def to_row(self, company_id: str) -> dict[str, Any]:
        row = {
            "companyId": company_id,
            "period": self.period,
            "production": self.production,
            "revenue": self.revenue,
        }
        if self.id:
            row["id"] = self.id
        return row
