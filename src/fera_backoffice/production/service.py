from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.numbers import parse_number
from ..common.validators import require_non_empty
from ..company.model import CompanyConfig
from ..core.enums import AreaStatus, Collection, ServiceType
from ..core.exceptions import ValidationError
from ..core.result import Err, Ok, Result, unwrap_or_raise
from ..store.protocol import RecordStore
from ..sync.runner import SyncRunner
from .model import Area, Service


def finish(area: Area, end_reference: str, day: date) -> Result[Area]:
    """executing -> finished; a finished area is never re-opened or finished again."""
    if area.is_finished:
        return Err("Área já finalizada")
    return Ok(
        area.with_changes(
            status=AreaStatus.FINISHED,
            end_date=day.isoformat(),
            end_reference=(end_reference or "").strip() or area.end_reference,
        )
    )


def build_service(
    area: Area,
    service_type: ServiceType,
    raw_quantity: Any,
    service_date: str,
    config: CompanyConfig,
) -> Result[Service]:
    """Measurement line with the unit value snapshotted from the current rates."""
    if area.is_finished:
        return Err("Não é possível lançar serviços em área finalizada")
    quantity = parse_number(raw_quantity)
    if quantity is None or quantity <= 0:
        return Err("Quantidade inválida")
    return Ok(
        Service(
            id=None,
            area_id=str(area.id),
            service_type=service_type,
            quantity=quantity,
            unit_value=config.rate_for(service_type),
            service_date=service_date,
        )
    )


def _service_type(raw: Any) -> ServiceType:
    try:
        return ServiceType(raw)
    except ValueError as exc:
        raise ValidationError("Tipo de serviço inválido") from exc


def _iso_day(raw: Any, label: str) -> str:
    try:
        return parse_iso_date(str(raw)).isoformat()
    except ValueError as exc:
        raise ValidationError(f"Data inválida: {label}") from exc


class ProductionService:
    def __init__(self, runner: SyncRunner):
        self._runner = runner

    def _area(self, area_id: str) -> Area:
        area = self._runner.snapshot.area(area_id)
        if area is None:
            raise ValidationError("Área não encontrada")
        return area

    def create_area(self, payload: dict[str, Any]) -> Area:
        if not self._runner.company_id:
            raise ValidationError("Usuário sem empresa vinculada")
        area = Area(
            id=None,
            company_id=self._runner.company_id,
            name=require_non_empty(payload.get("name"), "Nome da área"),
            start_date=_iso_day(payload.get("startDate") or today_local().isoformat(), "início"),
            start_reference=require_non_empty(payload.get("startReference"), "Referência inicial"),
            observations=(payload.get("observations") or "").strip(),
            responsible_employee_id=payload.get("responsibleEmployeeId") or None,
        )

        def _write(store: RecordStore) -> Area:
            return Area.from_row(store.save(Collection.AREAS, area.to_row()))

        return self._runner.run("area:new", _write)

    def add_service(self, area_id: str, raw_type: Any, raw_quantity: Any, service_date: Optional[str] = None) -> Service:
        area = self._area(area_id)
        day = _iso_day(service_date or today_local().isoformat(), "serviço")
        service = unwrap_or_raise(
            build_service(area, _service_type(raw_type), raw_quantity, day, self._runner.snapshot.config)
        )

        def _write(store: RecordStore) -> Service:
            return Service.from_row(store.save(Collection.SERVICES, service.to_row(area.company_id)))

        return self._runner.run(f"service:{area_id}", _write)

    def delete_service(self, area_id: str, service_id: str) -> None:
        area = self._area(area_id)
        if area.is_finished:
            raise ValidationError("Não é possível alterar área finalizada")
        if not any(s.id == service_id for s in area.services):
            raise ValidationError("Serviço não encontrado")
        self._runner.run(f"service:{area_id}", lambda store: store.delete(Collection.SERVICES, service_id))

    def finish_area(self, area_id: str, end_reference: str = "", day: Optional[date] = None) -> Area:
        finished = unwrap_or_raise(finish(self._area(area_id), end_reference, day or today_local()))

        def _write(store: RecordStore) -> Area:
            row = store.save(
                Collection.AREAS,
                {
                    "id": finished.id,
                    "companyId": finished.company_id,
                    "status": finished.status.value,
                    "endDate": finished.end_date,
                    "endReference": finished.end_reference,
                },
            )
            return Area.from_row({**row, "services": [s.to_row(finished.company_id) for s in finished.services]})

        return self._runner.run(f"area-finish:{area_id}", _write)
