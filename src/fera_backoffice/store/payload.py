"""Shape raw collection rows into the company payload the snapshot reads."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.enums import Collection

PAYLOAD_KEYS: dict[Collection, str] = {
    Collection.AREAS: "areas",
    Collection.EMPLOYEES: "employees",
    Collection.ATTENDANCE: "attendanceRecords",
    Collection.INVENTORY: "inventory",
    Collection.INVENTORY_MOVEMENTS: "inventoryExits",
    Collection.CASH_IN: "cashIn",
    Collection.CASH_OUT: "cashOut",
    Collection.MONTHLY_GOALS: "monthlyGoals",
}


def in_scope(row: Mapping[str, Any], company_id: Optional[str], is_global_role: bool) -> bool:
    return is_global_role or row.get("companyId") == company_id


def assemble_payload(
    rows: Mapping[Collection, Iterable[Mapping[str, Any]]],
    *,
    company_id: Optional[str],
    is_global_role: bool,
) -> dict[str, Any]:
    scoped = {
        collection: [dict(r) for r in rows.get(collection, ()) if in_scope(r, company_id, is_global_role)]
        for collection in Collection
    }

    services_by_area: dict[str, list[dict[str, Any]]] = {}
    for service in scoped[Collection.SERVICES]:
        services_by_area.setdefault(str(service.get("areaId")), []).append(service)

    payload: dict[str, Any] = {key: scoped[collection] for collection, key in PAYLOAD_KEYS.items()}
    payload["areas"] = [
        {**area, "services": services_by_area.get(str(area.get("id")), [])} for area in scoped[Collection.AREAS]
    ]

    settings = [s for s in scoped[Collection.COMPANY_SETTINGS] if s.get("companyId") == company_id]
    payload["settings"] = settings[0] if settings else None
    return payload
