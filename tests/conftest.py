from __future__ import annotations

import pytest

from fera_backoffice.core.enums import Collection
from fera_backoffice.store.memory_store import InMemoryRecordStore
from fera_backoffice.sync.runner import SyncRunner

COMPANY = "fera"
OTHER_COMPANY = "outra"


def employee_row(emp_id: str, *, modality: str = "DIARIA", value: float = 100.0, status: str = "active", name: str = "Ana Souza"):
    return {
        "id": emp_id,
        "companyId": COMPANY,
        "name": name,
        "role": "Roçador",
        "paymentModality": modality,
        "defaultValue": value,
        "status": status,
    }


def attendance_row(rec_id: str, emp_id: str, day: str, *, value: float = 100.0, bonus: float = 0.0, discount: float = 0.0, paid: bool = False, status: str = "present", observation: str = ""):
    return {
        "id": rec_id,
        "companyId": COMPANY,
        "employeeId": emp_id,
        "date": day,
        "status": status,
        "value": value,
        "bonusValue": bonus,
        "discountValue": discount,
        "discountObservation": observation,
        "paymentStatus": "pago" if paid else "pendente",
    }


@pytest.fixture
def seed():
    return {
        Collection.EMPLOYEES: [
            employee_row("e-diaria"),
            employee_row("e-clt", modality="CLT", value=3000.0, name="Bruno Lima"),
            employee_row("e-inativo", status="inactive", name="Carlos Reis"),
            {**employee_row("e-outra"), "companyId": OTHER_COMPANY},
        ],
        Collection.INVENTORY: [
            {"id": "i-luva", "companyId": COMPANY, "name": "Luva", "category": "EPIs", "currentQty": 10, "minQty": 2},
            {"id": "i-fio", "companyId": COMPANY, "name": "Fio de nylon", "category": "insumos", "currentQty": 1, "minQty": 5},
        ],
        Collection.AREAS: [
            {"id": "a-centro", "companyId": COMPANY, "name": "Centro", "startDate": "2025-01-02", "startReference": "Praça"},
        ],
    }


@pytest.fixture
def store(seed):
    return InMemoryRecordStore(seed)


@pytest.fixture
def runner(store):
    return SyncRunner(store, company_id=COMPANY)


@pytest.fixture
def rows():
    """Row builders for tests that seed their own store."""

    class _Rows:
        company = COMPANY
        other_company = OTHER_COMPANY
        employee = staticmethod(employee_row)
        attendance = staticmethod(attendance_row)

    return _Rows
