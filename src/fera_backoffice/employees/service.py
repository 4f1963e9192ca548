from __future__ import annotations

from typing import Any

from ..common.datetime_utils import parse_clock
from ..common.numbers import parse_or
from ..common.validators import require_non_empty
from ..core.enums import Collection, EmployeeStatus, PaymentModality
from ..core.exceptions import ValidationError
from ..store.protocol import RecordStore
from ..sync.runner import SyncRunner
from .model import Employee


def _modality(raw: Any) -> PaymentModality:
    try:
        return PaymentModality(str(raw or PaymentModality.DIARIA.value).upper())
    except ValueError as exc:
        raise ValidationError("Modalidade de pagamento inválida") from exc


def _clock(raw: Any, label: str):
    try:
        return parse_clock(raw)
    except ValueError as exc:
        raise ValidationError(f"Horário inválido: {label}") from exc


class EmployeeService:
    def __init__(self, runner: SyncRunner):
        self._runner = runner

    def list_employees(self, *, include_inactive: bool = True) -> list[Employee]:
        employees = self._runner.snapshot.employees
        if not include_inactive:
            employees = tuple(e for e in employees if e.is_active)
        return sorted(employees, key=lambda e: e.name.lower())

    def save_employee(self, payload: dict[str, Any]) -> Employee:
        """Create or update an employee from form data.

        An unparseable default value falls back to the current one (zero for
        a new employee) instead of aborting the form.
        """
        name = require_non_empty(payload.get("name"), "Nome")
        role = require_non_empty(payload.get("role"), "Cargo")

        employee_id = payload.get("id") or None
        current = self._runner.snapshot.employee(employee_id) if employee_id else None
        if employee_id and current is None:
            raise ValidationError("Funcionário não encontrado")

        employee = Employee(
            id=employee_id,
            company_id=current.company_id if current else self._company_id(),
            name=name,
            role=role,
            payment_modality=_modality(payload.get("paymentModality")),
            default_value=parse_or(payload.get("defaultValue"), current.default_value if current else 0.0),
            status=current.status if current else EmployeeStatus.ACTIVE,
            shift_start=_clock(payload.get("shiftStart"), "entrada"),
            break_start=_clock(payload.get("breakStart"), "início do intervalo"),
            break_end=_clock(payload.get("breakEnd"), "fim do intervalo"),
            shift_end=_clock(payload.get("shiftEnd"), "saída"),
            cpf=(payload.get("cpf") or "").strip(),
            birth_date=(payload.get("birthDate") or "").strip(),
            address=(payload.get("address") or "").strip(),
            phone=(payload.get("phone") or "").strip(),
            payment_type=payload.get("paymentType") or "pix",
            pix_key=(payload.get("pixKey") or "").strip(),
            bank_account=(payload.get("bankAccount") or "").strip(),
        )

        def _write(store: RecordStore) -> Employee:
            return Employee.from_row(store.save(Collection.EMPLOYEES, employee.to_row()))

        return self._runner.run(f"employee:{employee_id or 'new'}", _write)

    def toggle_employee_status(self, employee_id: str) -> Employee:
        current = self._runner.snapshot.employee(employee_id)
        if current is None:
            raise ValidationError("Funcionário não encontrado")
        new_status = EmployeeStatus.INACTIVE if current.is_active else EmployeeStatus.ACTIVE

        def _write(store: RecordStore) -> Employee:
            row = store.save(
                Collection.EMPLOYEES,
                {"id": employee_id, "companyId": current.company_id, "status": new_status.value},
            )
            return Employee.from_row(row)

        return self._runner.run(f"employee-status:{employee_id}", _write)

    def _company_id(self) -> str:
        if not self._runner.company_id:
            raise ValidationError("Usuário sem empresa vinculada")
        return self._runner.company_id
