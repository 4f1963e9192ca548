from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Optional

from ..common.datetime_utils import format_clock, parse_clock
from ..common.numbers import parse_or
from ..core.enums import EmployeeStatus, PaymentModality


@dataclass(frozen=True)
class Employee:
    """Domain entity: Funcionário.

    Note: plain data object, no store access. Employees are never hard-deleted,
    only switched to inactive.
    """

    id: Optional[str]
    company_id: str
    name: str
    role: str
    payment_modality: PaymentModality = PaymentModality.DIARIA
    default_value: float = 0.0
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    shift_start: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    shift_end: Optional[time] = None
    cpf: str = ""
    birth_date: str = ""
    address: str = ""
    phone: str = ""
    payment_type: str = "pix"
    pix_key: str = ""
    bank_account: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    @property
    def is_clt(self) -> bool:
        return self.payment_modality == PaymentModality.CLT

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Employee":
        return cls(
            id=row.get("id"),
            company_id=str(row["companyId"]),
            name=row.get("name") or "",
            role=row.get("role") or "",
            payment_modality=PaymentModality(row.get("paymentModality") or PaymentModality.DIARIA.value),
            default_value=parse_or(row.get("defaultValue", row.get("defaultDailyRate")), 0.0),
            status=EmployeeStatus(row.get("status") or EmployeeStatus.ACTIVE.value),
            shift_start=parse_clock(row.get("shiftStart")),
            break_start=parse_clock(row.get("breakStart")),
            break_end=parse_clock(row.get("breakEnd")),
            shift_end=parse_clock(row.get("shiftEnd")),
            cpf=row.get("cpf") or "",
            birth_date=row.get("birthDate") or "",
            address=row.get("address") or "",
            phone=row.get("phone") or "",
            payment_type=row.get("paymentType") or "pix",
            pix_key=row.get("pixKey") or "",
            bank_account=row.get("bankAccount") or "",
        )

    def to_row(self) -> dict[str, Any]:
        row = {
            "companyId": self.company_id,
            "name": self.name,
            "role": self.role,
            "paymentModality": self.payment_modality.value,
            "defaultValue": self.default_value,
            "status": self.status.value,
            "shiftStart": format_clock(self.shift_start),
            "breakStart": format_clock(self.break_start),
            "breakEnd": format_clock(self.break_end),
            "shiftEnd": format_clock(self.shift_end),
            "cpf": self.cpf,
            "birthDate": self.birth_date,
            "address": self.address,
            "phone": self.phone,
            "paymentType": self.payment_type,
            "pixKey": self.pix_key,
            "bankAccount": self.bank_account,
        }
        if self.id:
            row["id"] = self.id
        return row
