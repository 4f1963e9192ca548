"""CSV exports: one file per domain, semicolon-delimited, UTF-8 with BOM."""

from __future__ import annotations

import csv
import io
import re
import time
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import month_label_long
from ..core.constants import CSV_DELIMITER
from ..core.enums import EmployeeStatus, PaymentModality, StoredStatus
from ..employees.model import Employee
from ..finance.model import CashEntry
from ..inventory.model import InventoryItem
from ..production.model import Area
from .formatting import format_csv_number, format_date_br

INVENTORY_HEADER = ["ITEM", "CATEGORIA", "QUANTIDADE ATUAL", "QUANTIDADE MINIMA", "VALOR UNITARIO", "SITUACAO"]
EMPLOYEES_HEADER = ["NOME", "CARGO", "MODALIDADE", "VALOR PADRAO", "STATUS", "CPF", "TELEFONE", "CHAVE PIX"]
FINANCE_HEADER = ["DATA", "TIPO", "CATEGORIA", "REFERENCIA", "VALOR"]
PRODUCTION_HEADER = ["AREA", "STATUS", "DATA DO SERVICO", "SERVICO", "QUANTIDADE", "VALOR UNITARIO", "VALOR TOTAL"]
ATTENDANCE_HEADER = ["DATA", "STATUS", "VALOR DA DIARIA", "SITUACAO PAGAMENTO"]


@dataclass(frozen=True)
class CsvFile:
    filename: str
    content: bytes
    mimetype: str = "text/csv; charset=utf-8"


def _unix_millis(now_ms: Optional[int]) -> int:
    return int(time.time() * 1000) if now_ms is None else int(now_ms)


def report_filename(domain: str, now_ms: Optional[int] = None) -> str:
    return f"Relatorio_{domain}_{_unix_millis(now_ms)}.csv"


def _encode(rows: Iterable[Sequence[str]]) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out, delimiter=CSV_DELIMITER, lineterminator="\n")
    writer.writerows(rows)
    return out.getvalue().encode("utf-8-sig")


def export_inventory(items: Iterable[InventoryItem], *, now_ms: Optional[int] = None) -> CsvFile:
    rows = [INVENTORY_HEADER]
    for item in sorted(items, key=lambda i: i.name.lower()):
        rows.append(
            [
                item.name,
                item.category,
                format_csv_number(item.current_qty),
                format_csv_number(item.min_qty),
                format_csv_number(item.unit_value),
                "CRITICO" if item.is_critical else "OK",
            ]
        )
    return CsvFile(report_filename("Inventario", now_ms), _encode(rows))


def export_employees(employees: Iterable[Employee], *, now_ms: Optional[int] = None) -> CsvFile:
    rows = [EMPLOYEES_HEADER]
    for emp in sorted(employees, key=lambda e: e.name.lower()):
        rows.append(
            [
                emp.name,
                emp.role,
                "CLT" if emp.payment_modality == PaymentModality.CLT else "DIARIA",
                format_csv_number(emp.default_value),
                "ATIVO" if emp.status == EmployeeStatus.ACTIVE else "INATIVO",
                emp.cpf,
                emp.phone,
                emp.pix_key,
            ]
        )
    return CsvFile(report_filename("Funcionarios", now_ms), _encode(rows))


def export_finance(
    cash_in: Iterable[CashEntry], cash_out: Iterable[CashEntry], *, now_ms: Optional[int] = None
) -> CsvFile:
    entries = [("ENTRADA", c) for c in cash_in] + [("SAIDA", c) for c in cash_out]
    entries.sort(key=lambda pair: (pair[1].date, pair[0]))
    rows = [FINANCE_HEADER]
    for kind, entry in entries:
        rows.append([format_date_br(entry.date), kind, entry.category, entry.reference, format_csv_number(entry.value)])
    return CsvFile(report_filename("Financeiro", now_ms), _encode(rows))


def export_production(areas: Iterable[Area], *, now_ms: Optional[int] = None) -> CsvFile:
    rows = [PRODUCTION_HEADER]
    for area in areas:
        status = "FINALIZADA" if area.is_finished else "EM EXECUCAO"
        for service in sorted(area.services, key=lambda s: s.service_date):
            rows.append(
                [
                    area.name,
                    status,
                    format_date_br(service.service_date),
                    service.service_type.value,
                    format_csv_number(service.quantity),
                    format_csv_number(service.unit_value),
                    format_csv_number(service.total_value),
                ]
            )
    return CsvFile(report_filename("Producao", now_ms), _encode(rows))


def export_employee_attendance(employee: Employee, records: Iterable[AttendanceRecord], period: str) -> CsvFile:
    """Monthly attendance sheet of one employee, with a summary footer."""
    history = sorted(
        (r for r in records if r.employee_id == employee.id and r.date.isoformat().startswith(period)),
        key=lambda r: r.date,
    )
    year, month = int(period[:4]), int(period[5:7])

    rows: list[Sequence[str]] = [
        [f"RELATORIO DE PRESENCA - {employee.name.upper()}"],
        [f"CARGO: {employee.role.upper()}"],
        [f"MES DE REFERENCIA: {month_label_long(year, month).upper()}"],
        [],
        ATTENDANCE_HEADER,
    ]
    total_value = 0.0
    worked_days = 0
    for record in history:
        worked = record.status in (StoredStatus.PRESENT, StoredStatus.PARTIAL)
        if worked:
            total_value += record.value
            worked_days += 1
        rows.append(
            [
                format_date_br(record.date.isoformat()),
                "PRESENTE" if worked else "AUSENTE",
                format_csv_number(record.value if worked else 0),
                "PAGO" if record.is_paid else "PENDENTE",
            ]
        )
    rows += [
        [],
        ["RESUMO FINAL"],
        ["DIAS TRABALHADOS", str(worked_days)],
        ["TOTAL BRUTO", format_csv_number(total_value)],
    ]

    safe_name = re.sub(r"\s+", "_", employee.name.strip())
    return CsvFile(f"Presenca_{safe_name}_{period}.csv", _encode(rows))
