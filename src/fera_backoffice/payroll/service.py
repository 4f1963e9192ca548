from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.factory import PaymentStrategyFactory
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import today_local
from ..core.constants import DEFAULT_SETTLEMENT_CATEGORY
from ..core.enums import Collection, PaymentStatus
from ..core.exceptions import SettlementIntegrityError, SyncError, ValidationError
from ..finance.model import CashEntry
from ..store.protocol import RecordStore, TransactionalSettlementStore
from ..sync.claims import ClaimRegistry
from ..sync.runner import SyncRunner
from .calculator.base import SettlementCalculator
from .calculator.standard_calculator import StandardSettlementCalculator
from .model import Settlement, SettlementOutcome

logger = logging.getLogger(__name__)


class PayrollService:
    """Use case: settle an employee's pending attendance and post the cash-out."""

    def __init__(
        self,
        runner: SyncRunner,
        *,
        calculator: Optional[SettlementCalculator] = None,
        claims: Optional[ClaimRegistry] = None,
        strategy_factory: Optional[PaymentStrategyFactory] = None,
    ):
        self._runner = runner
        self._calculator = calculator or StandardSettlementCalculator()
        self._claims = claims or ClaimRegistry()
        self._factory = strategy_factory or PaymentStrategyFactory()

    def preview(self, employee_id: str, start: date, end: date) -> Settlement:
        if start > end:
            raise ValidationError("Período inválido")
        records = self._runner.snapshot.attendance_between(employee_id, start, end)
        return self._calculator.compute(records)

    def settle_range(
        self,
        employee_id: str,
        start: date,
        end: date,
        *,
        reference: str = "",
        category: str = DEFAULT_SETTLEMENT_CATEGORY,
    ) -> SettlementOutcome:
        if start > end:
            raise ValidationError("Período inválido")
        records = self._runner.snapshot.attendance_between(employee_id, start, end)
        return self.settle_and_post(employee_id, records, reference=reference, category=category)

    def settle_and_post(
        self,
        employee_id: str,
        records: Sequence[AttendanceRecord],
        *,
        reference: str = "",
        category: str = DEFAULT_SETTLEMENT_CATEGORY,
        day: Optional[date] = None,
    ) -> SettlementOutcome:
        employee = self._runner.snapshot.employee(employee_id)
        if employee is None:
            raise ValidationError("Funcionário não encontrado")

        unique: dict[str, AttendanceRecord] = {}
        for record in records:
            if not record.id:
                raise ValidationError("Registro de presença sem identificador")
            if record.employee_id != employee_id:
                raise ValidationError("Registro de outro funcionário na liquidação")
            unique[str(record.id)] = record

        informational = not self._factory.for_employee(employee).settles_per_day
        day = day or today_local()
        reference = reference or f"Pagamento {employee.name}"

        with self._claims.claim(unique) as claimed:
            eligible = [r for rid, r in unique.items() if rid in claimed and not r.is_paid]
            if not eligible:
                raise ValidationError("Nenhum lançamento pendente para liquidar")

            def _write(store: RecordStore) -> SettlementOutcome:
                return self._post(store, employee.company_id, eligible, reference, category, day, informational)

            return self._runner.run(f"settle:{employee_id}", _write)

    def _post(
        self,
        store: RecordStore,
        company_id: str,
        eligible: list[AttendanceRecord],
        reference: str,
        category: str,
        day: date,
        informational: bool,
    ) -> SettlementOutcome:
        draft = CashEntry(id=None, company_id=company_id, date=day.isoformat(), value=0.0, category=category, reference=reference)

        if isinstance(store, TransactionalSettlementStore):
            saved, summed_rows = store.apply_settlement(
                company_id=company_id,
                record_ids=[str(r.id) for r in eligible],
                cash_out_row=draft.to_row(),
            )
            if saved is None:
                raise ValidationError("Nenhum lançamento pendente para liquidar")
            # totals come from the rows the store summed, not from the snapshot copies
            paid = [AttendanceRecord.from_row(row) for row in summed_rows]
            settlement = self._calculator.compute(paid)
            return self._outcome(saved, paid, settlement, informational)

        return self._post_sequential(store, draft, eligible, informational)

    def _post_sequential(
        self,
        store: RecordStore,
        draft: CashEntry,
        eligible: list[AttendanceRecord],
        informational: bool,
    ) -> SettlementOutcome:
        """Best-effort path for stores without transactions.

        Re-reads the current rows, posts the cash-out from them, then marks
        each record. Any record left unmarked raises SettlementIntegrityError.
        """
        current = {
            str(row.get("id")): row
            for row in store.fetch_company_snapshot(draft.company_id, False).get("attendanceRecords") or []
        }
        fresh = [AttendanceRecord.from_row(current[str(r.id)]) for r in eligible if str(r.id) in current]
        pending = [r for r in fresh if not r.is_paid]
        if not pending:
            raise ValidationError("Nenhum lançamento pendente para liquidar")

        settlement = self._calculator.compute(pending)
        saved = store.save(Collection.CASH_OUT, {**draft.to_row(), "value": settlement.total_to_pay})

        paid: list[AttendanceRecord] = []
        failed: list[str] = []
        for record in pending:
            try:
                store.save(
                    Collection.ATTENDANCE,
                    {"id": record.id, "companyId": record.company_id, "paymentStatus": PaymentStatus.PAID.value},
                )
                paid.append(record)
            except SyncError as exc:
                logger.error("could not mark attendance %s as paid: %s", record.id, exc)
                failed.append(str(record.id))

        if failed:
            raise SettlementIntegrityError(
                "Saída de caixa registrada, mas a baixa dos registros falhou parcialmente",
                cash_out_id=saved.get("id"),
                failed_record_ids=failed,
            )
        return self._outcome(saved, paid, settlement, informational)

    @staticmethod
    def _outcome(
        saved: dict, paid: list[AttendanceRecord], settlement: Settlement, informational: bool
    ) -> SettlementOutcome:
        return SettlementOutcome(
            cash_out_entry=CashEntry.from_row(saved),
            updated_records=tuple(r.with_changes(payment_status=PaymentStatus.PAID) for r in paid),
            settlement=settlement,
            informational=informational,
        )
