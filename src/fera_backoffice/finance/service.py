from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.numbers import money, parse_number
from ..core.constants import DEFAULT_COMPANY_CATEGORY_IN, DEFAULT_COMPANY_CATEGORY_OUT
from ..core.enums import Collection
from ..core.exceptions import ValidationError
from ..production.aggregator import cash_balance
from ..store.protocol import RecordStore
from ..sync.runner import SyncRunner
from .model import CashEntry

_LEDGERS = {"in": Collection.CASH_IN, "out": Collection.CASH_OUT}


class FinanceService:
    def __init__(self, runner: SyncRunner):
        self._runner = runner

    def _entry(self, collection: Collection, raw_value: Any, category: str, reference: str, day: Optional[str]) -> CashEntry:
        if not self._runner.company_id:
            raise ValidationError("Usuário sem empresa vinculada")
        value = parse_number(raw_value)
        if value is None or value <= 0:
            raise ValidationError("Valor inválido")
        try:
            entry_date = parse_iso_date(day) if day else today_local()
        except ValueError as exc:
            raise ValidationError("Data inválida") from exc

        default_category = DEFAULT_COMPANY_CATEGORY_IN if collection == Collection.CASH_IN else DEFAULT_COMPANY_CATEGORY_OUT
        return CashEntry(
            id=None,
            company_id=self._runner.company_id,
            date=entry_date.isoformat(),
            value=money(value),
            category=(category or "").strip() or default_category,
            reference=(reference or "").strip(),
        )

    def _post(self, collection: Collection, entry: CashEntry) -> CashEntry:
        def _write(store: RecordStore) -> CashEntry:
            return CashEntry.from_row(store.save(collection, entry.to_row()))

        return self._runner.run(f"{collection.value}:new", _write)

    def record_cash_in(self, raw_value: Any, category: str = "", reference: str = "", day: Optional[str] = None) -> CashEntry:
        return self._post(Collection.CASH_IN, self._entry(Collection.CASH_IN, raw_value, category, reference, day))

    def record_cash_out(self, raw_value: Any, category: str = "", reference: str = "", day: Optional[str] = None) -> CashEntry:
        return self._post(Collection.CASH_OUT, self._entry(Collection.CASH_OUT, raw_value, category, reference, day))

    def delete_entry(self, ledger: str, entry_id: str) -> None:
        collection = _LEDGERS.get(ledger)
        if collection is None:
            raise ValidationError("Tipo de lançamento inválido")
        entries = self._runner.snapshot.cash_in if collection == Collection.CASH_IN else self._runner.snapshot.cash_out
        if not any(e.id == entry_id for e in entries):
            raise ValidationError("Lançamento não encontrado")
        self._runner.run(f"{collection.value}:{entry_id}", lambda store: store.delete(collection, entry_id))

    def balance(self, start: Optional[date] = None, end: Optional[date] = None) -> float:
        snapshot = self._runner.snapshot
        lo = start.isoformat() if start else ""
        hi = end.isoformat() if end else "9999-12-31"
        cash_in = [c for c in snapshot.cash_in if lo <= c.date <= hi]
        cash_out = [c for c in snapshot.cash_out if lo <= c.date <= hi]
        return cash_balance(cash_in, cash_out)
