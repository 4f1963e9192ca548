from __future__ import annotations

import threading
import uuid
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..core.enums import Collection, PaymentStatus
from ..core.exceptions import SyncError
from . import reducers
from .payload import assemble_payload


class InMemoryRecordStore:
    """Process-local store for development and tests.

    Holds an immutable table state and swaps it through the reducers on each
    write, so a fetched payload is never affected by later writes.
    """

    def __init__(self, seed: Optional[Mapping[Collection, Iterable[Mapping[str, Any]]]] = None):
        self._lock = threading.Lock()
        state = reducers.empty_state()
        for collection, rows in (seed or {}).items():
            for row in rows:
                state = reducers.upsert_row(state, collection, {"id": row.get("id") or self._new_id(), **row})
        self._state = state

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:12]

    def save(self, collection: Collection, record: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            row = dict(record)
            if not row.get("id"):
                row["id"] = self._new_id()
            elif reducers.find_row(self._state, collection, row["id"]) is None:
                raise SyncError(f"{collection.value}: registro {row['id']} não encontrado")
            self._state = reducers.upsert_row(self._state, collection, row)
            return dict(reducers.find_row(self._state, collection, row["id"]))

    def delete(self, collection: Collection, record_id: str) -> None:
        with self._lock:
            self._state = reducers.remove_row(self._state, collection, record_id)

    def fetch_company_snapshot(self, company_id: Optional[str], is_global_role: bool) -> dict[str, Any]:
        state = self._state
        return assemble_payload(state, company_id=company_id, is_global_role=is_global_role)

    def apply_settlement(
        self,
        *,
        company_id: str,
        record_ids: Sequence[str],
        cash_out_row: dict[str, Any],
    ) -> tuple[Optional[dict[str, Any]], list[dict[str, Any]]]:
        """Post the settlement under the store lock, as one state swap."""
        with self._lock:
            state = self._state
            pending = []
            for record_id in record_ids:
                row = reducers.find_row(state, Collection.ATTENDANCE, record_id)
                if row and row.get("companyId") == company_id and row.get("paymentStatus") != PaymentStatus.PAID.value:
                    pending.append(row)
            if not pending:
                return None, []

            total = sum(
                float(r.get("value") or 0) + float(r.get("bonusValue") or 0) - float(r.get("discountValue") or 0)
                for r in pending
            )
            cash_out = {**cash_out_row, "id": self._new_id(), "value": round(total, 2)}
            state = reducers.upsert_row(state, Collection.CASH_OUT, cash_out)
            for row in pending:
                state = reducers.upsert_row(
                    state, Collection.ATTENDANCE, {"id": row["id"], "paymentStatus": PaymentStatus.PAID.value}
                )
            self._state = state
            return dict(cash_out), [dict(r) for r in pending]
