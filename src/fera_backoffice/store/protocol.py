from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ..core.enums import Collection


class RecordStore(Protocol):
    """Seam to the hosted backend.

    ``save`` is upsert-by-id: without ``id`` it inserts, with ``id`` it updates
    only the supplied fields (callers rely on partial updates, never on a full
    overwrite). Failures are raised as ``SyncError``.
    """

    def save(self, collection: Collection, record: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def delete(self, collection: Collection, record_id: str) -> None:
        raise NotImplementedError

    def fetch_company_snapshot(self, company_id: Optional[str], is_global_role: bool) -> dict[str, Any]:
        raise NotImplementedError


@runtime_checkable
class TransactionalSettlementStore(Protocol):
    """Store able to post a settlement in a single transaction.

    Returns the saved cash-out row (None when nothing was pending) and the
    attendance rows it summed, as read under the lock before being marked paid.
    """

    def apply_settlement(
        self,
        *,
        company_id: str,
        record_ids: Sequence[str],
        cash_out_row: dict[str, Any],
    ) -> tuple[Optional[dict[str, Any]], list[dict[str, Any]]]:
        raise NotImplementedError
