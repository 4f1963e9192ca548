from __future__ import annotations

import json
import logging
import uuid
from decimal import Decimal
from typing import Any, Optional, Sequence

import mysql.connector

from ..core.enums import Collection, PaymentStatus
from ..core.exceptions import SyncError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, quote_ident
from ..database.schema import JSON_COLUMNS, TABLE_COLUMNS
from .payload import assemble_payload

logger = logging.getLogger(__name__)


def _encode(column: str, value: Any) -> Any:
    if column in JSON_COLUMNS and value is not None:
        return json.dumps(value, ensure_ascii=False)
    return value


def _decode_row(row: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, Decimal):
            value = float(value)
        elif key in JSON_COLUMNS and isinstance(value, str):
            value = json.loads(value)
        out[key] = value
    return out


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value or 0))


class MySQLRecordStore:
    """Record store on MySQL (mysql-connector), with transactional settlement."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _columns(collection: Collection, row: dict[str, Any]) -> list[str]:
        allowed = TABLE_COLUMNS[collection]
        unknown = sorted(set(row) - allowed)
        if unknown:
            raise SyncError(f"{collection.value}: colunas desconhecidas {unknown}")
        return [c for c in row if c != "id"]

    def save(self, collection: Collection, record: dict[str, Any]) -> dict[str, Any]:
        row = dict(record)
        columns = self._columns(collection, row)
        table = quote_ident(collection.value)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if row.get("id"):
                    record_id = str(row["id"])
                    if columns:
                        assignments = ", ".join(f"{quote_ident(c)}=%s" for c in columns)
                        cur.execute(
                            f"UPDATE {table} SET {assignments} WHERE `id`=%s",
                            tuple(_encode(c, row[c]) for c in columns) + (record_id,),
                        )
                else:
                    record_id = uuid.uuid4().hex
                    names = ["id", *columns]
                    cur.execute(
                        f"INSERT INTO {table} ({', '.join(map(quote_ident, names))}) VALUES ({placeholders(len(names))})",
                        (record_id, *(_encode(c, row[c]) for c in columns)),
                    )
                cur.execute(f"SELECT * FROM {table} WHERE `id`=%s", (record_id,))
                saved = fetchone(cur)
        except mysql.connector.Error as exc:
            raise SyncError(f"Falha ao salvar em {collection.value}: {exc}") from exc
        if saved is None:
            raise SyncError(f"{collection.value}: registro {record_id} não encontrado")
        return _decode_row(saved)

    def delete(self, collection: Collection, record_id: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {quote_ident(collection.value)} WHERE `id`=%s", (record_id,))
        except mysql.connector.Error as exc:
            raise SyncError(f"Falha ao excluir de {collection.value}: {exc}") from exc

    def fetch_company_snapshot(self, company_id: Optional[str], is_global_role: bool) -> dict[str, Any]:
        rows: dict[Collection, list[dict[str, Any]]] = {}
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for collection in Collection:
                    table = quote_ident(collection.value)
                    if is_global_role:
                        cur.execute(f"SELECT * FROM {table}")
                    else:
                        cur.execute(f"SELECT * FROM {table} WHERE `companyId`=%s", (company_id,))
                    rows[collection] = [_decode_row(r) for r in fetchall(cur)]
        except mysql.connector.Error as exc:
            raise SyncError(f"Falha ao carregar dados da empresa: {exc}") from exc
        return assemble_payload(rows, company_id=company_id, is_global_role=is_global_role)

    def apply_settlement(
        self,
        *,
        company_id: str,
        record_ids: Sequence[str],
        cash_out_row: dict[str, Any],
    ) -> tuple[Optional[dict[str, Any]], list[dict[str, Any]]]:
        """Lock the pending rows, post the cash-out and mark them paid in one transaction."""
        if not record_ids:
            return None, []
        ids = [str(i) for i in record_ids]
        columns = self._columns(Collection.CASH_OUT, cash_out_row)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT *
                    FROM `attendance_records`
                    WHERE `companyId`=%s AND `paymentStatus`<>%s AND `id` IN ({placeholders(len(ids))})
                    FOR UPDATE
                    """,
                    (company_id, PaymentStatus.PAID.value, *ids),
                )
                locked = [_decode_row(r) for r in fetchall(cur)]
                if not locked:
                    return None, []

                total = sum(
                    _decimal(r["value"]) + _decimal(r["bonusValue"]) - _decimal(r["discountValue"]) for r in locked
                )
                cash_out = {**{c: cash_out_row[c] for c in columns}, "value": float(round(total, 2))}
                cash_out_id = uuid.uuid4().hex
                names = ["id", *cash_out]
                cur.execute(
                    f"INSERT INTO `cash_out` ({', '.join(map(quote_ident, names))}) VALUES ({placeholders(len(names))})",
                    (cash_out_id, *cash_out.values()),
                )

                paid_ids = [str(r["id"]) for r in locked]
                cur.execute(
                    f"UPDATE `attendance_records` SET `paymentStatus`=%s WHERE `id` IN ({placeholders(len(paid_ids))})",
                    (PaymentStatus.PAID.value, *paid_ids),
                )
        except mysql.connector.Error as exc:
            # rolled back by db_cursor: neither the cash-out nor the statuses were written
            raise SyncError(f"Falha ao liquidar pagamentos: {exc}") from exc

        logger.info("settlement posted cash_out=%s records=%d", cash_out_id, len(paid_ids))
        return {"id": cash_out_id, **cash_out}, locked
