from __future__ import annotations

import logging
from typing import Protocol

from ..core.exceptions import SettlementIntegrityError, SyncError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Single top-level sink for failures the user must see."""

    def sync_failed(self, error: SyncError) -> None:
        raise NotImplementedError

    def integrity_failed(self, error: SettlementIntegrityError) -> None:
        raise NotImplementedError


class LoggingNotifier:
    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def sync_failed(self, error: SyncError) -> None:
        logger.warning("sync failed: %s", error)
        self.messages.append(("error", "Erro na sincronização Cloud. Tente novamente."))

    def integrity_failed(self, error: SettlementIntegrityError) -> None:
        logger.error(
            "settlement integrity: cash_out=%s failed_records=%s",
            error.cash_out_id,
            ",".join(error.failed_record_ids),
        )
        self.messages.append(
            (
                "critical",
                "Pagamento lançado, mas alguns registros não foram marcados como pagos: "
                + ", ".join(error.failed_record_ids),
            )
        )
