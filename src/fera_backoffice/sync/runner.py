from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, TypeVar

from ..core.exceptions import BusyError, SettlementIntegrityError, SyncError
from ..store.protocol import RecordStore
from ..store.snapshot import AppSnapshot
from .notifier import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncRunner:
    """Runs writes against the store for one company session.

    Each write is one logical loading state: the store call, then the full
    refetch. While a control's write is in flight a second submission of the
    same control is refused with ``BusyError`` (the store has no idempotency
    key). The snapshot is only replaced after the refetch succeeds.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        company_id: Optional[str],
        is_global_role: bool = False,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.company_id = company_id
        self.is_global_role = is_global_role
        self.notifier = notifier or LoggingNotifier()
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()
        self._snapshot: Optional[AppSnapshot] = None
        self._version = 0
        self._attached = True
        self.stale = False

    @property
    def snapshot(self) -> AppSnapshot:
        if self._snapshot is None:
            return self.refresh()
        return self._snapshot

    @property
    def is_attached(self) -> bool:
        return self._attached

    @property
    def loading(self) -> bool:
        with self._lock:
            return bool(self._in_flight)

    def is_loading(self, control_key: str) -> bool:
        with self._lock:
            return control_key in self._in_flight

    def detach(self) -> None:
        """Teardown: in-flight writes still complete, their results are ignored."""
        self._attached = False

    def refresh(self) -> AppSnapshot:
        try:
            payload = self.store.fetch_company_snapshot(self.company_id, self.is_global_role)
        except SyncError as exc:
            self.notifier.sync_failed(exc)
            raise
        self._version += 1
        self._snapshot = AppSnapshot.from_payload(self.company_id or "", payload, version=self._version)
        self.stale = False
        return self._snapshot

    def run(self, control_key: str, write: Callable[[RecordStore], T]) -> T:
        with self._lock:
            if control_key in self._in_flight:
                raise BusyError("Operação em andamento, aguarde")
            self._in_flight.add(control_key)

        try:
            try:
                value = write(self.store)
            except SettlementIntegrityError as exc:
                self.notifier.integrity_failed(exc)
                raise
            except SyncError as exc:
                self.notifier.sync_failed(exc)
                raise

            if not self._attached:
                logger.debug("write %s finished after teardown, result ignored", control_key)
                return value

            try:
                self.refresh()
            except SyncError:
                # the write is persisted; never retried
                self.stale = True
                logger.warning("write %s persisted but refetch failed, snapshot is stale", control_key)
            return value
        finally:
            with self._lock:
                self._in_flight.discard(control_key)
