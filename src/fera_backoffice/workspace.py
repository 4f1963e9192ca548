from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.service import AttendanceService
from .company.service import CompanyService
from .employees.service import EmployeeService
from .finance.service import FinanceService
from .inventory.service import InventoryService
from .payroll.service import PayrollService
from .production.service import ProductionService
from .session.auth import Session
from .store.protocol import RecordStore
from .sync.claims import ClaimRegistry
from .sync.notifier import LoggingNotifier
from .sync.runner import SyncRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workspace:
    """Services bound to one signed-in user's company snapshot."""

    session: Session
    runner: SyncRunner
    notifier: LoggingNotifier
    attendance: AttendanceService
    payroll: PayrollService
    employees: EmployeeService
    production: ProductionService
    finance: FinanceService
    inventory: InventoryService
    company: CompanyService


class WorkspaceRegistry:
    """One workspace per signed-in user; settlement claims are shared per company."""

    def __init__(self, store_factory: Callable[[Session], RecordStore]):
        self._store_factory = store_factory
        self._lock = threading.Lock()
        self._workspaces: dict[str, Workspace] = {}
        self._claims: dict[Optional[str], ClaimRegistry] = {}

    def _claims_for(self, company_id: Optional[str]) -> ClaimRegistry:
        with self._lock:
            return self._claims.setdefault(company_id, ClaimRegistry())

    def open(self, session: Session) -> Workspace:
        notifier = LoggingNotifier()
        runner = SyncRunner(
            self._store_factory(session),
            company_id=session.company_id,
            is_global_role=session.is_global_role,
            notifier=notifier,
        )
        workspace = Workspace(
            session=session,
            runner=runner,
            notifier=notifier,
            attendance=AttendanceService(runner),
            payroll=PayrollService(runner, claims=self._claims_for(session.company_id)),
            employees=EmployeeService(runner),
            production=ProductionService(runner),
            finance=FinanceService(runner),
            inventory=InventoryService(runner),
            company=CompanyService(runner),
        )
        with self._lock:
            previous = self._workspaces.get(session.user_id)
            self._workspaces[session.user_id] = workspace
        if previous is not None:
            previous.runner.detach()
        logger.debug("workspace opened user=%s company=%s", session.user_id, session.company_id)
        return workspace

    def get(self, session: Session) -> Workspace:
        with self._lock:
            workspace = self._workspaces.get(session.user_id)
        if workspace is None or workspace.session != session:
            workspace = self.open(session)
        return workspace

    def close(self, user_id: str) -> None:
        with self._lock:
            workspace = self._workspaces.pop(user_id, None)
        if workspace is not None:
            workspace.runner.detach()
