from __future__ import annotations

import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Callable

from werkzeug.security import generate_password_hash

from .assistant.client import GeminiAssistantClient
from .assistant.service import AssistantService
from .core.enums import Role
from .database.connection import DBConfig, DatabaseConnection
from .session.auth import (
    AuthSessionProvider,
    LocalAccount,
    LocalAuthProvider,
    RestAuthProvider,
    Session,
    SessionBootstrap,
)
from .store.memory_store import InMemoryRecordStore
from .store.mysql_store import MySQLRecordStore
from .store.protocol import RecordStore
from .store.rest_store import RestRecordStore
from .workspace import WorkspaceRegistry

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("mysql", "rest", "memory")


@dataclass(frozen=True)
class Container:
    store_backend: str
    auth_provider: AuthSessionProvider
    bootstrap: SessionBootstrap
    workspaces: WorkspaceRegistry
    assistant_service: AssistantService


def _store_factory(settings: ModuleType, backend: str) -> Callable[[Session], RecordStore]:
    if backend == "mysql":
        db = DBConfig.from_dict(getattr(settings, "DB_CONFIG"))
        store = MySQLRecordStore(DatabaseConnection(db))
        return lambda session: store

    if backend == "rest":
        url = getattr(settings, "SUPABASE_URL")
        key = getattr(settings, "SUPABASE_ANON_KEY")
        return lambda session: RestRecordStore(url, key, access_token=session.access_token)

    store = InMemoryRecordStore()
    return lambda session: store


def _auth_provider(settings: ModuleType, backend: str) -> AuthSessionProvider:
    if backend == "rest":
        return RestAuthProvider(getattr(settings, "SUPABASE_URL"), getattr(settings, "SUPABASE_ANON_KEY"))

    provider = LocalAuthProvider()
    email = getattr(settings, "LOCAL_ADMIN_EMAIL", "")
    password = getattr(settings, "LOCAL_ADMIN_PASSWORD", "")
    if email and password:
        provider.add_account(
            LocalAccount(
                user_id="local-admin",
                email=email,
                password_hash=generate_password_hash(password),
                profile={
                    "name": "Diretoria",
                    "role": Role.MASTER.value,
                    "companyId": getattr(settings, "LOCAL_ADMIN_COMPANY", "") or None,
                },
            )
        )
    return provider


def build_container(settings: ModuleType) -> Container:
    backend = str(getattr(settings, "STORE_BACKEND", "memory")).lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(f"STORE_BACKEND must be one of {STORE_BACKENDS}, got {backend!r}")

    workspaces = WorkspaceRegistry(_store_factory(settings, backend))
    auth_provider = _auth_provider(settings, backend)

    def _on_authenticated(session: Session) -> None:
        workspaces.open(session).runner.refresh()

    def _on_signed_out() -> None:
        logger.debug("session closed, login required")

    bootstrap = SessionBootstrap(auth_provider, on_authenticated=_on_authenticated, on_signed_out=_on_signed_out)
    bootstrap.start()

    api_key = getattr(settings, "ASSISTANT_API_KEY", "")
    assistant_client = (
        GeminiAssistantClient(api_key, model=getattr(settings, "ASSISTANT_MODEL", "gemini-2.5-flash"))
        if api_key
        else None
    )

    return Container(
        store_backend=backend,
        auth_provider=auth_provider,
        bootstrap=bootstrap,
        workspaces=workspaces,
        assistant_service=AssistantService(assistant_client),
    )
