"""Authentication session providers and the startup bootstrap.

The bootstrap subscribes to session changes once; each change either opens
the company workspace (snapshot fetch) or sends the user back to login.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol

import httpx
from werkzeug.security import check_password_hash

from ..access.permissions import UserPermissions, is_global_role, parse_role
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, SyncError

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional["Session"]], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class Session:
    """What we keep in the Flask session after login."""

    user_id: str
    email: str
    name: str
    role: Role
    company_id: Optional[str]
    permissions: UserPermissions = field(default_factory=UserPermissions)
    access_token: Optional[str] = None

    @property
    def is_global_role(self) -> bool:
        return is_global_role(self.role)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "company_id": self.company_id,
            "permissions": {c.value: True for c in self.permissions.granted()},
            "access_token": self.access_token,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Session":
        return cls(
            user_id=str(data["user_id"]),
            email=data.get("email") or "",
            name=data.get("name") or "",
            role=parse_role(data.get("role")),
            company_id=data.get("company_id"),
            permissions=UserPermissions.from_row(data.get("permissions")),
            access_token=data.get("access_token"),
        )


class AuthSessionProvider(Protocol):
    def sign_in(self, email: str, password: str) -> Session:
        raise NotImplementedError

    def sign_out(self, session: Optional[Session] = None) -> None:
        raise NotImplementedError

    def on_session_change(self, callback: SessionListener) -> Unsubscribe:
        raise NotImplementedError


class _Listeners:
    def __init__(self):
        self._lock = threading.Lock()
        self._callbacks: list[SessionListener] = []

    def add(self, callback: SessionListener) -> Unsubscribe:
        with self._lock:
            self._callbacks.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return _unsubscribe

    def emit(self, session: Optional[Session]) -> None:
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(session)

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)


def _session_from_profile(user_id: str, email: str, profile: Mapping[str, Any], token: Optional[str]) -> Session:
    return Session(
        user_id=user_id,
        email=email,
        name=profile.get("name") or email,
        role=parse_role(profile.get("role")),
        company_id=profile.get("companyId"),
        permissions=UserPermissions.from_row(profile.get("permissions")),
        access_token=token,
    )


@dataclass(frozen=True)
class LocalAccount:
    user_id: str
    email: str
    password_hash: str
    profile: Mapping[str, Any] = field(default_factory=dict)


class LocalAuthProvider:
    """Password check against locally held accounts (MySQL and memory backends)."""

    def __init__(self, accounts: Mapping[str, LocalAccount] | None = None):
        self._accounts = {k.lower(): v for k, v in (accounts or {}).items()}
        self._listeners = _Listeners()

    def add_account(self, account: LocalAccount) -> None:
        self._accounts[account.email.lower()] = account

    def sign_in(self, email: str, password: str) -> Session:
        account = self._accounts.get((email or "").strip().lower())
        if not account:
            raise AuthenticationError("E-mail ou senha inválidos")
        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            ok = False
        if not ok:
            raise AuthenticationError("E-mail ou senha inválidos")

        session = _session_from_profile(account.user_id, account.email, account.profile, None)
        self._listeners.emit(session)
        return session

    def sign_out(self, session: Optional[Session] = None) -> None:
        self._listeners.emit(None)

    def on_session_change(self, callback: SessionListener) -> Unsubscribe:
        return self._listeners.add(callback)


class RestAuthProvider:
    """Hosted auth endpoint (GoTrue dialect) plus the ``profiles`` table for role and company."""

    def __init__(self, base_url: str, api_key: str, *, timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self._api_key = api_key
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self._listeners = _Listeners()

    def _headers(self, token: Optional[str] = None) -> dict[str, str]:
        return {"apikey": self._api_key, "Authorization": f"Bearer {token or self._api_key}"}

    def sign_in(self, email: str, password: str) -> Session:
        try:
            resp = self._client.post(
                "/auth/v1/token",
                params={"grant_type": "password"},
                headers=self._headers(),
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as exc:
            raise SyncError(f"Falha ao contatar o serviço de login: {exc}") from exc
        if resp.status_code in (400, 401, 403):
            raise AuthenticationError("E-mail ou senha inválidos")
        if resp.is_error:
            raise SyncError(f"Serviço de login respondeu {resp.status_code}")

        data = resp.json()
        token = data.get("access_token")
        user = data.get("user") or {}
        profile = self._fetch_profile(str(user.get("id")), token)
        session = _session_from_profile(str(user.get("id")), user.get("email") or email, profile, token)
        self._listeners.emit(session)
        return session

    def _fetch_profile(self, user_id: str, token: Optional[str]) -> dict[str, Any]:
        try:
            resp = self._client.get(
                "/rest/v1/profiles",
                params={"id": f"eq.{user_id}", "select": "*"},
                headers=self._headers(token),
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise SyncError(f"Falha ao carregar o perfil do usuário: {exc}") from exc
        rows = resp.json()
        if not rows:
            raise AuthenticationError("Usuário sem perfil cadastrado")
        return rows[0]

    def sign_out(self, session: Optional[Session] = None) -> None:
        token = session.access_token if session else None
        if token:
            try:
                self._client.post("/auth/v1/logout", headers=self._headers(token))
            except httpx.HTTPError as exc:
                logger.warning("remote sign-out failed: %s", exc)
        self._listeners.emit(None)

    def on_session_change(self, callback: SessionListener) -> Unsubscribe:
        return self._listeners.add(callback)


class SessionBootstrap:
    """Startup decision between the company workspace and the login surface."""

    def __init__(
        self,
        provider: AuthSessionProvider,
        *,
        on_authenticated: Callable[[Session], None],
        on_signed_out: Callable[[], None],
    ):
        self._provider = provider
        self._on_authenticated = on_authenticated
        self._on_signed_out = on_signed_out
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._provider.on_session_change(self._handle)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle(self, session: Optional[Session]) -> None:
        if session is None:
            self._on_signed_out()
            return
        logger.info("session opened user=%s company=%s role=%s", session.user_id, session.company_id, session.role.value)
        self._on_authenticated(session)
