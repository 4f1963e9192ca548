from types import SimpleNamespace

import pytest

from fera_backoffice.container import build_container
from fera_backoffice.core.enums import Role
from fera_backoffice.session.auth import Session
from fera_backoffice.settings import get_settings_module
from fera_backoffice.workspace import WorkspaceRegistry


@pytest.mark.parametrize(
    "env,module",
    [
        ("production", "fera_backoffice.settings.production"),
        ("TEST", "fera_backoffice.settings.testing"),
        ("qualquer", "fera_backoffice.settings.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == module


def test_unknown_backend_is_refused():
    with pytest.raises(ValueError):
        build_container(SimpleNamespace(STORE_BACKEND="sqlite"))


def test_memory_container_opens_the_workspace_on_login():
    settings = SimpleNamespace(
        STORE_BACKEND="memory",
        LOCAL_ADMIN_EMAIL="chefe@fera.local",
        LOCAL_ADMIN_PASSWORD="x",
        LOCAL_ADMIN_COMPANY="fera",
    )
    container = build_container(settings)

    session = container.auth_provider.sign_in("chefe@fera.local", "x")

    assert container.bootstrap.started
    assert not container.assistant_service.enabled
    workspace = container.workspaces.get(session)
    assert workspace.session == session
    assert workspace.runner.is_global_role


def _session(user_id, company="fera"):
    return Session(user_id=user_id, email=f"{user_id}@fera.local", name=user_id, role=Role.ADMIN, company_id=company)


def test_reopening_detaches_the_previous_workspace(store):
    registry = WorkspaceRegistry(lambda session: store)

    first = registry.open(_session("u1"))
    second = registry.open(_session("u1"))

    assert not first.runner.is_attached
    assert registry.get(_session("u1")) is second

    registry.close("u1")
    assert not second.runner.is_attached


def test_users_of_one_company_share_settlement_claims(store):
    registry = WorkspaceRegistry(lambda session: store)

    a = registry.open(_session("u1"))
    b = registry.open(_session("u2"))
    other = registry.open(_session("u3", company="outra"))

    assert a.payroll._claims is b.payroll._claims
    assert a.payroll._claims is not other.payroll._claims
