import json

import httpx
import pytest
from werkzeug.security import generate_password_hash

from fera_backoffice.core.enums import Capability, Role
from fera_backoffice.core.exceptions import AuthenticationError, SyncError
from fera_backoffice.session.auth import LocalAccount, LocalAuthProvider, RestAuthProvider, Session, SessionBootstrap


@pytest.fixture
def local_provider():
    provider = LocalAuthProvider()
    provider.add_account(
        LocalAccount(
            user_id="u1",
            email="Gestor@Fera.local",
            password_hash=generate_password_hash("segredo"),
            profile={"name": "Gestor", "role": "ADMIN", "companyId": "fera", "permissions": {"finance": True}},
        )
    )
    return provider


def test_local_sign_in_builds_the_session(local_provider):
    session = local_provider.sign_in(" gestor@fera.local ", "segredo")

    assert session.user_id == "u1"
    assert session.role == Role.ADMIN
    assert session.company_id == "fera"
    assert session.permissions.granted() == {Capability.FINANCE}
    assert not session.is_global_role


@pytest.mark.parametrize("email,password", [("gestor@fera.local", "errada"), ("outro@fera.local", "segredo"), ("", "")])
def test_local_sign_in_rejects_bad_credentials(local_provider, email, password):
    with pytest.raises(AuthenticationError):
        local_provider.sign_in(email, password)


def test_session_survives_the_cookie_round_trip(local_provider):
    session = local_provider.sign_in("gestor@fera.local", "segredo")

    assert Session.from_dict(json.loads(json.dumps(session.to_dict()))) == session


def test_bootstrap_subscribes_once(local_provider):
    opened, closed = [], []
    bootstrap = SessionBootstrap(local_provider, on_authenticated=opened.append, on_signed_out=lambda: closed.append(True))

    bootstrap.start()
    bootstrap.start()
    session = local_provider.sign_in("gestor@fera.local", "segredo")
    local_provider.sign_out(session)

    assert opened == [session]
    assert closed == [True]
    assert bootstrap.started


def test_bootstrap_stop_unsubscribes(local_provider):
    opened = []
    bootstrap = SessionBootstrap(local_provider, on_authenticated=opened.append, on_signed_out=lambda: None)
    bootstrap.start()
    bootstrap.stop()

    local_provider.sign_in("gestor@fera.local", "segredo")

    assert opened == []
    assert not bootstrap.started


def _rest_provider(handler):
    http = httpx.Client(base_url="https://backend.test", transport=httpx.MockTransport(handler))
    return RestAuthProvider("https://backend.test", "anon", client=http)


def test_rest_sign_in_reads_token_and_profile():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path, request.headers["Authorization"]))
        if request.url.path == "/auth/v1/token":
            assert request.url.params["grant_type"] == "password"
            return httpx.Response(200, json={"access_token": "tok", "user": {"id": "u9", "email": "m@fera.local"}})
        if request.url.path == "/rest/v1/profiles":
            assert request.url.params["id"] == "eq.u9"
            return httpx.Response(200, json=[{"name": "Diretoria", "role": "DIRETORIA_MASTER", "companyId": "fera"}])
        if request.url.path == "/auth/v1/logout":
            return httpx.Response(204)
        return httpx.Response(404)

    provider = _rest_provider(handler)
    session = provider.sign_in("m@fera.local", "x")

    assert session.access_token == "tok"
    assert session.role == Role.MASTER
    assert session.is_global_role
    assert calls[1] == ("GET", "/rest/v1/profiles", "Bearer tok")

    provider.sign_out(session)
    assert calls[-1] == ("POST", "/auth/v1/logout", "Bearer tok")


def test_rest_sign_in_wrong_password():
    provider = _rest_provider(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

    with pytest.raises(AuthenticationError):
        provider.sign_in("m@fera.local", "x")


def test_rest_sign_in_server_error_is_a_sync_error():
    provider = _rest_provider(lambda request: httpx.Response(502))

    with pytest.raises(SyncError):
        provider.sign_in("m@fera.local", "x")


def test_rest_sign_in_without_profile():
    def handler(request):
        if request.url.path == "/auth/v1/token":
            return httpx.Response(200, json={"access_token": "tok", "user": {"id": "u9"}})
        return httpx.Response(200, json=[])

    with pytest.raises(AuthenticationError):
        _rest_provider(handler).sign_in("m@fera.local", "x")
