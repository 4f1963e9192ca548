import pytest
from werkzeug.security import generate_password_hash

from fera_backoffice.main import create_app
from fera_backoffice.session.auth import LocalAccount


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email="diretoria@fera.local", password="fera123"):
    return client.post("/api/login", json={"email": email, "password": password})


def test_routes_require_login(client):
    assert client.get("/api/dashboard").status_code == 401
    assert client.get("/api/me").status_code == 401


def test_wrong_password_is_401(client):
    resp = _login(client, password="errada")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_master_login_sees_every_section(client):
    resp = _login(client)
    user = resp.get_json()["user"]

    assert resp.status_code == 200
    assert user["companyId"] == "fera-service"
    assert user["role"] == "DIRETORIA_MASTER"
    assert {"dashboard", "finance", "analytics", "settings"} <= set(user["sections"])


def test_attendance_to_settlement_flow(client):
    _login(client)

    created = client.post("/api/employees", json={"name": "Ana Souza", "role": "Roçadora", "defaultValue": "100"})
    employee_id = created.get_json()["employee"]["id"]

    for day in ("2025-03-03", "2025-03-04"):
        resp = client.post("/api/attendance/toggle", json={"employeeId": employee_id, "date": day})
        assert resp.get_json()["action"] == "create"

    preview = client.get(f"/api/payroll/{employee_id}/preview?start=2025-03-01&end=2025-03-31").get_json()
    assert preview["settlement"]["totalToPay"] == 200
    assert len(preview["recordIds"]) == 2

    settled = client.post(f"/api/payroll/{employee_id}/settle?start=2025-03-01&end=2025-03-31", json={})
    body = settled.get_json()
    assert settled.status_code == 200
    assert body["cashOut"]["value"] == 200
    assert body["cashOut"]["reference"] == "Pagamento Ana Souza"
    assert all(r["paymentStatus"] == "pago" for r in body["updatedRecords"])

    again = client.post(f"/api/payroll/{employee_id}/settle?start=2025-03-01&end=2025-03-31", json={})
    assert again.status_code == 400

    finance = client.get("/api/finance").get_json()
    assert len(finance["cashOut"]) == 1
    assert finance["balance"] == -200


def test_dashboard_and_csv(client):
    _login(client)
    client.post("/api/employees", json={"name": "Bruno Lima", "role": "Motorista"})

    dashboard = client.get("/api/dashboard").get_json()
    assert dashboard["metrics"]["activeEmployees"] == 1
    assert dashboard["unavailable"] == []

    report = client.get("/api/employees/report.csv")
    assert report.status_code == 200
    assert report.mimetype == "text/csv"
    assert "Relatorio_Funcionarios_" in report.headers["Content-Disposition"]
    assert "Bruno Lima" in report.data.decode("utf-8-sig")


def test_validation_errors_are_400(client):
    _login(client)

    resp = client.post("/api/employees", json={"name": "", "role": "Motorista"})

    assert resp.status_code == 400
    assert resp.get_json()["message"]


def test_hidden_sections_do_not_exist_for_the_user(app, client):
    app.extensions["fera_container"].auth_provider.add_account(
        LocalAccount(
            user_id="op1",
            email="campo@fera.local",
            password_hash=generate_password_hash("campo"),
            profile={"name": "Campo", "role": "OPERATIONAL", "companyId": "fera-service", "permissions": {"production": True}},
        )
    )
    _login(client, "campo@fera.local", "campo")

    assert client.get("/api/areas").status_code == 200
    assert client.get("/api/finance").status_code == 404
    assert client.get("/api/settings").status_code == 404
    assert client.get("/api/dashboard").status_code == 200


def test_logout_clears_the_session(client):
    _login(client)
    assert client.get("/api/me").status_code == 200

    client.post("/api/logout")

    assert client.get("/api/me").status_code == 401
