from __future__ import annotations

from datetime import date

import pytest

from src.hr_payroll.hr_payroll.main import create_app


@pytest.fixture
def app(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    svc = world.container.user_service
    svc.create_user(full_name="Admin", username="admin", password="admin123", role="admin")
    svc.create_user(full_name="Gerente", username="gerente", password="gerente123", role="gerencia")
    svc.create_user(full_name="Contadora", username="conta", password="conta123", role="contabilidad")
    return create_app(container=world.container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_and_me(client):
    resp = login(client, "admin", "admin123")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["role"] == "admin"
    assert "payroll.config" in body["data"]["permissions"]

    me = client.get("/api/auth/me").get_json()
    assert me["data"]["full_name"] == "Admin"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_bad_credentials_return_401(client):
    resp = login(client, "admin", "nope")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Usuario o contraseña incorrectos"}


def test_protected_routes_require_session(client):
    assert client.get("/api/employees").status_code == 401
    assert client.get("/api/payroll/periods").status_code == 401


def test_role_without_permission_gets_403(client):
    login(client, "gerente", "gerente123")

    assert client.get("/api/payroll/periods").status_code == 200
    resp = client.post("/api/employees", json={"identification_type": "CC"})
    assert resp.status_code == 403
    assert client.put("/api/payroll/config/salario_minimo", json={"value": 1}).status_code == 403


def test_validation_and_not_found_errors(client):
    login(client, "admin", "admin123")

    resp = client.post(
        "/api/payroll/periods",
        json={"period_type": "mensual", "start_date": "2024-06-30", "end_date": "2024-06-01"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    assert client.get("/api/payroll/periods/999").status_code == 404
    assert client.get("/api/settlements/nope").status_code == 404


def test_payroll_flow_through_api(client, world):
    emp = world.add_employee()
    world.add_contract(emp, salary="2000000", start_date=date(2023, 1, 1))
    login(client, "admin", "admin123")

    resp = client.post(
        "/api/payroll/periods",
        json={"period_type": "mensual", "start_date": "2024-06-01", "end_date": "2024-06-30"},
    )
    assert resp.status_code == 201
    period_id = resp.get_json()["data"]["period_id"]
    assert resp.get_json()["data"]["status"] == "abierto"

    resp = client.post(
        f"/api/payroll/periods/{period_id}/novedades/bulk",
        json={
            "novedades": [
                {
                    "employee_id": emp,
                    "novedad_type": "bonificacion",
                    "category": "devengo",
                    "amount": "100000",
                    "novedad_date": "2024-06-10",
                }
            ]
        },
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["created"] == 1

    resp = client.post(f"/api/payroll/periods/{period_id}/liquidate", json={})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["employees"] == 1

    entries = client.get(f"/api/payroll/periods/{period_id}/entries").get_json()["data"]
    assert [e["employee_id"] for e in entries] == [emp]
    assert entries[0]["bonuses"] == "100000.00"

    resp = client.get(f"/api/payroll/periods/{period_id}/export?format=csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.data.startswith(b"\xef\xbb\xbf")
    assert "nomina_2024-06-01_2024-06-30.csv" in resp.headers["Content-Disposition"]

    exports = client.get(f"/api/payroll/periods/{period_id}/exports").get_json()["data"]
    assert exports[0]["export_format"] == "csv"


def test_settlement_flow_through_api(client, world):
    emp = world.add_employee()
    contract_id = world.add_contract(emp, salary="3600000", start_date=date(2023, 1, 1))
    login(client, "admin", "admin123")

    resp = client.post(
        f"/api/contracts/{contract_id}/settle",
        json={"settlement_date": "2023-12-26", "indemnization_type": "sin_justa_causa"},
    )
    assert resp.status_code == 201
    settlement = resp.get_json()["data"]
    assert settlement["total"] == "13032000.00"

    resp = client.patch(
        f"/api/settlements/{settlement['settlement_id']}",
        json={"changes": {"deductions": 32000}, "justification": "Préstamo de nómina"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["total"] == "13000000.00"

    audit = client.get(f"/api/settlements/{settlement['settlement_id']}/audit").get_json()["data"]
    assert audit[0]["field_name"] == "deductions"

    client.post("/api/auth/logout")
    login(client, "conta", "conta123")
    resp = client.post(f"/api/settlements/{settlement['settlement_id']}/approve", json={"comments": "Ok"})
    assert resp.status_code == 200
    resp = client.post(f"/api/settlements/{settlement['settlement_id']}/paid", json={"payment_reference": "TRX-9"})
    assert resp.get_json()["data"]["status"] == "pagado"


def test_non_finite_numbers_are_answered_with_400(client, world):
    emp = world.add_employee()
    contract_id = world.add_contract(emp, salary="2000000", start_date=date(2023, 1, 1))
    login(client, "admin", "admin123")

    resp = client.put("/api/payroll/config/salario_minimo_legal", json={"value": "Infinity"})
    assert resp.status_code == 400
    assert world.config.items == {}

    period_id = client.post(
        "/api/payroll/periods",
        json={"period_type": "mensual", "start_date": "2024-06-01", "end_date": "2024-06-30"},
    ).get_json()["data"]["period_id"]
    for amount in ("NaN", "sNaN", "Infinity"):
        resp = client.post(
            f"/api/payroll/periods/{period_id}/novedades",
            json={
                "employee_id": emp,
                "novedad_type": "bonificacion",
                "category": "devengo",
                "amount": amount,
                "novedad_date": "2024-06-10",
            },
        )
        assert resp.status_code == 400
    assert client.post(f"/api/payroll/periods/{period_id}/liquidate", json={}).status_code == 200

    settlement_id = client.post(
        f"/api/contracts/{contract_id}/settle", json={"settlement_date": "2023-12-31"}
    ).get_json()["data"]["settlement_id"]
    resp = client.patch(
        f"/api/settlements/{settlement_id}",
        json={"severance": "Infinity", "justification": "x"},
    )
    assert resp.status_code == 400


def test_session_with_unknown_role_is_forbidden(client):
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["role"] = "superusuario"

    resp = client.get("/api/employees")

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "No tiene permisos para esta acción"
