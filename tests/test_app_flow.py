from __future__ import annotations

import html
import re

import pytest

from src.qr_attendance.qr_attendance.container import assemble
from src.qr_attendance.qr_attendance.main import create_app

from tests.fakes import BrokenStore, InMemoryAttendance, InMemoryIdentities, InMemoryStudents


def _container(**repos):
    return assemble(
        identities_repo=repos.get("identities") or InMemoryIdentities(),
        students_repo=repos.get("students") or InMemoryStudents(),
        attendance_repo=repos.get("attendance") or InMemoryAttendance(),
        installation_id="asistencia-qr-test",
        secret_key="test-secret",
    )


@pytest.fixture
def make_client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    def make(container):
        app = create_app(container)
        return app.test_client()

    return make


@pytest.fixture
def client(make_client):
    return make_client(_container())


def _register(client, **overrides):
    form = {
        "nombre": "Ana López",
        "grupo": "3B",
        "semestre": "3",
        "materia": "Física",
        "hora": "08:00",
        "numero_control": "101",
    }
    form.update(overrides)
    return client.post("/students", data=form)


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_register_scan_and_report(client):
    assert client.get("/").status_code == 200

    res = _register(client)
    assert res.status_code == 302

    page = client.get("/").get_data(as_text=True)
    assert "api.qrserver.com" in page
    assert "Alumno registrado correctamente" in page

    assert client.post("/scan").status_code == 302
    assert client.post("/scan").status_code == 302

    res = client.get("/api/report", query_string={"materia": "Física", "hora": "08:00"})
    data = res.get_json()

    assert res.status_code == 200
    assert data["success"] is True
    assert len(data["rows"]) == 1
    assert data["rows"][0]["numero_control"] == "101"
    assert data["rows"][0]["nombre"] == "Ana López"
    assert data["rows"][0]["hora_entrada"] == "2026-03-02 07:00:00"


def test_duplicate_registration_shows_message(client):
    _register(client)
    res = _register(client, nombre="Otra")

    assert res.status_code == 400
    assert "El número de control ya está registrado" in res.get_data(as_text=True)


def test_scan_before_generating_qr_shows_message(client):
    client.post("/scan")
    page = client.get("/").get_data(as_text=True)

    assert "Primero genera un código QR" in page


def test_report_for_unknown_filter_is_empty(client):
    res = client.get("/api/report", query_string={"materia": "Química", "hora": "09:00"})

    assert res.status_code == 200
    assert res.get_json()["rows"] == []


def test_report_page_renders(client):
    _register(client)
    client.post("/scan")

    res = client.get("/report", query_string={"materia": "Física", "hora": "08:00"})

    assert res.status_code == 200
    assert "Ana López" in res.get_data(as_text=True)


def test_qr_png_for_last_registration(client):
    assert client.get("/qr.png").status_code == 404

    _register(client)
    res = client.get("/qr.png")

    assert res.status_code == 200
    assert res.mimetype == "image/png"


def test_sessions_are_isolated(make_client):
    container = _container()
    first = make_client(container)
    second = create_app(container).test_client()

    _register(first)
    first.post("/scan")

    res = second.get("/api/report", query_string={"materia": "Física", "hora": "08:00"})
    assert res.get_json()["rows"] == []


def test_token_exchange_resumes_identity(make_client):
    container = _container()
    first = make_client(container)
    _register(first)
    first.post("/scan")
    token = first.get("/auth/token").get_json()["token"]

    second = create_app(container).test_client()
    assert second.post("/auth/token", data={"token": token}).status_code == 302

    res = second.get("/api/report", query_string={"materia": "Física", "hora": "08:00"})
    assert [r["numero_control"] for r in res.get_json()["rows"]] == ["101"]


def test_identity_failure_blocks_data_routes(make_client):
    client = make_client(_container(identities=BrokenStore()))

    assert client.get("/").status_code == 503
    assert client.get("/api/report", query_string={"materia": "F", "hora": "08:00"}).status_code == 503
    assert client.get("/health").status_code == 200


def test_storage_failure_on_report_is_reported(make_client):
    client = make_client(_container(attendance=BrokenStore()))

    res = client.get("/api/report", query_string={"materia": "Física", "hora": "08:00"})

    assert res.status_code == 400
    assert res.get_json()["message"] == "Error al cargar el reporte"


def test_scan_form_carries_token_to_another_worker(make_client):
    identities, students, attendance = InMemoryIdentities(), InMemoryStudents(), InMemoryAttendance()
    worker_a = make_client(_container(identities=identities, students=students, attendance=attendance))
    worker_b = create_app(_container(identities=identities, students=students, attendance=attendance)).test_client()

    _register(worker_a)
    page = worker_a.get("/").get_data(as_text=True)
    token = html.unescape(re.search(r'name="token" value="([^"]+)"', page).group(1))
    assert "qr.png?token=" in page

    session_token = worker_a.get("/auth/token").get_json()["token"]
    worker_b.post("/auth/token", data={"token": session_token})
    assert worker_b.post("/scan", data={"token": token}).status_code == 302
    assert worker_b.get("/qr.png", query_string={"token": token}).mimetype == "image/png"

    res = worker_b.get("/api/report", query_string={"materia": "Física", "hora": "08:00"})
    assert [r["numero_control"] for r in res.get_json()["rows"]] == ["101"]
    assert len(attendance.rows) == 1


def test_scan_with_out_of_range_class_time_is_rejected(client):
    token = '{"control":"101","materia":"Física","hora":"23:00"}'
    client.post("/scan", data={"token": token})

    page = client.get("/").get_data(as_text=True)
    assert "hora de clase no válida" in page


def test_idle_shells_are_released(make_client):
    container = assemble(
        identities_repo=InMemoryIdentities(),
        students_repo=InMemoryStudents(),
        attendance_repo=InMemoryAttendance(),
        installation_id="asistencia-qr-test",
        secret_key="test-secret",
        shell_idle_seconds=0,
    )
    app = create_app(container)

    for _ in range(20):
        app.test_client().get("/api/report", query_string={"materia": "Física", "hora": "08:00"})

    assert len(container.shells) == 1
    assert sum(len(v) for v in container.student_registry._listeners.values()) == 1


def test_report_generation_is_issued_by_server(client):
    query = {"materia": "Física", "hora": "08:00", "gen": "99"}

    first = client.get("/api/report", query_string=query).get_json()
    second = client.get("/api/report", query_string=query).get_json()

    assert second["generation"] == first["generation"] + 1
