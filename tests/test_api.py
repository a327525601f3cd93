"""
FastAPI endpoint tests for the Consent Intake API.

Uses httpx + FastAPI TestClient against a LocalBlobStore in tmp_path —
no real server, no Vercel Blob calls.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import api
import pytest
from api import app
from fastapi.testclient import TestClient

from consent_intake.exceptions import StorageError
from consent_intake.service import ConsentService
from consent_intake.storage import LocalBlobStore

client = TestClient(app)


@pytest.fixture(autouse=True)
def store_root(tmp_path: Path):
    """Point the service at a fresh local store for every test (bypasses lifespan)."""
    api._service = ConsentService(LocalBlobStore(tmp_path))
    yield tmp_path
    api._service = None


VALID_BODY = {
    "nombre": "  Comercial Andes SpA  ",
    "rutEmpresa": "76.543.212-k",
    "email": "contacto@andes.cl",
    "aceptaTerminos": True,
}


def _post(body, **kwargs):
    return client.post("/api/consent", json=body, **kwargs)


class TestHealthEndpoint:
    def test_health_returns_200(self) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200

    def test_health_response_shape(self) -> None:
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["storage"] == "local"

    def test_health_503_before_startup(self) -> None:
        api._service = None
        assert client.get("/health").status_code == 503


class TestSubmitEndpoint:
    def test_accepts_valid_submission(self) -> None:
        resp = _post(VALID_BODY)
        assert resp.status_code == 201
        data = resp.json()
        assert data["ok"] is True
        assert data["id"].startswith("submissions/")
        assert data["id"].endswith(".json")

    def test_record_is_persisted_normalized(self, store_root: Path) -> None:
        data = _post(
            VALID_BODY,
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "form/1.0"},
        ).json()

        record = json.loads((store_root / data["id"]).read_text(encoding="utf-8"))
        assert record["nombre"] == "Comercial Andes SpA"
        assert record["rutEmpresa"] == "76543212K"
        assert record["email"] == "contacto@andes.cl"
        assert record["aceptaTerminos"] is True
        assert record["acceptedAt"].endswith("Z")
        assert record["ip"] == "203.0.113.7"
        assert record["userAgent"] == "form/1.0"

    def test_real_ip_header_used_without_forwarded_for(self, store_root: Path) -> None:
        data = _post(VALID_BODY, headers={"X-Real-IP": "198.51.100.4"}).json()
        record = json.loads((store_root / data["id"]).read_text(encoding="utf-8"))
        assert record["ip"] == "198.51.100.4"

    def test_each_submission_gets_its_own_id(self) -> None:
        first = _post(VALID_BODY).json()["id"]
        second = _post(VALID_BODY).json()["id"]
        assert first != second


class TestSubmitRejections:
    def test_terms_not_accepted(self, store_root: Path) -> None:
        resp = _post({**VALID_BODY, "aceptaTerminos": False, "email": "bad", "rutEmpresa": "AB-3"})
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "Debe aceptar términos."}
        assert not any(store_root.rglob("*.json"))

    def test_terms_omitted(self) -> None:
        body = {k: v for k, v in VALID_BODY.items() if k != "aceptaTerminos"}
        assert _post(body).json()["error"] == "Debe aceptar términos."

    def test_missing_fields(self) -> None:
        resp = _post({**VALID_BODY, "nombre": "   "})
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "Faltan campos."}

    def test_invalid_email(self) -> None:
        resp = _post({**VALID_BODY, "email": "contacto@andes"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Email inválido."

    def test_invalid_rut(self, store_root: Path) -> None:
        resp = _post({**VALID_BODY, "rutEmpresa": "76.543.210-5"})
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "RUT inválido."}
        assert not any(store_root.rglob("*.json"))


class TestMalformedRequests:
    def test_non_json_body(self) -> None:
        resp = client.post(
            "/api/consent",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "Solicitud inválida."}

    def test_missing_body(self) -> None:
        resp = client.post("/api/consent")
        assert resp.status_code == 400
        assert resp.json()["ok"] is False

    def test_wrong_field_type(self) -> None:
        resp = _post({**VALID_BODY, "nombre": {"first": "A"}})
        assert resp.status_code == 400


class TestServerErrors:
    def test_storage_failure_returns_generic_500(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken_put(pathname: str, body: str, content_type: str):
            raise StorageError("Could not write /secret/path: disk full")

        monkeypatch.setattr(api._service.store, "put", broken_put)

        resp = _post(VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"ok": False, "error": "Error de servidor."}
        assert "secret" not in resp.text

    def test_unexpected_error_returns_generic_500(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def boom(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(api._service, "submit", boom)

        lenient = TestClient(app, raise_server_exceptions=False)
        resp = lenient.post("/api/consent", json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"ok": False, "error": "Error de servidor."}


class TestServiceNotReady:
    def test_submit_before_startup_uses_error_envelope(self) -> None:
        api._service = None
        resp = _post(VALID_BODY)
        assert resp.status_code == 503
        assert resp.json() == {"ok": False, "error": "Error de servidor."}


class TestRequestLogging:
    def test_malformed_values_stay_out_of_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="api")

        resp = _post({
            **VALID_BODY,
            "nombre": {"completo": "Sofía Secreta"},
            "aceptaTerminos": "claro",
        })

        assert resp.status_code == 400
        assert "Malformed request" in caplog.text
        assert "aceptaTerminos" in caplog.text
        assert "claro" not in caplog.text
        assert "Sofía Secreta" not in caplog.text
