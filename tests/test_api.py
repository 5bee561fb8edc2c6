"""
HTTP endpoint tests
"""

import base64
import json
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader

from fensterbrief import api
from fensterbrief.assets import NoLogo
from fensterbrief.config import LetterSettings

URL = api.LETTER_PATH


@pytest.fixture
def client():
    api.app.dependency_overrides[api.get_settings] = lambda: LetterSettings()
    api.app.dependency_overrides[api.get_logo_provider] = lambda: NoLogo()
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()


def _field(response) -> str:
    pdf = base64.b64decode(response.json()["data"])
    return PdfReader(BytesIO(pdf)).get_form_text_fields()["anschrift"]


def _assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == "Content-Type"
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


# =============================================================================
# METHODS
# =============================================================================

def test_get_returns_usage(client):
    response = client.get(URL)
    assert response.status_code == 200
    assert response.json() == {"ok": True, "usage": api.USAGE}
    _assert_cors(response)


def test_options_preflight(client):
    response = client.options(URL)
    assert response.status_code == 200
    assert response.content == b""
    _assert_cors(response)


@pytest.mark.parametrize("method", ["put", "delete", "patch"])
def test_other_methods_rejected(client, method):
    response = getattr(client, method)(URL)
    assert response.status_code == 405
    assert response.json() == {"error": "Use POST with JSON body"}
    assert "POST" in response.headers["allow"]
    _assert_cors(response)


# =============================================================================
# POST
# =============================================================================

def test_post_returns_pdf(client):
    response = client.post(URL, json={"adresse": "Bahnstraße 17", "plzOrt": "2404 Petronell"})
    assert response.status_code == 200
    body = response.json()
    assert body["fileName"] == "wisehomes_brief.pdf"
    assert body["mimeType"] == "application/pdf"
    assert base64.b64decode(body["data"]).startswith(b"%PDF")
    assert _field(response).endswith("Bahnstraße 17\n2404 Petronell")
    _assert_cors(response)


def test_post_aliases(client):
    response = client.post(URL, json={"Adresse": "Hauptplatz 1", "plz/ort": "1010 Wien"})
    assert _field(response).endswith("Hauptplatz 1\n1010 Wien")


def test_post_empty_fields_fall_back(client):
    response = client.post(URL, json={"adresse": "", "plzOrt": ""})
    assert response.status_code == 200
    assert _field(response).endswith("Bahnstraße 17\n2404 Petronell")


def test_post_json_as_string(client):
    payload = json.dumps(json.dumps({"address": "Ring 5", "plzort": "8010 Graz"}))
    response = client.post(URL, content=payload, headers={"Content-Type": "application/json"})
    assert _field(response).endswith("Ring 5\n8010 Graz")


def test_post_malformed_body_uses_defaults(client):
    response = client.post(URL, content=b"{adresse: oops", headers={"Content-Type": "application/json"})
    assert response.status_code == 200
    assert response.json()["mimeType"] == "application/pdf"
    assert _field(response).endswith("Bahnstraße 17\n2404 Petronell")


def test_post_is_deterministic(client):
    payload = {"adresse": "Bahnstraße 17", "plzOrt": "2404 Petronell", "text": "Kurz und gut."}
    first = client.post(URL, json=payload).json()["data"]
    second = client.post(URL, json=payload).json()["data"]
    assert first == second


def test_internal_error(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("font embedding failed")

    monkeypatch.setattr(api, "build_letter_pdf", explode)
    response = client.post(URL, json={})
    assert response.status_code == 500
    assert response.json() == {"error": "Internal error", "details": "font embedding failed"}
    _assert_cors(response)
