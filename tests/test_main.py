"""
License Client Tests - HTTP facade.

Exercises the FastAPI endpoints with the license client wired to an
in-memory license server.
"""

from typing import Any, Callable, Dict, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from pecu_license_client.main import app, get_license_client

from .conftest import VALID_KEY


@pytest.fixture
def api() -> Iterator[Callable[..., TestClient]]:
    """
    Build a TestClient that serves requests with the given license client.
    """

    def _api(license_client: Any) -> TestClient:
        app.dependency_overrides[get_license_client] = lambda: license_client
        return TestClient(app)

    yield _api
    app.dependency_overrides.clear()


def test_format_endpoint() -> None:
    response = TestClient(app).post("/api/license/format", json={"value": "pecuab12c", "cursor": 9})

    assert response.status_code == 200
    assert response.json() == {"licenseKey": "PECU-AB12-C", "cursor": 11, "validFormat": False}


def test_format_endpoint_defaults_cursor_to_end() -> None:
    response = TestClient(app).post("/api/license/format", json={"value": "pecuab12cd34ef56gh78"})

    body = response.json()
    assert body["licenseKey"] == VALID_KEY
    assert body["cursor"] == len(VALID_KEY)
    assert body["validFormat"] is True


def test_validate_endpoint_success(
    api: Callable, make_client: Callable, valid_payload: Dict[str, Any]
) -> None:
    client = make_client(lambda request: httpx.Response(200, json=valid_payload))

    response = api(client).post("/api/license/validate", json={"licenseKey": VALID_KEY})

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["plan"] == "Pro"
    assert body["downloadsRemaining"] == 42
    assert body["unlimitedDownloads"] is False
    assert body["expires"] == "March 5, 2027"
    assert body["features"] == ["priority-support", "batch-download"]


def test_validate_endpoint_rejection(api: Callable, make_client: Callable) -> None:
    client = make_client(lambda request: httpx.Response(200, json={"valid": False, "error": "Invalid hardware"}))

    response = api(client).post("/api/license/validate", json={"licenseKey": VALID_KEY})

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["kind"] == "remote_rejected"
    assert body["reason"] == "Invalid hardware"
    assert body["recoverable"] is False
    assert "different hardware" in body["message"]


def test_validate_endpoint_malformed(api: Callable, make_client: Callable) -> None:
    client = make_client(lambda request: httpx.Response(200, json={"valid": True}))

    body = api(client).post("/api/license/validate", json={"licenseKey": "nope"}).json()

    assert body["valid"] is False
    assert body["kind"] == "malformed"


def test_remote_health_endpoint(api: Callable, make_client: Callable) -> None:
    client = make_client(lambda request: httpx.Response(503))

    body = api(client).get("/api/license/health").json()

    assert body == {"healthy": False, "statusCode": 503, "reason": "http-error"}


def test_service_health() -> None:
    body = TestClient(app).get("/health").json()

    assert body["status"] == "healthy"
    assert body["service"] == "license-client"
