"""CORS middleware tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from rulegate.interfaces.api.middleware.cors import CORSMiddleware
from rulegate.interfaces.api.resources.health import HealthResource


def _client(origins: list[str]) -> TestClient:
    app = falcon.asgi.App(middleware=[CORSMiddleware(origins)])
    app.add_route("/v1/health", HealthResource())
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    return _client(["http://localhost:3000"])


def test_allowed_origin_echoed(client: TestClient) -> None:
    r = client.simulate_get("/v1/health", headers={"Origin": "http://localhost:3000"})
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert r.headers["Vary"] == "Origin"


def test_unknown_origin_gets_no_headers(client: TestClient) -> None:
    r = client.simulate_get("/v1/health", headers={"Origin": "http://evil.example"})
    assert r.status_code == 200
    assert "Access-Control-Allow-Origin" not in r.headers


def test_preflight_short_circuits(client: TestClient) -> None:
    r = client.simulate_options("/v1/roles", headers={"Origin": "http://localhost:3000"})
    assert r.status_code == 200
    assert "PATCH" in r.headers["Access-Control-Allow-Methods"]


def test_wildcard() -> None:
    r = _client(["*"]).simulate_get("/v1/health", headers={"Origin": "http://any.example"})
    assert r.headers["Access-Control-Allow-Origin"] == "*"
