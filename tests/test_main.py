"""Composition root smoke tests (no database or Keycloak needed)."""

from unittest.mock import AsyncMock, MagicMock

import psycopg
import pytest
from falcon.testing import TestClient

from rulegate import main as main_module
from rulegate.config import Settings
from rulegate.main import create_rulegate_app, main


@pytest.fixture
def pool(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    pool = MagicMock()
    pool.open = AsyncMock()
    pool.close = AsyncMock()
    pool.connection.side_effect = psycopg.OperationalError("no database in tests")
    monkeypatch.setattr(main_module, "create_pool", lambda conninfo: pool)
    return pool


@pytest.fixture
def client(pool: MagicMock) -> TestClient:
    settings = Settings(_env_file=None, keycloak_client_secret="", cors_origins="*")
    return TestClient(create_rulegate_app(settings))


def test_liveness(client: TestClient) -> None:
    r = client.simulate_get("/v1/health")
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == "*"


def test_not_ready_without_database(client: TestClient) -> None:
    r = client.simulate_get("/v1/health/ready")
    assert r.status_code == 503
    assert r.json["rule_store"]["initialized"] is False


def test_management_routes_require_authentication(client: TestClient) -> None:
    for path in ("/v1/roles", "/v1/audit-logs", "/v1/permission-management/matrix"):
        r = client.simulate_get(path)
        assert r.status_code == 401, path


def test_unknown_route(client: TestClient) -> None:
    assert client.simulate_get("/v1/nothing").status_code == 404


def test_main_prints_version(capsys: pytest.CaptureFixture[str]) -> None:
    main()
    assert capsys.readouterr().out.startswith("RuleGate v")
