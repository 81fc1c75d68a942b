from fastapi.testclient import TestClient

from blogdesk.api.main import build_app
from blogdesk.health import repository as health_repository


def test_build_app_includes_auth_and_health_routes(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    async def _db_ok() -> tuple[bool, str | None]:
        return True, None

    monkeypatch.setattr(health_repository, "check_db", _db_ok)
    app = build_app()
    paths = {route.path for route in app.routes}
    assert {"/auth/login", "/auth/logout", "/auth/me", "/auth/refresh", "/auth/password", "/auth/users"} <= paths

    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
