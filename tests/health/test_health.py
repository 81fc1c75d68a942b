import pytest  # type: ignore[import-not-found]
from fastapi.testclient import TestClient

from blogdesk.health import repository, service


@pytest.mark.anyio
async def test_health_payload_reports_db_down(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    async def _db_down() -> tuple[bool, str | None]:
        return False, "OperationalError"

    monkeypatch.setattr(repository, "check_db", _db_down)
    payload = await service.get_health_payload()
    assert payload == {"status": "error", "db": {"ok": False, "detail": "OperationalError"}}


def test_health_ok(client: TestClient, monkeypatch) -> None:  # type: ignore[no-untyped-def]
    async def _db_ok() -> tuple[bool, str | None]:
        return True, None

    monkeypatch.setattr(repository, "check_db", _db_ok)
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["db"]["ok"] is True
