"""Health routes — liveness and board-store readiness."""

from sqlalchemy import delete

from taskboard.models.container import Container


async def test_liveness(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_readiness_with_seeded_defaults(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"] == {
        "database": "healthy", "default_containers": "seeded",
    }


async def test_readiness_without_database(client, monkeypatch):
    import taskboard.infrastructure.database as db_module

    monkeypatch.setattr(db_module, "db_manager", None)
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503
    assert resp.json()["reason"] == "database_unavailable"


async def test_readiness_reports_missing_default_containers(client, test_db):
    await test_db.execute(
        delete(Container).where(
            Container.is_default.is_(True), Container.title == "Completed",
        ),
    )
    await test_db.commit()
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503
    body = resp.json()
    assert body["reason"] == "default_containers_missing"
    assert body["missing"] == ["Completed"]
