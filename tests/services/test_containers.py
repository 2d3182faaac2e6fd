"""Container routes — defaults, ownership, immutability, deletion guard."""

from uuid import uuid4

from taskboard.services.container_registry import ContainerRegistry
from tests.services.board_client import (
    ALICE, BOB, containers_by_title, create_container, create_task,
    error_code, headers,
)

DEFAULT_TITLES = ["Open", "In Progress", "Completed", "Blocked", "On Hold"]


async def test_defaults_listed_first_in_seed_order(client):
    await create_container(client, ALICE, "Review")
    resp = await client.get("/api/v1/containers", headers=headers(ALICE))
    assert resp.status_code == 200
    titles = [c["title"] for c in resp.json()]
    assert titles == DEFAULT_TITLES + ["Review"]
    assert all(c["is_default"] for c in resp.json()[:5])


async def test_custom_containers_visible_only_to_owner(client):
    await create_container(client, ALICE, "Review")
    bob_view = await containers_by_title(client, BOB)
    assert "Review" not in bob_view
    assert set(bob_view) == set(DEFAULT_TITLES)


async def test_create_trims_title_and_uses_default_color(client):
    created = await create_container(client, ALICE, "  Review  ")
    assert created["title"] == "Review"
    assert created["color"] == "#3B82F6"
    assert created["is_default"] is False
    assert created["owner_id"] == str(ALICE)


async def test_create_rejects_long_title(client):
    resp = await client.post(
        "/api/v1/containers", json={"title": "x" * 51}, headers=headers(ALICE),
    )
    assert resp.status_code == 400


async def test_create_rejects_bad_color(client):
    resp = await client.post(
        "/api/v1/containers", json={"title": "Review", "color": "red"},
        headers=headers(ALICE),
    )
    assert resp.status_code == 400


async def test_owner_can_rename_and_recolor(client):
    created = await create_container(client, ALICE, "Review")
    resp = await client.put(
        f"/api/v1/containers/{created['id']}",
        json={"title": "QA", "color": "#10b981"},
        headers=headers(ALICE),
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "QA"
    assert resp.json()["color"] == "#10B981"


async def test_default_container_is_immutable_for_everyone(client):
    open_ = (await containers_by_title(client, ALICE))["Open"]
    for user in (ALICE, BOB):
        put = await client.put(
            f"/api/v1/containers/{open_['id']}", json={"title": "Mine"},
            headers=headers(user),
        )
        assert put.status_code == 409
        assert error_code(put) == "DEFAULT_CONTAINER_IMMUTABLE"
        delete = await client.delete(
            f"/api/v1/containers/{open_['id']}", headers=headers(user),
        )
        assert delete.status_code == 409
    assert (await containers_by_title(client, ALICE))["Open"]["title"] == "Open"


async def test_non_owner_cannot_modify_custom_container(client):
    created = await create_container(client, ALICE, "Review")
    put = await client.put(
        f"/api/v1/containers/{created['id']}", json={"title": "Hijacked"},
        headers=headers(BOB),
    )
    assert put.status_code == 403
    delete = await client.delete(
        f"/api/v1/containers/{created['id']}", headers=headers(BOB),
    )
    assert delete.status_code == 403
    assert "Review" in await containers_by_title(client, ALICE)


async def test_unknown_container_is_not_found(client):
    resp = await client.delete(f"/api/v1/containers/{uuid4()}", headers=headers(ALICE))
    assert resp.status_code == 404


async def test_owner_deletes_empty_container(client):
    created = await create_container(client, ALICE, "Review")
    resp = await client.delete(
        f"/api/v1/containers/{created['id']}", headers=headers(ALICE),
    )
    assert resp.status_code == 200
    assert "Review" not in await containers_by_title(client, ALICE)


async def test_delete_refused_while_tasks_reference_container(client):
    created = await create_container(client, ALICE, "Review")
    await create_task(client, ALICE, "Check copy", container_id=created["id"])
    resp = await client.delete(
        f"/api/v1/containers/{created['id']}", headers=headers(ALICE),
    )
    assert resp.status_code == 409
    assert error_code(resp) == "CONTAINER_IN_USE"


async def test_seed_defaults_is_idempotent(test_db):
    assert await ContainerRegistry(test_db).seed_defaults() == 0


async def test_requests_without_identity_are_rejected(client):
    resp = await client.get("/api/v1/containers")
    assert resp.status_code == 401
    assert error_code(resp) == "UNAUTHENTICATED"


async def test_rename_carries_over_to_task_status(client):
    created = await create_container(client, ALICE, "Review")
    task = await create_task(client, ALICE, "Check copy", container_id=created["id"])
    await client.put(
        f"/api/v1/containers/{created['id']}", json={"title": "QA"},
        headers=headers(ALICE),
    )
    resp = await client.get(f"/api/v1/tasks/{task['id']}", headers=headers(ALICE))
    assert resp.json()["status"] == "QA"
