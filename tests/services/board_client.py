"""Request helpers shared by the service tests."""

from uuid import UUID

from httpx import AsyncClient

ALICE = UUID("00000000-0000-4000-8000-00000000a11c")
BOB = UUID("00000000-0000-4000-8000-000000000b0b")
CAROL = UUID("00000000-0000-4000-8000-0000000ca201")

NAMES = {ALICE: "Alice", BOB: "Bob", CAROL: "Carol"}


def headers(user_id: UUID) -> dict[str, str]:
    name = NAMES.get(user_id, "Someone")
    return {
        "X-User-Id": str(user_id),
        "X-User-Name": name,
        "X-User-Email": f"{name.lower()}@example.com",
    }


async def containers_by_title(client: AsyncClient, user_id: UUID) -> dict[str, dict]:
    resp = await client.get("/api/v1/containers", headers=headers(user_id))
    assert resp.status_code == 200
    return {c["title"]: c for c in resp.json()}


async def create_container(
    client: AsyncClient, user_id: UUID, title: str, color: str | None = None,
) -> dict:
    body = {"title": title}
    if color is not None:
        body["color"] = color
    resp = await client.post(
        "/api/v1/containers", json=body, headers=headers(user_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_task(client: AsyncClient, user_id: UUID, title: str, **fields) -> dict:
    body = {"title": title}
    for key, value in fields.items():
        if isinstance(value, UUID):
            value = str(value)
        elif isinstance(value, list):
            value = [str(v) if isinstance(v, UUID) else v for v in value]
        body[key] = value
    resp = await client.post("/api/v1/tasks", json=body, headers=headers(user_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


async def get_task(client: AsyncClient, user_id: UUID, task_id: str) -> dict:
    resp = await client.get(f"/api/v1/tasks/{task_id}", headers=headers(user_id))
    assert resp.status_code == 200, resp.text
    return resp.json()


def error_code(resp) -> str:
    return resp.json()["error"]["code"]
