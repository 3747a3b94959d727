from __future__ import annotations

from fastapi import FastAPI, status
from helpers import API, iso_in
from httpx import AsyncClient

from taskflow.models import utcnow


async def test_list_users_paginates_newest_first(client: AsyncClient, register_user) -> None:
    first = await register_user(name="Ann One", email="ann@example.com")
    await register_user(name="Ben Two", email="ben@example.com")
    await register_user(name="Cat Three", email="cat@example.com")

    page_one = await client.get(f"{API}/users", headers=first["headers"], params={"limit": 2})
    page_two = await client.get(
        f"{API}/users",
        headers=first["headers"],
        params={"limit": 2, "page": 2},
    )

    assert page_one.status_code == status.HTTP_200_OK
    data = page_one.json()["data"]
    assert [user["name"] for user in data["users"]] == ["Cat Three", "Ben Two"]
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert [user["name"] for user in page_two.json()["data"]["users"]] == ["Ann One"]


async def test_list_users_filters_by_search(client: AsyncClient, alice, bob) -> None:
    response = await client.get(f"{API}/users", headers=alice["headers"], params={"search": "BOB@"})

    data = response.json()["data"]
    assert [user["email"] for user in data["users"]] == ["bob@example.com"]
    assert data["pagination"]["total"] == 1


async def test_search_requires_two_characters(client: AsyncClient, alice) -> None:
    for params in ({"q": "a"}, {"q": "  a "}, {}):
        response = await client.get(f"{API}/users/search", headers=alice["headers"], params=params)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Search query must be at least 2 characters long."


async def test_search_matches_name_and_email(client: AsyncClient, alice, bob) -> None:
    by_name = await client.get(f"{API}/users/search", headers=alice["headers"], params={"q": "smi"})
    by_email = await client.get(f"{API}/users/search", headers=alice["headers"], params={"q": "example.com"})

    assert [user["name"] for user in by_name.json()["data"]["users"]] == ["Bob Smith"]
    assert [user["name"] for user in by_email.json()["data"]["users"]] == ["Alice Johnson", "Bob Smith"]


async def test_directory_requires_authentication(client: AsyncClient) -> None:
    response = await client.get(f"{API}/users")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_get_update_and_delete_user(client: AsyncClient, alice, bob) -> None:
    url = f"{API}/users/{bob['user']['id']}"

    fetched = await client.get(url, headers=alice["headers"])
    assert fetched.json()["data"]["user"]["email"] == "bob@example.com"

    updated = await client.put(url, headers=alice["headers"], json={"name": "Robert Smith"})
    assert updated.json()["message"] == "User updated successfully"
    assert updated.json()["data"]["user"]["avatar"] == "RS"

    conflict = await client.put(url, headers=alice["headers"], json={"email": "alice@example.com"})
    assert conflict.status_code == status.HTTP_400_BAD_REQUEST
    assert conflict.json()["message"] == "Email is already in use."

    deleted = await client.delete(url, headers=alice["headers"])
    assert deleted.json()["message"] == "User deleted successfully"

    missing = await client.get(url, headers=alice["headers"])
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["message"] == "User not found."


async def test_unknown_user_id_is_not_found(client: AsyncClient, alice) -> None:
    for user_id in ("665f1c2e8b3e4a0012345678", "not-an-id"):
        response = await client.get(f"{API}/users/{user_id}", headers=alice["headers"])
        assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_user_statistics(client: AsyncClient, alice, bob) -> None:
    task = await client.post(
        f"{API}/tasks",
        headers=alice["headers"],
        json={"title": "Stats", "dueDate": iso_in(days=1), "assigneeId": alice["user"]["id"]},
    )
    await client.patch(f"{API}/tasks/{task.json()['data']['task']['id']}/toggle", headers=alice["headers"])
    await client.post(f"{API}/auth/login", json={"email": "bob@example.com", "password": "hunter22"})

    response = await client.get(f"{API}/users/stats", headers=alice["headers"])

    assert response.json()["data"]["stats"] == {
        "totalUsers": 2,
        "activeUsers": 1,
        "totalTasksCompleted": 1,
        "totalTasksActive": 0,
        "averageTasksCompleted": 0.5,
    }


async def test_refresh_metrics_recomputes_counters(app: FastAPI, client: AsyncClient, alice) -> None:
    users = app.state.repositories.users
    await users.update_counters(alice["user"]["id"], completed=7, active=3, at=utcnow())

    response = await client.put(f"{API}/users/{alice['user']['id']}/metrics", headers=alice["headers"])

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "User metrics updated successfully"
    user = response.json()["data"]["user"]
    assert user["tasksCompleted"] == 0
    assert user["tasksActive"] == 0


async def test_activity_lists_recent_events_newest_first(client: AsyncClient, alice) -> None:
    await client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    await client.put(f"{API}/auth/profile", headers=alice["headers"], json={"name": "Alice J"})

    response = await client.get(f"{API}/users/{alice['user']['id']}/activity", headers=alice["headers"])

    assert response.status_code == status.HTTP_200_OK
    events = response.json()["data"]["events"]
    assert [event["action"] for event in events] == ["profile_updated", "login", "registered"]
    assert events[0]["metadata"] == {"changes": {"name": "Alice J"}}
    assert events[0]["targetId"] == alice["user"]["id"]

    limited = await client.get(
        f"{API}/users/{alice['user']['id']}/activity",
        headers=alice["headers"],
        params={"limit": 1},
    )
    assert len(limited.json()["data"]["events"]) == 1
