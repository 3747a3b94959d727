from __future__ import annotations

from typing import Any

from fastapi import status
from helpers import API, iso_in
from httpx import AsyncClient


async def _create_task(client: AsyncClient, owner: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    body = {
        "title": "Write report",
        "dueDate": iso_in(days=1),
        "assigneeId": owner["user"]["id"],
        **overrides,
    }
    response = await client.post(f"{API}/tasks", headers=owner["headers"], json=body)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]["task"]


async def _stats(client: AsyncClient, owner: dict[str, Any]) -> dict[str, int]:
    response = await client.get(f"{API}/tasks/stats", headers=owner["headers"])
    assert response.status_code == status.HTTP_200_OK
    return response.json()["data"]["stats"]


async def _profile(client: AsyncClient, owner: dict[str, Any]) -> dict[str, Any]:
    response = await client.get(f"{API}/auth/profile", headers=owner["headers"])
    assert response.status_code == status.HTTP_200_OK
    return response.json()["data"]["user"]


async def test_create_task_applies_defaults(client: AsyncClient, alice) -> None:
    task = await _create_task(client, alice)

    assert task["title"] == "Write report"
    assert task["ownerId"] == alice["user"]["id"]
    assert task["completed"] is False
    assert task["starred"] is False
    assert task["priority"] == "medium"
    assert task["category"] == "Business"
    assert task["status"] == "todo"
    assert task["completedAt"] is None
    assert task["isOverdue"] is False


async def test_create_task_accepts_assignee_alias(client: AsyncClient, alice) -> None:
    response = await client.post(
        f"{API}/tasks",
        headers=alice["headers"],
        json={"title": "Alias", "dueDate": iso_in(days=2), "assignee": alice["user"]["id"]},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["task"]["assigneeId"] == alice["user"]["id"]


async def test_create_task_requires_title_due_date_and_assignee(client: AsyncClient, alice) -> None:
    response = await client.post(
        f"{API}/tasks",
        headers=alice["headers"],
        json={"title": "No due date", "assigneeId": alice["user"]["id"]},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["message"] == "Title, due date, and assignee are required."
    assert payload["details"]["missing"] == ["due_date"]


async def test_tasks_require_authentication(client: AsyncClient) -> None:
    response = await client.get(f"{API}/tasks")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_tasks_are_scoped_to_their_owner(client: AsyncClient, alice, bob) -> None:
    task = await _create_task(client, alice)
    task_url = f"{API}/tasks/{task['id']}"

    responses = [
        await client.get(task_url, headers=bob["headers"]),
        await client.put(task_url, headers=bob["headers"], json={"title": "Hijacked"}),
        await client.patch(f"{task_url}/toggle", headers=bob["headers"]),
        await client.patch(f"{task_url}/star", headers=bob["headers"]),
        await client.delete(task_url, headers=bob["headers"]),
    ]
    for response in responses:
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Task not found."

    bob_list = await client.get(f"{API}/tasks", headers=bob["headers"])
    assert bob_list.json()["data"] == {"tasks": [], "count": 0}

    unchanged = await client.get(task_url, headers=alice["headers"])
    assert unchanged.json()["data"]["task"]["title"] == "Write report"
    assert unchanged.json()["data"]["task"]["completed"] is False


async def test_toggle_twice_restores_original_state(client: AsyncClient, alice) -> None:
    task = await _create_task(client, alice)
    toggle_url = f"{API}/tasks/{task['id']}/toggle"

    first = (await client.patch(toggle_url, headers=alice["headers"])).json()["data"]["task"]
    assert first["completed"] is True
    assert first["status"] == "completed"
    assert first["completedAt"] is not None

    second = (await client.patch(toggle_url, headers=alice["headers"])).json()["data"]["task"]
    assert second["completed"] is False
    assert second["status"] == "todo"
    assert second["completedAt"] is None


async def test_update_completed_keeps_status_in_lockstep(client: AsyncClient, alice) -> None:
    task = await _create_task(client, alice)

    response = await client.put(
        f"{API}/tasks/{task['id']}",
        headers=alice["headers"],
        json={"completed": True, "priority": "high"},
    )

    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["data"]["task"]
    assert updated["completed"] is True
    assert updated["status"] == "completed"
    assert updated["completedAt"] is not None
    assert updated["priority"] == "high"
    assert (await _profile(client, alice))["tasksCompleted"] == 1


async def test_update_ignores_fields_outside_the_patch(client: AsyncClient, alice, bob) -> None:
    task = await _create_task(client, alice)

    response = await client.put(
        f"{API}/tasks/{task['id']}",
        headers=alice["headers"],
        json={"title": "Renamed", "ownerId": bob["user"]["id"], "id": "665f1c2e8b3e4a0012345678"},
    )

    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["data"]["task"]
    assert updated["title"] == "Renamed"
    assert updated["ownerId"] == alice["user"]["id"]
    assert updated["id"] == task["id"]


async def test_update_rejects_invalid_enum(client: AsyncClient, alice) -> None:
    task = await _create_task(client, alice)

    response = await client.put(
        f"{API}/tasks/{task['id']}",
        headers=alice["headers"],
        json={"priority": "urgent"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "validation_error"


async def test_star_toggles_flag(client: AsyncClient, alice) -> None:
    task = await _create_task(client, alice)
    star_url = f"{API}/tasks/{task['id']}/star"

    starred = (await client.patch(star_url, headers=alice["headers"])).json()
    assert starred["message"] == "Task starred/unstarred successfully"
    assert starred["data"]["task"]["starred"] is True
    assert (await _stats(client, alice))["starred"] == 1

    unstarred = (await client.patch(star_url, headers=alice["headers"])).json()
    assert unstarred["data"]["task"]["starred"] is False


async def test_delete_task_removes_it(client: AsyncClient, alice) -> None:
    task = await _create_task(client, alice)

    deleted = await client.delete(f"{API}/tasks/{task['id']}", headers=alice["headers"])
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json()["message"] == "Task deleted successfully"

    missing = await client.get(f"{API}/tasks/{task['id']}", headers=alice["headers"])
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert (await _profile(client, alice))["tasksActive"] == 0


async def test_list_filters_and_limit(client: AsyncClient, alice) -> None:
    await _create_task(client, alice, title="Quarterly REPORT", priority="high")
    done = await _create_task(client, alice, title="Design review", category="Design")
    await client.patch(f"{API}/tasks/{done['id']}/toggle", headers=alice["headers"])
    newest = await _create_task(client, alice, title="Budget sheet", priority="low")

    async def titles(**params: Any) -> list[str]:
        response = await client.get(f"{API}/tasks", headers=alice["headers"], params=params)
        assert response.status_code == status.HTTP_200_OK
        return [task["title"] for task in response.json()["data"]["tasks"]]

    assert await titles() == ["Budget sheet", "Design review", "Quarterly REPORT"]
    assert await titles(completed="true") == ["Design review"]
    assert await titles(priority="high") == ["Quarterly REPORT"]
    assert await titles(category="Design") == ["Design review"]
    assert await titles(search="report") == ["Quarterly REPORT"]
    assert await titles(search="(") == []
    assert await titles(limit=1) == [newest["title"]]


async def test_list_rejects_out_of_range_limit(client: AsyncClient, alice) -> None:
    response = await client.get(f"{API}/tasks", headers=alice["headers"], params={"limit": 0})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


async def test_statistics_count_overdue_and_pending(client: AsyncClient, alice) -> None:
    await _create_task(client, alice, title="Late", dueDate=iso_in(days=-1))
    await _create_task(client, alice, title="Soon", starred=True)
    done = await _create_task(client, alice, title="Late but done", dueDate=iso_in(days=-2))
    await client.patch(f"{API}/tasks/{done['id']}/toggle", headers=alice["headers"])

    assert await _stats(client, alice) == {
        "total": 3,
        "completed": 1,
        "pending": 2,
        "starred": 1,
        "overdue": 1,
    }


async def test_priority_breakdown(client: AsyncClient, alice) -> None:
    first = await _create_task(client, alice, priority="high")
    await _create_task(client, alice, priority="high")
    await _create_task(client, alice, priority="low")
    await client.patch(f"{API}/tasks/{first['id']}/toggle", headers=alice["headers"])

    response = await client.get(f"{API}/tasks/priorities", headers=alice["headers"])

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["priorities"] == [
        {"priority": "high", "count": 2, "completed": 1},
        {"priority": "low", "count": 1, "completed": 0},
    ]


async def test_upcoming_lists_open_tasks_in_window_soonest_first(client: AsyncClient, alice) -> None:
    await _create_task(client, alice, title="In three days", dueDate=iso_in(days=3))
    await _create_task(client, alice, title="Tomorrow", dueDate=iso_in(days=1))
    await _create_task(client, alice, title="Next fortnight", dueDate=iso_in(days=10))
    await _create_task(client, alice, title="Yesterday", dueDate=iso_in(days=-1))
    done = await _create_task(client, alice, title="Done soon", dueDate=iso_in(days=2))
    await client.patch(f"{API}/tasks/{done['id']}/toggle", headers=alice["headers"])

    default_window = await client.get(f"{API}/tasks/upcoming", headers=alice["headers"])
    wide_window = await client.get(f"{API}/tasks/upcoming", headers=alice["headers"], params={"days": 14})

    assert [task["title"] for task in default_window.json()["data"]["tasks"]] == [
        "Tomorrow",
        "In three days",
    ]
    assert [task["title"] for task in wide_window.json()["data"]["tasks"]] == [
        "Tomorrow",
        "In three days",
        "Next fortnight",
    ]


async def test_counters_follow_assignee_completion(client: AsyncClient, alice) -> None:
    tasks = [await _create_task(client, alice, title=f"Task {index}") for index in range(4)]
    for task in tasks[:3]:
        await client.patch(f"{API}/tasks/{task['id']}/toggle", headers=alice["headers"])

    profile = await _profile(client, alice)
    assert profile["tasksCompleted"] == 3
    assert profile["tasksActive"] == 1


async def test_reassignment_moves_counters_between_users(client: AsyncClient, alice, bob) -> None:
    task = await _create_task(client, alice)
    assert (await _profile(client, alice))["tasksActive"] == 1

    response = await client.put(
        f"{API}/tasks/{task['id']}",
        headers=alice["headers"],
        json={"assigneeId": bob["user"]["id"]},
    )
    assert response.status_code == status.HTTP_200_OK

    assert (await _profile(client, alice))["tasksActive"] == 0
    bob_profile = await _profile(client, bob)
    assert bob_profile["tasksActive"] == 1
    assert bob_profile["tasksCompleted"] == 0


async def test_end_to_end_task_lifecycle(client: AsyncClient, alice) -> None:
    login = await client.post(
        f"{API}/auth/login",
        json={"email": "alice@example.com", "password": "secret123"},
    )
    session = {
        "user": login.json()["data"]["user"],
        "headers": {"Authorization": f"Bearer {login.json()['data']['token']}"},
    }

    task = await _create_task(client, session, title="Ship release", dueDate=iso_in(days=1))
    assert await _stats(client, session) == {
        "total": 1,
        "completed": 0,
        "pending": 1,
        "starred": 0,
        "overdue": 0,
    }

    toggled = await client.patch(f"{API}/tasks/{task['id']}/toggle", headers=session["headers"])
    assert toggled.json()["data"]["task"]["completed"] is True
    assert await _stats(client, session) == {
        "total": 1,
        "completed": 1,
        "pending": 0,
        "starred": 0,
        "overdue": 0,
    }

    profile = await _profile(client, session)
    assert profile["tasksCompleted"] == 1
    assert profile["tasksActive"] == 0


async def test_malformed_task_id_is_not_found(client: AsyncClient, alice) -> None:
    headers = alice["headers"]
    responses = [
        await client.get(f"{API}/tasks/not-an-id", headers=headers),
        await client.put(f"{API}/tasks/not-an-id", headers=headers, json={"title": "x"}),
        await client.patch(f"{API}/tasks/not-an-id/toggle", headers=headers),
        await client.delete(f"{API}/tasks/not-an-id", headers=headers),
    ]
    for response in responses:
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "not_found"


async def test_task_may_only_link_to_the_callers_project(client: AsyncClient, alice, bob) -> None:
    project_body = {
        "name": "Launch",
        "description": "Ship it.",
        "deadline": iso_in(days=10),
        "projectManager": "Alice Johnson",
    }
    own = await client.post(f"{API}/projects/create", headers=alice["headers"], json=project_body)
    foreign = await client.post(f"{API}/projects/create", headers=bob["headers"], json=project_body)
    own_id = own.json()["data"]["project"]["id"]
    foreign_id = foreign.json()["data"]["project"]["id"]

    linked = await _create_task(client, alice, projectId=own_id)
    assert linked["projectId"] == own_id

    for project_id in (foreign_id, "not-an-id"):
        response = await client.post(
            f"{API}/tasks",
            headers=alice["headers"],
            json={
                "title": "Sneaky",
                "dueDate": iso_in(days=1),
                "assigneeId": alice["user"]["id"],
                "projectId": project_id,
            },
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "validation_error"
        assert response.json()["message"] == "Project not found."

    listed = await client.get(f"{API}/tasks", headers=alice["headers"])
    assert [task["title"] for task in listed.json()["data"]["tasks"]] == ["Write report"]
