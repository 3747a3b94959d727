from __future__ import annotations

from typing import Any

from fastapi import status
from helpers import API, iso_in
from httpx import AsyncClient


async def _create_project(client: AsyncClient, owner: dict[str, Any], /, **overrides: Any) -> dict[str, Any]:
    body = {
        "name": "Website relaunch",
        "description": "Replace the marketing site.",
        "deadline": iso_in(days=20),
        "projectManager": "Alice Johnson",
        **overrides,
    }
    response = await client.post(f"{API}/projects/create", headers=owner["headers"], json=body)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]["project"]


async def test_create_project_applies_defaults(client: AsyncClient, alice) -> None:
    project = await _create_project(client, alice)

    assert project["status"] == "planning"
    assert project["priority"] == "medium"
    assert project["category"] == "Development"
    assert project["ownerId"] == alice["user"]["id"]
    assert project["completedAt"] is None
    assert project["team"] == []
    assert project["taskCount"] == 0
    assert project["completedTaskCount"] == 0
    assert project["progress"] == 0
    assert project["isOverdue"] is False


async def test_create_project_requires_deadline_and_manager(client: AsyncClient, alice) -> None:
    missing_deadline = await client.post(
        f"{API}/projects/create",
        headers=alice["headers"],
        json={"name": "No deadline", "description": "x", "projectManager": "Alice"},
    )
    missing_manager = await client.post(
        f"{API}/projects/create",
        headers=alice["headers"],
        json={"name": "No manager", "description": "x", "deadline": iso_in(days=5)},
    )

    for response, field in ((missing_deadline, "deadline"), (missing_manager, "project_manager")):
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        payload = response.json()
        assert payload["code"] == "validation_error"
        assert payload["details"]["missing"] == [field]

    listed = await client.get(f"{API}/projects", headers=alice["headers"])
    assert listed.json()["data"]["projects"] == []


async def test_create_project_resolves_and_deduplicates_team(client: AsyncClient, alice, bob) -> None:
    project = await _create_project(
        client,
        alice,
        team=["bob@example.com", "Carol", "carol", bob["user"]["id"]],
    )

    assert project["team"] == [
        {"userId": bob["user"]["id"], "name": "Bob Smith"},
        {"userId": None, "name": "Carol"},
    ]


async def test_team_add_is_idempotent_and_remove_ignores_absent(client: AsyncClient, alice, bob) -> None:
    project = await _create_project(client, alice)
    add_url = f"{API}/projects/{project['id']}/team/add"
    remove_url = f"{API}/projects/{project['id']}/team/remove"

    first = await client.post(add_url, headers=alice["headers"], json={"member": bob["user"]["id"]})
    second = await client.post(add_url, headers=alice["headers"], json={"member": "bob@example.com"})
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["message"] == "Team member added successfully"
    assert second.json()["data"]["project"]["team"] == [{"userId": bob["user"]["id"], "name": "Bob Smith"}]

    absent = await client.post(remove_url, headers=alice["headers"], json={"member": "Dana"})
    assert absent.status_code == status.HTTP_200_OK
    assert len(absent.json()["data"]["project"]["team"]) == 1

    removed = await client.post(remove_url, headers=alice["headers"], json={"member": "bob smith"})
    assert removed.json()["message"] == "Team member removed successfully"
    assert removed.json()["data"]["project"]["team"] == []


async def test_update_replaces_team_with_resolved_members(client: AsyncClient, alice, bob) -> None:
    project = await _create_project(client, alice, team=["Dana"])

    response = await client.put(
        f"{API}/projects/{project['id']}",
        headers=alice["headers"],
        json={"team": ["Carol", "bob@example.com", "carol", bob["user"]["id"]]},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["project"]["team"] == [
        {"userId": None, "name": "Carol"},
        {"userId": bob["user"]["id"], "name": "Bob Smith"},
    ]

    untouched = await client.put(
        f"{API}/projects/{project['id']}", headers=alice["headers"], json={"name": "Renamed"}
    )
    assert len(untouched.json()["data"]["project"]["team"]) == 2

    cleared = await client.put(f"{API}/projects/{project['id']}", headers=alice["headers"], json={"team": []})
    assert cleared.json()["data"]["project"]["team"] == []


async def test_team_member_payload_is_validated(client: AsyncClient, alice) -> None:
    project = await _create_project(client, alice)

    response = await client.post(
        f"{API}/projects/{project['id']}/team/add",
        headers=alice["headers"],
        json={},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


async def test_status_changes_keep_completed_at_in_lockstep(client: AsyncClient, alice) -> None:
    project = await _create_project(client, alice)
    url = f"{API}/projects/{project['id']}"

    completed = await client.put(url, headers=alice["headers"], json={"status": "completed"})
    assert completed.json()["message"] == "Project updated successfully"
    assert completed.json()["data"]["project"]["completedAt"] is not None

    reopened = await client.put(url, headers=alice["headers"], json={"status": "active"})
    assert reopened.json()["data"]["project"]["status"] == "active"
    assert reopened.json()["data"]["project"]["completedAt"] is None


async def test_update_can_clear_optional_fields(client: AsyncClient, alice) -> None:
    project = await _create_project(client, alice, budget="$10k", client="Acme")

    response = await client.put(
        f"{API}/projects/{project['id']}",
        headers=alice["headers"],
        json={"budget": None, "client": None, "name": None},
    )

    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["data"]["project"]
    assert updated["budget"] is None
    assert updated["client"] is None
    assert updated["name"] == "Website relaunch"


async def test_projects_are_scoped_to_their_owner(client: AsyncClient, alice, bob) -> None:
    project = await _create_project(client, alice)
    url = f"{API}/projects/{project['id']}"

    responses = [
        await client.get(url, headers=bob["headers"]),
        await client.put(url, headers=bob["headers"], json={"name": "Mine now"}),
        await client.post(f"{url}/team/add", headers=bob["headers"], json={"member": "Eve"}),
        await client.delete(url, headers=bob["headers"]),
    ]
    for response in responses:
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Project not found."

    still_there = await client.get(url, headers=alice["headers"])
    assert still_there.status_code == status.HTTP_200_OK


async def test_delete_project(client: AsyncClient, alice) -> None:
    project = await _create_project(client, alice)

    deleted = await client.delete(f"{API}/projects/{project['id']}", headers=alice["headers"])
    missing = await client.get(f"{API}/projects/{project['id']}", headers=alice["headers"])

    assert deleted.json()["message"] == "Project deleted successfully"
    assert missing.status_code == status.HTTP_404_NOT_FOUND


async def test_list_filters_and_search(client: AsyncClient, alice) -> None:
    await _create_project(client, alice, name="Mobile app", category="Mobile", status="active")
    await _create_project(client, alice, name="Audit", category="Security", projectManager="Dana Lee")

    async def names(**params: Any) -> list[str]:
        response = await client.get(f"{API}/projects", headers=alice["headers"], params=params)
        assert response.status_code == status.HTTP_200_OK
        return [project["name"] for project in response.json()["data"]["projects"]]

    assert await names() == ["Audit", "Mobile app"]
    assert await names(status="active") == ["Mobile app"]
    assert await names(category="Security") == ["Audit"]
    assert await names(search="dana") == ["Audit"]
    assert await names(search="mobile") == ["Mobile app"]


async def test_statistics_and_deadlines(client: AsyncClient, alice) -> None:
    await _create_project(client, alice, name="Late", deadline=iso_in(days=-3))
    await _create_project(client, alice, name="Soon", deadline=iso_in(days=5), status="active")
    await _create_project(client, alice, name="Later", deadline=iso_in(days=45))
    await _create_project(client, alice, name="Finished", deadline=iso_in(days=2), status="completed")

    stats = await client.get(f"{API}/projects/stats", headers=alice["headers"])
    assert stats.json()["data"]["stats"] == {
        "total": 4,
        "active": 1,
        "completed": 1,
        "planning": 2,
        "overdue": 1,
    }

    deadlines = await client.get(f"{API}/projects/deadlines", headers=alice["headers"])
    assert [project["name"] for project in deadlines.json()["data"]["projects"]] == ["Soon"]

    wide = await client.get(f"{API}/projects/deadlines", headers=alice["headers"], params={"days": 60})
    assert [project["name"] for project in wide.json()["data"]["projects"]] == ["Soon", "Later"]


async def test_malformed_project_id_is_not_found(client: AsyncClient, alice) -> None:
    headers = alice["headers"]
    fetched = await client.get(f"{API}/projects/not-an-id", headers=headers)
    added = await client.post(f"{API}/projects/not-an-id/team/add", headers=headers, json={"member": "Dana"})
    deleted = await client.delete(f"{API}/projects/not-an-id", headers=headers)

    for response in (fetched, added, deleted):
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Project not found."


async def test_status_breakdown_counts_own_projects(client: AsyncClient, alice, bob) -> None:
    await _create_project(client, alice, name="One", status="active")
    await _create_project(client, alice, name="Two", status="active")
    await _create_project(client, alice, name="Three")
    await _create_project(client, bob, name="Not mine", status="completed")

    response = await client.get(f"{API}/projects/statuses", headers=alice["headers"])

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["statuses"] == [
        {"status": "active", "count": 2},
        {"status": "planning", "count": 1},
    ]

    bobs = await client.get(f"{API}/projects/statuses", headers=bob["headers"])
    assert bobs.json()["data"]["statuses"] == [{"status": "completed", "count": 1}]
