"""任务接口测试 -- 创建 / 编辑 / 进度 / 删除 / 搜索"""

import pytest
from httpx import AsyncClient


async def _create(client: AsyncClient, **fields) -> dict:
    payload = {"category_id": "cat-001", **fields}
    resp = await client.post("/api/tasks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["task"]


class TestCreateTask:
    async def test_create_defaults(self, member_client: AsyncClient):
        task = await _create(member_client)

        assert task["id"].startswith("task-")
        assert task["title"] == "Untitled Task"
        assert task["assigned_to"] == ["Mr. Anmol"]
        assert task["status"] == "not-started"
        assert task["progress"] == 0
        assert task["updates"] == []

    async def test_create_unknown_category(self, member_client: AsyncClient):
        resp = await member_client.post("/api/tasks", json={"category_id": "cat-404"})

        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    async def test_create_requires_login(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"category_id": "cat-001"})

        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHENTICATED"

    async def test_persisted(self, member_client: AsyncClient, test_app):
        task = await _create(member_client, title="Confirm caterer")
        await test_app.state.coordinator.drain()

        stored = await test_app.state.store_group.task_store.get(task["id"])
        assert stored.title == "Confirm caterer"


class TestProgress:
    async def test_quick_update(self, member_client: AsyncClient):
        task = await _create(member_client)

        resp = await member_client.post(f"/api/tasks/{task['id']}/quick-update")

        assert resp.status_code == 200
        updated = resp.json()["task"]
        assert updated["progress"] == 10
        assert updated["status"] == "in-progress"
        assert updated["updates"][0]["message"] == "Progress updated from 0% to 10%."
        assert updated["updates"][0]["user"] == "Mr. Anmol"

    async def test_manual_progress(self, member_client: AsyncClient):
        task = await _create(member_client)

        resp = await member_client.post(
            f"/api/tasks/{task['id']}/progress",
            json={"progress": 100, "message": "Done and dusted"},
        )

        updated = resp.json()["task"]
        assert updated["status"] == "completed"
        assert updated["updates"][0]["message"] == "Done and dusted"

    @pytest.mark.parametrize("progress", [101, -5, "half", None, 12.5])
    async def test_manual_progress_invalid(self, member_client: AsyncClient, progress):
        task = await _create(member_client)

        resp = await member_client.post(
            f"/api/tasks/{task['id']}/progress", json={"progress": progress}
        )

        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
        detail = (await member_client.get(f"/api/tasks/{task['id']}")).json()["task"]
        assert detail["progress"] == 0
        assert detail["updates"] == []

    async def test_quick_update_unknown_task(self, member_client: AsyncClient):
        resp = await member_client.post("/api/tasks/task-404/quick-update")
        assert resp.status_code == 404


class TestEditAndDelete:
    async def test_patch_only_given_fields(self, member_client: AsyncClient):
        task = await _create(member_client, title="Old", description="keep me")
        await member_client.post(f"/api/tasks/{task['id']}/quick-update")

        resp = await member_client.patch(f"/api/tasks/{task['id']}", json={"title": "New"})

        edited = resp.json()["task"]
        assert edited["title"] == "New"
        assert edited["description"] == "keep me"
        assert edited["progress"] == 10
        assert len(edited["updates"]) == 1

    async def test_move_to_other_category(self, member_client: AsyncClient):
        task = await _create(member_client)

        resp = await member_client.patch(
            f"/api/tasks/{task['id']}", json={"category_id": "cat-005"}
        )

        assert resp.status_code == 200
        detail = (await member_client.get(f"/api/tasks/{task['id']}")).json()
        assert detail["category"]["id"] == "cat-005"

    @pytest.mark.parametrize("field", ["description", "assigned_to", "due_date"])
    async def test_patch_null_required_field_is_422(self, member_client: AsyncClient, field):
        task = await _create(member_client, description="keep me")

        resp = await member_client.patch(f"/api/tasks/{task['id']}", json={field: None})

        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
        detail = (await member_client.get(f"/api/tasks/{task['id']}")).json()["task"]
        assert detail[field] == task[field]

    async def test_delete_forbidden_for_member(self, member_client: AsyncClient):
        task = await _create(member_client)

        resp = await member_client.delete(f"/api/tasks/{task['id']}")

        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "FORBIDDEN"
        assert (await member_client.get(f"/api/tasks/{task['id']}")).status_code == 200

    async def test_delete_as_super_admin(self, admin_client: AsyncClient):
        task = await _create(admin_client)

        resp = await admin_client.delete(f"/api/tasks/{task['id']}")

        assert resp.status_code == 204
        assert (await admin_client.get(f"/api/tasks/{task['id']}")).status_code == 404


class TestListTasks:
    async def test_search_and_stats(self, member_client: AsyncClient):
        await _create(member_client, title="Book auditorium")
        second = await _create(member_client, title="Print banners")
        await member_client.post(f"/api/tasks/{second['id']}/progress", json={"progress": 100})

        everything = (await member_client.get("/api/tasks")).json()
        assert everything["stats"]["total"] == 2
        assert everything["stats"]["completed"] == 1

        found = (await member_client.get("/api/tasks", params={"q": "AUDITORIUM"})).json()
        assert [t["title"] for t in found["tasks"]] == ["Book auditorium"]

    async def test_mine(self, member_client: AsyncClient):
        await _create(member_client, title="Mine")
        await _create(member_client, title="Theirs", assigned_to=["Lalit Kumar"])

        mine = (await member_client.get("/api/tasks", params={"mine": "true"})).json()

        assert [t["title"] for t in mine["tasks"]] == ["Mine"]

    async def test_mine_requires_login(self, client: AsyncClient):
        resp = await client.get("/api/tasks", params={"mine": "true"})
        assert resp.status_code == 401
