"""端到端：登录 -> 建分类 / 任务 -> 推进进度 -> 看板与洞察反映变化"""

from httpx import AsyncClient


class TestEventProgressFlow:
    async def test_full_flow(self, client: AsyncClient):
        # 未登录无法写入
        resp = await client.post("/api/tasks", json={"category_id": "cat-001"})
        assert resp.status_code == 401

        resp = await client.post("/api/session", json={"user_id": "3", "password": "password123"})
        assert resp.status_code == 200

        category = (
            await client.post(
                "/api/categories",
                json={"name": "Hospitality", "phase": "during-event"},
            )
        ).json()["category"]

        first = (
            await client.post(
                "/api/tasks", json={"category_id": category["id"], "title": "Book rooms"}
            )
        ).json()["task"]
        second = (
            await client.post(
                "/api/tasks", json={"category_id": category["id"], "title": "Arrange cabs"}
            )
        ).json()["task"]

        for _ in range(3):
            await client.post(f"/api/tasks/{first['id']}/quick-update")
        await client.post(
            f"/api/tasks/{second['id']}/progress",
            json={"progress": 50, "message": "Vendor shortlisted"},
        )

        detail = (await client.get(f"/api/categories/{category['id']}")).json()
        assert detail["category"]["progress"] == 40
        assert detail["category"]["status"] == "in-progress"
        assert detail["stats"]["in_progress"] == 2
        assert [a["message"] for a in detail["recent_activity"]][0] == "Vendor shortlisted"

        dashboard = (await client.get("/api/dashboard")).json()
        during = next(p for p in dashboard["phases"] if p["phase"] == "during-event")
        # 3 个 during-event 分类：0, 0, 40
        assert round(during["progress"], 2) == 13.33
        assert dashboard["overall_progress"] == 3
        assert dashboard["summary"]["total_tasks"] == 2
        assert dashboard["summary"]["active_team"] == 1

        insights = (await client.post("/api/insights")).json()
        assert insights["available"] is True

        resp = await client.delete("/api/session")
        assert resp.status_code == 204
        resp = await client.post(f"/api/tasks/{first['id']}/quick-update")
        assert resp.status_code == 401

    async def test_member_cannot_delete_admin_can(self, client: AsyncClient):
        await client.post("/api/session", json={"user_id": "3", "password": "password123"})
        task = (await client.post("/api/tasks", json={"category_id": "cat-002"})).json()["task"]

        assert (await client.delete(f"/api/tasks/{task['id']}")).status_code == 403

        await client.post("/api/session", json={"user_id": "9", "password": "admin123"})
        assert (await client.delete(f"/api/tasks/{task['id']}")).status_code == 204

        listed = (await client.get("/api/tasks")).json()
        assert listed["tasks"] == []
