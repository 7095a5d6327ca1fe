"""Comment API: author rules and tenant scoping."""
import pytest


async def add_comment(api, token, task_id, content="Looks good"):
    return await api.client.post(f"/api/comments/task/{task_id}", json={"content": content}, headers=api.auth(token))


class TestComments:

    @pytest.mark.asyncio
    async def test_add_and_list_oldest_first(self, api, acme, bob_task):
        first = await add_comment(api, acme.carol.token, bob_task["id"], "  first  ")
        await add_comment(api, acme.bob.token, bob_task["id"], "second")

        assert first.status_code == 201
        comment = first.json()["data"]
        assert comment["content"] == "first"
        assert comment["author_id"] == acme.carol.id
        assert comment["workspace_id"] == acme.workspace_id
        assert comment["is_edited"] is False

        listing = await api.client.get(f"/api/comments/task/{bob_task['id']}", headers=api.auth(acme.bob.token))
        assert listing.json()["count"] == 2
        assert [c["content"] for c in listing.json()["data"]] == ["first", "second"]

        count = await api.client.get(f"/api/comments/task/{bob_task['id']}/count", headers=api.auth(acme.bob.token))
        assert count.json()["data"] == {"count": 2}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   "])
    async def test_blank_content_rejected(self, api, acme, bob_task, content):
        response = await add_comment(api, acme.bob.token, bob_task["id"], content)

        assert response.status_code == 400
        assert response.json()["message"] == "Comment content is required"

    @pytest.mark.asyncio
    async def test_too_long_content_rejected(self, api, acme, bob_task):
        response = await add_comment(api, acme.bob.token, bob_task["id"], "x" * 1001)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_comment_on_missing_task(self, api, acme):
        response = await add_comment(api, acme.bob.token, 999999)
        assert response.status_code == 404
        assert response.json()["message"] == "Task not found"

    @pytest.mark.asyncio
    async def test_only_author_edits(self, api, acme, bob_task):
        comment = (await add_comment(api, acme.carol.token, bob_task["id"])).json()["data"]

        by_owner = await api.client.put(
            f"/api/comments/{comment['id']}", json={"content": "owner edit"}, headers=api.auth(acme.owner.token)
        )
        assert by_owner.status_code == 403
        assert by_owner.json()["message"] == "You can only edit your own comments"

        by_author = await api.client.put(
            f"/api/comments/{comment['id']}", json={"content": "edited"}, headers=api.auth(acme.carol.token)
        )
        assert by_author.status_code == 200
        data = by_author.json()["data"]
        assert data["content"] == "edited"
        assert data["is_edited"] is True
        assert data["edited_at"] is not None

    @pytest.mark.asyncio
    async def test_delete_rules(self, api, acme, bob_task):
        c1 = (await add_comment(api, acme.carol.token, bob_task["id"], "one")).json()["data"]
        c2 = (await add_comment(api, acme.carol.token, bob_task["id"], "two")).json()["data"]
        c3 = (await add_comment(api, acme.carol.token, bob_task["id"], "three")).json()["data"]

        # Bob owns the task, but not the comment
        by_bob = await api.client.delete(f"/api/comments/{c1['id']}", headers=api.auth(acme.bob.token))
        assert by_bob.status_code == 403

        for token, comment in ((acme.carol.token, c1), (acme.admin.token, c2), (acme.owner.token, c3)):
            response = await api.client.delete(f"/api/comments/{comment['id']}", headers=api.auth(token))
            assert response.status_code == 200

        count = await api.client.get(f"/api/comments/task/{bob_task['id']}/count", headers=api.auth(acme.bob.token))
        assert count.json()["data"]["count"] == 0


class TestCommentIsolation:

    @pytest.mark.asyncio
    async def test_foreign_task_comments_not_found(self, api, acme, globex, bob_task):
        await add_comment(api, acme.bob.token, bob_task["id"])
        headers = api.auth(globex.owner.token)

        listing = await api.client.get(f"/api/comments/task/{bob_task['id']}", headers=headers)
        assert listing.status_code == 404

        post = await add_comment(api, globex.owner.token, bob_task["id"], "intrusion")
        assert post.status_code == 404

    @pytest.mark.asyncio
    async def test_foreign_comment_update_and_delete_not_found(self, api, acme, globex, bob_task):
        comment = (await add_comment(api, acme.bob.token, bob_task["id"])).json()["data"]
        headers = api.auth(globex.owner.token)

        update = await api.client.put(f"/api/comments/{comment['id']}", json={"content": "x"}, headers=headers)
        delete = await api.client.delete(f"/api/comments/{comment['id']}", headers=headers)

        assert update.status_code == delete.status_code == 404
        assert update.json()["message"] == "Comment not found"
