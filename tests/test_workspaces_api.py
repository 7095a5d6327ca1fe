"""Workspace settings, membership and role management."""
import pytest


async def change_role(api, token, user_id, role):
    return await api.client.patch(
        f"/api/workspaces/members/{user_id}/role", json={"role": role}, headers=api.auth(token)
    )


class TestWorkspaceRead:

    @pytest.mark.asyncio
    async def test_current_workspace(self, api, acme):
        response = await api.client.get("/api/workspaces/current", headers=api.auth(acme.bob.token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == "acme"
        assert data["plan"] == "free"
        assert data["settings"] == {"allow_invites": True, "max_members": 10}
        assert data["owner"]["id"] == acme.owner.id
        member_ids = {m["id"] for m in data["members"]}
        assert member_ids == {acme.owner.id, acme.bob.id, acme.carol.id, acme.admin.id}

    @pytest.mark.asyncio
    async def test_members_are_scoped(self, api, acme, globex):
        response = await api.client.get("/api/workspaces/members", headers=api.auth(globex.member.token))

        assert response.json()["count"] == 2
        assert {m["email"] for m in response.json()["data"]} == {"gina@globex.com", "hank@globex.com"}


class TestCreateMember:

    @pytest.mark.asyncio
    async def test_member_cannot_add_members(self, api, acme):
        response = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Eve", "email": "eve@x.com", "password": "secret1"},
            headers=api.auth(acme.bob.token),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_adds_member_but_not_admin(self, api, acme):
        member = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Eve", "email": "eve@x.com", "password": "secret1"},
            headers=api.auth(acme.admin.token),
        )
        assert member.status_code == 201
        assert member.json()["data"]["role"] == "member"

        admin = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Fay", "email": "fay@x.com", "password": "secret1", "role": "admin"},
            headers=api.auth(acme.admin.token),
        )
        assert admin.status_code == 403

    @pytest.mark.asyncio
    async def test_cannot_create_owner(self, api, acme):
        response = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Eve", "email": "eve@x.com", "password": "secret1", "role": "owner"},
            headers=api.auth(acme.owner.token),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_blank_member_name_rejected(self, api, acme):
        response = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "    ", "email": "eve@x.com", "password": "secret1"},
            headers=api.auth(acme.owner.token),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_email(self, api, acme, globex):
        response = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Bob Two", "email": "hank@globex.com", "password": "secret1"},
            headers=api.auth(acme.owner.token),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Email already exists"

    @pytest.mark.asyncio
    async def test_admins_blocked_when_invites_disabled(self, api, acme):
        await api.client.put(
            "/api/workspaces/settings", json={"settings": {"allowInvites": False}}, headers=api.auth(acme.owner.token)
        )
        response = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Eve", "email": "eve@x.com", "password": "secret1"},
            headers=api.auth(acme.admin.token),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_member_limit(self, api, acme):
        await api.client.put(
            "/api/workspaces/settings", json={"settings": {"maxMembers": 4}}, headers=api.auth(acme.owner.token)
        )
        response = await api.client.post(
            "/api/workspaces/create-member",
            json={"name": "Eve", "email": "eve@x.com", "password": "secret1"},
            headers=api.auth(acme.owner.token),
        )
        assert response.status_code == 400
        assert "limit" in response.json()["message"]


class TestSettings:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who", ["admin", "bob"])
    async def test_only_owner_updates_settings(self, api, acme, who):
        response = await api.client.put(
            "/api/workspaces/settings", json={"name": "Hacked"}, headers=api.auth(getattr(acme, who).token)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_owner_updates_settings(self, api, acme):
        response = await api.client.put(
            "/api/workspaces/settings",
            json={"name": "Acme Labs", "settings": {"allow_invites": False, "max_members": 25}},
            headers=api.auth(acme.owner.token),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Acme Labs"
        assert data["slug"] == "acme"
        assert data["settings"] == {"allow_invites": False, "max_members": 25}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["   ", " x "])
    async def test_blank_name_rejected(self, api, acme, name):
        response = await api.client.put(
            "/api/workspaces/settings", json={"name": name}, headers=api.auth(acme.owner.token)
        )
        assert response.status_code == 400

        current = await api.client.get("/api/workspaces/current", headers=api.auth(acme.owner.token))
        assert current.json()["data"]["name"] == "Acme"

    @pytest.mark.asyncio
    async def test_max_members_bounds(self, api, acme):
        response = await api.client.put(
            "/api/workspaces/settings", json={"settings": {"max_members": 0}}, headers=api.auth(acme.owner.token)
        )
        assert response.status_code == 400


class TestRoleChanges:

    @pytest.mark.asyncio
    async def test_owner_promotes_member_to_admin(self, api, acme):
        response = await change_role(api, acme.owner.token, acme.bob.id, "admin")

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"
        assert response.json()["message"] == "User role updated to admin"

    @pytest.mark.asyncio
    async def test_admin_cannot_promote_to_admin(self, api, acme):
        response = await change_role(api, acme.admin.token, acme.bob.id, "admin")

        assert response.status_code == 403
        assert response.json()["message"] == "Only workspace owner can promote users to admin"

    @pytest.mark.asyncio
    async def test_admin_can_demote_to_member(self, api, acme):
        await change_role(api, acme.owner.token, acme.bob.id, "admin")
        response = await change_role(api, acme.admin.token, acme.bob.id, "member")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_member_cannot_change_roles(self, api, acme):
        response = await change_role(api, acme.bob.token, acme.carol.id, "member")
        assert response.status_code == 403

    @pytest.mark.asyncio
    @pytest.mark.parametrize("who", ["owner", "admin"])
    @pytest.mark.parametrize("role", ["member", "admin"])
    async def test_owner_role_cannot_be_changed(self, api, acme, who, role):
        response = await change_role(api, getattr(acme, who).token, acme.owner.id, role)

        assert response.status_code == 403
        assert response.json()["message"] == "Cannot change owner role"

    @pytest.mark.asyncio
    async def test_invalid_role(self, api, acme):
        response = await change_role(api, acme.owner.token, acme.bob.id, "owner")

        assert response.status_code == 400
        assert response.json()["message"] == 'Invalid role. Must be "member" or "admin"'

    @pytest.mark.asyncio
    async def test_foreign_user_not_found(self, api, acme, globex):
        response = await change_role(api, acme.owner.token, globex.member.id, "member")

        assert response.status_code == 404
        assert response.json()["message"] == "User not found in this workspace"


class TestDeactivation:

    @pytest.mark.asyncio
    async def test_deactivate_member(self, api, acme):
        response = await api.client.delete(
            f"/api/workspaces/members/{acme.bob.id}", headers=api.auth(acme.admin.token)
        )
        assert response.status_code == 200

        members = await api.client.get("/api/workspaces/members", headers=api.auth(acme.owner.token))
        assert acme.bob.id not in {m["id"] for m in members.json()["data"]}

        current = await api.client.get("/api/workspaces/current", headers=api.auth(acme.owner.token))
        assert acme.bob.id not in {m["id"] for m in current.json()["data"]["members"]}

    @pytest.mark.asyncio
    async def test_cannot_deactivate_owner(self, api, acme):
        response = await api.client.delete(
            f"/api/workspaces/members/{acme.owner.id}", headers=api.auth(acme.admin.token)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_cannot_deactivate_admin(self, api, acme):
        await change_role(api, acme.owner.token, acme.carol.id, "admin")
        response = await api.client.delete(
            f"/api/workspaces/members/{acme.carol.id}", headers=api.auth(acme.admin.token)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_cannot_deactivate_self(self, api, acme):
        response = await api.client.delete(
            f"/api/workspaces/members/{acme.admin.id}", headers=api.auth(acme.admin.token)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_deactivated_user_cannot_be_assigned(self, api, acme):
        await api.client.delete(f"/api/workspaces/members/{acme.carol.id}", headers=api.auth(acme.owner.token))
        response = await api.create_task(acme.bob.token, assignedTo=acme.carol.id)
        assert response.status_code == 400
