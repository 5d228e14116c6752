"""User, explore user and role endpoints."""
from datetime import timedelta
import pytest
from httpx import AsyncClient
from apps.identity.models import ExploreUserAccess, User
from framework.repository.entity import as_utc
from framework.security import ADMIN_ROLE_ID, EXPLORE_ROLE_ID, create_access_token, token_claims

USERS = "/api/v1/users"
ROLES = "/api/v1/roles"


def user_payload(email: str, **overrides) -> dict:
    payload = {"name": "Nora", "email": email, "password": "secret123", "system_role_id": 3}
    payload.update(overrides)
    return payload


class TestUsers:

    async def test_create_and_get(self, client: AsyncClient, admin_headers):
        response = await client.post(f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com"))
        assert response.status_code == 200
        created = response.json()["data"]
        assert created["is_email_verified"] is False
        assert "password" not in created

        response = await client.get(f"{USERS}/{created['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "nora@accredigo.com"

    async def test_duplicate_email_is_conflict(self, client: AsyncClient, admin_headers):
        response = await client.post(f"{USERS}/", headers=admin_headers, json=user_payload("ADMIN@accredigo.com"))
        assert response.status_code == 409
        assert response.json()["state"] == "conflict"

    async def test_unknown_role(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{USERS}/", headers=admin_headers, json=user_payload("x@accredigo.com", system_role_id=42)
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("email", [
        "not-an-email", "a b@c.d", "x@@y.z", "x@.", "<script>@evil.com", "a@b..c",
    ])
    async def test_invalid_email(self, client: AsyncClient, admin_headers, email):
        response = await client.post(f"{USERS}/", headers=admin_headers, json=user_payload(email))
        assert response.status_code == 422

    async def test_only_admin_manages_users(self, client: AsyncClient, admin_headers, staff_headers):
        response = await client.post(
            f"{USERS}/", headers=staff_headers, json=user_payload("x@accredigo.com", system_role_id=1)
        )
        assert response.status_code == 403

        created = (await client.post(
            f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com")
        )).json()["data"]
        update = {"name": "Nora", "email": "nora@accredigo.com", "system_role_id": 1}
        assert (await client.put(f"{USERS}/{created['id']}", headers=staff_headers, json=update)).status_code == 403
        assert (await client.delete(f"{USERS}/{created['id']}", headers=staff_headers)).status_code == 403

    async def test_explore_user_cannot_promote_self(self, client: AsyncClient, roles, uow_factory):
        data = (await client.post(f"{USERS}/explore", json={
            "name": "Eve", "email": "eve@accredigo.com", "password": "secret123",
        })).json()["data"]
        token = create_access_token(token_claims(data["user_id"], data["email"], data["name"], EXPLORE_ROLE_ID))
        headers = {"Authorization": f"Bearer {token}"}

        update = {"name": "Eve", "email": "eve@accredigo.com", "system_role_id": ADMIN_ROLE_ID}
        response = await client.put(f"{USERS}/{data['user_id']}", headers=headers, json=update)
        assert response.status_code == 403

        unit = uow_factory()
        try:
            user = await unit.get_repository(User).get_required(data["user_id"])
        finally:
            await unit.dispose()
        assert user.system_role_id == EXPLORE_ROLE_ID

    async def test_get_missing_user(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{USERS}/nope", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["state"] == "not_found"

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get(f"{USERS}/")
        assert response.status_code == 401

    async def test_update(self, client: AsyncClient, admin_headers):
        created = (await client.post(
            f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com")
        )).json()["data"]

        update = {"name": "Nora B.", "email": "nora.b@accredigo.com", "system_role_id": 2}
        response = await client.put(f"{USERS}/{created['id']}", headers=admin_headers, json=update)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Nora B."
        assert data["email"] == "nora.b@accredigo.com"
        assert data["system_role_id"] == 2

    async def test_update_to_taken_email(self, client: AsyncClient, admin_headers):
        created = (await client.post(
            f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com")
        )).json()["data"]
        update = {"name": "Nora", "email": "admin@accredigo.com", "system_role_id": 3}
        response = await client.put(f"{USERS}/{created['id']}", headers=admin_headers, json=update)
        assert response.status_code == 409

    async def test_delete_is_soft(self, client: AsyncClient, admin_headers):
        created = (await client.post(
            f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com")
        )).json()["data"]

        assert (await client.delete(f"{USERS}/{created['id']}", headers=admin_headers)).status_code == 200
        assert (await client.get(f"{USERS}/{created['id']}", headers=admin_headers)).status_code == 404
        assert (await client.delete(f"{USERS}/{created['id']}", headers=admin_headers)).status_code == 404

        # the address stays reserved by the deleted account
        response = await client.post(f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com"))
        assert response.status_code == 409

    async def test_paged_list(self, client: AsyncClient, admin_headers):
        for i in range(3):
            await client.post(f"{USERS}/", headers=admin_headers, json=user_payload(f"user{i}@accredigo.com"))

        response = await client.get(f"{USERS}/", headers=admin_headers, params={"pageNumber": 1, "pageSize": 2})
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["totalCount"] == 4
        assert body["totalPages"] == 2
        assert body["hasNextPage"] is True
        assert body["hasPreviousPage"] is False

    async def test_list_filters(self, client: AsyncClient, admin_headers):
        await client.post(f"{USERS}/", headers=admin_headers, json=user_payload("nora@accredigo.com"))

        body = (await client.get(f"{USERS}/", headers=admin_headers, params={"search": "nora"})).json()
        assert [u["email"] for u in body["data"]] == ["nora@accredigo.com"]

        body = (await client.get(f"{USERS}/", headers=admin_headers, params={"systemRoleId": 1})).json()
        assert [u["id"] for u in body["data"]] == ["admin-1"]

        body = (await client.get(
            f"{USERS}/", headers=admin_headers, params={"sortBy": "email", "descending": "false"}
        )).json()
        assert [u["email"] for u in body["data"]] == ["admin@accredigo.com", "nora@accredigo.com"]

    async def test_unknown_sort_field(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{USERS}/", headers=admin_headers, params={"sortBy": "password"})
        assert response.status_code == 400


class TestExploreUsers:

    async def test_sign_up_starts_trial(self, client: AsyncClient, roles, staff_headers, uow_factory):
        response = await client.post(f"{USERS}/explore", json={
            "name": "Explorer", "email": "explorer@accredigo.com", "password": "secret123",
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_trial_active"] is True
        assert data["email"] == "explorer@accredigo.com"

        unit = uow_factory()
        try:
            access = await unit.get_repository(ExploreUserAccess).get_required(data["user_id"])
        finally:
            await unit.dispose()
        assert as_utc(access.trial_end) - as_utc(access.trial_start) == timedelta(days=14)

        response = await client.get(f"{USERS}/explore/{data['user_id']}", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Explorer"

    async def test_unknown_explore_user(self, client: AsyncClient, staff_headers):
        response = await client.get(f"{USERS}/explore/nope", headers=staff_headers)
        assert response.status_code == 404


class TestRoles:

    async def test_list_seeded_roles(self, client: AsyncClient, staff_headers):
        response = await client.get(f"{ROLES}/", headers=staff_headers)
        assert response.status_code == 200
        assert [role["id"] for role in response.json()["data"]] == [1, 2, 3, 4]

    async def test_only_admin_creates_roles(self, client: AsyncClient, staff_headers):
        response = await client.post(f"{ROLES}/", headers=staff_headers, json={"name": "Auditor"})
        assert response.status_code == 403
        assert response.json()["state"] == "forbidden"

    async def test_create_role_takes_next_id(self, client: AsyncClient, admin_headers):
        response = await client.post(f"{ROLES}/", headers=admin_headers, json={"name": "Auditor"})
        assert response.status_code == 200
        assert response.json()["data"]["id"] == 5

        response = await client.post(f"{ROLES}/", headers=admin_headers, json={"name": "Auditor"})
        assert response.status_code == 409

    async def test_rename_role(self, client: AsyncClient, admin_headers):
        response = await client.put(f"{ROLES}/3", headers=admin_headers, json={"name": "Facility staff"})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Facility staff"

        response = await client.put(f"{ROLES}/3", headers=admin_headers, json={"name": "Admin"})
        assert response.status_code == 409

    async def test_missing_role(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{ROLES}/99", headers=admin_headers)
        assert response.status_code == 404

    async def test_grant_permission(self, client: AsyncClient, admin_headers):
        response = await client.post(f"{ROLES}/permissions", headers=admin_headers, json={
            "code": "sessions.read", "description": "Read gap analysis sessions",
        })
        assert response.status_code == 200
        permission_id = response.json()["data"]["id"]

        response = await client.post(f"{ROLES}/permissions", headers=admin_headers, json={"code": "sessions.read"})
        assert response.status_code == 409

        grant = {"permission_id": permission_id}
        assert (await client.post(f"{ROLES}/2/permissions", headers=admin_headers, json=grant)).status_code == 200
        assert (await client.post(f"{ROLES}/2/permissions", headers=admin_headers, json=grant)).status_code == 409

        response = await client.get(f"{ROLES}/2", headers=admin_headers)
        assert [p["code"] for p in response.json()["data"]["permissions"]] == ["sessions.read"]

        response = await client.get(f"{ROLES}/permissions", headers=admin_headers)
        assert [p["id"] for p in response.json()["data"]] == [permission_id]
