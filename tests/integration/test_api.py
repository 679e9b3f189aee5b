"""Integration tests for the HTTP API."""

import uuid
from datetime import datetime

import pytest
from httpx import AsyncClient

PASSWORD = "TestPassword123"
API = "/api/v1"


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def register(client: AsyncClient, username: str) -> dict:
    response = await client.post(
        f"{API}/auth/register",
        json={
            "email": f"{username}@scefoundation.org",
            "username": username,
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthAPI:
    """Tests for /api/v1/auth endpoints."""

    @pytest.mark.asyncio
    async def test_register_verify_login_flow(self, client: AsyncClient):
        registered = await register(client, "newcomer")
        assert registered["account"]["role"] == "reader"
        assert registered["account"]["clearance"] == 1
        assert "password_hash" not in registered["account"]

        response = await client.post(
            f"{API}/auth/login",
            json={"email": "newcomer@scefoundation.org", "password": PASSWORD},
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "email_not_verified"

        response = await client.post(
            f"{API}/auth/verify-email",
            json={"token": registered["verification_token"]},
        )
        assert response.status_code == 200
        assert response.json()["email_verified"] is True

        response = await client.post(
            f"{API}/auth/login",
            json={"email": "newcomer@scefoundation.org", "password": PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"

        response = await client.get(
            f"{API}/auth/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert response.status_code == 200
        assert response.json()["username"] == "newcomer"

    @pytest.mark.asyncio
    async def test_register_missing_field(self, client: AsyncClient):
        response = await client.post(
            f"{API}/auth/register",
            json={"email": "x@scefoundation.org", "password": PASSWORD, "confirm_password": PASSWORD},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert "username" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient):
        await register(client, "original")
        response = await client.post(
            f"{API}/auth/register",
            json={
                "email": "original@scefoundation.org",
                "username": "copycat",
                "password": PASSWORD,
                "confirm_password": PASSWORD,
            },
        )
        assert response.status_code == 409
        assert response.json()["field"] == "email"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, reader):
        response = await client.post(
            f"{API}/auth/login",
            json={"email": reader.email, "password": "WrongPassword1"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_refresh_and_logout(self, client: AsyncClient, reader):
        login = await client.post(
            f"{API}/auth/login",
            json={"email": reader.email, "password": PASSWORD},
        )
        tokens = login.json()
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        response = await client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        rotated = response.json()["refresh_token"]

        response = await client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 401

        response = await client.post(f"{API}/auth/logout", headers=headers)
        assert response.status_code == 200

        response = await client.post(f"{API}/auth/refresh", json={"refresh_token": rotated})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get(f"{API}/auth/me")
        assert response.status_code == 401
        assert response.json()["reason"] == "not_authenticated"

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, client: AsyncClient):
        response = await client.get(f"{API}/records", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"


class TestAccountsAPI:
    """Tests for /api/v1/accounts endpoints."""

    @pytest.mark.asyncio
    async def test_list_accounts_admin_only(self, client, admin, reader, auth_headers):
        response = await client.get(f"{API}/accounts", headers=auth_headers(admin))
        assert response.status_code == 200
        assert len(response.json()) == 2

        response = await client.get(f"{API}/accounts", headers=auth_headers(reader))
        assert response.status_code == 403
        assert response.json()["reason"] == "insufficient_role"

    @pytest.mark.asyncio
    async def test_change_clearance(self, client, admin, reader, auth_headers):
        response = await client.put(
            f"{API}/accounts/{reader.id}/clearance",
            json={"clearance": 4},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["clearance"] == 4

    @pytest.mark.asyncio
    async def test_clearance_out_of_range(self, client, admin, reader, auth_headers):
        response = await client.put(
            f"{API}/accounts/{reader.id}/clearance",
            json={"clearance": 6},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_cannot_change_own_role(self, client, admin, auth_headers):
        response = await client.put(
            f"{API}/accounts/{admin.id}/role",
            json={"role": "reader"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "self_modification"

    @pytest.mark.asyncio
    async def test_profile_update_own(self, client, reader, auth_headers):
        response = await client.patch(
            f"{API}/accounts/{reader.id}",
            json={"bio": "Archivist", "department": "research"},
            headers=auth_headers(reader),
        )
        assert response.status_code == 200
        assert response.json()["bio"] == "Archivist"
        assert response.json()["department"] == "research"

    @pytest.mark.asyncio
    async def test_profile_update_cannot_raise_own_clearance(self, client, reader, auth_headers):
        response = await client.patch(
            f"{API}/accounts/{reader.id}",
            json={"clearance": 5},
            headers=auth_headers(reader),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_change_position(self, client, admin, reader, auth_headers):
        response = await client.put(
            f"{API}/accounts/{reader.id}/position",
            json={"position": "Field agent", "department": "security"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["position"] == "Field agent"


class TestContentAPI:
    """Tests for /api/v1/records and /api/v1/posts."""

    @pytest.mark.asyncio
    async def test_record_lifecycle(self, client, admin, record_data, auth_headers):
        headers = auth_headers(admin)
        response = await client.post(f"{API}/records", json=record_data, headers=headers)
        assert response.status_code == 201
        record = response.json()
        assert record["created_by"] == str(admin.id)

        response = await client.patch(
            f"{API}/records/{record['id']}",
            json={"title": "The Statue"},
            headers=headers,
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "The Statue"
        assert parse_timestamp(updated["updated_at"]) > parse_timestamp(record["updated_at"])
        assert parse_timestamp(updated["created_at"]).tzinfo is not None
        assert parse_timestamp(updated["updated_at"]) > parse_timestamp(updated["created_at"])

        response = await client.delete(f"{API}/records/{record['id']}", headers=headers)
        assert response.status_code == 204

        response = await client.delete(f"{API}/records/{record['id']}", headers=headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_record_number(self, client, admin, record_data, auth_headers):
        headers = auth_headers(admin)
        await client.post(f"{API}/records", json=record_data, headers=headers)
        response = await client.post(f"{API}/records", json=record_data, headers=headers)

        assert response.status_code == 409
        assert response.json()["field"] == "external_number"

    @pytest.mark.asyncio
    async def test_record_read_gates(self, client, admin, reader, record_data, auth_headers):
        response = await client.post(
            f"{API}/records",
            json=dict(record_data, required_clearance=3),
            headers=auth_headers(admin),
        )
        record_id = response.json()["id"]

        response = await client.get(f"{API}/records/{record_id}")
        assert response.status_code == 401

        response = await client.get(f"{API}/records/{record_id}", headers=auth_headers(reader))
        assert response.status_code == 403
        assert response.json()["reason"] == "insufficient_clearance"

        response = await client.get(f"{API}/records", headers=auth_headers(reader))
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_missing_record(self, client):
        response = await client.get(f"{API}/records/{uuid.uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reader_cannot_create_post(self, client, reader, post_data, auth_headers):
        response = await client.post(f"{API}/posts", json=post_data, headers=auth_headers(reader))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_cannot_create_post(self, client, post_data):
        response = await client.post(f"{API}/posts", json=post_data)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_post_listing(self, client, admin, post_data, auth_headers):
        headers = auth_headers(admin)
        for title, clearance in [("Open", None), ("Secret", 4), ("Basic", 1)]:
            await client.post(
                f"{API}/posts",
                json=dict(post_data, title=title, required_clearance=clearance),
                headers=headers,
            )

        response = await client.get(f"{API}/posts")
        assert [p["title"] for p in response.json()] == ["Open", "Basic"]
        assert response.json()[0]["author_name"] == admin.username

    @pytest.mark.asyncio
    async def test_reset_content(self, client, admin, reader, post_data, auth_headers):
        await client.post(f"{API}/posts", json=post_data, headers=auth_headers(admin))

        response = await client.post(f"{API}/admin/reset-content", headers=auth_headers(reader))
        assert response.status_code == 403

        response = await client.post(f"{API}/admin/reset-content", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["data"] == {"content_records": 0, "posts": 1}


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
