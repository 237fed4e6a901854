"""
API Tests for authentication endpoints
"""
from httpx import AsyncClient

from app.core.security import create_refresh_token, build_token_data


API = "/api/v1/auth"
TEST_PASSWORD = "testpassword123"


class TestLogin:

    async def test_login_success(self, client: AsyncClient, teacher_user):
        response = await client.post(f"{API}/login", json={
            "email": teacher_user.email,
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["id"] == teacher_user.id
        assert data["user"]["role"] == "teacher"

    async def test_login_wrong_password(self, client: AsyncClient, teacher_user):
        response = await client.post(f"{API}/login", json={
            "email": teacher_user.email,
            "password": "not-the-password",
        })

        assert response.status_code == 401

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(f"{API}/login", json={
            "email": "nobody@example.com",
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 401

    async def test_login_inactive_account(self, client: AsyncClient, db_session, teacher_user):
        teacher_user.is_active = False
        await db_session.commit()

        response = await client.post(f"{API}/login", json={
            "email": teacher_user.email,
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 403


class TestTokens:

    async def test_me(self, client: AsyncClient, it_user, it_headers):
        response = await client.get(f"{API}/me", headers=it_headers)

        assert response.status_code == 200
        assert response.json()["email"] == it_user.email

    async def test_me_with_bad_token(self, client: AsyncClient):
        response = await client.get(f"{API}/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    async def test_refresh(self, client: AsyncClient, teacher_user):
        refresh = create_refresh_token(build_token_data(teacher_user))

        response = await client.post(f"{API}/refresh", json={"refresh_token": refresh})

        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_access_token_cannot_refresh(self, client: AsyncClient, teacher_headers):
        access = teacher_headers["Authorization"].split(" ", 1)[1]

        response = await client.post(f"{API}/refresh", json={"refresh_token": access})

        assert response.status_code == 401

    async def test_logout(self, client: AsyncClient, teacher_headers):
        response = await client.post(f"{API}/logout", headers=teacher_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Successfully logged out"}
