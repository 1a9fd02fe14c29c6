import pytest
from datetime import datetime
from unittest.mock import AsyncMock, patch
from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

# Импорты из тестируемых модулей
from src.api.v1.auth import register, login, logout
from src.core.exceptions import ConflictError, UnauthenticatedError
from src.schemas.auth import UserCreate, LoginRequest
from src.models.user import User
from src.services.security_service import SecurityService
from src.services.token_blacklist import token_blacklist
from src.services.user_service import UserService


class TestAuthEndpoints:
    """Юниттесты для эндпоинтов аутентификации"""

    def setup_method(self):
        """Настройка для каждого теста"""
        self.mock_db = AsyncMock(spec=AsyncSession)
        self.mock_user = User(
            id="00000000000000000001",
            username="testuser",
            hashed_password="hashed_password",
            created_at=datetime(2025, 1, 1),
            updated_at=datetime(2025, 1, 1),
        )

    @pytest.mark.asyncio
    async def test_register_success(self):
        """Тест успешной регистрации пользователя"""
        user_data = UserCreate(username="testuser", password="password123")
        response = Response()

        with patch.object(UserService, 'create', new_callable=AsyncMock, return_value=self.mock_user) as mock_create:
            result = await register(user_data, response, self.mock_db)

        assert result.username == "testuser"
        assert response.headers["Location"].endswith(f"/users/{self.mock_user.id}")
        mock_create.assert_called_once_with(self.mock_db, "testuser", "password123")

    @pytest.mark.asyncio
    async def test_register_username_exists(self):
        """Тест регистрации с уже существующим именем пользователя"""
        user_data = UserCreate(username="testuser", password="password123")

        with patch.object(UserService, 'get_by_username', new_callable=AsyncMock, return_value=self.mock_user):
            with pytest.raises(ConflictError) as exc_info:
                await register(user_data, Response(), self.mock_db)

        assert exc_info.value.message == "Username already exists."
        self.mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_returns_token_for_user(self):
        """Тест успешного входа: токен привязан к id пользователя"""
        credentials = LoginRequest(username="testuser", password="password123")

        with patch.object(UserService, 'authenticate', new_callable=AsyncMock, return_value=self.mock_user):
            result = await login(credentials, self.mock_db)

        assert SecurityService.verify_token(result["token"]) == self.mock_user.id

    @pytest.mark.asyncio
    async def test_login_invalid_credentials(self):
        """Тест входа с неверными учетными данными"""
        credentials = LoginRequest(username="testuser", password="wrong")

        with patch.object(UserService, 'get_by_username', new_callable=AsyncMock, return_value=None):
            with pytest.raises(UnauthenticatedError) as exc_info:
                await login(credentials, self.mock_db)

        assert exc_info.value.message == "Invalid credentials."

    @pytest.mark.asyncio
    async def test_logout_revokes_token(self):
        """Тест выхода: токен попадает в черный список"""
        token = SecurityService.create_access_token(self.mock_user.id)

        result = await logout(token=token, current_user=self.mock_user)

        assert result == {"message": "Successfully logged out."}
        assert token in token_blacklist


class TestAuthApi:
    """Интеграционные тесты регистрации, входа и выхода через HTTP"""

    @pytest.mark.asyncio
    async def test_register_returns_created_user_without_password(self, client):
        response = await client.post("/users", json={"username": "alice", "password": "secret1"})

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert "password" not in body and "hashedPassword" not in body
        assert response.headers["location"] == f"/users/{body['id']}"

    @pytest.mark.asyncio
    async def test_register_twice_conflicts(self, client):
        """Повторная регистрация того же имени всегда дает 409"""
        payload = {"username": "alice", "password": "secret1"}
        assert (await client.post("/users", json=payload)).status_code == 201

        response = await client.post("/auth/register", json={"username": "alice", "password": "other1"})

        assert response.status_code == 409
        assert response.json() == {"error": "Username already exists."}

    @pytest.mark.asyncio
    async def test_register_missing_fields(self, client):
        response = await client.post("/users", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input."

    @pytest.mark.asyncio
    async def test_register_blank_username(self, client):
        response = await client.post("/users", json={"username": "   ", "password": "secret1"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_login_success(self, client, make_user):
        user_id, _ = await make_user("alice", "secret1")

        response = await client.post("/auth/login", json={"username": "alice", "password": "secret1"})

        assert response.status_code == 200
        assert SecurityService.verify_token(response.json()["token"]) == user_id

    @pytest.mark.asyncio
    async def test_login_failures_are_indistinguishable(self, client, make_user):
        """Неизвестный пользователь и неверный пароль дают одинаковый ответ"""
        await make_user("alice", "secret1")

        wrong_password = await client.post("/sessions", json={"username": "alice", "password": "nope"})
        unknown_user = await client.post("/sessions", json={"username": "mallory", "password": "nope"})

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"error": "Invalid credentials."}

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/boards")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_malformed_token(self, client):
        response = await client.get("/boards", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid or expired token."}

    @pytest.mark.asyncio
    async def test_logout_invalidates_token(self, client, make_user):
        """После выхода токен отклоняется, хотя подпись еще валидна"""
        _, headers = await make_user("alice")

        response = await client.delete("/sessions", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Successfully logged out."}

        response = await client.get("/boards", headers=headers)
        assert response.status_code == 401
        assert response.json() == {"error": "Token has been invalidated. Please log in again."}

    @pytest.mark.asyncio
    async def test_logout_alias_route(self, client, make_user):
        _, headers = await make_user("alice")

        response = await client.post("/auth/logout", headers=headers)

        assert response.status_code == 200
        assert (await client.get("/users/me", headers=headers)).status_code == 401

    @pytest.mark.asyncio
    async def test_relogin_after_logout_gives_working_token(self, client, make_user):
        _, headers = await make_user("alice", "secret1")
        await client.delete("/sessions", headers=headers)

        response = await client.post("/sessions", json={"username": "alice", "password": "secret1"})
        new_headers = {"Authorization": f"Bearer {response.json()['token']}"}

        assert (await client.get("/users/me", headers=new_headers)).status_code == 200
