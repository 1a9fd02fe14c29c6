import os
import tempfile

# Настройки окружения должны быть заданы до импорта src
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="kanban-logs-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.db.database import build_engine, build_session_factory, create_tables, get_async_session
from src.main import app
from src.services.token_blacklist import token_blacklist


@pytest.fixture(autouse=True)
def clean_token_blacklist():
    """Черный список токенов общий для процесса, очищаем его между тестами"""
    token_blacklist.clear()
    yield
    token_blacklist.clear()


@pytest_asyncio.fixture
async def engine():
    """Отдельная in-memory база для каждого теста"""
    test_engine = build_engine("sqlite+aiosqlite://")
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    async with build_session_factory(engine)() as session:
        yield session


@pytest_asyncio.fixture
async def client(engine):
    """HTTP клиент поверх ASGI приложения, работающий с тестовой базой"""
    session_factory = build_session_factory(engine)

    async def override_get_async_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Регистрирует пользователя, логинится и возвращает (id, заголовки авторизации)"""

    async def _make_user(username: str, password: str = "password123"):
        response = await client.post("/users", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        user_id = response.json()["id"]

        response = await client.post("/sessions", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["token"]
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make_user
