"""
Fixtures for the API tests: the app wired to a fresh test database.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from groupdiary.api.app import app
from groupdiary.api.dependencies import SETTINGS, get_async_session


@pytest_asyncio.fixture
async def client(server_settings, session_manager):
    async def override_session():
        async with session_manager.session() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[SETTINGS] = lambda: server_settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def register(client):
    """
    Register a user and return the headers identifying them.
    """

    async def register(name: str, email: str) -> dict[str, str]:
        response = await client.post("/users", json={"name": name, "email": email})
        assert response.status_code == 201
        return {"X-User-Id": response.json()["user_id"]}

    yield register
