"""
Core configuration
"""

import pytest_asyncio
import structlog

from groupdiary.config.settings import Settings


@pytest_asyncio.fixture
def server_settings(tmp_path):
    yield Settings(
        database_type="sqlite",
        database_db=str(tmp_path / "groupdiary.db"),
        password_hash_cost=4,
        invite_requires_membership=True,
    )


@pytest_asyncio.fixture
async def session_manager(server_settings: Settings):
    manager = server_settings.async_manager()
    await manager.create_all()

    yield manager

    await manager.dispose()


@pytest_asyncio.fixture
def logger():
    yield structlog.get_logger()
