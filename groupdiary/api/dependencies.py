"""
Dependencies used by the API.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from groupdiary.config.settings import Settings
from groupdiary.core.uuid import UUID


@lru_cache
def SETTINGS():
    return Settings()


DATABASE_MANAGER = SETTINGS().async_manager()


async def get_async_session():
    async with DATABASE_MANAGER.session() as session:
        async with session.begin():
            yield session


def logger():
    return get_logger()


def get_actor(x_user_id: Annotated[UUID, Header()]) -> UUID:
    """
    The authenticated user making the request. Authentication happens in
    front of this service, which forwards the user's ID in `X-User-Id`.
    """
    return x_user_id


SettingsDependency = Annotated[Settings, Depends(SETTINGS)]
DatabaseDependency = Annotated[AsyncSession, Depends(get_async_session)]
LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]
ActorDependency = Annotated[UUID, Depends(get_actor)]
