"""
Fixtures for the service layer tests.
"""

import pytest_asyncio

from groupdiary.service import groups as groups_service
from groupdiary.service import user as user_service


@pytest_asyncio.fixture
async def users(session_manager, logger):
    """
    A leader, somebody to invite, and an outsider, keyed by role.
    """
    async with session_manager.session() as conn:
        async with conn.begin():
            created = {}
            for role in ("leader", "invitee", "outsider"):
                user = await user_service.create(
                    name=f"{role.title()} User",
                    email=f"{role}@example.com",
                    conn=conn,
                    log=logger,
                )
                created[role] = user.user_id

    yield created


@pytest_asyncio.fixture
async def group(session_manager, logger, users, server_settings):
    async with session_manager.session() as conn:
        async with conn.begin():
            group = await groups_service.create(
                group_name="Hiking Club",
                leader_id=users["leader"],
                password=None,
                settings=server_settings,
                conn=conn,
                log=logger,
            )

            GROUP_ID = group.group_id

    yield GROUP_ID
