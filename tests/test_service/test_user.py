"""
Tests the user directory and diary services.
"""

import pytest

from groupdiary.core.uuid import UUID
from groupdiary.service import diary as diary_service
from groupdiary.service import user as user_service


@pytest.mark.asyncio
async def test_create_user(session_manager, logger):
    async with session_manager.session() as conn:
        async with conn.begin():
            user = await user_service.create(
                name=" Test User ",
                email="Test_User@Email.com ",
                conn=conn,
                log=logger,
            )

            USER_ID = user.user_id

    async with session_manager.session() as conn:
        async with conn.begin():
            user = await user_service.read_by_id(user_id=USER_ID, conn=conn)
            assert user.name == "Test User"
            assert user.email == "test_user@email.com"

            user = await user_service.read_by_email(
                email="TEST_USER@email.com", conn=conn
            )
            assert user.user_id == USER_ID
            assert user.to_core().email == "test_user@email.com"

    with pytest.raises(user_service.UserExistsError):
        async with session_manager.session() as conn:
            async with conn.begin():
                await user_service.create(
                    name="Imposter",
                    email="test_user@email.com",
                    conn=conn,
                    log=logger,
                )

    with pytest.raises(user_service.UserNotFound):
        async with session_manager.session() as conn:
            async with conn.begin():
                await user_service.read_by_id(user_id=UUID(int=0), conn=conn)

    with pytest.raises(user_service.UserNotFound):
        async with session_manager.session() as conn:
            async with conn.begin():
                await user_service.read_by_email(email="nobody@email.com", conn=conn)


@pytest.mark.asyncio
async def test_find_by_emails(session_manager, logger, users):
    async with session_manager.session() as conn:
        async with conn.begin():
            found = await user_service.find_by_emails(
                emails=["leader@example.com", "Invitee@Example.com ", "nope@x.org", " "],
                conn=conn,
            )
            assert {u.user_id for u in found} == {users["leader"], users["invitee"]}

            assert await user_service.find_by_emails(emails=[], conn=conn) == []


@pytest.mark.asyncio
async def test_diary_entries(session_manager, logger, users, group):
    async with session_manager.session() as conn:
        async with conn.begin():
            first = await diary_service.create(
                author_id=users["leader"],
                title="First",
                content="Hello",
                group_id=group,
                conn=conn,
                log=logger,
            )
            await diary_service.create(
                author_id=users["leader"],
                title="Private",
                content="Just me",
                group_id=None,
                conn=conn,
                log=logger,
            )

            FIRST_ID = first.entry_id

    async with session_manager.session() as conn:
        async with conn.begin():
            entries = await diary_service.list_for_group(
                group_id=group, conn=conn, log=logger
            )
            assert [e.entry_id for e in entries] == [FIRST_ID]

            assert (
                await diary_service.delete_all_for_group(
                    group_id=group, conn=conn, log=logger
                )
                == 1
            )

    with pytest.raises(user_service.UserNotFound):
        async with session_manager.session() as conn:
            async with conn.begin():
                await diary_service.create(
                    author_id=UUID(int=0),
                    title="Ghost",
                    content="Boo",
                    group_id=None,
                    conn=conn,
                    log=logger,
                )
