"""
Service layer for diary entries. The group service only relies on
`delete_all_for_group`.
"""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdiary.core.uuid import UUID
from groupdiary.database.diary import DiaryEntry

from . import user as user_service


async def create(
    author_id: UUID,
    title: str,
    content: str,
    group_id: UUID | None,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> DiaryEntry:
    """
    Write a new diary entry, optionally shared with a group. Group access is
    checked by the caller.
    """
    log = log.bind(author_id=author_id, group_id=group_id)

    await user_service.read_by_id(user_id=author_id, conn=conn)

    entry = DiaryEntry(
        author_id=author_id,
        group_id=group_id,
        title=title,
        content=content,
        created_at=datetime.now(tz=timezone.utc),
    )
    conn.add(entry)
    await conn.flush()

    await log.ainfo("diary.created", entry_id=entry.entry_id)

    return entry


async def list_for_group(
    group_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
) -> list[DiaryEntry]:
    result = await conn.execute(
        select(DiaryEntry)
        .where(DiaryEntry.group_id == group_id)
        .order_by(DiaryEntry.created_at)
    )
    entries = list(result.scalars().all())
    await log.adebug(
        "diary.listed", group_id=group_id, number_of_entries=len(entries)
    )
    return entries


async def delete_all_for_group(
    group_id: UUID, conn: AsyncSession, log: FilteringBoundLogger
) -> int:
    """
    Delete every entry belonging to a group.

    Returns
    -------
    int
        The number of entries removed.
    """
    log = log.bind(group_id=group_id)
    result = await conn.execute(
        delete(DiaryEntry)
        .where(DiaryEntry.group_id == group_id)
    )
    await log.ainfo("diary.group_entries_deleted", number_of_entries=result.rowcount)
    return result.rowcount
