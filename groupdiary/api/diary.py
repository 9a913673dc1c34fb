"""
Diary entry endpoints. Entries shared with a group are visible to its
members only.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from groupdiary.core import access
from groupdiary.core.diary import DiaryEntryData
from groupdiary.core.uuid import UUID
from groupdiary.service import diary as diary_service
from groupdiary.service import groups as groups_service

from .dependencies import ActorDependency, DatabaseDependency, LoggerDependency

diary_app = APIRouter(tags=["Diary"])


class DiaryEntryRequest(BaseModel):
    title: str = Field(min_length=1)
    content: str
    group_id: UUID | None = None


async def _require_membership(group_id, actor, conn, log):
    group = await groups_service.read_by_id(group_id=group_id, conn=conn, log=log)

    if not access.is_member(group, actor):
        await log.awarning("diary.access_denied", group_id=group_id)
        raise groups_service.GroupAccessDenied("You are not a member of this group")


@diary_app.post(
    "",
    summary="Write a diary entry",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Entry created."},
        403: {"description": "Caller is not a member of the group."},
        404: {"description": "Group not found."},
    },
)
async def create_entry(
    content: DiaryEntryRequest,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> DiaryEntryData:
    log = log.bind(user_id=actor)

    if content.group_id is not None:
        await _require_membership(content.group_id, actor, conn, log)

    entry = await diary_service.create(
        author_id=actor,
        title=content.title,
        content=content.content,
        group_id=content.group_id,
        conn=conn,
        log=log,
    )
    return entry.to_core()


@diary_app.get(
    "/group/{group_id}",
    summary="List a group's diary entries",
    responses={
        200: {"description": "Entries, oldest first."},
        403: {"description": "Caller is not a member of the group."},
        404: {"description": "Group not found."},
    },
)
async def list_group_entries(
    group_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[DiaryEntryData]:
    log = log.bind(user_id=actor)
    await _require_membership(group_id, actor, conn, log)

    entries = await diary_service.list_for_group(group_id=group_id, conn=conn, log=log)
    return [e.to_core() for e in entries]
