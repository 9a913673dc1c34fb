"""
Group management.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from groupdiary.core.group import GroupData, InvitationData
from groupdiary.core.user import UserData
from groupdiary.core.uuid import UUID
from groupdiary.service import groups as groups_service

from .dependencies import (
    ActorDependency,
    DatabaseDependency,
    LoggerDependency,
    SettingsDependency,
)

group_app = APIRouter(tags=["Group Management"])


class MessageResponse(BaseModel):
    message: str


class GroupCreationRequest(BaseModel):
    """
    Request model for creating a new group.
    """

    name: str = Field(min_length=1)
    password: str | None = None


class GroupCreationResponse(BaseModel):
    group_id: UUID


class InviteRequest(BaseModel):
    user_emails: list[str]


class PasswordRequest(BaseModel):
    password: str


class NewPasswordRequest(BaseModel):
    new_password: str = Field(min_length=1)


class MembersResponse(BaseModel):
    members: list[UserData]


class GroupDeletionResponse(MessageResponse):
    deleted_entries: int


@group_app.post(
    "",
    summary="Create a new group",
    description=(
        "Create a new group led by the caller, who becomes its first member. "
        "If a password is given, members will need it to pass the group's "
        "password gate."
    ),
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Group created successfully."},
        400: {"description": "Invalid group name."},
        404: {"description": "Caller is not a known user."},
    },
)
async def create_group(
    content: GroupCreationRequest,
    actor: ActorDependency,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupCreationResponse:
    group = await groups_service.create(
        group_name=content.name,
        leader_id=actor,
        password=content.password,
        settings=settings,
        conn=conn,
        log=log,
    )

    return GroupCreationResponse(group_id=group.group_id)


@group_app.get(
    "/invitations",
    summary="List my invitations",
    description="List the groups the caller has a pending invitation to.",
)
async def list_invitations(
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[InvitationData]:
    return await groups_service.list_invitations_for(
        user_id=actor, conn=conn, log=log
    )


@group_app.get(
    "/mine",
    summary="List my groups",
    description=(
        "List the groups the caller is a member of, with the leader and "
        "members resolved and whether each group has a password."
    ),
)
async def list_my_groups(
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> list[GroupData]:
    groups = await groups_service.list_my_groups(actor_id=actor, conn=conn, log=log)
    return [g.to_core() for g in groups]


@group_app.post(
    "/{group_id}/invite",
    summary="Invite users by email",
    description=(
        "Invite users to the group by email. Unknown emails, existing members "
        "and users already invited are skipped."
    ),
    responses={
        200: {"description": "Invitations sent."},
        403: {"description": "Caller may not invite to this group."},
        404: {"description": "Group not found."},
    },
)
async def invite_users(
    group_id: UUID,
    content: InviteRequest,
    actor: ActorDependency,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.invite(
        actor_id=actor,
        group_id=group_id,
        user_emails=content.user_emails,
        settings=settings,
        conn=conn,
        log=log,
    )

    return MessageResponse(message="Invitations sent")


@group_app.post(
    "/{group_id}/accept",
    summary="Accept an invitation",
    responses={
        200: {"description": "Invitation accepted."},
        403: {"description": "No pending invitation."},
        404: {"description": "Group not found."},
    },
)
async def accept_invite(
    group_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.accept_invite(
        actor_id=actor, group_id=group_id, conn=conn, log=log
    )

    return MessageResponse(message="Invitation accepted")


@group_app.post(
    "/{group_id}/reject",
    summary="Reject an invitation",
    responses={
        200: {"description": "Invitation rejected."},
        404: {"description": "Group not found."},
    },
)
async def reject_invite(
    group_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.reject_invite(
        actor_id=actor, group_id=group_id, conn=conn, log=log
    )

    return MessageResponse(message="Invitation rejected")


@group_app.get(
    "/{group_id}/members",
    summary="List group members",
    responses={
        200: {"description": "Group members."},
        404: {"description": "Group not found."},
    },
)
async def list_members(
    group_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MembersResponse:
    members = await groups_service.list_members(
        group_id=group_id, conn=conn, log=log.bind(user_id=actor)
    )

    return MembersResponse(members=members)


@group_app.post(
    "/{group_id}/verify-password",
    summary="Check the group password",
    description="Groups without a password accept any candidate.",
    responses={
        200: {"description": "Password accepted."},
        403: {"description": "Incorrect password."},
        404: {"description": "Group not found."},
    },
)
async def verify_password(
    group_id: UUID,
    content: PasswordRequest,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.verify_password(
        group_id=group_id,
        password=content.password,
        conn=conn,
        log=log.bind(user_id=actor),
    )

    return MessageResponse(message="Password verified")


@group_app.delete(
    "/{group_id}/members/{member_id}",
    summary="Remove a member",
    description="Only the leader can remove members, and not themselves.",
    responses={
        200: {"description": "Member removed."},
        400: {"description": "Leader tried to remove themselves."},
        403: {"description": "Caller is not the leader."},
        404: {"description": "Group not found."},
    },
)
async def remove_member(
    group_id: UUID,
    member_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.remove_member(
        actor_id=actor, group_id=group_id, member_id=member_id, conn=conn, log=log
    )

    return MessageResponse(message="Member removed")


@group_app.post(
    "/{group_id}/leave",
    summary="Leave a group",
    responses={
        200: {"description": "Left the group."},
        400: {"description": "The leader cannot leave."},
        403: {"description": "Caller is not a member."},
        404: {"description": "Group not found."},
    },
)
async def leave_group(
    group_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.leave_group(
        actor_id=actor, group_id=group_id, conn=conn, log=log
    )

    return MessageResponse(message="Left the group")


@group_app.put(
    "/{group_id}/password",
    summary="Change the group password",
    responses={
        200: {"description": "Password changed."},
        403: {"description": "Caller is not the leader."},
        404: {"description": "Group not found."},
    },
)
async def update_password(
    group_id: UUID,
    content: NewPasswordRequest,
    actor: ActorDependency,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> MessageResponse:
    await groups_service.update_password(
        actor_id=actor,
        group_id=group_id,
        new_password=content.new_password,
        settings=settings,
        conn=conn,
        log=log,
    )

    return MessageResponse(message="Password changed")


@group_app.delete(
    "/{group_id}",
    summary="Delete a group",
    description="Delete a group and all of its diary entries. Leader only.",
    responses={
        200: {"description": "Group and entries deleted."},
        403: {"description": "Caller is not the leader."},
        404: {"description": "Group not found."},
    },
)
async def delete_group(
    group_id: UUID,
    actor: ActorDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> GroupDeletionResponse:
    deleted_entries = await groups_service.delete_group(
        actor_id=actor, group_id=group_id, conn=conn, log=log
    )

    return GroupDeletionResponse(
        message="Group and its diary entries deleted",
        deleted_entries=deleted_entries,
    )
