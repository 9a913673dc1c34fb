"""
Service layer for groups: creation, invitations, membership, the optional
password gate, and deletion.

Every mutating function checks, in order, that the group exists
(`GroupNotFound`), that the actor is allowed to act (`GroupAccessDenied`) and
that the request makes sense (`InvalidMembershipChange`,
`InvalidGroupRequest`) before touching anything. The group row is locked for
the rest of the transaction before it is read (`SELECT ... FOR UPDATE` on
Postgres; on SQLite every transaction holds the database write lock from its
start, see `config.managers.immediate_transactions`), so concurrent writers on
the same group are serialized.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdiary.config.settings import Settings
from groupdiary.core import access
from groupdiary.core.group import InvitationData
from groupdiary.core.hashing import ahash_password, averify_password
from groupdiary.core.user import UserData
from groupdiary.core.uuid import UUID
from groupdiary.database.group import Group
from groupdiary.database.user import User

from . import diary as diary_service
from . import user as user_service


class GroupNotFound(Exception):
    pass


class GroupAccessDenied(Exception):
    pass


class PasswordMismatch(GroupAccessDenied):
    pass


class InvalidMembershipChange(Exception):
    pass


class InvalidGroupRequest(Exception):
    pass


async def create(
    group_name: str,
    leader_id: UUID,
    password: str | None,
    settings: Settings,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Create a new group.

    Parameters
    ----------
    group_name: str
        Display name for the group. Need not be unique.
    leader_id: UUID
        The user that creates and administers this group. They are the first
        and only member.
    password: str | None
        Optional password gate. Only its hash is stored.

    Raises
    ------
    InvalidGroupRequest
        If the name is blank.
    user_service.UserNotFound
        If the leader does not exist.
    """
    group_name = group_name.strip()

    log = log.bind(
        group_name=group_name, user_id=leader_id, has_password=bool(password)
    )

    if not group_name:
        await log.ainfo("group.create.blank_name")
        raise InvalidGroupRequest("Group name must not be empty")

    try:
        leader = await user_service.read_by_id(user_id=leader_id, conn=conn)
    except user_service.UserNotFound as e:
        await log.ainfo("group.create.leader_does_not_exist")
        raise e

    password_hash = None

    if password:
        password_hash = await ahash_password(password, cost=settings.password_hash_cost)

    group = Group(
        group_name=group_name,
        leader_id=leader_id,
        leader=leader,
        created_at=datetime.now(tz=timezone.utc),
        members=[leader],
        invitations=[],
        password_hash=password_hash,
    )
    conn.add(group)
    await conn.flush()

    await log.ainfo("group.created", group_id=group.group_id)

    return group


async def read_by_id(
    group_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
    lock: bool = False,
) -> Group:
    """
    Read a group by its ID.

    Parameters
    ----------
    group_id: UUID
        The ID of the group to read.
    lock: bool
        Take a row lock on the group for the rest of the transaction. Used by
        every read-modify-write below.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    log = log.bind(group_id=group_id)

    if lock:
        # Lock the bare row; FOR UPDATE cannot cover the outer joins used to
        # load members and invitations.
        await conn.execute(
            select(Group.group_id).where(Group.group_id == group_id).with_for_update()
        )

    result = await conn.execute(
        select(Group)
        .where(Group.group_id == group_id)
        .execution_options(populate_existing=lock)
    )
    group = result.unique().scalar_one_or_none()

    if not group:
        await log.ainfo("group.not_found")
        raise GroupNotFound(f"Group with id {group_id} not found")

    await log.adebug("group.found")
    return group


async def invite(
    actor_id: UUID,
    group_id: UUID,
    user_emails: list[str],
    settings: Settings,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Invite users to a group by email.

    Emails that do not resolve to a user are skipped, as are users that are
    already members or already invited, so repeating an invitation changes
    nothing.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    GroupAccessDenied
        If `settings.invite_requires_membership` is set and the actor is not
        a member of the group.
    """
    log = log.bind(
        group_id=group_id, user_id=actor_id, number_of_emails=len(user_emails)
    )
    group = await read_by_id(group_id, conn, log, lock=True)

    if settings.invite_requires_membership and not access.is_member(group, actor_id):
        await log.awarning("group.invite.access_denied")
        raise GroupAccessDenied("Only group members can invite new users")

    users = await user_service.find_by_emails(emails=user_emails, conn=conn)

    invited = 0

    for user in users:
        if access.is_member(group, user.user_id) or access.is_invited(
            group, user.user_id
        ):
            continue

        group.invitations.append(user)
        invited += 1

    await conn.flush()

    await log.ainfo(
        "group.invite.sent",
        number_resolved=len(users),
        number_invited=invited,
    )

    return group


async def list_invitations_for(
    user_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> list[InvitationData]:
    """
    List the groups that `user_id` has a pending invitation to, along with
    the name of each group's leader.
    """
    log = log.bind(user_id=user_id)

    result = await conn.execute(
        select(Group).where(Group.invitations.any(User.user_id == user_id))
    )
    groups = result.unique().scalars().all()

    await log.adebug("group.invitations.listed", number_of_invitations=len(groups))

    return [
        InvitationData(
            group_id=group.group_id,
            group_name=group.group_name,
            inviter_name=group.leader.name,
        )
        for group in groups
    ]


async def accept_invite(
    actor_id: UUID,
    group_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Accept a pending invitation. Accepting again once a member is harmless.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    GroupAccessDenied
        If the actor was neither invited nor already a member.
    """
    log = log.bind(group_id=group_id, user_id=actor_id)
    group = await read_by_id(group_id, conn, log, lock=True)

    already_member = access.is_member(group, actor_id)

    if not already_member and not access.is_invited(group, actor_id):
        await log.awarning("group.accept.not_invited")
        raise GroupAccessDenied("No pending invitation to this group")

    if not already_member:
        user = await user_service.read_by_id(user_id=actor_id, conn=conn)
        group.members.append(user)

    group.invitations = [x for x in group.invitations if x.user_id != actor_id]
    await conn.flush()

    if already_member:
        await log.ainfo("group.accept.already_member")
    else:
        await log.ainfo("group.accept.joined")

    return group


async def reject_invite(
    actor_id: UUID,
    group_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Drop the actor's pending invitation, if there is one.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    log = log.bind(group_id=group_id, user_id=actor_id)
    group = await read_by_id(group_id, conn, log, lock=True)

    was_invited = access.is_invited(group, actor_id)
    group.invitations = [x for x in group.invitations if x.user_id != actor_id]
    await conn.flush()

    await log.ainfo("group.reject", was_invited=was_invited)

    return group


async def list_my_groups(
    actor_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> list[Group]:
    """
    Get every group the actor is a member of.
    """
    log = log.bind(user_id=actor_id)

    result = await conn.execute(
        select(Group)
        .where(Group.members.any(User.user_id == actor_id))
        .order_by(Group.created_at)
    )
    groups = list(result.unique().scalars().all())

    await log.adebug("group.listed", number_of_groups=len(groups))
    return groups


async def list_members(
    group_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> list[UserData]:
    """
    Raises
    ------
    GroupNotFound
        If the group does not exist.
    """
    group = await read_by_id(group_id, conn, log)
    return [member.to_core() for member in group.members]


async def verify_password(
    group_id: UUID,
    password: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> None:
    """
    Check a candidate password against the group's password gate. Groups
    without a password let everybody through.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    PasswordMismatch
        If the password is wrong.
    """
    log = log.bind(group_id=group_id)
    group = await read_by_id(group_id, conn, log)

    if not group.has_password:
        await log.ainfo("group.password.open_group")
        return

    if not await averify_password(password, group.password_hash):
        await log.awarning("group.password.mismatch")
        raise PasswordMismatch("Incorrect group password")

    await log.ainfo("group.password.verified")


async def remove_member(
    actor_id: UUID,
    group_id: UUID,
    member_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Remove a member from a group. Only the leader may do this, and never to
    themselves. Removing somebody who is not a member does nothing.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    GroupAccessDenied
        If the actor is not the leader.
    InvalidMembershipChange
        If the actor targets themselves.
    """
    log = log.bind(group_id=group_id, user_id=actor_id, member_id=member_id)
    group = await read_by_id(group_id, conn, log, lock=True)

    if not access.is_leader(group, actor_id):
        await log.awarning("group.remove_member.access_denied")
        raise GroupAccessDenied("Only the group leader can remove members")

    if access.is_self(actor_id, member_id):
        await log.ainfo("group.remove_member.self")
        raise InvalidMembershipChange("You cannot remove yourself from the group")

    if access.is_member(group, member_id):
        group.members = [x for x in group.members if x.user_id != member_id]
        await conn.flush()
        await log.ainfo("group.member_removed")
    else:
        await log.ainfo("group.user_not_member")

    return group


async def leave_group(
    actor_id: UUID,
    group_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Leave a group. The leader cannot leave; they can only delete the group.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    GroupAccessDenied
        If the actor is not a member.
    InvalidMembershipChange
        If the actor is the leader.
    """
    log = log.bind(group_id=group_id, user_id=actor_id)
    group = await read_by_id(group_id, conn, log, lock=True)

    if not access.is_member(group, actor_id):
        await log.awarning("group.leave.not_member")
        raise GroupAccessDenied("You are not a member of this group")

    if access.is_leader(group, actor_id):
        await log.ainfo("group.leave.leader")
        raise InvalidMembershipChange("The group leader cannot leave the group")

    group.members = [x for x in group.members if x.user_id != actor_id]
    await conn.flush()

    await log.ainfo("group.member_left")

    return group


async def update_password(
    actor_id: UUID,
    group_id: UUID,
    new_password: str,
    settings: Settings,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> Group:
    """
    Replace the group's password. Leader only. There is no way to clear a
    password through here.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    GroupAccessDenied
        If the actor is not the leader.
    InvalidGroupRequest
        If the new password is empty.
    """
    log = log.bind(group_id=group_id, user_id=actor_id)
    group = await read_by_id(group_id, conn, log, lock=True)

    if not access.is_leader(group, actor_id):
        await log.awarning("group.password.access_denied")
        raise GroupAccessDenied("Only the group leader can change the password")

    if not new_password:
        await log.ainfo("group.password.empty")
        raise InvalidGroupRequest("The new password must not be empty")

    group.password_hash = await ahash_password(
        new_password, cost=settings.password_hash_cost
    )
    await conn.flush()

    await log.ainfo("group.password.updated")

    return group


async def delete_group(
    actor_id: UUID,
    group_id: UUID,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> int:
    """
    Delete a group and every diary entry that belongs to it. Leader only.

    The entries go first, then the group. Both happen on `conn`, so they
    commit or roll back together with the surrounding transaction.

    Returns
    -------
    int
        The number of diary entries removed.

    Raises
    ------
    GroupNotFound
        If the group does not exist.
    GroupAccessDenied
        If the actor is not the leader.
    """
    log = log.bind(group_id=group_id, user_id=actor_id)
    group = await read_by_id(group_id, conn, log, lock=True)

    if not access.is_leader(group, actor_id):
        await log.awarning("group.delete.access_denied")
        raise GroupAccessDenied("Only the group leader can delete the group")

    deleted_entries = await diary_service.delete_all_for_group(
        group_id=group_id, conn=conn, log=log
    )

    await conn.delete(group)
    await conn.flush()

    await log.ainfo("group.deleted", deleted_entries=deleted_entries)

    return deleted_entries
