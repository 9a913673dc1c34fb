"""
Authorization predicates for group operations. These hold no state and work
on anything exposing `leader_id`, `members` and `invitations` (the ORM
`Group` or a `GroupData` snapshot).
"""

from groupdiary.core.uuid import UUID


def is_self(actor_id: UUID, target_id: UUID) -> bool:
    return actor_id == target_id


def is_leader(group, actor_id: UUID) -> bool:
    return group.leader_id == actor_id


def is_member(group, actor_id: UUID) -> bool:
    return any(member.user_id == actor_id for member in group.members)


def is_invited(group, actor_id: UUID) -> bool:
    return any(invitee.user_id == actor_id for invitee in group.invitations)
