"""
Core group data models.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from groupdiary.core.uuid import UUID

from .user import UserData


class GroupData(BaseModel):
    """
    Snapshot of a group. The password hash never leaves the database layer;
    only whether one is set.
    """

    model_config = ConfigDict(frozen=True)

    group_id: UUID
    group_name: str
    leader_id: UUID
    leader: UserData
    created_at: datetime
    members: list[UserData]
    invitations: list[UserData]
    has_password: bool


class InvitationData(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: UUID
    group_name: str
    inviter_name: str
