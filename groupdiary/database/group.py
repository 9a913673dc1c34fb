"""
Group ORM
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel

from groupdiary.core.group import GroupData
from groupdiary.core.uuid import UUID, uuid7

if TYPE_CHECKING:
    from .user import User


class GroupMembership(SQLModel, table=True):
    """
    A record of a user's group membership.
    """

    user_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="user.user_id", ondelete="CASCADE"
    )
    group_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="group.group_id", ondelete="CASCADE"
    )


class GroupInvitation(SQLModel, table=True):
    """
    A pending invitation for a user to join a group.
    """

    user_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="user.user_id", ondelete="CASCADE"
    )
    group_id: Optional[UUID] = Field(
        primary_key=True, foreign_key="group.group_id", ondelete="CASCADE"
    )


class Group(SQLModel, table=True):
    group_id: UUID = Field(primary_key=True, default_factory=uuid7)

    group_name: str
    leader_id: UUID = Field(foreign_key="user.user_id")
    leader: "User" = Relationship(sa_relationship_kwargs=dict(lazy="joined"))
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    # None means the group is open.
    password_hash: str | None = None

    members: list["User"] = Relationship(
        link_model=GroupMembership,
        sa_relationship_kwargs=dict(lazy="joined"),
    )
    invitations: list["User"] = Relationship(
        link_model=GroupInvitation,
        sa_relationship_kwargs=dict(lazy="joined"),
    )

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    def to_core(self) -> GroupData:
        """
        Convert this Group ORM object to a GroupData core object.
        """
        return GroupData(
            group_id=self.group_id,
            group_name=self.group_name,
            leader_id=self.leader_id,
            leader=self.leader.to_core(),
            created_at=self.created_at,
            members=[member.to_core() for member in self.members],
            invitations=[invitee.to_core() for invitee in self.invitations],
            has_password=self.has_password,
        )
