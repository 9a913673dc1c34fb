"""
Meta functionality for the database.
"""

from .diary import DiaryEntry
from .group import Group, GroupInvitation, GroupMembership
from .user import User

ALL_TABLES = (
    DiaryEntry,
    Group,
    GroupInvitation,
    GroupMembership,
    User,
)
