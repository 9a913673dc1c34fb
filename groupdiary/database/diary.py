"""
ORM for diary entries. Entries optionally belong to a group; a group's
entries are removed along with it.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from groupdiary.core.diary import DiaryEntryData
from groupdiary.core.uuid import UUID, uuid7


class DiaryEntry(SQLModel, table=True):
    entry_id: UUID = Field(primary_key=True, default_factory=uuid7)

    # Personal entries have no group.
    group_id: UUID | None = Field(default=None, foreign_key="group.group_id", index=True)
    author_id: UUID = Field(foreign_key="user.user_id")

    title: str
    content: str
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    def to_core(self) -> DiaryEntryData:
        return DiaryEntryData(
            entry_id=self.entry_id,
            group_id=self.group_id,
            author_id=self.author_id,
            title=self.title,
            content=self.content,
            created_at=self.created_at,
        )
