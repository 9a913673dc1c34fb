"""
Core diary entry data model.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from groupdiary.core.uuid import UUID


class DiaryEntryData(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id: UUID
    group_id: UUID | None
    author_id: UUID
    title: str
    content: str
    created_at: datetime
