"""
A shared user object that is serialized.
"""

from pydantic import BaseModel, ConfigDict

from groupdiary.core.uuid import UUID


class UserData(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    name: str
    email: str
