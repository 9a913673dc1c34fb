"""
ORM for the user directory.
"""

from sqlmodel import Field, SQLModel

from groupdiary.core.user import UserData
from groupdiary.core.uuid import UUID, uuid7


class User(SQLModel, table=True):
    user_id: UUID = Field(primary_key=True, default_factory=uuid7)

    name: str
    email: str = Field(unique=True, index=True)

    def to_core(self) -> UserData:
        return UserData(user_id=self.user_id, name=self.name, email=self.email)
