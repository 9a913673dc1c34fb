"""
User directory endpoints.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from groupdiary.core.user import UserData
from groupdiary.service import user as user_service

from .dependencies import DatabaseDependency, LoggerDependency

user_app = APIRouter(tags=["Users"])


class UserCreationRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")


@user_app.post(
    "",
    summary="Register a user",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "User created."},
        409: {"description": "Email already registered."},
    },
)
async def create_user(
    content: UserCreationRequest,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> UserData:
    user = await user_service.create(
        name=content.name, email=content.email, conn=conn, log=log
    )
    return user.to_core()
