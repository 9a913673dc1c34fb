"""
Service layer for the user directory.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from groupdiary.core.uuid import UUID
from groupdiary.database.user import User


class UserNotFound(Exception):
    pass


class UserExistsError(Exception):
    pass


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create(
    name: str,
    email: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> User:
    """
    Creates a user, if one with this email does not exist.

    Raises
    ------
    UserExistsError
        If the email is already registered.
    """
    email = normalize_email(email)

    log = log.bind(email=email)

    existing = (
        await conn.execute(select(User).filter(User.email == email))
    ).scalar_one_or_none()

    if existing is not None:
        await log.ainfo("user.create.exists")
        raise UserExistsError(f"User with email {email} already exists")

    user = User(name=name.strip(), email=email)

    try:
        conn.add(user)
        await conn.flush()
    except IntegrityError:
        await log.ainfo("user.create.exists")
        raise UserExistsError(f"User with email {email} already exists")

    log = log.bind(user_id=user.user_id)
    await log.ainfo("user.created")

    return user


async def read_by_id(user_id: UUID, conn: AsyncSession) -> User:
    res = await conn.get(User, user_id)

    if res is None:
        raise UserNotFound(f"User with ID {user_id} not found in the database")

    return res


async def read_by_email(email: str, conn: AsyncSession) -> User:
    email = normalize_email(email)

    query = select(User).filter(User.email == email)
    res = (await conn.execute(query)).scalar_one_or_none()

    if res is None:
        raise UserNotFound(f"User with email {email} not found in the database")

    return res


async def find_by_emails(emails: list[str], conn: AsyncSession) -> list[User]:
    """
    Resolve a list of emails to users. Emails that do not belong to anybody
    are dropped without error.
    """
    emails = {normalize_email(email) for email in emails if email.strip()}

    if not emails:
        return []

    query = select(User).filter(User.email.in_(emails))
    return list((await conn.execute(query)).scalars().all())
