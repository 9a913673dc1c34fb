"""
FastAPI app
"""

from importlib.metadata import version

from fastapi import FastAPI

from .dependencies import DATABASE_MANAGER, SETTINGS, logger
from .diary import diary_app
from .errors import add_exception_handlers
from .groups import group_app
from .users import user_app

settings = SETTINGS()


async def lifespan(app: FastAPI):
    app.settings = settings

    if settings.create_tables_on_startup:
        await DATABASE_MANAGER.create_all()
        await logger().ainfo("app.tables_created")

    yield

    await DATABASE_MANAGER.dispose()


app = FastAPI(
    lifespan=lifespan,
    title="Group Diary API",
    summary="Shared diary groups: creation, invitations, membership and password gates.",
    version=version("groupdiary"),
)

app = add_exception_handlers(app)

app.include_router(user_app, prefix="/users")
app.include_router(group_app, prefix="/groups")
app.include_router(diary_app, prefix="/diary")
