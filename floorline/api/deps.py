import uuid
from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.common.logging import get_logger
from floorline.core.scheduling.service import get_project
from floorline.db.models.project import Project
from floorline.db.session import async_session_factory

logger = get_logger("api.deps")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One unit of work per request: commit on success, roll back on any error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.debug("Rolled back request session after %s", type(exc).__name__)
            raise


async def valid_project(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Project:
    """Resolve the ``{project_id}`` path parameter or answer 404."""
    return await get_project(project_id, db)
