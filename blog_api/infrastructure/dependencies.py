"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.config import get_settings
from blog_api.application.interfaces import PictureStorage
from blog_api.application.services import ArticleService
from blog_api.infrastructure.database.session import get_db_session
from blog_api.infrastructure.database.repositories import SQLAlchemyArticleRepository
from blog_api.infrastructure.storage.local_file_storage import LocalFileStorage


def get_picture_storage() -> PictureStorage:
    """Provides the cover picture storage configured in settings."""
    settings = get_settings()
    return LocalFileStorage(
        pictures_dir=settings.pictures_dir,
        max_bytes=settings.max_upload_bytes,
    )


async def get_article_service(
    session: AsyncSession = Depends(get_db_session),
    storage: PictureStorage = Depends(get_picture_storage),
) -> AsyncGenerator[ArticleService, None]:
    """Provides an ArticleService with its repository and storage wired up.

    The session is committed before superseded cover pictures are removed,
    so a failed commit never leaves a row pointing at a deleted file.
    """
    repository = SQLAlchemyArticleRepository(session)
    service = ArticleService(repository, storage)
    yield service
    await session.commit()
    await service.discard_replaced_pictures()
