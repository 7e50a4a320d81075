"""Concrete repository implementation backed by SQLAlchemy."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.application.interfaces import ArticleRepository
from blog_api.domain.entities import Article, ArticleStatus
from blog_api.domain.exceptions import PersistenceError
from blog_api.infrastructure.database.models import BlogArticleModel


class SQLAlchemyArticleRepository(ArticleRepository):
    """Implements the ArticleRepository port using SQLAlchemy async sessions.

    Writes are flushed, not committed; the request-scoped session commits.
    Database errors, and values the driver cannot bind, surface as
    ``PersistenceError``.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: BlogArticleModel) -> Article:
        """Map ORM model → domain entity."""
        return Article(
            id=model.id,
            author_id=model.author_id,
            title=model.title,
            content=model.content,
            keywords=list(model.keywords or []),
            status=ArticleStatus(model.status),
            publication_date=model.publication_date,
            creation_date=model.creation_date,
            cover_picture_ref=model.cover_picture_ref,
        )

    def _to_model(self, entity: Article) -> BlogArticleModel:
        """Map domain entity → ORM model (for creation)."""
        return BlogArticleModel(
            author_id=entity.author_id,
            title=entity.title,
            content=entity.content,
            keywords=list(entity.keywords),
            status=entity.status.value,
            slug=entity.slug,
            publication_date=entity.publication_date,
            creation_date=entity.creation_date,
            cover_picture_ref=entity.cover_picture_ref,
        )

    async def get_by_id(self, article_id: int) -> Article | None:
        try:
            result = await self._session.get(BlogArticleModel, article_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Error loading article: {exc}") from exc
        return self._to_entity(result) if result else None

    async def get_by_statuses(self, statuses: Iterable[ArticleStatus]) -> list[Article]:
        stmt = (
            select(BlogArticleModel)
            .where(BlogArticleModel.status.in_([s.value for s in statuses]))
            .order_by(BlogArticleModel.id.asc())
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Error listing articles: {exc}") from exc
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, article: Article) -> Article:
        model = self._to_model(article)
        try:
            self._session.add(model)
            await self._session.flush()
        except (SQLAlchemyError, OverflowError) as exc:
            raise PersistenceError(f"Error saving article: {exc}") from exc
        return self._to_entity(model)

    async def update(self, article: Article) -> Article:
        try:
            model = await self._session.get(BlogArticleModel, article.id)
            if model is None:
                raise PersistenceError(f"Article {article.id} not found in database")
            model.title = article.title
            model.slug = article.slug
            model.content = article.content
            model.keywords = list(article.keywords)
            model.status = article.status.value
            model.publication_date = article.publication_date
            model.cover_picture_ref = article.cover_picture_ref
            await self._session.flush()
        except (SQLAlchemyError, OverflowError) as exc:
            raise PersistenceError(f"Error saving article: {exc}") from exc
        return self._to_entity(model)
