"""Application service (use case) for blog article operations."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from blog_api.application.interfaces import ArticleRepository, PictureStorage
from blog_api.application.schemas import ArticleCreate, ArticleUpdate, CoverPictureUpload
from blog_api.domain.entities import Article, ArticleStatus, LISTED_STATUSES
from blog_api.domain.exceptions import EntityNotFoundError, ValidationError
from blog_api.domain.validation import (
    Violation,
    parse_author_id,
    parse_status,
    validate_article,
)

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields. Please provide title, content, and authorId."
INVALID_DATE_MESSAGE = "Invalid publication date format"


def _is_missing(value: object) -> bool:
    """None, blank strings, 0 and "0" all count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in ("", "0")
    return value == 0 and not isinstance(value, bool)


def parse_publication_date(raw: str | None) -> datetime | None:
    """Parse an ISO-8601 date-time, keeping the submitted wall-clock time.

    Returns None for absent or blank input. Any UTC offset is dropped rather
    than converted, so ``08:45+02:00`` is stored and returned as ``08:45``.
    """
    if raw is None or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip())
    except ValueError:
        raise ValidationError(INVALID_DATE_MESSAGE) from None
    return parsed.replace(tzinfo=timezone.utc)


def _raise_for_violations(article: Article, coercion_violations: list[Violation]) -> None:
    """Merge coercion problems with the entity rule set and raise if anything failed."""
    violations = list(coercion_violations)
    already_reported = {v.field for v in violations}
    violations.extend(v for v in validate_article(article) if v.field not in already_reported)
    if violations:
        raise ValidationError([str(v) for v in violations])


class ArticleService:
    """Orchestrates blog article business logic.

    Depends on the repository and picture storage ports (DI). Input is
    validated in full before any picture is written, and a picture written
    for a request whose persistence then fails is removed again.

    Pictures replaced by an update are only queued; the caller removes them
    with ``discard_replaced_pictures()`` once the unit of work is committed.
    """

    def __init__(self, repository: ArticleRepository, storage: PictureStorage):
        self._repository = repository
        self._storage = storage
        self._replaced_pictures: list[str] = []

    async def get_article(self, article_id: int) -> Article:
        article = await self._repository.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        return article

    async def list_articles(self) -> list[Article]:
        """Return draft and published articles, deleted ones excluded."""
        return await self._repository.get_by_statuses(LISTED_STATUSES)

    async def create_article(
        self, data: ArticleCreate, picture: CoverPictureUpload | None = None
    ) -> Article:
        if any(_is_missing(v) for v in (data.title, data.content, data.author_id)):
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        coercion_violations: list[Violation] = []

        author_id = parse_author_id(data.author_id)
        if isinstance(author_id, Violation):
            coercion_violations.append(author_id)
            author_id = None

        status = parse_status(data.status or ArticleStatus.DRAFT.value)
        if isinstance(status, Violation):
            coercion_violations.append(status)
            status = ArticleStatus.DRAFT

        article = Article(
            author_id=author_id,
            title=data.title,
            content=data.content,
            keywords=list(data.keywords or []),
            status=status,
        )

        publication_date = parse_publication_date(data.publication_date)
        if publication_date is not None:
            article.publication_date = publication_date

        _raise_for_violations(article, coercion_violations)

        if picture is not None:
            article.cover_picture_ref = await self._store_picture(picture)

        try:
            created = await self._repository.create(article)
        except Exception:
            if article.cover_picture_ref:
                await self._discard_picture(article.cover_picture_ref)
            raise

        logger.info("Created article %s (slug=%s)", created.id, created.slug)
        return created

    async def update_article(
        self,
        article_id: int,
        data: ArticleUpdate,
        picture: CoverPictureUpload | None = None,
    ) -> Article:
        article = await self.get_article(article_id)

        coercion_violations: list[Violation] = []
        status: ArticleStatus | None = None
        if data.status is not None:
            parsed = parse_status(data.status)
            if isinstance(parsed, Violation):
                coercion_violations.append(parsed)
            else:
                status = parsed

        article.update(
            title=data.title,
            content=data.content,
            keywords=data.keywords,
            status=status,
            publication_date=parse_publication_date(data.publication_date),
        )

        _raise_for_violations(article, coercion_violations)

        previous_picture: str | None = None
        if picture is not None:
            stored = await self._store_picture(picture)
            previous_picture = article.replace_cover_picture(stored)

        try:
            updated = await self._repository.update(article)
        except Exception:
            if picture is not None and article.cover_picture_ref:
                await self._discard_picture(article.cover_picture_ref)
            raise

        if previous_picture:
            self._replaced_pictures.append(previous_picture)

        logger.info("Updated article %s", article_id)
        return updated

    async def discard_replaced_pictures(self) -> None:
        """Remove cover pictures superseded by committed updates (best-effort)."""
        while self._replaced_pictures:
            await self._discard_picture(self._replaced_pictures.pop())

    async def delete_article(self, article_id: int) -> Article:
        """Soft delete: mark the article as deleted, keep the row and its picture."""
        article = await self.get_article(article_id)
        article.soft_delete()
        deleted = await self._repository.update(article)
        logger.info("Soft-deleted article %s", article_id)
        return deleted

    async def get_cover_picture_path(self, article_id: int) -> Path:
        article = await self.get_article(article_id)
        if not article.cover_picture_ref:
            raise EntityNotFoundError("CoverPicture", article_id)
        path = self._storage.path_for(article.cover_picture_ref)
        if not path.is_file():
            raise EntityNotFoundError("CoverPicture", article_id)
        return path

    # ── Helpers ─────────────────────────────────────────────────────

    async def _store_picture(self, picture: CoverPictureUpload) -> str:
        return await self._storage.store(
            picture.content, picture.filename, picture.content_type
        )

    async def _discard_picture(self, filename: str) -> None:
        removed = await self._storage.delete(filename)
        if not removed:
            logger.warning("Cover picture %s could not be removed", filename)
