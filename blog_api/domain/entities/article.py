"""Domain entities — pure Python business objects, no framework dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from blog_api.domain.slug import slugify


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleStatus(str, Enum):
    """Lifecycle states of a blog article. ``DELETED`` is a soft-delete marker."""

    DRAFT = "draft"
    PUBLISHED = "published"
    DELETED = "deleted"


# Statuses returned by the article listing
LISTED_STATUSES: tuple[ArticleStatus, ...] = (ArticleStatus.DRAFT, ArticleStatus.PUBLISHED)


@dataclass
class Article:
    """Core domain entity representing a blog article.

    ``slug`` is not stored on the entity; it is always computed from the
    current title. ``creation_date`` is fixed when the object is built and no
    method changes it.
    """

    author_id: int
    title: str
    content: str
    keywords: list[str] = field(default_factory=list)
    status: ArticleStatus = ArticleStatus.DRAFT
    publication_date: datetime = field(default_factory=_utcnow)
    cover_picture_ref: str | None = None
    id: int | None = None
    creation_date: datetime = field(default_factory=_utcnow)

    @property
    def slug(self) -> str:
        return slugify(self.title)

    def update(
        self,
        *,
        title: str | None = None,
        content: str | None = None,
        keywords: list[str] | None = None,
        status: ArticleStatus | None = None,
        publication_date: datetime | None = None,
    ) -> None:
        """Apply the given fields; ``None`` leaves the current value untouched."""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        if keywords is not None:
            self.keywords = list(keywords)
        if status is not None:
            self.status = status
        if publication_date is not None:
            self.publication_date = publication_date

    def replace_cover_picture(self, reference: str) -> str | None:
        """Point the article at a new cover picture and return the previous reference."""
        previous = self.cover_picture_ref
        self.cover_picture_ref = reference
        return previous

    def soft_delete(self) -> None:
        """Transition to the deleted state. The record itself is kept."""
        self.status = ArticleStatus.DELETED
