"""Abstract repository interfaces (ports) — define the contract, not the implementation."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from blog_api.domain.entities import Article, ArticleStatus


class ArticleRepository(ABC):
    """Port for article persistence — implemented in the infrastructure layer.

    Every method may raise ``PersistenceError`` when the backend fails.
    """

    @abstractmethod
    async def get_by_id(self, article_id: int) -> Article | None:
        """Retrieve a single article by its ID, whatever its status."""
        ...

    @abstractmethod
    async def get_by_statuses(self, statuses: Iterable[ArticleStatus]) -> list[Article]:
        """Retrieve all articles whose status is in ``statuses``, ordered by ID."""
        ...

    @abstractmethod
    async def create(self, article: Article) -> Article:
        """Persist a new article and return it with the generated ID."""
        ...

    @abstractmethod
    async def update(self, article: Article) -> Article:
        """Write the current state of an existing article."""
        ...
