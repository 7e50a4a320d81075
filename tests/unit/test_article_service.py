"""Unit tests for the ArticleService."""

import copy
from datetime import datetime, timezone
from pathlib import Path

import pytest

from blog_api.application.interfaces import ArticleRepository, PictureStorage
from blog_api.application.schemas import ArticleCreate, ArticleUpdate, CoverPictureUpload
from blog_api.application.services import ArticleService
from blog_api.application.services.article_service import (
    INVALID_DATE_MESSAGE,
    MISSING_FIELDS_MESSAGE,
)
from blog_api.domain.entities import Article, ArticleStatus
from blog_api.domain.exceptions import (
    EntityNotFoundError,
    PersistenceError,
    StorageError,
    ValidationError,
)


# ── Fakes ────────────────────────────────────────────────────────────

class FakeArticleRepository(ArticleRepository):
    """In-memory fake repository. Stores copies, like a real database would."""

    def __init__(self):
        self._articles: dict[int, Article] = {}
        self._next_id = 1
        self.fail_writes = False

    async def get_by_id(self, article_id: int) -> Article | None:
        article = self._articles.get(article_id)
        return copy.deepcopy(article) if article else None

    async def get_by_statuses(self, statuses) -> list[Article]:
        wanted = set(statuses)
        return [
            copy.deepcopy(a)
            for _, a in sorted(self._articles.items())
            if a.status in wanted
        ]

    async def create(self, article: Article) -> Article:
        if self.fail_writes:
            raise PersistenceError("Error saving article: disk full")
        article.id = self._next_id
        self._next_id += 1
        self._articles[article.id] = copy.deepcopy(article)
        return copy.deepcopy(article)

    async def update(self, article: Article) -> Article:
        if self.fail_writes:
            raise PersistenceError("Error saving article: disk full")
        self._articles[article.id] = copy.deepcopy(article)
        return copy.deepcopy(article)


class FakePictureStorage(PictureStorage):
    """Keeps stored pictures in a dict keyed by generated filename."""

    def __init__(self, fail: bool = False):
        self.files: dict[str, bytes] = {}
        self.fail = fail
        self._counter = 0

    async def store(self, content: bytes, original_filename: str, content_type: str | None = None) -> str:
        if self.fail:
            raise StorageError("Error uploading file: read-only filesystem")
        self._counter += 1
        name = f"{Path(original_filename).stem}-{self._counter}.png"
        self.files[name] = content
        return name

    async def delete(self, filename: str) -> bool:
        return self.files.pop(filename, None) is not None

    def path_for(self, filename: str) -> Path:
        return Path("/nonexistent") / filename


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def repository() -> FakeArticleRepository:
    return FakeArticleRepository()


@pytest.fixture
def storage() -> FakePictureStorage:
    return FakePictureStorage()


@pytest.fixture
def service(repository, storage) -> ArticleService:
    return ArticleService(repository, storage)


def _create_data(**overrides) -> ArticleCreate:
    fields = {
        "title": "My Blog Post",
        "content": "Content of the blog post",
        "authorId": 1,
    }
    fields.update(overrides)
    return ArticleCreate.model_validate(fields)


def _picture(name: str = "cover.png") -> CoverPictureUpload:
    return CoverPictureUpload(content=b"\x89PNG fake", filename=name, content_type="image/png")


# ── Create ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_article_applies_defaults(service: ArticleService):
    article = await service.create_article(_create_data())

    assert article.id == 1
    assert article.status is ArticleStatus.DRAFT
    assert article.slug == "my-blog-post"
    assert article.keywords == []
    assert article.author_id == 1
    assert article.cover_picture_ref is None


@pytest.mark.asyncio
async def test_create_article_coerces_form_author_id(service: ArticleService):
    article = await service.create_article(_create_data(authorId="42"))
    assert article.author_id == 42


@pytest.mark.asyncio
async def test_create_article_keeps_keyword_order_and_duplicates(service: ArticleService):
    article = await service.create_article(_create_data(keywords=["b", "a", "b"]))
    assert article.keywords == ["b", "a", "b"]


@pytest.mark.asyncio
async def test_create_article_parses_publication_date(service: ArticleService):
    article = await service.create_article(_create_data(publicationDate="2024-05-01T10:30:00"))
    assert article.publication_date == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_article_keeps_wall_clock_of_offset_dates(service: ArticleService):
    article = await service.create_article(
        _create_data(publicationDate="2024-03-15T08:45:00+02:00")
    )
    assert article.publication_date == datetime(2024, 3, 15, 8, 45, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_article_defaults_publication_date_to_now(service: ArticleService):
    before = datetime.now(timezone.utc)
    article = await service.create_article(_create_data())
    assert before <= article.publication_date <= datetime.now(timezone.utc)


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["title", "content", "authorId"])
async def test_create_article_requires_fields(service: ArticleService, repository, missing):
    data = _create_data(**{missing: None})
    with pytest.raises(ValidationError) as exc_info:
        await service.create_article(data)
    assert exc_info.value.messages == [MISSING_FIELDS_MESSAGE]
    assert await repository.get_by_statuses(list(ArticleStatus)) == []


@pytest.mark.asyncio
async def test_create_article_rejects_empty_title(service: ArticleService):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_article(_create_data(title="   "))
    assert exc_info.value.messages == [MISSING_FIELDS_MESSAGE]


@pytest.mark.asyncio
async def test_create_article_rejects_bad_publication_date(service: ArticleService, repository):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_article(_create_data(publicationDate="next tuesday"))
    assert exc_info.value.messages == [INVALID_DATE_MESSAGE]
    assert await repository.get_by_id(1) is None


@pytest.mark.asyncio
async def test_create_article_collects_all_violations(service: ArticleService):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_article(
            _create_data(title="x" * 101, status="archived", authorId="abc")
        )
    messages = exc_info.value.messages
    assert "authorId: This value should be a valid integer." in messages
    assert "status: The value you selected is not a valid choice." in messages
    assert any(m.startswith("title: This value is too long") for m in messages)
    assert len(messages) == 3


@pytest.mark.asyncio
async def test_create_article_stores_cover_picture(service: ArticleService, storage):
    article = await service.create_article(_create_data(), _picture())
    assert article.cover_picture_ref in storage.files


@pytest.mark.asyncio
async def test_create_article_validates_before_storing(service: ArticleService, storage):
    with pytest.raises(ValidationError):
        await service.create_article(_create_data(status="bogus"), _picture())
    assert storage.files == {}


@pytest.mark.asyncio
async def test_create_article_storage_failure(repository):
    service = ArticleService(repository, FakePictureStorage(fail=True))
    with pytest.raises(StorageError):
        await service.create_article(_create_data(), _picture())
    assert await repository.get_by_id(1) is None


@pytest.mark.asyncio
async def test_create_article_persistence_failure_removes_picture(service, repository, storage):
    repository.fail_writes = True
    with pytest.raises(PersistenceError):
        await service.create_article(_create_data(), _picture())
    assert storage.files == {}


@pytest.mark.asyncio
async def test_create_article_unexpected_write_error_removes_picture(
    service, repository, storage, monkeypatch
):
    async def overflow(article):
        raise OverflowError("Python int too large to convert to SQLite INTEGER")

    monkeypatch.setattr(repository, "create", overflow)
    with pytest.raises(OverflowError):
        await service.create_article(_create_data(), _picture())
    assert storage.files == {}


@pytest.mark.asyncio
async def test_create_article_rejects_out_of_range_author_id(service, storage):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_article(_create_data(authorId="99999999999999999999"), _picture())
    assert exc_info.value.messages[0].startswith("authorId: This value should be between")
    assert storage.files == {}


@pytest.mark.asyncio
async def test_create_article_accepts_negative_author_id(service: ArticleService):
    article = await service.create_article(_create_data(authorId=-7))
    assert article.author_id == -7


@pytest.mark.asyncio
@pytest.mark.parametrize("author_id", [0, "0"])
async def test_create_article_zero_author_id_is_missing(service: ArticleService, author_id):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_article(_create_data(authorId=author_id))
    assert exc_info.value.messages == [MISSING_FIELDS_MESSAGE]


@pytest.mark.asyncio
async def test_update_article_failure_keeps_previous_picture(service, repository, storage):
    created = await service.create_article(_create_data(), _picture("old.png"))
    repository.fail_writes = True

    with pytest.raises(PersistenceError):
        await service.update_article(created.id, ArticleUpdate(), _picture("new.png"))
    await service.discard_replaced_pictures()

    assert list(storage.files) == [created.cover_picture_ref]


# ── List / Get ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_articles_excludes_deleted(service: ArticleService):
    first = await service.create_article(_create_data(title="First"))
    second = await service.create_article(_create_data(title="Second", status="published"))
    third = await service.create_article(_create_data(title="Third"))
    await service.delete_article(second.id)

    listed = await service.list_articles()
    assert [a.id for a in listed] == [first.id, third.id]


@pytest.mark.asyncio
async def test_get_article_returns_deleted(service: ArticleService):
    created = await service.create_article(_create_data())
    await service.delete_article(created.id)
    article = await service.get_article(created.id)
    assert article.status is ArticleStatus.DELETED


@pytest.mark.asyncio
async def test_get_article_not_found(service: ArticleService):
    with pytest.raises(EntityNotFoundError):
        await service.get_article(999)


# ── Update ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_article_only_changes_present_fields(service: ArticleService):
    created = await service.create_article(_create_data(keywords=["python"]))
    await service.update_article(created.id, ArticleUpdate(status="published"))

    article = await service.get_article(created.id)
    assert article.status is ArticleStatus.PUBLISHED
    assert article.title == created.title
    assert article.content == created.content
    assert article.slug == created.slug
    assert article.keywords == ["python"]
    assert article.creation_date == created.creation_date


@pytest.mark.asyncio
async def test_update_article_title_recomputes_slug(service: ArticleService):
    created = await service.create_article(_create_data())
    updated = await service.update_article(created.id, ArticleUpdate(title="A Brand New Title"))
    assert updated.slug == "a-brand-new-title"


@pytest.mark.asyncio
async def test_update_article_bad_date_leaves_article_untouched(service: ArticleService):
    created = await service.create_article(_create_data())
    with pytest.raises(ValidationError):
        await service.update_article(
            created.id, ArticleUpdate(title="Changed", publication_date="31/31/2024")
        )
    article = await service.get_article(created.id)
    assert article.title == "My Blog Post"


@pytest.mark.asyncio
async def test_update_article_rejects_blank_content(service: ArticleService):
    created = await service.create_article(_create_data())
    with pytest.raises(ValidationError) as exc_info:
        await service.update_article(created.id, ArticleUpdate(content=""))
    assert exc_info.value.messages == ["content: This value should not be blank."]
    article = await service.get_article(created.id)
    assert article.content == "Content of the blog post"


@pytest.mark.asyncio
async def test_update_article_defers_removing_replaced_picture(service: ArticleService, storage):
    created = await service.create_article(_create_data(), _picture("old.png"))
    old_ref = created.cover_picture_ref

    updated = await service.update_article(created.id, ArticleUpdate(), _picture("new.png"))

    assert updated.cover_picture_ref != old_ref
    assert old_ref in storage.files

    await service.discard_replaced_pictures()
    assert old_ref not in storage.files
    assert updated.cover_picture_ref in storage.files


@pytest.mark.asyncio
async def test_update_article_not_found(service: ArticleService):
    with pytest.raises(EntityNotFoundError):
        await service.update_article(999, ArticleUpdate(title="Nope"))


# ── Delete ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delete_article_is_soft_and_idempotent(service: ArticleService, storage):
    created = await service.create_article(_create_data(), _picture())

    await service.delete_article(created.id)
    await service.delete_article(created.id)

    article = await service.get_article(created.id)
    assert article.status is ArticleStatus.DELETED
    assert article.cover_picture_ref in storage.files


@pytest.mark.asyncio
async def test_delete_article_not_found(service: ArticleService):
    with pytest.raises(EntityNotFoundError):
        await service.delete_article(999)


@pytest.mark.asyncio
async def test_cover_picture_path_missing(service: ArticleService):
    created = await service.create_article(_create_data())
    with pytest.raises(EntityNotFoundError):
        await service.get_cover_picture_path(created.id)
