"""Blog article CRUD endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse

from blog_api.application.schemas import (
    DATE_FORMAT,
    ArticleCreatedResponse,
    ArticleDetailResponse,
    ArticleSummaryResponse,
)
from blog_api.application.services import ArticleService
from blog_api.config import get_settings
from blog_api.domain.entities import Article
from blog_api.domain.exceptions import (
    EntityNotFoundError,
    PersistenceError,
    StorageError,
    ValidationError,
)
from blog_api.infrastructure.dependencies import get_article_service
from blog_api.presentation.api.article_payload import read_create_payload, read_update_payload

router = APIRouter(prefix="/blog-articles", tags=["Blog Articles"])


# ── Helpers ──────────────────────────────────────────────────────────

def _format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def _to_summary(article: Article) -> ArticleSummaryResponse:
    return ArticleSummaryResponse(
        id=article.id,
        title=article.title,
        publication_date=_format_date(article.publication_date),
        status=article.status.value,
        slug=article.slug,
    )


def _to_detail(article: Article) -> ArticleDetailResponse:
    return ArticleDetailResponse(
        id=article.id,
        author_id=article.author_id,
        title=article.title,
        content=article.content,
        publication_date=_format_date(article.publication_date),
        creation_date=_format_date(article.creation_date),
        keywords=article.keywords,
        status=article.status.value,
        slug=article.slug,
        cover_picture_ref=article.cover_picture_ref,
    )


# ── Endpoints ────────────────────────────────────────────────────────

@router.post("", response_model=ArticleCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    request: Request,
    service: ArticleService = Depends(get_article_service),
) -> ArticleCreatedResponse:
    """Create a new article from a multipart form or a JSON body."""
    settings = get_settings()
    try:
        data, picture = await read_create_payload(
            request, strict_keywords=settings.strict_keywords
        )
        article = await service.create_article(data, picture)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.messages)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return ArticleCreatedResponse(id=article.id)


@router.get("", response_model=list[ArticleSummaryResponse])
async def list_articles(
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleSummaryResponse]:
    """List draft and published articles, ordered by ID."""
    articles = await service.list_articles()
    return [_to_summary(a) for a in articles]


@router.get("/{article_id}", response_model=ArticleDetailResponse)
async def get_article(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
) -> ArticleDetailResponse:
    """Retrieve a single article by ID, including soft-deleted ones."""
    try:
        article = await service.get_article(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _to_detail(article)


@router.patch("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_article(
    article_id: int,
    request: Request,
    service: ArticleService = Depends(get_article_service),
) -> None:
    """Partially update an article; only submitted fields change."""
    settings = get_settings()
    try:
        # Unknown ids are reported before any payload problem
        await service.get_article(article_id)
        data, picture = await read_update_payload(
            request, strict_keywords=settings.strict_keywords
        )
        await service.update_article(article_id, data, picture)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.messages)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
) -> None:
    """Soft-delete an article by ID."""
    try:
        await service.delete_article(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{article_id}/cover-picture")
async def download_cover_picture(
    article_id: int,
    service: ArticleService = Depends(get_article_service),
):
    """Download the article's cover picture."""
    try:
        path = await service.get_cover_picture_path(article_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return FileResponse(path=str(path), filename=path.name)
