from .article import (
    DATE_FORMAT,
    ArticleCreate,
    ArticleUpdate,
    CoverPictureUpload,
    ArticleCreatedResponse,
    ArticleSummaryResponse,
    ArticleDetailResponse,
)

__all__ = [
    "DATE_FORMAT",
    "ArticleCreate",
    "ArticleUpdate",
    "CoverPictureUpload",
    "ArticleCreatedResponse",
    "ArticleSummaryResponse",
    "ArticleDetailResponse",
]
