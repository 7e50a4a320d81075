"""Pydantic DTOs (Data Transfer Objects) for the blog article feature.

Wire names are camelCase (``authorId``, ``publicationDate``); Python code uses
the snake_case attribute names.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Format used for every timestamp in article projections
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleCreate(BaseModel):
    """Schema for creating a new article.

    Fields are loose on purpose: presence and coercion rules are enforced by
    ``ArticleService`` so that a missing field is a 400, not a schema error.
    """

    model_config = _CAMEL_CONFIG

    author_id: int | str | None = Field(None, examples=[1])
    title: str | None = Field(None, examples=["My Blog Post"])
    content: str | None = Field(None, examples=["Content of the blog post"])
    keywords: list[str] | None = Field(None, examples=[["python", "api"]])
    status: str | None = Field(None, examples=["draft"])
    publication_date: str | None = Field(None, examples=["2024-05-01T10:00:00"])


class ArticleUpdate(BaseModel):
    """Schema for partially updating an article — absent or null fields are left alone."""

    model_config = _CAMEL_CONFIG

    title: str | None = None
    content: str | None = None
    keywords: list[str] | None = None
    status: str | None = None
    publication_date: str | None = None


@dataclass
class CoverPictureUpload:
    """Raw cover picture received with a create or update request."""

    content: bytes
    filename: str
    content_type: str | None = None


class ArticleCreatedResponse(BaseModel):
    """Schema returned after a successful create."""

    id: int
    message: str = "Article created successfully"


class ArticleSummaryResponse(BaseModel):
    """Listing projection."""

    model_config = _CAMEL_CONFIG

    id: int
    title: str
    publication_date: str
    status: str
    slug: str


class ArticleDetailResponse(BaseModel):
    """Full projection of a single article."""

    model_config = _CAMEL_CONFIG

    id: int
    author_id: int
    title: str
    content: str
    publication_date: str
    creation_date: str
    keywords: list[str]
    status: str
    slug: str
    cover_picture_ref: str | None
