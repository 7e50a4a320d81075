from .article_repository import ArticleRepository
from .picture_storage import PictureStorage

__all__ = [
    "ArticleRepository",
    "PictureStorage",
]
