from .article import BlogArticleModel

__all__ = [
    "BlogArticleModel",
]
