from .article import Article, ArticleStatus, LISTED_STATUSES

__all__ = [
    "Article",
    "ArticleStatus",
    "LISTED_STATUSES",
]
