"""Field-level rule set for the Article entity.

Rules never raise; they return a list of violations so that every problem
with an article can be reported in a single response.
"""

from dataclasses import dataclass

from blog_api.domain.entities import Article, ArticleStatus

TITLE_MAX_LENGTH = 100

# Range of the author_id INTEGER column
AUTHOR_ID_MIN = -(2**31)
AUTHOR_ID_MAX = 2**31 - 1

NOT_BLANK = "This value should not be blank."
OUT_OF_RANGE = "This value should be between {min} and {max}."
NOT_INTEGER = "This value should be a valid integer."
TOO_LONG = "This value is too long. It should have {limit} characters or less."
INVALID_CHOICE = "The value you selected is not a valid choice."


@dataclass(frozen=True)
class Violation:
    """A single broken rule, keyed by the API field name."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_article(article: Article) -> list[Violation]:
    violations: list[Violation] = []

    if article.author_id is None:
        violations.append(Violation("authorId", NOT_BLANK))

    if _is_blank(article.title):
        violations.append(Violation("title", NOT_BLANK))
    elif len(article.title) > TITLE_MAX_LENGTH:
        violations.append(Violation("title", TOO_LONG.format(limit=TITLE_MAX_LENGTH)))

    if _is_blank(article.content):
        violations.append(Violation("content", NOT_BLANK))

    if not isinstance(article.status, ArticleStatus):
        violations.append(Violation("status", INVALID_CHOICE))

    return violations


def parse_status(raw: str) -> ArticleStatus | Violation:
    """Map a status string onto the enum, or return the violation it causes."""
    try:
        return ArticleStatus(raw)
    except ValueError:
        return Violation("status", INVALID_CHOICE)


def parse_author_id(raw: int | str) -> int | Violation:
    """Coerce an author id from JSON (int) or form data (str)."""
    if isinstance(raw, bool):
        return Violation("authorId", NOT_INTEGER)
    try:
        value = int(str(raw).strip())
    except ValueError:
        return Violation("authorId", NOT_INTEGER)
    if not AUTHOR_ID_MIN <= value <= AUTHOR_ID_MAX:
        return Violation(
            "authorId", OUT_OF_RANGE.format(min=AUTHOR_ID_MIN, max=AUTHOR_ID_MAX)
        )
    return value
