"""Input normalization for blog article requests.

Turns either a form submission (multipart or url-encoded) or a JSON body into the
typed ``ArticleCreate`` / ``ArticleUpdate`` DTOs plus an optional cover
picture. No side effects beyond reading the request.
"""

import json
import logging
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from starlette.datastructures import UploadFile

from blog_api.application.schemas import ArticleCreate, ArticleUpdate, CoverPictureUpload
from blog_api.domain.entities import ArticleStatus
from blog_api.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
INVALID_KEYWORDS_MESSAGE = "keywords: This value should be a JSON array of strings."

_FORM_TEXT_FIELDS = ("authorId", "title", "content", "status", "publicationDate")

_SchemaT = TypeVar("_SchemaT", bound=BaseModel)


def is_form_submission(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return any(form_type in content_type for form_type in FORM_CONTENT_TYPES)


def parse_keywords(raw: str, *, strict: bool = False) -> list[Any] | None:
    """Decode a JSON-array keywords string from a form field.

    Malformed input returns None (treated as absent) unless ``strict``.
    """
    try:
        value = json.loads(raw)
    except ValueError:
        value = None
    if isinstance(value, list):
        return value
    if strict:
        raise ValidationError(INVALID_KEYWORDS_MESSAGE)
    logger.debug("Ignoring malformed keywords field: %r", raw)
    return None


async def _read_form(
    request: Request, *, apply_defaults: bool, strict_keywords: bool
) -> tuple[dict[str, Any], CoverPictureUpload | None]:
    fields: dict[str, Any] = {}
    picture: CoverPictureUpload | None = None

    async with request.form() as form:
        for name in _FORM_TEXT_FIELDS:
            value = form.get(name)
            if isinstance(value, str):
                fields[name] = value

        raw_keywords = form.get("keywords")
        if isinstance(raw_keywords, str):
            keywords = parse_keywords(raw_keywords, strict=strict_keywords)
            if keywords is not None:
                fields["keywords"] = keywords

        upload = form.get("coverPicture")
        if isinstance(upload, UploadFile) and upload.filename:
            content = await upload.read()
            if content:
                picture = CoverPictureUpload(
                    content=content,
                    filename=upload.filename,
                    content_type=upload.content_type,
                )

    if apply_defaults:
        fields.setdefault("keywords", [])
        fields.setdefault("status", ArticleStatus.DRAFT.value)
    return fields, picture


async def _read_json(request: Request) -> dict[str, Any]:
    """Parse the body as a JSON object; anything else yields an empty map."""
    body = await request.body()
    if not body:
        return {}
    try:
        data = json.loads(body)
    except ValueError:
        logger.debug("Request body is not valid JSON")
        return {}
    return data if isinstance(data, dict) else {}


def _to_schema(schema: type[_SchemaT], fields: dict[str, Any]) -> _SchemaT:
    try:
        return schema.model_validate(fields)
    except SchemaValidationError as exc:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ValidationError(messages) from None


async def read_create_payload(
    request: Request, *, strict_keywords: bool = False
) -> tuple[ArticleCreate, CoverPictureUpload | None]:
    if is_form_submission(request):
        fields, picture = await _read_form(
            request, apply_defaults=True, strict_keywords=strict_keywords
        )
    else:
        fields, picture = await _read_json(request), None
    return _to_schema(ArticleCreate, fields), picture


async def read_update_payload(
    request: Request, *, strict_keywords: bool = False
) -> tuple[ArticleUpdate, CoverPictureUpload | None]:
    if is_form_submission(request):
        fields, picture = await _read_form(
            request, apply_defaults=False, strict_keywords=strict_keywords
        )
    else:
        fields, picture = await _read_json(request), None
    return _to_schema(ArticleUpdate, fields), picture
