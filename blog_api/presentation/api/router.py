"""Top-level API router — every endpoint lives under ``/api``."""

from fastapi import APIRouter

from blog_api.presentation.api.endpoints.health import router as health_router
from blog_api.presentation.api.endpoints.blog_articles import router as blog_articles_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(blog_articles_router)
