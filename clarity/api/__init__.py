"""API router for v1 endpoints."""

from fastapi import APIRouter

from clarity.api import ai, media

router = APIRouter()

# Ask AI and chat history
router.include_router(ai.router, prefix="/ai", tags=["ai"])

# Media text re-extraction and content analysis
router.include_router(media.router, prefix="/media", tags=["media"])
