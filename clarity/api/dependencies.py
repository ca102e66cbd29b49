"""Shared FastAPI dependencies."""

from functools import lru_cache

from fastapi import Header, HTTPException

from clarity.core.ask_orchestrator import AskOrchestrator, build_orchestrator
from clarity.core.config import get_settings
from clarity.core.stores import BinaryStore, MediaStore, SupabaseMediaStore, get_binary_store


@lru_cache(maxsize=1)
def get_ask_orchestrator() -> AskOrchestrator:
    """Process-wide orchestrator built from settings."""
    return build_orchestrator(get_settings())


def get_media_store() -> BinaryStore:
    settings = get_settings()
    return get_binary_store(settings.MEDIA_ROOT, settings.MEDIA_STORAGE_BUCKET)


def get_media_record_store() -> MediaStore:
    return SupabaseMediaStore()


def get_requesting_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """ID of the authenticated user, set by the auth proxy in front of this service."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id
