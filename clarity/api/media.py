"""Media endpoints: text re-extraction and content-type suggestion."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from clarity.api.dependencies import get_media_record_store, get_media_store
from clarity.core.config import get_settings
from clarity.core.content_classifier import ContentSuggestion, suggest_content_type
from clarity.core.errors import NotFoundError, StorageError
from clarity.core.logging import get_logger
from clarity.core.media_text import extract_media_text, reextract_media_asset
from clarity.core.stores import BinaryStore, MediaStore

logger = get_logger(__name__)

router = APIRouter()


class ReextractResponse(BaseModel):
    success: bool
    has_text: bool


@router.post("/{media_id}/extract", response_model=ReextractResponse)
async def reextract_media_text(
    media_id: str,
    binary_store: BinaryStore = Depends(get_media_store),
    media_store: MediaStore = Depends(get_media_record_store),
) -> ReextractResponse:
    """Re-run text extraction for an uploaded file and store the result."""
    try:
        has_text = await reextract_media_asset(media_id, binary_store, media_store)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except StorageError as e:
        logger.error(f"Re-extraction failed for media {media_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    return ReextractResponse(success=True, has_text=has_text)


@router.post("/analyze", response_model=ContentSuggestion)
async def analyze_media(file: UploadFile = File(...)) -> ContentSuggestion:
    """Suggest a content type and title for a file without storing it."""
    settings = get_settings()
    raw_bytes = await file.read()
    filename = file.filename or "upload"
    mime_type = file.content_type or "application/octet-stream"

    text = extract_media_text(filename, mime_type, raw_bytes)

    return await suggest_content_type(
        text=text,
        filename=filename,
        api_key=settings.ANTHROPIC_API_KEY,
        model=settings.CLASSIFIER_MODEL,
        max_chars=settings.CLASSIFIER_MAX_CHARS,
    )
