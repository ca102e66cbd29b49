"""Media file read and update operations."""

from typing import Any

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)

MEDIA_COLUMNS = (
    "id, company_id, title, description, file_type, original_filename, file_path, "
    "file_size, mime_type, extracted_text, processing_status"
)


def list_completed_media_files(company_id: str) -> list[dict[str, Any]]:
    """
    List media files for a company whose processing has completed, oldest first.

    Args:
        company_id: Company UUID

    Returns:
        List of media file dicts
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("media_files")
            .select(MEDIA_COLUMNS)
            .eq("company_id", company_id)
            .eq("processing_status", "completed")
            .order("created_at", desc=False)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to list media files for company {company_id}: {e}")
        raise

    rows = response.data or []
    logger.debug(f"Fetched {len(rows)} completed media files for company {company_id}")
    return rows


def get_media_file(media_id: str) -> dict[str, Any] | None:
    """Fetch a media file by ID, or None."""
    supabase = get_supabase()

    response = supabase.table("media_files").select(MEDIA_COLUMNS).eq("id", media_id).execute()
    if not response.data:
        return None
    return response.data[0]


def update_extracted_text(media_id: str, extracted_text: str | None) -> dict[str, Any] | None:
    """
    Overwrite the extracted text of a media file.

    Processing status is left untouched.

    Returns:
        Updated row, or None if the media file does not exist
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("media_files")
            .update({"extracted_text": extracted_text})
            .eq("id", media_id)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to update extracted text for media {media_id}: {e}")
        raise

    if not response.data:
        return None

    logger.info(
        f"Updated extracted text for media {media_id}",
        extra={"extra_data": {"has_text": bool(extracted_text)}},
    )
    return response.data[0]
