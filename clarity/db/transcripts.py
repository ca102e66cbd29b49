"""Transcript read operations."""

from typing import Any

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)

TRANSCRIPT_COLUMNS = (
    "id, company_id, title, meeting_date, duration_minutes, participants, "
    "content, summary, key_points, video_url"
)


def list_transcripts(company_id: str) -> list[dict[str, Any]]:
    """
    List every transcript for a company, oldest first.

    Args:
        company_id: Company UUID

    Returns:
        List of transcript dicts (full content included)
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("transcripts")
            .select(TRANSCRIPT_COLUMNS)
            .eq("company_id", company_id)
            .order("created_at", desc=False)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to list transcripts for company {company_id}: {e}")
        raise

    rows = response.data or []
    logger.debug(f"Fetched {len(rows)} transcripts for company {company_id}")
    return rows
