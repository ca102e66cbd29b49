"""Document read operations."""

from typing import Any

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_documents(company_id: str) -> list[dict[str, Any]]:
    """List every document for a company, oldest first."""
    supabase = get_supabase()

    try:
        response = (
            supabase.table("documents")
            .select("id, company_id, title, type, content, file_size, mime_type")
            .eq("company_id", company_id)
            .order("created_at", desc=False)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to list documents for company {company_id}: {e}")
        raise

    rows = response.data or []
    logger.debug(f"Fetched {len(rows)} documents for company {company_id}")
    return rows
