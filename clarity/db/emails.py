"""Email read operations."""

from typing import Any

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)

EMAIL_COLUMNS = "id, company_id, subject, from_address, to_addresses, cc_addresses, sent_date, body"


def list_emails(company_id: str) -> list[dict[str, Any]]:
    """List every email for a company, oldest first."""
    supabase = get_supabase()

    try:
        response = (
            supabase.table("emails")
            .select(EMAIL_COLUMNS)
            .eq("company_id", company_id)
            .order("created_at", desc=False)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to list emails for company {company_id}: {e}")
        raise

    rows = response.data or []
    logger.debug(f"Fetched {len(rows)} emails for company {company_id}")
    return rows
