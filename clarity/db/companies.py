"""Company read operations."""

from typing import Any

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)


def get_company(company_id: str) -> dict[str, Any] | None:
    """
    Fetch a company by ID.

    Args:
        company_id: Company UUID

    Returns:
        Company row as dict, or None if it does not exist
    """
    supabase = get_supabase()

    try:
        response = supabase.table("companies").select("*").eq("id", company_id).execute()
    except Exception as e:
        logger.error(f"Failed to fetch company {company_id}: {e}")
        raise

    if not response.data:
        return None
    return response.data[0]
