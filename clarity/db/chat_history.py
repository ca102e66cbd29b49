"""Ask AI chat history persistence."""

from typing import Any

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)


def insert_chat_history(
    company_id: str,
    user_id: str,
    question: str,
    answer: str,
    sources: list[dict[str, Any]],
) -> dict[str, Any]:
    """
    Insert one question/answer/sources exchange.

    Args:
        company_id: Company UUID
        user_id: UUID of the user who asked
        question: Question text
        answer: Answer text
        sources: Source dicts (stored as JSONB)

    Returns:
        Inserted row including server-assigned id and created_at

    Raises:
        RuntimeError: If the insert returned no row
    """
    supabase = get_supabase()

    row = {
        "company_id": company_id,
        "user_id": user_id,
        "question": question,
        "answer": answer,
        "sources": sources,
    }

    try:
        response = supabase.table("chat_history").insert(row).execute()
    except Exception as e:
        logger.error(
            f"Failed to insert chat history for company {company_id}: {e}",
            extra={"company_id": company_id},
        )
        raise

    if not response.data:
        raise RuntimeError("Chat history insert returned no data")

    return response.data[0]


def list_chat_history(company_id: str, limit: int = 20) -> list[dict[str, Any]]:
    """
    List a company's chat history, newest first, with the asker's display name.

    Args:
        company_id: Company UUID
        limit: Maximum number of entries

    Returns:
        List of history dicts with ``user_name`` flattened from the users join
    """
    supabase = get_supabase()

    response = (
        supabase.table("chat_history")
        .select("*, users(name)")
        .eq("company_id", company_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )

    entries = []
    for row in response.data or []:
        user_data = row.pop("users", None) or {}
        row["user_name"] = user_data.get("name")
        row["sources"] = row.get("sources") or []
        entries.append(row)

    return entries
