"""Ask AI history: append-only writes, newest-first reads."""

from clarity.core.errors import ValidationError
from clarity.core.logging import get_logger
from clarity.core.schemas_ask import ChatHistoryEntry, Source
from clarity.core.stores import HistoryStore

logger = get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 20


class HistoryRecorder:
    """Records question/answer/sources exchanges and reads them back."""

    def __init__(self, store: HistoryStore):
        self.store = store

    async def record(
        self,
        company_id: str,
        user_id: str,
        question: str,
        answer: str,
        sources: list[Source],
    ) -> ChatHistoryEntry:
        """Create a new history entry; the store assigns id and timestamp."""
        entry = await self.store.insert(
            company_id=company_id,
            user_id=user_id,
            question=question,
            answer=answer,
            sources=sources,
        )
        logger.info(
            f"Recorded chat history entry {entry.id}",
            extra={"company_id": company_id},
        )
        return entry

    async def list_recent(
        self,
        company_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[ChatHistoryEntry]:
        """Newest-first entries for a company, at most ``limit`` of them."""
        if not company_id:
            raise ValidationError("company_id is required", stage="history")
        if limit < 1:
            raise ValidationError("limit must be at least 1", stage="history")

        entries = await self.store.list_recent(company_id, limit)
        return entries[:limit]
