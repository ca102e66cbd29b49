"""Entry point for Ask AI: answer a question about a company and keep history."""

from dataclasses import dataclass, field

from clarity.core.config import Settings
from clarity.core.context_serializer import ContextWindow, latest_records_window
from clarity.core.generation import GenerationClient
from clarity.core.history import DEFAULT_HISTORY_LIMIT, HistoryRecorder
from clarity.core.logging import get_logger
from clarity.core.schemas_ask import ChatHistoryEntry, Source
from clarity.core.source_attribution import DEFAULT_SOURCE_LIMIT
from clarity.core.stores import (
    BinaryStore,
    HistoryStore,
    RecordStore,
    SupabaseHistoryStore,
    SupabaseRecordStore,
    get_binary_store,
)
from clarity.graphs.ask_graph import AskState, Generator, build_ask_graph

logger = get_logger(__name__)


@dataclass
class AskResult:
    """Answer returned to the caller."""

    answer: str
    sources: list[Source] = field(default_factory=list)
    history_entry_id: str | None = None


class AskOrchestrator:
    """Runs the ask graph with injected stores and generation client."""

    def __init__(
        self,
        record_store: RecordStore,
        binary_store: BinaryStore,
        generator: Generator,
        history_store: HistoryStore,
        context_window: ContextWindow | None = None,
        source_limit: int = DEFAULT_SOURCE_LIMIT,
    ):
        self.history = HistoryRecorder(history_store)
        self._graph = build_ask_graph(
            record_store=record_store,
            binary_store=binary_store,
            generator=generator,
            history=self.history,
            context_window=context_window,
            source_limit=source_limit,
        )

    async def ask(self, company_id: str, question: str, user_id: str) -> AskResult:
        """
        Answer a question about a company.

        Args:
            company_id: Company UUID
            question: Free-text question
            user_id: UUID of the asking user (recorded in history)

        Returns:
            AskResult with the answer and at most ``source_limit`` sources

        Raises:
            ValidationError: company_id or question missing
            NotFoundError: Unknown company
            StorageError: Records could not be loaded
            ConfigurationError: Generation credential missing or rejected
            GenerationError: Any other generation failure
        """
        logger.info(f"Ask started for company {company_id}", extra={"company_id": company_id})

        final_state = await self._graph.ainvoke(
            AskState(company_id=company_id, question=question, user_id=user_id)
        )

        logger.info(
            f"Ask completed with {len(final_state['sources'])} sources",
            extra={"company_id": final_state["company_id"], "stage": final_state["stage"]},
        )

        return AskResult(
            answer=final_state["answer"],
            sources=final_state["sources"],
            history_entry_id=final_state.get("history_entry_id"),
        )

    async def get_history(
        self,
        company_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[ChatHistoryEntry]:
        """Newest-first chat history for a company."""
        return await self.history.list_recent(company_id, limit)


def build_orchestrator(settings: Settings) -> AskOrchestrator:
    """Wire the production collaborators from settings."""
    context_window = None
    if settings.CONTEXT_MAX_RECORDS_PER_TYPE:
        context_window = latest_records_window(settings.CONTEXT_MAX_RECORDS_PER_TYPE)

    return AskOrchestrator(
        record_store=SupabaseRecordStore(),
        binary_store=get_binary_store(settings.MEDIA_ROOT, settings.MEDIA_STORAGE_BUCKET),
        generator=GenerationClient.from_settings(settings),
        history_store=SupabaseHistoryStore(),
        context_window=context_window,
        source_limit=settings.ASK_SOURCE_LIMIT,
    )
