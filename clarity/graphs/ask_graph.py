"""LangGraph pipeline for answering a question about a company.

validate -> load -> serialize -> generate -> attribute -> persist

A node that raises ends the run; the error carries the stage it failed in.
Persisting is the exception: a failed history write is logged and the answer is
still returned.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from langgraph.graph import END, StateGraph

from clarity.core.context_serializer import ContextWindow, serialize_context
from clarity.core.errors import (
    AskError,
    ConfigurationError,
    GenerationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from clarity.core.history import HistoryRecorder
from clarity.core.logging import get_logger, log_with_context
from clarity.core.prompt_builder import build_prompt_parts
from clarity.core.schemas_ask import (
    Company,
    CompanyRecords,
    PromptPart,
    SerializedContext,
    Source,
)
from clarity.core.source_attribution import DEFAULT_SOURCE_LIMIT, attribute_sources
from clarity.core.stores import BinaryStore, RecordStore

logger = get_logger(__name__)


class AskStage(str, Enum):
    VALIDATING = "validating"
    LOADING = "loading"
    SERIALIZING = "serializing"
    GENERATING = "generating"
    ATTRIBUTING = "attributing"
    PERSISTING = "persisting"
    DONE = "done"


class Generator(Protocol):
    async def generate(self, parts: list[PromptPart], company_id: str | None = None) -> str: ...


@dataclass
class AskState:
    """State for the ask graph."""

    # Input fields
    company_id: str
    question: str
    user_id: str

    # Processing state
    stage: str = AskStage.VALIDATING.value
    company: Company | None = None
    records: CompanyRecords | None = None
    serialized: SerializedContext | None = None
    prompt_parts: list[PromptPart] = field(default_factory=list)

    # Output
    answer: str | None = None
    sources: list[Source] = field(default_factory=list)
    history_entry_id: str | None = None
    history_error: str | None = None


def _fail(error: AskError, stage: AskStage) -> AskError:
    if error.stage is None:
        error.stage = stage.value
    return error


def build_ask_graph(
    record_store: RecordStore,
    binary_store: BinaryStore,
    generator: Generator,
    history: HistoryRecorder,
    context_window: ContextWindow | None = None,
    source_limit: int = DEFAULT_SOURCE_LIMIT,
):
    """Build and compile the ask graph with its collaborators bound."""

    async def validate(state: AskState) -> dict[str, Any]:
        stage = AskStage.VALIDATING
        company_id = (state.company_id or "").strip()
        question = (state.question or "").strip()

        if not company_id or not question:
            raise _fail(ValidationError("company_id and question are required"), stage)

        try:
            company = await record_store.get_company(company_id)
        except AskError as e:
            raise _fail(e, stage)
        except Exception as e:
            raise _fail(StorageError(f"Failed to fetch company: {e}"), stage) from e

        if company is None:
            raise _fail(NotFoundError("Company not found"), stage)

        return {
            "company_id": company_id,
            "question": question,
            "company": company,
            "stage": AskStage.LOADING.value,
        }

    async def load(state: AskState) -> dict[str, Any]:
        stage = AskStage.LOADING
        company_id = state.company_id

        try:
            transcripts, emails, documents, media = await asyncio.gather(
                record_store.list_transcripts(company_id),
                record_store.list_emails(company_id),
                record_store.list_documents(company_id),
                record_store.list_completed_media_assets(company_id),
            )
        except AskError as e:
            raise _fail(e, stage)
        except Exception as e:
            raise _fail(StorageError(f"Failed to load company records: {e}"), stage) from e

        records = CompanyRecords(
            company=state.company,
            transcripts=transcripts,
            emails=emails,
            documents=documents,
            media=media,
        )
        if context_window is not None:
            records = context_window(records)

        log_with_context(
            logger,
            logging.INFO,
            "Loaded company records",
            company_id=company_id,
            stage=stage.value,
            transcripts=len(records.transcripts),
            emails=len(records.emails),
            documents=len(records.documents),
            media=len(records.media),
        )

        return {"records": records, "stage": AskStage.SERIALIZING.value}

    async def serialize(state: AskState) -> dict[str, Any]:
        serialized = await serialize_context(state.records, binary_store)
        parts = build_prompt_parts(state.records.company.name, serialized, state.question)

        return {
            "serialized": serialized,
            "prompt_parts": parts,
            "stage": AskStage.GENERATING.value,
        }

    async def generate(state: AskState) -> dict[str, Any]:
        stage = AskStage.GENERATING

        try:
            answer = await generator.generate(state.prompt_parts, company_id=state.company_id)
        except (ConfigurationError, GenerationError) as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"Generation failed: {e}",
                company_id=state.company_id,
                stage=stage.value,
                error_kind=e.kind,
            )
            raise _fail(e, stage)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"Generation failed unexpectedly: {e}",
                company_id=state.company_id,
                stage=stage.value,
                error_kind=GenerationError.kind,
            )
            raise _fail(GenerationError(f"Generation failed: {e}"), stage) from e

        return {"answer": answer, "stage": AskStage.ATTRIBUTING.value}

    async def attribute(state: AskState) -> dict[str, Any]:
        sources = attribute_sources(state.answer, state.records, limit=source_limit)

        log_with_context(
            logger,
            logging.INFO,
            f"Attributed {len(sources)} sources",
            company_id=state.company_id,
            stage=AskStage.ATTRIBUTING.value,
        )
        return {"sources": sources, "stage": AskStage.PERSISTING.value}

    async def persist(state: AskState) -> dict[str, Any]:
        try:
            entry = await history.record(
                company_id=state.company_id,
                user_id=state.user_id,
                question=state.question,
                answer=state.answer,
                sources=state.sources,
            )
        except Exception as e:
            # Non-fatal: the user already waited for the answer
            logger.error(
                f"Failed to save chat history (answer still returned): {e}",
                exc_info=True,
                extra={"company_id": state.company_id, "stage": AskStage.PERSISTING.value},
            )
            return {"history_error": str(e), "stage": AskStage.DONE.value}

        return {"history_entry_id": entry.id, "stage": AskStage.DONE.value}

    graph = StateGraph(AskState)

    graph.add_node("validate", validate)
    graph.add_node("load", load)
    graph.add_node("serialize", serialize)
    graph.add_node("generate", generate)
    graph.add_node("attribute", attribute)
    graph.add_node("persist", persist)

    graph.set_entry_point("validate")
    graph.add_edge("validate", "load")
    graph.add_edge("load", "serialize")
    graph.add_edge("serialize", "generate")
    graph.add_edge("generate", "attribute")
    graph.add_edge("attribute", "persist")
    graph.add_edge("persist", END)

    return graph.compile()
