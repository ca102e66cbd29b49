"""Ask AI endpoints: question answering over a company's records, and history."""

from fastapi import APIRouter, Depends, HTTPException, Query

from clarity.api.dependencies import get_ask_orchestrator, get_requesting_user_id
from clarity.core.ask_orchestrator import AskOrchestrator
from clarity.core.config import get_settings
from clarity.core.errors import (
    AskError,
    ConfigurationError,
    GenerationError,
    NotFoundError,
    ValidationError,
)
from clarity.core.logging import get_logger
from clarity.core.schemas_ask import AskRequest, AskResponse, ChatHistoryEntry

logger = get_logger(__name__)

router = APIRouter()


def _to_http_error(error: AskError) -> HTTPException:
    """Map pipeline errors to HTTP responses."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, ConfigurationError):
        return HTTPException(
            status_code=500,
            detail=(
                "AI service not configured. Please set ANTHROPIC_API_KEY "
                "in the environment variables."
            ),
        )
    if isinstance(error, GenerationError):
        return HTTPException(status_code=500, detail="Failed to generate AI response")
    return HTTPException(status_code=500, detail="Internal server error")


@router.post("/ask", response_model=AskResponse)
async def ask_question(
    request: AskRequest,
    user_id: str = Depends(get_requesting_user_id),
    orchestrator: AskOrchestrator = Depends(get_ask_orchestrator),
) -> AskResponse:
    """
    Answer a question about a company from all of its records.

    Returns the answer with up to five cited sources. The exchange is saved to
    chat history; a failed save does not fail the request.
    """
    try:
        result = await orchestrator.ask(
            company_id=request.company_id or "",
            question=request.question or "",
            user_id=user_id,
        )
    except AskError as e:
        logger.error(
            f"Ask failed ({e.kind} at {e.stage}): {e.message}",
            extra={"company_id": request.company_id, "stage": e.stage, "error_kind": e.kind},
        )
        raise _to_http_error(e) from e

    return AskResponse(answer=result.answer, sources=result.sources)


@router.get("/history/{company_id}", response_model=list[ChatHistoryEntry])
async def get_chat_history(
    company_id: str,
    limit: int | None = Query(None, ge=1, description="Max entries (default 20)"),
    orchestrator: AskOrchestrator = Depends(get_ask_orchestrator),
) -> list[ChatHistoryEntry]:
    """Chat history for a company, newest first."""
    settings = get_settings()
    effective_limit = limit or settings.CHAT_HISTORY_DEFAULT_LIMIT

    try:
        return await orchestrator.get_history(company_id, limit=effective_limit)
    except AskError as e:
        logger.error(f"Failed to load chat history: {e.message}", extra={"company_id": company_id})
        raise _to_http_error(e) from e
