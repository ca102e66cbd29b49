"""Suggest what kind of content an uploaded file holds.

Claude classifies the first few thousand characters; when it is unavailable or
its reply cannot be parsed, keyword heuristics decide.
"""

import re
from pathlib import PurePath

from pydantic import BaseModel

from clarity.core.llm import parse_llm_json_dict
from clarity.core.logging import get_logger

logger = get_logger(__name__)

MIN_TEXT_CHARS = 50

CONTENT_TYPES = (
    "transcript",
    "email",
    "document_internal",
    "document_external",
    "proposal",
    "contract",
    "report",
    "notes",
)

CLASSIFY_PROMPT = """Analyze this document content and determine what type it is. Respond with ONLY a JSON object (no markdown, no code blocks) with these fields:
- type: one of "transcript", "email", "document_internal", "document_external", "proposal", "contract", "report", "notes"
- confidence: "high", "medium", or "low"
- reason: brief explanation (1-2 sentences)
- suggestedTitle: a good title for this document based on content

Content types explained:
- transcript: Meeting notes, call transcripts, conversation records with multiple speakers
- email: Email correspondence, email threads
- document_internal: Documents written by our company (Clarity)
- document_external: Documents from a client or partner company
- proposal: Sales proposals, project proposals
- contract: Legal agreements, terms of service
- report: Analysis reports, status reports
- notes: General notes, summaries

Here is the document content (first {max_chars} chars):
{content}"""

_TIMESTAMP_START = re.compile(r"^\s*\[?\d{1,2}:\d{2}")


class ContentSuggestion(BaseModel):
    suggested_type: str
    confidence: str
    reason: str
    suggested_title: str | None = None


def default_title(filename: str) -> str:
    """Filename without its extension."""
    return PurePath(filename).stem or filename


def heuristic_suggestion(text: str, filename: str) -> ContentSuggestion:
    """Keyword-based classification."""
    lowered = text.lower()
    suggested_type = "document"
    reason = "Based on file content"

    if (
        "meeting" in lowered
        or "transcript" in lowered
        or "speaker:" in lowered
        or "[speaker" in lowered
        or _TIMESTAMP_START.match(text)
    ):
        suggested_type = "transcript"
        reason = "Contains meeting/transcript indicators"
    elif "from:" in lowered and "to:" in lowered and "subject:" in lowered:
        suggested_type = "email"
        reason = "Contains email headers"
    elif "proposal" in lowered or "we propose" in lowered:
        suggested_type = "proposal"
        reason = "Contains proposal language"
    elif "agreement" in lowered or "terms and conditions" in lowered:
        suggested_type = "contract"
        reason = "Contains contract/agreement language"

    return ContentSuggestion(
        suggested_type=suggested_type,
        confidence="medium",
        reason=reason,
        suggested_title=default_title(filename),
    )


async def _classify_with_model(
    text: str,
    filename: str,
    api_key: str,
    model: str,
    max_chars: int,
) -> ContentSuggestion:
    from anthropic import AsyncAnthropic

    async with AsyncAnthropic(api_key=api_key, max_retries=0) as client:
        response = await client.messages.create(
            model=model,
            max_tokens=400,
            temperature=0.0,
            messages=[{
                "role": "user",
                "content": CLASSIFY_PROMPT.format(max_chars=max_chars, content=text[:max_chars]),
            }],
        )
    raw = "".join(block.text for block in response.content if block.type == "text")
    analysis = parse_llm_json_dict(raw)

    suggested_type = analysis.get("type")
    if suggested_type not in CONTENT_TYPES:
        suggested_type = "document"

    return ContentSuggestion(
        suggested_type=suggested_type,
        confidence=analysis.get("confidence") or "medium",
        reason=analysis.get("reason") or "Based on content analysis",
        suggested_title=analysis.get("suggestedTitle") or default_title(filename),
    )


async def suggest_content_type(
    text: str | None,
    filename: str,
    api_key: str | None,
    model: str,
    max_chars: int = 3000,
) -> ContentSuggestion:
    """
    Suggest a content type and title for extracted file text.

    Args:
        text: Extracted text (None if extraction produced nothing)
        filename: Original filename
        api_key: Anthropic key; without it only low-confidence defaults are returned
        model: Classification model
        max_chars: Characters of text sent to the model

    Returns:
        ContentSuggestion
    """
    if not text or len(text) < MIN_TEXT_CHARS:
        return ContentSuggestion(
            suggested_type="document",
            confidence="low",
            reason="Not enough text content to analyze",
        )

    if not api_key:
        return ContentSuggestion(
            suggested_type="document",
            confidence="low",
            reason="AI analysis not available",
        )

    try:
        return await _classify_with_model(text, filename, api_key, model, max_chars)
    except Exception as e:
        logger.warning(f"AI content analysis failed for {filename}, using heuristics: {e}")

    return heuristic_suggestion(text, filename)
