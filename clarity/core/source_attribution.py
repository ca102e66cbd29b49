"""Heuristic citation extraction for Ask AI answers.

Matching is case-insensitive substring search over the answer. Generic words
("transcript", "meeting", "email", "file", ...) deliberately flag every record of
that kind, so a single mention can cite many records; the result is capped.
"""

from clarity.core.schemas_ask import (
    CompanyRecords,
    Document,
    Email,
    MediaAsset,
    ProcessingStatus,
    Source,
    Transcript,
)

DEFAULT_SOURCE_LIMIT = 5
EXCERPT_CHARS = 200

TRANSCRIPT_KEYWORDS = ("transcript", "meeting")
EMAIL_KEYWORDS = ("email",)
MEDIA_KEYWORDS = ("media", "file", "image", "screenshot")


def _excerpt(text: str) -> str:
    return text[:EXCERPT_CHARS] + "..."


def _mentions(answer: str, *terms: str | None) -> bool:
    """True if any non-empty term appears in the (lowercased) answer."""
    return any(term and term.lower() in answer for term in terms)


def _transcript_source(transcript: Transcript) -> Source:
    return Source(
        type="transcript",
        id=transcript.id,
        title=transcript.title,
        excerpt=transcript.summary or _excerpt(transcript.content),
    )


def _email_source(email: Email) -> Source:
    return Source(
        type="email",
        id=email.id,
        title=email.subject,
        excerpt=_excerpt(email.body),
    )


def _document_source(document: Document) -> Source:
    return Source(
        type="document",
        id=document.id,
        title=document.title,
        excerpt=_excerpt(document.content) if document.content else "",
    )


def _media_source(asset: MediaAsset) -> Source:
    if asset.extracted_text:
        excerpt = _excerpt(asset.extracted_text)
    else:
        excerpt = f"[{asset.file_type.value}: {asset.original_filename}]"
    return Source(type="media", id=asset.id, title=asset.title, excerpt=excerpt)


def find_candidate_sources(answer: str, records: CompanyRecords) -> list[Source]:
    """
    Every record the answer plausibly refers to, in record-set order.

    Transcripts, then emails, documents and media; duplicates (same type and id)
    are dropped.
    """
    text = answer.lower()
    candidates: list[Source] = []

    for transcript in records.transcripts:
        if _mentions(text, transcript.title, *TRANSCRIPT_KEYWORDS):
            candidates.append(_transcript_source(transcript))

    for email in records.emails:
        if _mentions(text, email.subject, *EMAIL_KEYWORDS):
            candidates.append(_email_source(email))

    for document in records.documents:
        if _mentions(text, document.title, document.type.value):
            candidates.append(_document_source(document))

    for asset in records.media:
        if asset.processing_status != ProcessingStatus.COMPLETED:
            continue
        if _mentions(
            text,
            asset.title,
            asset.file_type.value,
            asset.original_filename,
            *MEDIA_KEYWORDS,
        ):
            candidates.append(_media_source(asset))

    seen: set[tuple[str, str]] = set()
    unique: list[Source] = []
    for source in candidates:
        key = (source.type, source.id)
        if key not in seen:
            seen.add(key)
            unique.append(source)
    return unique


def attribute_sources(
    answer: str,
    records: CompanyRecords,
    limit: int = DEFAULT_SOURCE_LIMIT,
) -> list[Source]:
    """The first ``limit`` candidate sources for an answer."""
    return find_candidate_sources(answer, records)[:limit]
