"""Serialize a company's full record set into the Ask AI context.

Section order is fixed: company profile, transcripts, emails, documents, then media
with extracted text. Empty sections are omitted. Record content is never truncated;
callers that need a bound pass a ``ContextWindow`` that trims the record set first.
"""

from collections.abc import Callable
from datetime import datetime

from clarity.core.logging import get_logger
from clarity.core.schemas_ask import (
    Company,
    CompanyRecords,
    Document,
    Email,
    ImageAttachment,
    MediaAsset,
    ProcessingStatus,
    SerializedContext,
    Transcript,
)
from clarity.core.stores import BinaryStore

logger = get_logger(__name__)

ContextWindow = Callable[[CompanyRecords], CompanyRecords]


def latest_records_window(max_per_type: int) -> ContextWindow:
    """Build a window keeping the last ``max_per_type`` records of each kind.

    Stores return records oldest first, so the tail is the most recent.
    """
    if max_per_type < 1:
        raise ValueError("max_per_type must be at least 1")

    def _window(records: CompanyRecords) -> CompanyRecords:
        return records.model_copy(
            update={
                "transcripts": records.transcripts[-max_per_type:],
                "emails": records.emails[-max_per_type:],
                "documents": records.documents[-max_per_type:],
                "media": records.media[-max_per_type:],
            }
        )

    return _window


def format_date(value: datetime) -> str:
    """Render a date as M/D/YYYY."""
    return f"{value.month}/{value.day}/{value.year}"


def _company_header(company: Company) -> str:
    contact_name = company.primary_contact_name or "N/A"
    contact_email = company.primary_contact_email or "N/A"

    lines = [
        f"# Company Information: {company.name}",
        f"Type: {company.type.value}",
        f"Industry: {company.industry or 'N/A'}",
        f"Status: {company.status.value}",
        f"Description: {company.description or 'N/A'}",
        f"Primary Contact: {contact_name} ({contact_email})",
    ]
    if company.contract_value:
        lines.append(f"Contract Value: ${company.contract_value:.2f}")
    lines.append(f"Notes: {company.notes or 'N/A'}")
    return "\n".join(lines) + "\n\n"


def _transcript_block(transcript: Transcript) -> str:
    block = f"## {transcript.title} ({format_date(transcript.meeting_date)})\n"
    if transcript.summary:
        block += f"Summary: {transcript.summary}\n"
    if transcript.key_points:
        bullets = "\n".join(f"- {point}" for point in transcript.key_points)
        block += f"Key Points:\n{bullets}\n"
    block += f"\nFull Transcript:\n{transcript.content}\n\n"
    return block


def _email_block(email: Email) -> str:
    return (
        f"## Email: {email.subject}\n"
        f"From: {email.from_address}\n"
        f"To: {', '.join(email.to_addresses)}\n"
        f"Date: {format_date(email.sent_date)}\n"
        f"\n{email.body}\n\n"
    )


def _document_block(document: Document) -> str:
    block = f"## {document.title} ({document.type.value})\n"
    if document.content:
        block += f"{document.content}\n\n"
    return block


def _media_block(asset: MediaAsset) -> str:
    block = f"## {asset.title} ({asset.file_type.value})\n"
    block += f"Original File: {asset.original_filename}\n"
    if asset.description:
        block += f"Description: {asset.description}\n"
    block += f"Content:\n{asset.extracted_text}\n\n"
    return block


def _completed_media(records: CompanyRecords) -> list[MediaAsset]:
    return [m for m in records.media if m.processing_status == ProcessingStatus.COMPLETED]


def build_context_text(records: CompanyRecords) -> str:
    """Render the text context block for a company."""
    context = _company_header(records.company)

    if records.transcripts:
        context += "# Meeting Transcripts\n\n"
        context += "".join(_transcript_block(t) for t in records.transcripts)

    if records.emails:
        context += "# Email Exchanges\n\n"
        context += "".join(_email_block(e) for e in records.emails)

    if records.documents:
        context += "# Documents\n\n"
        context += "".join(_document_block(d) for d in records.documents)

    text_media = [m for m in _completed_media(records) if m.extracted_text]
    if text_media:
        context += "# Uploaded Media\n\n"
        context += "".join(_media_block(m) for m in text_media)

    return context


async def collect_image_attachments(
    records: CompanyRecords,
    binary_store: BinaryStore,
) -> list[ImageAttachment]:
    """Read completed image assets from the binary store, in record order.

    Files that cannot be read are skipped.
    """
    attachments: list[ImageAttachment] = []

    for asset in _completed_media(records):
        if not asset.is_image:
            continue
        try:
            data = await binary_store.read_file(asset.file_path)
        except Exception as e:
            logger.warning(
                f"Skipping image {asset.id}: could not read {asset.file_path}: {e}",
                extra={"company_id": records.company.id},
            )
            continue
        if data is None:
            logger.warning(
                f"Skipping image {asset.id}: file not found at {asset.file_path}",
                extra={"company_id": records.company.id},
            )
            continue

        attachments.append(
            ImageAttachment(
                id=asset.id,
                title=asset.title,
                mime_type=asset.mime_type,
                data=data,
            )
        )

    return attachments


async def serialize_context(
    records: CompanyRecords,
    binary_store: BinaryStore,
) -> SerializedContext:
    """Build the text context and image attachments for a company."""
    text = build_context_text(records)
    attachments = await collect_image_attachments(records, binary_store)

    logger.info(
        f"Serialized context: {len(text)} chars, {len(attachments)} images",
        extra={"company_id": records.company.id},
    )
    return SerializedContext(text=text, attachments=attachments)
