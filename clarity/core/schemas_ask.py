"""Pydantic schemas for companies, their content records and Ask AI exchanges."""

from datetime import date, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class CompanyType(str, Enum):
    CUSTOMER = "customer"
    PROSPECT = "prospect"


class CompanyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    CHURNED = "churned"
    LOST = "lost"


class DocumentType(str, Enum):
    CONTRACT = "contract"
    PROPOSAL = "proposal"
    PRESENTATION = "presentation"
    REPORT = "report"
    OTHER = "other"


class MediaFileType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    PDF = "pdf"
    DOCUMENT = "document"
    OTHER = "other"


class ProcessingStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# =============================================================================
# Records
# =============================================================================


class Company(BaseModel):
    """Customer or prospect profile."""

    id: str
    name: str
    type: CompanyType
    industry: str | None = None
    status: CompanyStatus = CompanyStatus.ACTIVE
    description: str | None = None
    website: str | None = None
    primary_contact_name: str | None = None
    primary_contact_email: str | None = None
    primary_contact_title: str | None = None
    contract_value: float | None = None
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    notes: str | None = None


class Transcript(BaseModel):
    """Meeting transcript."""

    id: str
    company_id: str
    title: str
    meeting_date: datetime
    duration_minutes: int | None = None
    participants: list[str] | None = None
    content: str = Field(..., min_length=1)
    summary: str | None = None
    key_points: list[str] | None = None
    video_url: str | None = None


class Email(BaseModel):
    """Email exchange."""

    id: str
    company_id: str
    subject: str
    from_address: str
    to_addresses: list[str] = Field(..., min_length=1)
    cc_addresses: list[str] | None = None
    sent_date: datetime
    body: str


class Document(BaseModel):
    """Contract, proposal, presentation, report or other document."""

    id: str
    company_id: str
    title: str
    type: DocumentType
    content: str | None = None
    file_size: int | None = None
    mime_type: str | None = None


class MediaAsset(BaseModel):
    """Uploaded file with its extracted text and processing status."""

    id: str
    company_id: str
    title: str
    description: str | None = None
    file_type: MediaFileType
    original_filename: str
    file_path: str
    file_size: int | None = None
    mime_type: str
    extracted_text: str | None = None
    processing_status: ProcessingStatus = ProcessingStatus.PENDING

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class CompanyRecords(BaseModel):
    """Everything loaded for one company, in store iteration order."""

    company: Company
    transcripts: list[Transcript] = Field(default_factory=list)
    emails: list[Email] = Field(default_factory=list)
    documents: list[Document] = Field(default_factory=list)
    media: list[MediaAsset] = Field(default_factory=list)


# =============================================================================
# Sources and history
# =============================================================================

SourceType = Literal["transcript", "email", "document", "media"]


class Source(BaseModel):
    """A record the answer most likely drew on."""

    type: SourceType
    id: str
    title: str
    excerpt: str


class ChatHistoryEntry(BaseModel):
    """One persisted question/answer/sources exchange."""

    id: str
    company_id: str
    user_id: str
    question: str
    answer: str
    sources: list[Source] = Field(default_factory=list)
    created_at: datetime
    user_name: str | None = None


# =============================================================================
# Context and prompt parts
# =============================================================================


class ImageAttachment(BaseModel):
    """Image bytes inlined into the prompt."""

    id: str
    title: str
    mime_type: str
    data: bytes


class SerializedContext(BaseModel):
    """Text context block plus inlineable images."""

    text: str
    attachments: list[ImageAttachment] = Field(default_factory=list)


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    kind: Literal["image"] = "image"
    data: bytes
    mime_type: str


PromptPart = TextPart | ImagePart


# =============================================================================
# API
# =============================================================================


class AskRequest(BaseModel):
    """Request body for POST /ai/ask."""

    company_id: str | None = None
    question: str | None = None


class AskResponse(BaseModel):
    """Answer plus attributed sources."""

    answer: str
    sources: list[Source] = Field(default_factory=list)
