"""Collaborator interfaces consumed by the Ask AI pipeline, with production adapters.

The pipeline only sees the protocols below. The Supabase adapters wrap the
synchronous query functions in ``clarity.db`` and run them in a worker thread;
every failure is re-raised as ``StorageError``.
"""

import asyncio
from pathlib import Path
from typing import Any, Protocol

from clarity.core.errors import StorageError
from clarity.core.schemas_ask import (
    ChatHistoryEntry,
    Company,
    Document,
    Email,
    MediaAsset,
    Source,
    Transcript,
)
from clarity.db import chat_history as chat_history_db
from clarity.db import companies as companies_db
from clarity.db import documents as documents_db
from clarity.db import emails as emails_db
from clarity.db import media_files as media_files_db
from clarity.db import transcripts as transcripts_db
from clarity.db.supabase_client import get_supabase


class RecordStore(Protocol):
    async def get_company(self, company_id: str) -> Company | None: ...

    async def list_transcripts(self, company_id: str) -> list[Transcript]: ...

    async def list_emails(self, company_id: str) -> list[Email]: ...

    async def list_documents(self, company_id: str) -> list[Document]: ...

    async def list_completed_media_assets(self, company_id: str) -> list[MediaAsset]: ...


class BinaryStore(Protocol):
    async def read_file(self, path: str) -> bytes | None:
        """Return file bytes, or None when the file does not exist."""
        ...


class HistoryStore(Protocol):
    async def insert(
        self,
        company_id: str,
        user_id: str,
        question: str,
        answer: str,
        sources: list[Source],
    ) -> ChatHistoryEntry: ...

    async def list_recent(self, company_id: str, limit: int) -> list[ChatHistoryEntry]: ...


class MediaStore(Protocol):
    async def get_media_asset(self, media_id: str) -> MediaAsset | None: ...

    async def update_extracted_text(self, media_id: str, extracted_text: str | None) -> None: ...


async def _run_query(description: str, fn, *args: Any) -> Any:
    try:
        return await asyncio.to_thread(fn, *args)
    except Exception as e:
        raise StorageError(f"Failed to {description}: {e}") from e


class SupabaseRecordStore:
    """Reads company records from Supabase tables."""

    async def get_company(self, company_id: str) -> Company | None:
        row = await _run_query("fetch company", companies_db.get_company, company_id)
        return Company(**row) if row else None

    async def list_transcripts(self, company_id: str) -> list[Transcript]:
        rows = await _run_query("list transcripts", transcripts_db.list_transcripts, company_id)
        return [Transcript(**row) for row in rows]

    async def list_emails(self, company_id: str) -> list[Email]:
        rows = await _run_query("list emails", emails_db.list_emails, company_id)
        return [Email(**row) for row in rows]

    async def list_documents(self, company_id: str) -> list[Document]:
        rows = await _run_query("list documents", documents_db.list_documents, company_id)
        return [Document(**row) for row in rows]

    async def list_completed_media_assets(self, company_id: str) -> list[MediaAsset]:
        rows = await _run_query("list media files", media_files_db.list_completed_media_files, company_id)
        return [MediaAsset(**row) for row in rows]


class SupabaseHistoryStore:
    """Persists and reads Ask AI history in the ``chat_history`` table."""

    async def insert(
        self,
        company_id: str,
        user_id: str,
        question: str,
        answer: str,
        sources: list[Source],
    ) -> ChatHistoryEntry:
        row = await _run_query(
            "insert chat history",
            chat_history_db.insert_chat_history,
            company_id,
            user_id,
            question,
            answer,
            [s.model_dump() for s in sources],
        )
        return ChatHistoryEntry(**row)

    async def list_recent(self, company_id: str, limit: int) -> list[ChatHistoryEntry]:
        rows = await _run_query("list chat history", chat_history_db.list_chat_history, company_id, limit)
        return [ChatHistoryEntry(**row) for row in rows]


class SupabaseMediaStore:
    """Reads media rows and writes re-extracted text in the ``media_files`` table."""

    async def get_media_asset(self, media_id: str) -> MediaAsset | None:
        row = await _run_query("fetch media file", media_files_db.get_media_file, media_id)
        return MediaAsset(**row) if row else None

    async def update_extracted_text(self, media_id: str, extracted_text: str | None) -> None:
        await _run_query(
            "update extracted text",
            media_files_db.update_extracted_text,
            media_id,
            extracted_text,
        )


class LocalBinaryStore:
    """Reads uploaded media from a directory on local disk."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        resolved = candidate.resolve()
        if not resolved.is_relative_to(self.root):
            raise StorageError(f"Media path escapes media root: {path}")
        return resolved

    async def read_file(self, path: str) -> bytes | None:
        resolved = self._resolve(path)
        if not resolved.is_file():
            return None
        try:
            return await asyncio.to_thread(resolved.read_bytes)
        except OSError as e:
            raise StorageError(f"Failed to read media file {path}: {e}") from e


class SupabaseStorageBinaryStore:
    """Reads uploaded media from a Supabase Storage bucket."""

    def __init__(self, bucket: str):
        self.bucket = bucket

    def _download(self, path: str) -> bytes | None:
        supabase = get_supabase()
        return supabase.storage.from_(self.bucket).download(path) or None

    async def read_file(self, path: str) -> bytes | None:
        try:
            return await asyncio.to_thread(self._download, path)
        except Exception as e:
            raise StorageError(f"Failed to download {path} from bucket {self.bucket}: {e}") from e


def get_binary_store(media_root: str, bucket: str | None = None) -> BinaryStore:
    """Supabase Storage when a bucket is configured, local disk otherwise."""
    if bucket:
        return SupabaseStorageBinaryStore(bucket)
    return LocalBinaryStore(media_root)
