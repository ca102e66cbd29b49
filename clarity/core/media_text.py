"""Text extraction for uploaded media files."""

from io import BytesIO

from clarity.core.errors import NotFoundError
from clarity.core.logging import get_logger
from clarity.core.stores import BinaryStore, MediaStore

logger = get_logger(__name__)

DOCX_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
}


def classify_file_type(mime_type: str) -> str:
    """Map a MIME type to a media file_type category."""
    if mime_type.startswith("video/"):
        return "video"
    if mime_type.startswith("audio/"):
        return "audio"
    if mime_type.startswith("image/"):
        return "image"
    if mime_type == "application/pdf":
        return "pdf"
    if mime_type.startswith("text/") or "document" in mime_type or "sheet" in mime_type:
        return "document"
    return "other"


def decode_text(raw_bytes: bytes) -> str:
    """
    Decode bytes trying UTF-8 with BOM, UTF-8, then Latin-1.

    Latin-1 maps every byte, so this only fails on impossible input.
    """
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        try:
            return raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

    for encoding in ("utf-8", "latin-1"):
        try:
            return raw_bytes.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise ValueError("Unable to decode file content. Supported encodings: UTF-8, UTF-8-BOM, Latin-1.")


def _extract_docx(raw_bytes: bytes) -> str | None:
    from docx import Document

    doc = Document(BytesIO(raw_bytes))
    text = "\n".join(p.text for p in doc.paragraphs if p.text.strip())
    return text or None


def extract_media_text(filename: str, mime_type: str, raw_bytes: bytes) -> str | None:
    """
    Extract text from a media file.

    Text and JSON are decoded, Word documents parsed. PDFs, images, audio and
    video yield None; images are sent to the model as inline attachments instead.

    Args:
        filename: Original filename (for logging)
        mime_type: MIME type of the file
        raw_bytes: File content

    Returns:
        Extracted text, or None when nothing could be extracted
    """
    try:
        if mime_type.startswith("text/") or mime_type == "application/json":
            return decode_text(raw_bytes)

        if mime_type in DOCX_MIME_TYPES:
            return _extract_docx(raw_bytes)
    except Exception as e:
        logger.error(f"Text extraction failed for {filename} ({mime_type}): {e}")
        return None

    return None


async def reextract_media_asset(
    media_id: str,
    binary_store: BinaryStore,
    media_store: MediaStore,
) -> bool:
    """
    Re-run text extraction for a stored media file.

    Args:
        media_id: Media file UUID
        binary_store: Where the file bytes live
        media_store: Media rows (lookup and extracted-text update)

    Returns:
        True if text was extracted

    Raises:
        NotFoundError: Unknown media file, or its stored file is missing
        StorageError: Media row could not be read or updated
    """
    asset = await media_store.get_media_asset(media_id)
    if asset is None:
        raise NotFoundError("Media file not found", stage="reextract")

    raw_bytes = await binary_store.read_file(asset.file_path)
    if raw_bytes is None:
        raise NotFoundError("Stored file is missing", stage="reextract")

    text = extract_media_text(asset.original_filename, asset.mime_type, raw_bytes)
    await media_store.update_extracted_text(media_id, text)

    logger.info(f"Re-extracted media {media_id}: has_text={bool(text)}")
    return bool(text)
