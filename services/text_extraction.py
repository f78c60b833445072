"""Text extraction for uploaded documents (.txt, .docx, .rtf, .html/.htm)."""

from __future__ import annotations

import codecs
import io
import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Dict, Optional

from bs4 import BeautifulSoup
from docx import Document
from striprtf.striprtf import rtf_to_text

from config import UploadSettings

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Base exception for text extraction errors."""


class UnsupportedFormatError(ExtractionError):
    """Raised when no reader exists for the file extension."""

    def __init__(self, kind: str = ""):
        self.kind = kind
        super().__init__("Unsupported file type.")


class EmptyDocumentError(ExtractionError):
    """Raised when an upload carries no bytes."""


class DocumentTooLargeError(ExtractionError):
    """Raised when an upload exceeds the configured size limit."""


class DocumentParseError(ExtractionError):
    """Raised when a document parser rejects the payload (corrupt or mislabeled file)."""


@dataclass(frozen=True)
class ExtractedDocument:
    source: str
    kind: str
    text: str


def file_kind(filename: str) -> str:
    """Lowercased extension without the leading dot ('' when there is none)."""
    return PurePath(filename or "").suffix.lower().lstrip(".")


_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def decode_text(data: bytes) -> str:
    """Decode bytes honoring a UTF-8/UTF-16 BOM; defaults to UTF-8 with replacement."""
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return data.decode(encoding, errors="replace")
    return data.decode("utf-8", errors="replace")


def read_plain_text(data: bytes) -> str:
    return decode_text(data)


def read_docx(data: bytes) -> str:
    try:
        document = Document(io.BytesIO(data))
    except Exception as exc:
        raise DocumentParseError(f"Unable to read Word document: {exc}") from exc

    parts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" ".join(cells))
    return "\n".join(parts)


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text()


def read_html(data: bytes) -> str:
    return html_to_text(decode_text(data))


def read_rtf(data: bytes) -> str:
    try:
        return rtf_to_text(decode_text(data), errors="replace")
    except Exception as exc:
        raise DocumentParseError(f"Unable to read rich text document: {exc}") from exc


READERS: Dict[str, Callable[[bytes], str]] = {
    "txt": read_plain_text,
    "docx": read_docx,
    "rtf": read_rtf,
    "html": read_html,
    "htm": read_html,
}


def extract_text(
    filename: str,
    data: bytes,
    settings: Optional[UploadSettings] = None,
) -> ExtractedDocument:
    """
    Turn an uploaded file into decoded text.

    Raises:
        UnsupportedFormatError: the extension has no reader
        EmptyDocumentError: the upload is zero bytes
        DocumentTooLargeError: the upload exceeds settings.max_size_bytes
        DocumentParseError: the parser rejected the payload
    """
    settings = settings or UploadSettings()
    kind = file_kind(filename)

    reader = READERS.get(kind)
    if reader is None or f".{kind}" not in settings.allowed_extensions:
        raise UnsupportedFormatError(kind)
    if not data:
        raise EmptyDocumentError("Uploaded file is empty.")
    if len(data) > settings.max_size_bytes:
        raise DocumentTooLargeError(
            f"File too large: {len(data)} bytes exceeds the limit of {settings.max_size_bytes} bytes"
        )

    text = reader(data)
    logger.debug("Extracted %d characters from %s (%s)", len(text), filename, kind)
    return ExtractedDocument(source=filename, kind=kind, text=text)
