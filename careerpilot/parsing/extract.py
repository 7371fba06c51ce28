from __future__ import annotations

import re
from datetime import datetime, timezone
from io import BytesIO
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

from .models import ExtractedText

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")

_HORIZONTAL_SPACE_RE = re.compile(r"[ \t\f\v]+")
_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n+")
_PAGE_FOOTER_RE = re.compile(r"Page \d+ of \d+", re.IGNORECASE)
_PAGE_NUMBER_LINE_RE = re.compile(r"^\s*\d{1,3}\s*$", re.MULTILINE)


class UnsupportedFileTypeError(ValueError):
    pass


class EmptyDocumentError(ValueError):
    pass


def clean_extracted_text(text: str) -> str:
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _PAGE_FOOTER_RE.sub("", cleaned)
    cleaned = _PAGE_NUMBER_LINE_RE.sub("", cleaned)
    cleaned = _HORIZONTAL_SPACE_RE.sub(" ", cleaned)
    cleaned = "\n".join(line.strip() for line in cleaned.split("\n"))
    cleaned = _BLANK_RUN_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def _parse_txt(content: bytes) -> tuple[str, int | None, list[str]]:
    return content.decode("utf-8", errors="replace"), None, []


def _parse_pdf(content: bytes) -> tuple[str, int | None, list[str]]:
    warnings: list[str] = []
    reader = PdfReader(BytesIO(content))
    text_parts: list[str] = []
    for index, page in enumerate(reader.pages, start=1):
        page_text = (page.extract_text() or "").strip()
        if page_text:
            text_parts.append(page_text)
        else:
            warnings.append(f"No extractable text on page {index}.")
    return "\n".join(text_parts), len(reader.pages), warnings


def _parse_docx(content: bytes) -> tuple[str, int | None, list[str]]:
    document = Document(BytesIO(content))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    return "\n".join(paragraphs), None, []


def extract_text(filename: str, content: bytes) -> ExtractedText:
    """Extract plain text from an uploaded resume.

    Raises ``UnsupportedFileTypeError`` for other extensions and
    ``EmptyDocumentError`` when nothing readable is left after cleanup.
    Parser failures on corrupt files propagate as ``EmptyDocumentError``.
    """
    extension = PurePath(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(
            f"Unsupported file type '{extension or filename}'. Supported types: .pdf, .docx, .txt"
        )

    parsers = {".txt": _parse_txt, ".pdf": _parse_pdf, ".docx": _parse_docx}
    try:
        raw, page_count, warnings = parsers[extension](content)
    except Exception as exc:  # noqa: BLE001 - pypdf/python-docx raise many unrelated types
        raise EmptyDocumentError(f"Failed to extract text from {extension[1:].upper()}: {exc}") from exc

    text = clean_extracted_text(raw)
    if not text:
        raise EmptyDocumentError(f"{extension[1:].upper()} appears to be empty or text could not be extracted")

    return ExtractedText(
        text=text,
        file_type=extension[1:],
        page_count=page_count,
        word_count=len(text.split()),
        character_count=len(text),
        extracted_at=datetime.now(timezone.utc),
        parsing_warnings=warnings,
    )
