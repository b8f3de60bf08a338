"""PDF text extraction for uploaded CVs and LinkedIn exports."""

from __future__ import annotations

import asyncio
import logging
import re

import fitz  # pymupdf

from gapzero.errors import UnreadableDocumentError, UnsupportedDocumentError
from gapzero.models.document import ParsedDocument

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"
MIN_READABLE_CHARS = 200
TRUNCATION_NOTICE = "\n\n[... CV text truncated for processing ...]"

# Glyphs PDF exporters emit for icons and ligature failures
_ARTIFACT_RE = re.compile("[\u200b\u200c\u200d\u00ad\u2060\ufeff\ufffd]")


def is_pdf(content: bytes) -> bool:
    return content[:4] == PDF_MAGIC


def clean_text(text: str) -> str:
    """Normalize PDF-extracted text.

    Handles: zero-width and replacement characters, runs of spaces,
    trailing whitespace and excessive blank lines.
    """
    text = _ARTIFACT_RE.sub("", text)
    lines = [re.sub(r"[ \t]{2,}", "  ", line).rstrip() for line in text.splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def assess_quality(text: str, page_count: int) -> tuple[int, str | None]:
    """Return a 0-100 quality score and a warning when extraction looks poor."""
    chars_per_page = len(text) / max(page_count, 1)
    alnum = sum(1 for c in text if c.isalnum())
    alnum_ratio = alnum / max(len(text), 1)

    score = 100
    if chars_per_page < 500:
        score -= 30
    if alnum_ratio < 0.5:
        score -= 30
    score = max(score, 0)

    warning = None
    if score < 70:
        warning = (
            "Only part of the text could be read from this PDF. "
            "Results may be less accurate; a PDF exported from a word processor works best."
        )
    return score, warning


def _parse_pdf_sync(content: bytes) -> ParsedDocument:
    doc = fitz.open(stream=content, filetype="pdf")
    try:
        pages = []
        images = 0
        for page in doc:
            pages.append(page.get_text())
            images += len(page.get_images(full=True))
        page_count = doc.page_count
    finally:
        doc.close()

    text = clean_text("\n".join(pages))
    score, warning = assess_quality(text, page_count)
    return ParsedDocument(
        text=text,
        page_count=page_count,
        file_size=len(content),
        image_count=images,
        quality_score=score,
        quality_warning=warning,
    )


async def parse_pdf(content: bytes, *, min_chars: int = MIN_READABLE_CHARS) -> ParsedDocument:
    """Extract text from PDF bytes in a worker thread.

    Raises:
        UnsupportedDocumentError: the bytes are not a PDF.
        UnreadableDocumentError: the PDF is corrupt or holds almost no text.
    """
    if not is_pdf(content):
        raise UnsupportedDocumentError("The uploaded file is not a valid PDF document.")
    try:
        parsed = await asyncio.to_thread(_parse_pdf_sync, content)
    except (RuntimeError, ValueError) as exc:
        logger.warning("PDF parsing failed: %s", exc)
        raise UnreadableDocumentError(
            "Could not read the PDF. The file may be corrupted or password-protected."
        ) from exc

    if len(parsed.text) < min_chars:
        raise UnreadableDocumentError(
            "Could not extract enough text from the PDF. The file may be a scanned image. "
            "Please upload a text-based PDF."
        )
    logger.info(
        "PDF parsed: %d pages, %d chars, %d images",
        parsed.page_count,
        len(parsed.text),
        parsed.image_count,
    )
    if parsed.quality_warning:
        logger.warning("Low extraction quality (%d): %s", parsed.quality_score, parsed.quality_warning)
    return parsed


def truncate_cv_text(text: str, max_chars: int = 40000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_NOTICE
