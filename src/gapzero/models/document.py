"""Models for documents handed over by the parsing collaborator."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Rough characters-per-page used when only text is available
CHARS_PER_PAGE = 3000


@dataclass
class ParsedDocument:
    """Plain text plus the lightweight metadata the format checks need."""

    text: str
    page_count: int = 1
    file_size: int = 0
    image_count: int = 0
    quality_score: int = 100
    quality_warning: str | None = None

    @classmethod
    def from_text(cls, text: str) -> ParsedDocument:
        """Describe pre-extracted text, estimating pages and byte size."""
        return cls(
            text=text,
            page_count=max(1, math.ceil(len(text) / CHARS_PER_PAGE)),
            file_size=len(text) * 2,
        )
