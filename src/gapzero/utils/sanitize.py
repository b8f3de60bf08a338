"""Replace typographic punctuation in model output with plain ASCII."""

from __future__ import annotations

import re
from typing import Any

_REPLACEMENTS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\s*[—–]\s*"), " - "),  # em/en dash
    (re.compile(r"[‘’]"), "'"),
    (re.compile(r"[“”]"), '"'),
    (re.compile(r"…"), "..."),
    (re.compile(r"→"), "->"),
    (re.compile(r"•"), "-"),
]


def sanitize_text(text: str) -> str:
    for pattern, replacement in _REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text


def sanitize_result(value: Any) -> Any:
    """Recursively sanitize every string inside dicts and lists; keys untouched."""
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        return [sanitize_result(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_result(v) for k, v in value.items()}
    return value
