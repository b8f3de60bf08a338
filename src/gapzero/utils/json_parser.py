"""Pull a JSON value out of free-form model output."""

from __future__ import annotations

import json
import re

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)```", re.DOTALL)
_PAIRS = {"{": "}", "[": "]"}
_VALUE_ENDINGS = frozenset('"}]0123456789el')
_MAX_REPAIR_ATTEMPTS = 200


def extract_json(text: str) -> dict | list:
    """Extract the JSON object or array embedded in *text*.

    Tries in order:
    1. The whole text
    2. The body of a fenced code block
    3. The first balanced ``{...}`` or ``[...]`` span
    4. A repair of output cut off mid-object (open containers closed)

    Raises ValueError when nothing parses.
    """
    text = (text or "").strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    fence = _FENCE_RE.search(text)
    if fence:
        body = fence.group(1).strip()
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            text = body

    span = _balanced_span(text)
    if span is not None:
        try:
            return json.loads(span)
        except json.JSONDecodeError:
            pass

    repaired = _repair_truncated(text)
    if repaired is not None:
        return repaired

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _first_opener(text: str) -> int:
    positions = [i for i in (text.find("{"), text.find("[")) if i != -1]
    return min(positions) if positions else -1


def _balanced_span(text: str) -> str | None:
    """Return the first bracket-balanced span, ignoring brackets inside strings."""
    start = _first_opener(text)
    if start == -1:
        return None
    stack: list[str] = []
    in_string = escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif stack and ch == stack[-1]:
            stack.pop()
            if not stack:
                return text[start : i + 1]
    return None


def _repair_truncated(text: str) -> dict | list | None:
    """Close the containers left open by a response cut off at max_tokens."""
    start = _first_opener(text)
    if start == -1:
        return None
    candidate = text[start:].rstrip()

    # Walk back over the last few complete values until one closes cleanly
    attempts = 0
    for cut in range(len(candidate), 0, -1):
        if candidate[cut - 1] not in _VALUE_ENDINGS:
            continue
        attempts += 1
        if attempts > _MAX_REPAIR_ATTEMPTS:
            break
        head = candidate[:cut]
        closers = _open_closers(head)
        if closers is None:
            continue
        try:
            return json.loads(head + "".join(reversed(closers)))
        except json.JSONDecodeError:
            continue
    return None


def _open_closers(text: str) -> list[str] | None:
    """Closers still owed at the end of *text*, or None if inside a string."""
    stack: list[str] = []
    in_string = escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif stack and ch == stack[-1]:
            stack.pop()
    if in_string:
        return None
    return stack
