"""Progress events sent over the event stream."""

from __future__ import annotations

import json
from typing import Any, Literal

from gapzero.models.base import WireModel

Step = Literal[
    "parsing",
    "extraction",
    "gap_analysis",
    "gap_done",
    "career_plan",
    "plan_done",
    "ats",
    "translating",
    "complete",
    "error",
]


class ProgressEvent(WireModel):
    step: Step
    progress: int | None = None
    message: str | None = None
    data: dict[str, Any] | None = None
    total_time: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.step in ("complete", "error")

    def to_frame(self) -> str:
        """Server-sent event frame: ``data: {json}`` and a blank line."""
        return f"data: {json.dumps(self.to_payload(), ensure_ascii=False)}\n\n"
