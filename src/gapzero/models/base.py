"""Shared base for models that travel as camelCase JSON."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; both spellings validate."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump for delivery: camelCase keys, absent optional fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
