"""Single entry point for every model call in the pipeline.

A call either yields a validated model or, on any failure, a copy of the
fallback the caller supplied. Nothing but cancellation propagates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from gapzero.clients.llm_client import DEFAULT_MODEL, LLMClient

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class GatewayResult(Generic[M]):
    value: M
    used_fallback: bool = False
    error: str | None = None


class AIGateway:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    async def invoke(
        self,
        system: str,
        prompt: str,
        *,
        expected: type[M],
        fallback: M,
        max_tokens: int = 4096,
        temperature: float = 0.3,
        stage: str = "",
    ) -> GatewayResult[M]:
        """Call the model and validate its JSON against *expected*.

        Raises TypeError if *fallback* is missing, since every caller must
        provide a usable value.
        """
        if fallback is None:
            raise TypeError("AIGateway.invoke requires a fallback value")
        label = stage or expected.__name__
        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=system,
                model=self.model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            value = expected.model_validate(data)
        except Exception as exc:
            logger.warning("%s: model call failed, using fallback (%s)", label, exc)
            return GatewayResult(
                value=fallback.model_copy(deep=True),
                used_fallback=True,
                error=f"{type(exc).__name__}: {exc}",
            )
        logger.debug("%s: model call succeeded", label)
        return GatewayResult(value=value)
