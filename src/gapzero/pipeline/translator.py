"""Post-processing translation of a finished English report."""

from __future__ import annotations

import logging

from gapzero.clients.gateway import AIGateway, GatewayResult
from gapzero.models.result import AnalysisResult

logger = logging.getLogger(__name__)

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ro": "Romanian (Română)",
    "de": "German (Deutsch)",
    "fr": "French (Français)",
    "es": "Spanish (Español)",
}

SYSTEM_PROMPT_TEMPLATE = """\
You are a professional translator for career advisory and technology content. Translate the JSON \
career analysis you are given from English into {language}.

RULES:
1. Return ONLY the complete translated JSON object, no preamble, no markdown fences
2. Keep the structure identical: same keys, same nesting, same array lengths, same numbers
3. Translate every human-readable string value into natural, professional {language}
4. Keep in English: all JSON keys; metadata values; enum values (severity, tier, priority, \
category, importance, status); currency codes; company, technology, certification and course \
names; matchingSkills and missingSkills; cvSuggestions[].section
5. Do not add or remove keys or array items"""


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)


class Translator:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def translate(self, result: AnalysisResult, language: str) -> GatewayResult[AnalysisResult]:
        """Translate *result*; the untranslated result comes back on failure."""
        system = SYSTEM_PROMPT_TEMPLATE.format(language=language_name(language))
        translated = await self.gateway.invoke(
            system,
            result.model_dump_json(by_alias=True, exclude_none=True),
            expected=AnalysisResult,
            fallback=result,
            max_tokens=16384,
            temperature=0.1,
            stage="translation",
        )
        if not translated.used_fallback:
            logger.info("Translation to %s complete", language)
        return translated
