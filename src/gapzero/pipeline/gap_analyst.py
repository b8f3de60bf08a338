"""Stage 2: Gap Analysis - fit score, strengths, gaps and role recommendations."""

from __future__ import annotations

import logging

from gapzero.clients.gateway import AIGateway
from gapzero.models.gap import FitScore, GapAnalysisResult
from gapzero.models.profile import ExtractedProfile
from gapzero.models.request import Questionnaire

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a senior career strategist who has placed hundreds of candidates in tech roles. \
Compare the candidate profile against the target role and the local job market.

Respond ONLY with a JSON object matching the schema below. No preamble, no markdown fences.

RULES:
- fitScore.score is an integer 1-10; label is one of "Strong Fit" (8-10), "Moderate Fit" (5-7), \
"Stretch" (3-4), "Significant Gap" (1-2)
- Strengths come from evidence in the profile. tier: "differentiator" (rare in the market), \
"strong", "supporting"
- Gaps are skills the target role requires that the profile lacks or shows only weakly. \
severity: "critical", "moderate", "minor". Give a concrete closing plan and real resources
- roleRecommendations are ordered best fit first, at most 5, salary ranges gross annual \
in the currency of the candidate's country

JSON SCHEMA:
{
  "fitScore": {"score": 7, "label": "Moderate Fit", "summary": "2-3 sentences"},
  "strengths": [{"title": "string", "description": "string", "relevance": "string", "tier": "differentiator|strong|supporting"}],
  "gaps": [{"skill": "string", "severity": "critical|moderate|minor", "currentLevel": "string", "requiredLevel": "string", \
"impact": "string", "closingPlan": "string", "timeToClose": "string", "resources": ["string"]}],
  "roleRecommendations": [{"title": "string", "fitScore": 8, "salaryRange": {"low": 0, "mid": 0, "high": 0, "currency": "EUR"}, \
"reasoning": "string", "exampleCompanies": ["string"], "timeToReady": "string"}]
}"""

GAP_ANALYSIS_FALLBACK = GapAnalysisResult(
    fit_score=FitScore(
        score=5,
        label="Moderate Fit",
        summary="Analysis could not be completed. Please try again.",
    ),
    strengths=[],
    gaps=[],
    role_recommendations=[],
)


class GapAnalyst:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def analyze(self, profile: ExtractedProfile, questionnaire: Questionnaire) -> GapAnalysisResult:
        prompt = f"""CANDIDATE PROFILE:
{profile.model_dump_json(by_alias=True, exclude_none=True, indent=2)}

QUESTIONNAIRE:
{questionnaire.describe()}

Analyze the fit for the target role(s) and respond with JSON only."""

        result = await self.gateway.invoke(
            SYSTEM_PROMPT,
            prompt,
            expected=GapAnalysisResult,
            fallback=GAP_ANALYSIS_FALLBACK,
            max_tokens=6144,
            temperature=0.3,
            stage="gap_analysis",
        )
        analysis = result.value
        logger.info(
            "Gap analysis: fit %d/10, %d strengths, %d gaps, %d roles",
            analysis.fit_score.score,
            len(analysis.strengths),
            len(analysis.gaps),
            len(analysis.role_recommendations),
        )
        return analysis
