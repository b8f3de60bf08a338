"""Stage 4: Job Match - compare the CV against one specific job posting."""

from __future__ import annotations

import logging

from gapzero.clients.gateway import AIGateway
from gapzero.models.job_match import JobMatch
from gapzero.models.profile import ExtractedProfile

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a hiring manager screening applications. Compare the candidate against the job posting \
and tell them how to tailor their CV for it.

Respond ONLY with a JSON object matching the schema below. No preamble, no markdown fences.

RULES:
- matchScore is an integer 0-100
- matchingSkills and missingSkills use the skill names from the posting
- cvSuggestions quote the CV text to change in "current" and give a rewritten version in "suggested". \
Never invent experience the candidate does not have

JSON SCHEMA:
{
  "matchScore": 0,
  "matchingSkills": ["string"],
  "missingSkills": ["string"],
  "cvSuggestions": [{"section": "string", "current": "string", "suggested": "string", "reasoning": "string"}],
  "overallAdvice": "string"
}"""

JOB_MATCH_FALLBACK = JobMatch(
    match_score=0,
    matching_skills=[],
    missing_skills=[],
    cv_suggestions=[],
    overall_advice="Unable to analyze job match. Please try again.",
)


class JobMatcher:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def match(self, profile: ExtractedProfile, cv_text: str, job_posting: str) -> JobMatch:
        skills = "; ".join(
            f"{c.category}: {', '.join(c.skills)}" for c in profile.skills
        )
        prompt = f"""JOB POSTING:
---
{job_posting}
---

CANDIDATE SKILLS: {skills or "not extracted"}

CANDIDATE CV:
---
{cv_text}
---

Evaluate the match and respond with JSON only."""

        result = await self.gateway.invoke(
            SYSTEM_PROMPT,
            prompt,
            expected=JobMatch,
            fallback=JOB_MATCH_FALLBACK,
            max_tokens=4096,
            temperature=0.3,
            stage="job_match",
        )
        logger.info("Job match score: %d", result.value.match_score)
        return result.value
