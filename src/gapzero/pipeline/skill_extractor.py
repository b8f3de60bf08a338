"""Stage 1: Skill Extraction - turns raw CV text into a structured profile."""

from __future__ import annotations

import logging

from gapzero.clients.gateway import AIGateway
from gapzero.models.profile import ExtractedProfile
from gapzero.models.request import Questionnaire

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert CV analyst and career strategist with 20 years of experience in tech recruitment. \
Extract a comprehensive, structured profile from the CV you are given.

Respond ONLY with a JSON object matching the schema below. No preamble, no markdown fences.

EXTRACTION RULES:
1. Extract ALL skills, both explicit ("Python") and implied by the work described ("API Design")
2. Group skills into logical categories (Programming Languages, Cloud & DevOps, AI/ML, ...)
3. Infer proficiency from years used, depth of work and certifications
4. For experience entries, keep quantifiable achievements (max 4 per role) and technologies used
5. Never invent facts that are not in the CV

PROFICIENCY LEVELS: "expert" (5+ years, architect-level), "advanced" (3-5 years), \
"intermediate" (1-3 years), "beginner" (briefly used)

JSON SCHEMA:
{
  "name": "full name",
  "currentRole": "most recent job title",
  "totalYearsExperience": 0,
  "skills": [{"category": "string", "skills": ["string"], "proficiencyLevel": "expert|advanced|intermediate|beginner"}],
  "certifications": ["string"],
  "education": [{"degree": "string", "institution": "string", "year": "string or null", "field": "string"}],
  "experience": [{"title": "string", "company": "string", "duration": "string", "highlights": ["string"], "technologies": ["string"]}],
  "languages": [{"language": "string", "level": "Native|C1|B2|..."}],
  "summary": "2-3 sentence professional summary"
}"""

EXTRACTION_FALLBACK = ExtractedProfile(
    name="Unknown",
    current_role="Not specified",
    total_years_experience=0,
    skills=[],
    experience=[],
    summary="Could not extract profile from CV.",
)


class SkillExtractor:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def extract(self, cv_text: str, questionnaire: Questionnaire) -> ExtractedProfile:
        """Extract the candidate profile; falls back to an empty profile."""
        prompt = f"""Here is the CV text to analyze:

---CV TEXT START---
{cv_text}
---CV TEXT END---

Additional context from the questionnaire:
{questionnaire.describe()}
"""
        if questionnaire.linked_in_profile:
            prompt += f"""
The candidate's LinkedIn profile, to complement the CV:
---LINKEDIN START---
{questionnaire.linked_in_profile}
---LINKEDIN END---
"""
        prompt += "\nExtract the complete professional profile as JSON."

        result = await self.gateway.invoke(
            SYSTEM_PROMPT,
            prompt,
            expected=ExtractedProfile,
            fallback=EXTRACTION_FALLBACK,
            max_tokens=4096,
            temperature=0.2,
            stage="skill_extraction",
        )
        profile = result.value
        logger.info(
            "Profile: %d skill categories, %d experience entries",
            len(profile.skills),
            len(profile.experience),
        )
        return profile
