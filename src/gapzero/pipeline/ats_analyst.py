"""ATS stages: keyword extraction from the posting and matching against the CV."""

from __future__ import annotations

import json
import logging

from gapzero.clients.gateway import AIGateway, GatewayResult
from gapzero.models.ats import ExtractedKeyword, KeywordExtraction, MatchingResult

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = """\
You are an ATS (Applicant Tracking System) analyst who knows how Workday, Greenhouse, Lever, \
Taleo and iCIMS parse and rank resumes. Extract every keyword, skill and requirement from the \
job posting and categorize it.

category:
- "required": stated as required, must-have, or listed under minimum qualifications
- "preferred": stated as preferred, bonus, or listed under preferred qualifications
- "nice-to-have": mentioned in the description body but not in a requirements section

importance: "high" (deal-breaker if missing), "medium" (strengthens the application), "low" (minor)
variants: common alternative phrasings, e.g. "AWS" -> ["Amazon Web Services"]

Extract specific skills, tools, platforms, certifications, methodologies and experience \
requirements ("5+ years Python"). Skip generic phrases like "team player". Only extract \
keywords present in the posting; do not split compound terms.

Respond ONLY with this JSON:
{
  "keywords": [{"keyword": "Python", "category": "required", "importance": "high", "variants": ["Python 3"]}],
  "roleLevel": "junior|mid|senior|lead|principal",
  "domain": "e.g. AI/ML Engineering"
}"""

MATCHING_SYSTEM_PROMPT = """\
You are an ATS matching engine. Decide which job-posting keywords appear in the candidate's CV.

For each keyword return:
- status: "exact_match" (keyword or a variant found verbatim), "semantic_match" (a closely related \
skill, e.g. "React Native" for "React"), or "missing"
- matchedAs: the CV text that matched, if any
- cvSection: the section holding the match, or where it should be added if missing

Matching is case-insensitive; abbreviations equal their full forms ("ML" = "Machine Learning"). \
A tangentially related skill is not a match ("Java" does not match "JavaScript").

Also give prioritized recommendations for adding missing keywords.

Respond ONLY with this JSON:
{
  "matches": [{"keyword": "Python", "category": "required", "importance": "high", "status": "exact_match", \
"matchedAs": "Python", "cvSection": "Skills"}],
  "recommendations": [{"action": "string", "section": "Skills", "priority": "critical|high|medium", \
"keywords": ["Docker"], "example": "string"}]
}"""

KEYWORD_EXTRACTION_FALLBACK = KeywordExtraction(keywords=[], role_level="mid", domain="General")
MATCHING_FALLBACK = MatchingResult(matches=[], recommendations=[])


class KeywordExtractor:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def extract(self, job_posting: str) -> GatewayResult[KeywordExtraction]:
        prompt = f"""JOB POSTING:
---
{job_posting}
---

Extract the keywords as JSON."""
        result = await self.gateway.invoke(
            EXTRACTION_SYSTEM_PROMPT,
            prompt,
            expected=KeywordExtraction,
            fallback=KEYWORD_EXTRACTION_FALLBACK,
            max_tokens=4000,
            temperature=0.1,
            stage="ats_keyword_extraction",
        )
        logger.info(
            "ATS keywords: %d extracted (%s, %s)",
            len(result.value.keywords),
            result.value.role_level,
            result.value.domain,
        )
        return result


class KeywordMatcher:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def match(
        self, cv_text: str, keywords: list[ExtractedKeyword]
    ) -> GatewayResult[MatchingResult]:
        keywords_json = json.dumps(
            [k.to_payload() for k in keywords], indent=2, ensure_ascii=False
        )
        prompt = f"""CANDIDATE CV TEXT:
---
{cv_text}
---

JOB POSTING KEYWORDS TO MATCH:
{keywords_json}

Match every keyword and respond with JSON only."""
        result = await self.gateway.invoke(
            MATCHING_SYSTEM_PROMPT,
            prompt,
            expected=MatchingResult,
            fallback=MATCHING_FALLBACK,
            max_tokens=6000,
            temperature=0.1,
            stage="ats_keyword_matching",
        )
        logger.info("ATS matches: %d", len(result.value.matches))
        return result
