"""Full ATS assessment: two AI stages feeding the deterministic scorers."""

from __future__ import annotations

import logging

from gapzero.ats.company_ats import resolve_company_ats
from gapzero.ats.format_check import analyze_document_format
from gapzero.ats.scoring import blend_scores, compute_keyword_score
from gapzero.clients.gateway import AIGateway
from gapzero.errors import ATSScoringError, NoKeywordsError
from gapzero.models.ats import ATSScoreResult
from gapzero.models.document import ParsedDocument
from gapzero.pipeline.ats_analyst import KeywordExtractor, KeywordMatcher

logger = logging.getLogger(__name__)


class ATSScorer:
    def __init__(self, gateway: AIGateway):
        self.extractor = KeywordExtractor(gateway)
        self.matcher = KeywordMatcher(gateway)

    async def score(
        self,
        cv_text: str,
        job_posting: str,
        *,
        document: ParsedDocument | None = None,
        company_name: str | None = None,
        job_url: str | None = None,
    ) -> ATSScoreResult:
        """Score *cv_text* against *job_posting*.

        Format metadata comes from *document* when given, otherwise it is
        estimated from the text.

        Raises:
            NoKeywordsError: nothing could be extracted from the posting.
            ATSScoringError: keyword matching failed.
        """
        extraction = await self.extractor.extract(job_posting)
        keywords = extraction.value.keywords
        if not keywords:
            raise NoKeywordsError(
                "Could not extract keywords from the job posting. Please check the posting text."
            )

        matching = await self.matcher.match(cv_text, keywords)
        if matching.used_fallback:
            raise ATSScoringError("Failed to match keywords. Please try again.")

        keyword_score, analysis = compute_keyword_score(matching.value.matches)
        fmt = analyze_document_format(document or ParsedDocument.from_text(cv_text))
        company = resolve_company_ats(job_posting, company_name, job_url)
        overall = blend_scores(keyword_score, fmt.format_score)

        logger.info(
            "ATS score %d (keywords %d, format %d)", overall, keyword_score, fmt.format_score
        )
        return ATSScoreResult(
            overall_score=overall,
            keyword_score=keyword_score,
            format_score=fmt.format_score,
            keywords=analysis,
            format_issues=fmt.issues,
            recommendations=matching.value.recommendations,
            company_ats=company,
        )
