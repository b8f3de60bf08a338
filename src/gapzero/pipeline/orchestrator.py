"""Main pipeline orchestrator - sequences the analysis stages."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from gapzero.ats.scorer import ATSScorer
from gapzero.clients.gateway import AIGateway
from gapzero.clients.llm_client import LLMClient
from gapzero.config import AppConfig, PipelineConfig
from gapzero.errors import AIServiceUnavailableError, AnalysisTimeoutError, user_message
from gapzero.models.ats import ATSScoreResult
from gapzero.models.document import ParsedDocument
from gapzero.models.events import ProgressEvent
from gapzero.models.request import AnalysisRequest, Questionnaire
from gapzero.models.result import AnalysisMetadata, AnalysisResult
from gapzero.parsers.document_parser import parse_pdf, truncate_cv_text
from gapzero.pipeline.career_planner import CareerPlanner
from gapzero.pipeline.currency import normalize_salary_currencies
from gapzero.pipeline.gap_analyst import GapAnalyst
from gapzero.pipeline.job_matcher import JobMatcher
from gapzero.pipeline.progress import ProgressChannel
from gapzero.pipeline.skill_extractor import SkillExtractor
from gapzero.pipeline.translator import Translator
from gapzero.utils.sanitize import sanitize_result

logger = logging.getLogger(__name__)

EventSink = Callable[[ProgressEvent], Awaitable[None]]
DocumentParser = Callable[..., Awaitable[ParsedDocument]]


async def _skipped() -> None:
    return None


class AnalysisOrchestrator:
    """Runs one analysis request through every stage.

    parsing -> extraction -> gap analysis -> (career plan || job match)
    -> ATS score -> translation -> complete. Job match and ATS only run
    when the questionnaire carries a long enough job posting.
    """

    def __init__(
        self,
        gateway: AIGateway,
        config: PipelineConfig | None = None,
        *,
        document_parser: DocumentParser = parse_pdf,
    ):
        self.gateway = gateway
        self.config = config or PipelineConfig()
        self.skill_extractor = SkillExtractor(gateway)
        self.gap_analyst = GapAnalyst(gateway)
        self.career_planner = CareerPlanner(gateway)
        self.job_matcher = JobMatcher(gateway)
        self.ats_scorer = ATSScorer(gateway)
        self.translator = Translator(gateway)
        self.parse_document = document_parser

    @classmethod
    def from_config(cls, config: AppConfig, api_key: str | None = None) -> AnalysisOrchestrator:
        """Wire a real Claude client.

        Raises AIServiceUnavailableError when no API key is configured.
        """
        api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise AIServiceUnavailableError(
                "The AI service is not configured right now. Please try again later."
            )
        llm = LLMClient(
            api_key=api_key,
            timeout=config.llm.timeout,
            max_attempts=config.llm.max_attempts,
        )
        return cls(AIGateway(llm, model=config.llm.model), config.pipeline)

    async def analyze(
        self, request: AnalysisRequest, on_event: EventSink | None = None
    ) -> AnalysisResult:
        """Run the pipeline and return the sanitized result.

        Raises AnalysisTimeoutError past ``timeout_seconds``; document errors
        propagate as their GapZeroError subclass.
        """
        try:
            result = await asyncio.wait_for(
                self._run(request, on_event), timeout=self.config.timeout_seconds
            )
        except asyncio.TimeoutError:
            raise AnalysisTimeoutError(
                "The analysis took too long to complete. Please try again."
            ) from None
        return AnalysisResult.model_validate(sanitize_result(result.to_payload()))

    async def stream(self, request: AnalysisRequest, channel: ProgressChannel) -> None:
        """Run the pipeline, reporting through *channel*; always closes it."""
        start = time.monotonic()
        try:
            result = await self.analyze(request, on_event=channel.send)
            total_time = f"{time.monotonic() - start:.1f}"
            logger.info("Analysis complete in %ss", total_time)
            await channel.send(
                ProgressEvent(
                    step="complete",
                    progress=100,
                    message="Analysis complete!",
                    data=result.to_payload(),
                    total_time=total_time,
                )
            )
        except Exception as exc:
            logger.exception("Analysis failed")
            await channel.send(ProgressEvent(step="error", message=user_message(exc)))
        finally:
            channel.close()

    async def _run(self, request: AnalysisRequest, on_event: EventSink | None) -> AnalysisResult:
        async def notify(step: str, progress: int, message: str, data: dict | None = None) -> None:
            if on_event is not None:
                await on_event(ProgressEvent(step=step, progress=progress, message=message, data=data))

        # --- Documents ---
        await notify("parsing", 5, "Reading your documents...")
        document = await self._read_cv(request)
        cv_text = truncate_cv_text(document.text, self.config.max_cv_chars)
        questionnaire = await self._attach_companion(request, request.questionnaire)

        # --- Profile, then gaps (the plan needs both) ---
        await notify("extraction", 12, "Extracting skills and experience...")
        profile = await self.skill_extractor.extract(cv_text, questionnaire)

        await notify("gap_analysis", 25, "Analyzing skill gaps and matching roles...")
        gap = await self.gap_analyst.analyze(profile, questionnaire)
        await notify("gap_done", 50, "Skills analysis complete!", gap.to_payload())

        # --- Career plan + job match (parallel) ---
        await notify("career_plan", 55, "Building your career roadmap...")
        posting = self._qualifying_posting(questionnaire)
        # Both branches run to completion before any failure is raised
        plan, job_match = await asyncio.gather(
            self.career_planner.plan(
                profile, questionnaire, gap.gaps, gap.role_recommendations
            ),
            self.job_matcher.match(profile, cv_text, posting) if posting else _skipped(),
            return_exceptions=True,
        )
        for outcome in (plan, job_match):
            if isinstance(outcome, BaseException):
                raise outcome
        normalize_salary_currencies(plan.salary_analysis)

        plan_data = {
            "actionPlan": plan.action_plan.to_payload(),
            "salaryAnalysis": plan.salary_analysis.to_payload(),
        }
        if job_match is not None:
            plan_data["jobMatch"] = job_match.to_payload()
        await notify("plan_done", 80, "Career plan ready!", plan_data)

        # --- ATS (optional) ---
        ats_score = None
        if posting:
            await notify("ats", 82, "Checking your CV against ATS filters...")
            ats_score = await self._score_ats(cv_text, posting, document, request, questionnaire)

        result = AnalysisResult(
            metadata=AnalysisMetadata(
                analyzed_at=datetime.now(timezone.utc).isoformat(),
                cv_file_name=request.cv_file_name,
                target_role=questionnaire.target_role,
                country=questionnaire.country,
            ),
            fit_score=gap.fit_score,
            strengths=gap.strengths,
            gaps=gap.gaps,
            role_recommendations=gap.role_recommendations,
            action_plan=plan.action_plan,
            salary_analysis=plan.salary_analysis,
            job_match=job_match,
            ats_score=ats_score,
        )

        # --- Translation (optional) ---
        language = questionnaire.language or self.config.default_language
        if language != self.config.default_language:
            await notify("translating", 85, "Translating your report...")
            result = await self._translate(result, language)

        return result

    async def _read_cv(self, request: AnalysisRequest) -> ParsedDocument:
        if request.cv is not None:
            return await self.parse_document(request.cv.content)
        return ParsedDocument.from_text(request.cv_text)

    async def _attach_companion(
        self, request: AnalysisRequest, questionnaire: Questionnaire
    ) -> Questionnaire:
        """Add the LinkedIn export to a copy of the questionnaire, if readable."""
        if request.companion is None:
            return questionnaire
        try:
            parsed = await self.parse_document(request.companion.content, min_chars=0)
        except Exception:
            logger.warning("Companion document could not be parsed, continuing without it", exc_info=True)
            return questionnaire
        text = truncate_cv_text(parsed.text, self.config.max_cv_chars)
        if len(text) <= self.config.companion_min_chars:
            logger.info("Companion document too short (%d chars), ignored", len(text))
            return questionnaire
        logger.info("Companion document attached: %d chars", len(text))
        return questionnaire.model_copy(update={"linked_in_profile": text})

    def _qualifying_posting(self, questionnaire: Questionnaire) -> str | None:
        posting = (questionnaire.job_posting or "").strip()
        if len(posting) > self.config.job_posting_min_chars:
            return posting
        return None

    async def _score_ats(
        self,
        cv_text: str,
        posting: str,
        document: ParsedDocument,
        request: AnalysisRequest,
        questionnaire: Questionnaire,
    ) -> ATSScoreResult | None:
        try:
            return await self.ats_scorer.score(
                cv_text,
                posting,
                document=document,
                company_name=request.company_name,
                job_url=questionnaire.job_posting_url,
            )
        except Exception:
            logger.warning("ATS scoring failed, skipping", exc_info=True)
            return None

    async def _translate(self, result: AnalysisResult, language: str) -> AnalysisResult:
        """Translated result, or *result* unchanged if translation fell through."""
        try:
            translated = await self.translator.translate(result, language)
        except Exception:
            logger.warning("Translation to %s failed, keeping English", language, exc_info=True)
            return result
        if translated.used_fallback:
            logger.warning("Translation to %s fell back, keeping English", language)
            return result

        value = translated.value
        # Optional sections are present exactly when they were before translating
        job_match = (value.job_match or result.job_match) if result.job_match else None
        ats_score = (value.ats_score or result.ats_score) if result.ats_score else None
        return value.model_copy(
            update={"metadata": result.metadata, "job_match": job_match, "ats_score": ats_score}
        )
