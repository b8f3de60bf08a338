"""Tests for pipeline orchestrator."""

import json

import pytest

from gapzero.clients.gateway import AIGateway
from gapzero.config import AppConfig, PipelineConfig
from gapzero.errors import (
    GENERIC_ERROR_MESSAGE,
    AIServiceUnavailableError,
    AnalysisTimeoutError,
    UnreadableDocumentError,
)
from gapzero.models.document import ParsedDocument
from gapzero.models.request import AnalysisRequest, UploadedDocument
from gapzero.pipeline.orchestrator import AnalysisOrchestrator
from gapzero.pipeline.progress import ProgressChannel

ALL_STAGES = ["extraction", "gap_analysis", "career_plan", "job_match", "keywords", "matching", "translation"]


class EventLog:
    def __init__(self):
        self.events = []

    async def __call__(self, event):
        self.events.append(event)

    @property
    def steps(self):
        return [e.step for e in self.events]

    def get(self, step):
        return next(e for e in self.events if e.step == step)


def fake_parser(documents: dict):
    """Document parser keyed by file content; values are documents or exceptions."""

    async def parse(content, **kwargs):
        doc = documents[content]
        if isinstance(doc, Exception):
            raise doc
        return doc

    return parse


def _orchestrator(llm, config=None, documents=None) -> AnalysisOrchestrator:
    if documents is None:
        return AnalysisOrchestrator(AIGateway(llm), config)
    return AnalysisOrchestrator(AIGateway(llm), config, document_parser=fake_parser(documents))


@pytest.fixture
def text_request(sample_questionnaire, sample_cv_text, sample_job_posting):
    questionnaire = sample_questionnaire.model_copy(update={"job_posting": sample_job_posting})
    return AnalysisRequest(questionnaire=questionnaire, cv_text=sample_cv_text)


@pytest.fixture
def no_posting_request(sample_questionnaire, sample_cv_text):
    return AnalysisRequest(questionnaire=sample_questionnaire, cv_text=sample_cv_text)


class TestPipelineFlow:
    async def test_steps_and_progress(self, scripted_llm, text_request):
        log = EventLog()

        await _orchestrator(scripted_llm).analyze(text_request, on_event=log)

        assert log.steps == [
            "parsing",
            "extraction",
            "gap_analysis",
            "gap_done",
            "career_plan",
            "plan_done",
            "ats",
        ]
        assert [e.progress for e in log.events] == [5, 12, 25, 50, 55, 80, 82]

    async def test_partial_results_in_events(self, scripted_llm, text_request):
        log = EventLog()

        await _orchestrator(scripted_llm).analyze(text_request, on_event=log)

        gap_data = log.get("gap_done").data
        assert gap_data["fitScore"]["score"] == 7
        assert gap_data["gaps"][0]["skill"] == "MLOps"
        plan_data = log.get("plan_done").data
        assert set(plan_data) == {"actionPlan", "salaryAnalysis", "jobMatch"}
        assert plan_data["jobMatch"]["matchScore"] == 72

    async def test_full_result(self, scripted_llm, text_request):
        result = await _orchestrator(scripted_llm).analyze(text_request)

        assert result.metadata.cv_file_name == "cv.txt"
        assert result.metadata.target_role == "Machine Learning Engineer"
        assert result.metadata.country == "Germany"
        assert result.fit_score.score == 7
        assert result.job_match.match_score == 72
        # Python exact (10) + Kubernetes semantic (0.7 * 10) of 10 + 10 + 3
        assert result.ats_score.keyword_score == 74
        assert result.ats_score.format_score == 100
        assert result.ats_score.overall_score == 79

    async def test_stage_order(self, scripted_llm, text_request):
        await _orchestrator(scripted_llm).analyze(text_request)

        stages = scripted_llm.stages()
        assert stages[:2] == ["extraction", "gap_analysis"]
        assert set(stages[2:4]) == {"career_plan", "job_match"}
        assert stages[4:] == ["keywords", "matching"]

    async def test_each_stage_waits_for_its_inputs(self, make_llm, text_request):
        llm = make_llm(delays={"extraction": 0.05, "gap_analysis": 0.05})

        await _orchestrator(llm).analyze(text_request)

        assert llm.call("extraction")["end"] <= llm.call("gap_analysis")["start"]
        assert llm.call("gap_analysis")["end"] <= llm.call("career_plan")["start"]
        assert llm.call("gap_analysis")["end"] <= llm.call("job_match")["start"]

    async def test_plan_and_job_match_overlap(self, make_llm, text_request):
        llm = make_llm(delays={"career_plan": 0.2, "job_match": 0.2})

        await _orchestrator(llm).analyze(text_request)

        plan, match = llm.call("career_plan"), llm.call("job_match")
        assert match["start"] < plan["end"]
        assert plan["start"] < match["end"]
        assert max(plan["end"], match["end"]) - min(plan["start"], match["start"]) < 0.4

    async def test_results_are_sanitized(self, scripted_llm, text_request):
        result = await _orchestrator(scripted_llm).analyze(text_request)

        assert result.fit_score.summary == "Strong backend base - ML production depth is missing."


class TestJobPostingThreshold:
    async def test_no_posting_skips_job_match_and_ats(self, scripted_llm, no_posting_request):
        log = EventLog()

        result = await _orchestrator(scripted_llm).analyze(no_posting_request, on_event=log)

        assert result.job_match is None
        assert result.ats_score is None
        assert "ats" not in log.steps
        assert "jobMatch" not in log.get("plan_done").data
        assert scripted_llm.stages() == ["extraction", "gap_analysis", "career_plan"]
        payload = result.to_payload()
        assert "jobMatch" not in payload
        assert "atsScore" not in payload

    @pytest.mark.parametrize("length,expected", [(50, False), (51, True)])
    async def test_posting_must_exceed_threshold(self, scripted_llm, no_posting_request, length, expected):
        questionnaire = no_posting_request.questionnaire.model_copy(update={"job_posting": "p" * length})
        request = AnalysisRequest(questionnaire=questionnaire, cv_text=no_posting_request.cv_text)

        result = await _orchestrator(scripted_llm).analyze(request)

        assert (result.job_match is not None) is expected
        assert ("job_match" in scripted_llm.stages()) is expected

    async def test_whitespace_does_not_count(self, scripted_llm, no_posting_request):
        questionnaire = no_posting_request.questionnaire.model_copy(
            update={"job_posting": "  short posting  " + " " * 100}
        )
        request = AnalysisRequest(questionnaire=questionnaire, cv_text=no_posting_request.cv_text)

        result = await _orchestrator(scripted_llm).analyze(request)

        assert result.job_match is None


class TestFallbacks:
    async def test_failed_gap_analysis_uses_fallback(self, make_llm, text_request):
        llm = make_llm({"gap_analysis": RuntimeError("overloaded")})
        log = EventLog()

        result = await _orchestrator(llm).analyze(text_request, on_event=log)

        assert result.fit_score.score == 5
        assert result.fit_score.label == "Moderate Fit"
        assert result.gaps == []
        assert log.get("gap_done").data["fitScore"]["score"] == 5
        assert "career_plan" in llm.stages()

    async def test_every_stage_failing_still_completes(self, make_llm, text_request):
        llm = make_llm({stage: RuntimeError("down") for stage in ALL_STAGES})

        result = await _orchestrator(llm).analyze(text_request)

        assert result.fit_score.score == 5
        assert result.job_match.match_score == 0
        assert result.salary_analysis.target_role_market.region == "Unknown"
        assert result.ats_score is None

    async def test_ats_failure_is_not_fatal(self, make_llm, text_request):
        llm = make_llm({"matching": ValueError("bad json")})

        result = await _orchestrator(llm).analyze(text_request)

        assert result.ats_score is None
        assert result.job_match.match_score == 72


class TestSalaryNormalization:
    async def test_current_market_converted_to_target_currency(self, scripted_llm, no_posting_request):
        log = EventLog()

        result = await _orchestrator(scripted_llm).analyze(no_posting_request, on_event=log)

        current = result.salary_analysis.current_role_market
        assert current.currency == "EUR"
        assert (current.low, current.mid, current.high) == (92000, 110400, 128800)
        assert current.region == "US remote (converted to EUR, gross annual)"
        event_market = log.get("plan_done").data["salaryAnalysis"]["currentRoleMarket"]
        assert event_market["currency"] == "EUR"


class TestDocuments:
    async def test_pdf_is_parsed(self, scripted_llm, sample_questionnaire, sample_cv_text):
        request = AnalysisRequest(
            questionnaire=sample_questionnaire,
            cv=UploadedDocument(filename="jane.pdf", content=b"cv"),
        )
        orchestrator = _orchestrator(scripted_llm, documents={b"cv": ParsedDocument(text=sample_cv_text)})

        result = await orchestrator.analyze(request)

        assert result.metadata.cv_file_name == "jane.pdf"
        assert "Acme Analytics" in scripted_llm.call("extraction")["prompt"]

    async def test_long_cv_is_truncated(self, scripted_llm, sample_questionnaire):
        request = AnalysisRequest(questionnaire=sample_questionnaire, cv_text="a" * 5000)
        orchestrator = _orchestrator(scripted_llm, PipelineConfig(max_cv_chars=1000))

        await orchestrator.analyze(request)

        prompt = scripted_llm.call("extraction")["prompt"]
        assert "a" * 1000 in prompt
        assert "a" * 1001 not in prompt
        assert "CV text truncated" in prompt

    async def test_companion_attached(self, scripted_llm, sample_questionnaire, sample_cv_text):
        request = AnalysisRequest(
            questionnaire=sample_questionnaire,
            cv=UploadedDocument(filename="cv.pdf", content=b"cv"),
            companion=UploadedDocument(filename="linkedin.pdf", content=b"li"),
        )
        linkedin = "Open source maintainer of a Kafka client library. " * 5
        orchestrator = _orchestrator(
            scripted_llm,
            documents={b"cv": ParsedDocument(text=sample_cv_text), b"li": ParsedDocument(text=linkedin)},
        )

        await orchestrator.analyze(request)

        prompt = scripted_llm.call("extraction")["prompt"]
        assert "---LINKEDIN START---" in prompt
        assert "Kafka client library" in prompt

    @pytest.mark.parametrize(
        "companion",
        [ParsedDocument(text="too short"), UnreadableDocumentError("broken")],
    )
    async def test_companion_ignored_when_unusable(
        self, scripted_llm, sample_questionnaire, sample_cv_text, companion
    ):
        request = AnalysisRequest(
            questionnaire=sample_questionnaire,
            cv=UploadedDocument(filename="cv.pdf", content=b"cv"),
            companion=UploadedDocument(filename="linkedin.pdf", content=b"li"),
        )
        orchestrator = _orchestrator(
            scripted_llm,
            documents={b"cv": ParsedDocument(text=sample_cv_text), b"li": companion},
        )

        result = await orchestrator.analyze(request)

        assert "LINKEDIN" not in scripted_llm.call("extraction")["prompt"]
        assert result.fit_score.score == 7

    async def test_unreadable_cv_raises(self, scripted_llm, sample_questionnaire):
        request = AnalysisRequest(
            questionnaire=sample_questionnaire,
            cv=UploadedDocument(filename="cv.pdf", content=b"cv"),
        )
        orchestrator = _orchestrator(
            scripted_llm, documents={b"cv": UnreadableDocumentError("Could not read the PDF.")}
        )

        with pytest.raises(UnreadableDocumentError):
            await orchestrator.analyze(request)
        assert scripted_llm.calls == []


class TestTranslation:
    async def test_translated_when_language_differs(self, make_llm, text_request):
        def translate(prompt):
            data = json.loads(prompt)
            data["fitScore"]["summary"] = "Solide Backend-Basis"
            data["metadata"]["cvFileName"] = "lebenslauf.pdf"
            data.pop("jobMatch")
            return data

        llm = make_llm({"translation": translate})
        questionnaire = text_request.questionnaire.model_copy(update={"language": "de"})
        request = AnalysisRequest(questionnaire=questionnaire, cv_text=text_request.cv_text)
        log = EventLog()

        result = await _orchestrator(llm).analyze(request, on_event=log)

        assert result.fit_score.summary == "Solide Backend-Basis"
        assert result.metadata.cv_file_name == "cv.txt"
        assert result.job_match.match_score == 72
        assert log.steps[-1] == "translating"
        assert log.get("translating").progress == 85

    async def test_translation_failure_keeps_english(self, make_llm, text_request):
        llm = make_llm({"translation": RuntimeError("timeout")})
        questionnaire = text_request.questionnaire.model_copy(update={"language": "fr"})
        request = AnalysisRequest(questionnaire=questionnaire, cv_text=text_request.cv_text)

        result = await _orchestrator(llm).analyze(request)

        assert result.fit_score.summary.startswith("Strong backend base")
        assert result.ats_score is not None

    async def test_default_language_not_translated(self, scripted_llm, text_request):
        questionnaire = text_request.questionnaire.model_copy(update={"language": "en"})
        request = AnalysisRequest(questionnaire=questionnaire, cv_text=text_request.cv_text)

        await _orchestrator(scripted_llm).analyze(request)

        assert "translation" not in scripted_llm.stages()


class TestStream:
    async def test_stream_ends_with_complete(self, scripted_llm, text_request):
        channel = ProgressChannel()

        await _orchestrator(scripted_llm).stream(text_request, channel)
        events = [e async for e in channel]

        final = events[-1]
        assert final.step == "complete"
        assert final.progress == 100
        assert final.message == "Analysis complete!"
        assert final.data["fitScore"]["score"] == 7
        assert final.data["atsScore"]["overallScore"] == 79
        assert final.total_time is not None
        assert channel.closed

    async def test_progress_never_decreases(self, scripted_llm, text_request):
        channel = ProgressChannel()

        await _orchestrator(scripted_llm).stream(text_request, channel)
        progress = [e.progress async for e in channel if e.progress is not None]

        assert progress == sorted(progress)
        assert progress[-1] == 100

    async def test_document_error_becomes_error_event(self, scripted_llm, sample_questionnaire):
        request = AnalysisRequest(
            questionnaire=sample_questionnaire,
            cv=UploadedDocument(filename="cv.pdf", content=b"cv"),
        )
        orchestrator = _orchestrator(
            scripted_llm, documents={b"cv": UnreadableDocumentError("Could not read the PDF.")}
        )
        channel = ProgressChannel()

        await orchestrator.stream(request, channel)
        events = [e async for e in channel]

        assert [e.step for e in events] == ["parsing", "error"]
        assert events[-1].message == "Could not read the PDF."
        assert channel.closed

    async def test_unexpected_error_is_generic(self, scripted_llm, sample_questionnaire):
        request = AnalysisRequest(
            questionnaire=sample_questionnaire,
            cv=UploadedDocument(filename="cv.pdf", content=b"cv"),
        )
        orchestrator = _orchestrator(scripted_llm, documents={b"cv": KeyError("internal detail")})
        channel = ProgressChannel()

        await orchestrator.stream(request, channel)
        events = [e async for e in channel]

        assert events[-1].step == "error"
        assert events[-1].message == GENERIC_ERROR_MESSAGE

    async def test_failing_plan_waits_for_job_match(self, make_llm, text_request):
        llm = make_llm(delays={"job_match": 0.3})
        orchestrator = _orchestrator(llm)

        async def broken_plan(*args, **kwargs):
            raise KeyError("plan")

        orchestrator.career_planner.plan = broken_plan
        channel = ProgressChannel()

        await orchestrator.stream(text_request, channel)
        events = [e async for e in channel]

        assert [e.step for e in events][-2:] == ["career_plan", "error"]
        assert llm.call("job_match").get("end") is not None


class TestTimeout:
    async def test_slow_run_times_out(self, make_llm, text_request):
        llm = make_llm(delays={"extraction": 5})
        orchestrator = _orchestrator(llm, PipelineConfig(timeout_seconds=1))

        with pytest.raises(AnalysisTimeoutError):
            await orchestrator.analyze(text_request)


class TestFromConfig:
    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        with pytest.raises(AIServiceUnavailableError):
            AnalysisOrchestrator.from_config(AppConfig())

    def test_wires_configured_model(self):
        config = AppConfig()

        orchestrator = AnalysisOrchestrator.from_config(config, api_key="test-key")

        assert orchestrator.gateway.model == config.llm.model
        assert orchestrator.gateway.llm.max_attempts == 1
        assert orchestrator.config is config.pipeline
