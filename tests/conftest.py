"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import copy
from unittest.mock import AsyncMock

import pytest

from gapzero.clients.gateway import AIGateway
from gapzero.clients.llm_client import LLMClient, LLMResponse
from gapzero.models.request import Questionnaire
from gapzero.models.result import AnalysisResult
from gapzero.pipeline import ats_analyst, career_planner, gap_analyst, job_matcher, skill_extractor

SAMPLE_CV = """\
Jane Doe
jane.doe@example.com | Berlin, Germany

Summary
Backend engineer with six years of experience building data-heavy services in Python and Go.

Experience
Senior Backend Engineer, Acme Analytics (2021 - present)
- Designed an event ingestion platform handling 40k messages per second on Kafka and PostgreSQL
- Cut p95 API latency by 40% by introducing caching and query tuning
- Mentored four engineers and led the migration from a monolith to containerized services

Backend Engineer, Northwind Labs (2019 - 2021)
- Built REST APIs in Python with FastAPI and deployed them with Docker on AWS
- Automated nightly reporting jobs that replaced two days of manual work per month

Skills
Python, Go, SQL, PostgreSQL, Kafka, Docker, AWS, FastAPI, Git, CI/CD

Education
B.Sc. Computer Science, Technical University of Munich (2019)
"""

SAMPLE_JOB_POSTING = """\
Senior Machine Learning Engineer

We are looking for an engineer to take models from research into production.

Requirements:
- 5+ years of Python
- Hands-on Kubernetes experience
- Experience with ML pipelines and model serving

Nice to have:
- Terraform
- Experience with feature stores
"""

PROFILE_PAYLOAD = {
    "name": "Jane Doe",
    "currentRole": "Senior Backend Engineer",
    "totalYearsExperience": 6,
    "skills": [
        {"category": "Programming Languages", "skills": ["Python", "Go", "SQL"], "proficiencyLevel": "expert"},
        {"category": "Cloud & DevOps", "skills": ["Docker", "AWS"], "proficiencyLevel": "advanced"},
    ],
    "certifications": [],
    "education": [{"degree": "B.Sc.", "institution": "TU Munich", "year": "2019", "field": "Computer Science"}],
    "experience": [
        {
            "title": "Senior Backend Engineer",
            "company": "Acme Analytics",
            "duration": "2021 - present",
            "highlights": ["Cut p95 API latency by 40%"],
            "technologies": ["Python", "Kafka", "PostgreSQL"],
        }
    ],
    "languages": [{"language": "English", "level": "C1"}],
    "summary": "Backend engineer with six years of experience.",
}

GAP_PAYLOAD = {
    "fitScore": {
        "score": 7,
        "label": "Moderate Fit",
        "summary": "Strong backend base — ML production depth is missing.",
    },
    "strengths": [
        {
            "title": "Python at scale",
            "description": "Six years of production Python",
            "relevance": "Core language of the target role",
            "tier": "differentiator",
        }
    ],
    "gaps": [
        {
            "skill": "MLOps",
            "severity": "critical",
            "currentLevel": "none",
            "requiredLevel": "advanced",
            "impact": "Model deployment is the core of the role",
            "closingPlan": "Ship one model end to end",
            "timeToClose": "3 months",
            "resources": ["Made With ML"],
        }
    ],
    "roleRecommendations": [
        {
            "title": "ML Platform Engineer",
            "fitScore": 8,
            "salaryRange": {"low": 70000, "mid": 80000, "high": 95000, "currency": "EUR"},
            "reasoning": "Builds on backend and infrastructure work",
            "exampleCompanies": ["Spotify", "Zalando"],
            "timeToReady": "3-6 months",
        }
    ],
}

PLAN_PAYLOAD = {
    "actionPlan": {
        "thirtyDays": [
            {
                "action": "Deploy a small model behind a FastAPI service",
                "priority": "high",
                "timeEstimate": "4 weeks",
                "resource": "Full Stack Deep Learning",
                "expectedImpact": "Portfolio evidence of model serving",
            }
        ],
        "ninetyDays": [],
        "twelveMonths": [],
    },
    "salaryAnalysis": {
        "currentRoleMarket": {
            "low": 100000,
            "mid": 120000,
            "high": 140000,
            "currency": "USD",
            "region": "US remote (gross annual)",
        },
        "targetRoleMarket": {
            "low": 70000,
            "mid": 80000,
            "high": 95000,
            "currency": "EUR",
            "region": "Berlin (gross annual)",
        },
        "growthPotential": "+15% within two years",
        "bestMonetaryMove": "Move into ML platform work",
        "negotiationTips": ["Anchor on platform scale"],
    },
}

JOB_MATCH_PAYLOAD = {
    "matchScore": 72,
    "matchingSkills": ["Python", "Docker"],
    "missingSkills": ["Kubernetes"],
    "cvSuggestions": [
        {
            "section": "Skills",
            "current": "Docker",
            "suggested": "Docker, Kubernetes (learning)",
            "reasoning": "Kubernetes is a hard requirement",
        }
    ],
    "overallAdvice": "Good fit once Kubernetes is covered.",
}

KEYWORDS_PAYLOAD = {
    "keywords": [
        {"keyword": "Python", "category": "required", "importance": "high", "variants": ["Python 3"]},
        {"keyword": "Kubernetes", "category": "required", "importance": "high", "variants": ["K8s"]},
        {"keyword": "Terraform", "category": "preferred", "importance": "medium", "variants": []},
    ],
    "roleLevel": "senior",
    "domain": "ML Engineering",
}

MATCHING_PAYLOAD = {
    "matches": [
        {
            "keyword": "Python",
            "category": "required",
            "importance": "high",
            "status": "exact_match",
            "matchedAs": "Python",
            "cvSection": "Skills",
        },
        {
            "keyword": "Kubernetes",
            "category": "required",
            "importance": "high",
            "status": "semantic_match",
            "matchedAs": "Docker",
            "cvSection": "Experience",
        },
        {
            "keyword": "Terraform",
            "category": "preferred",
            "importance": "medium",
            "status": "missing",
            "cvSection": "Skills",
        },
    ],
    "recommendations": [
        {
            "action": "Mention any infrastructure-as-code work",
            "section": "Skills",
            "priority": "high",
            "keywords": ["Terraform"],
        }
    ],
}

STAGE_PROMPTS = {
    skill_extractor.SYSTEM_PROMPT: "extraction",
    gap_analyst.SYSTEM_PROMPT: "gap_analysis",
    career_planner.SYSTEM_PROMPT: "career_plan",
    job_matcher.SYSTEM_PROMPT: "job_match",
    ats_analyst.EXTRACTION_SYSTEM_PROMPT: "keywords",
    ats_analyst.MATCHING_SYSTEM_PROMPT: "matching",
}


def stage_for(system: str) -> str:
    if system.startswith("You are a professional translator"):
        return "translation"
    return STAGE_PROMPTS[system]


class ScriptedLLM:
    """Stands in for LLMClient: answers each stage from a script.

    A scripted value may be a payload dict, an exception to raise, or a
    callable taking the prompt. Every call is recorded with its start and
    end time on the event loop clock.
    """

    def __init__(self, responses: dict, delays: dict | None = None):
        self.responses = responses
        self.delays = delays or {}
        self.calls: list[dict] = []

    async def generate_json(
        self,
        prompt: str,
        system: str = "",
        model: str = "",
        temperature: float = 0.3,
        max_tokens: int = 4096,
    ):
        stage = stage_for(system)
        loop = asyncio.get_running_loop()
        call = {"stage": stage, "prompt": prompt, "max_tokens": max_tokens, "start": loop.time()}
        self.calls.append(call)
        await asyncio.sleep(self.delays.get(stage, 0))
        call["end"] = loop.time()

        response = self.responses.get(stage)
        if response is None:
            raise ValueError(f"No scripted response for {stage}")
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return copy.deepcopy(response)

    def get_token_summary(self) -> dict:
        return {"input": 0, "output": 0, "calls": []}

    def stages(self) -> list[str]:
        return [c["stage"] for c in self.calls]

    def call(self, stage: str) -> dict:
        return next(c for c in self.calls if c["stage"] == stage)


@pytest.fixture
def default_responses() -> dict:
    return {
        "extraction": copy.deepcopy(PROFILE_PAYLOAD),
        "gap_analysis": copy.deepcopy(GAP_PAYLOAD),
        "career_plan": copy.deepcopy(PLAN_PAYLOAD),
        "job_match": copy.deepcopy(JOB_MATCH_PAYLOAD),
        "keywords": copy.deepcopy(KEYWORDS_PAYLOAD),
        "matching": copy.deepcopy(MATCHING_PAYLOAD),
    }


@pytest.fixture
def scripted_llm(default_responses) -> ScriptedLLM:
    return ScriptedLLM(default_responses)


@pytest.fixture
def make_llm(default_responses):
    """Build a ScriptedLLM from the default script with some stages overridden."""

    def factory(overrides: dict | None = None, delays: dict | None = None) -> ScriptedLLM:
        return ScriptedLLM({**default_responses, **(overrides or {})}, delays)

    return factory


@pytest.fixture
def sample_cv_text() -> str:
    return SAMPLE_CV


@pytest.fixture
def sample_job_posting() -> str:
    return SAMPLE_JOB_POSTING


@pytest.fixture
def sample_questionnaire() -> Questionnaire:
    return Questionnaire(
        current_role="Senior Backend Engineer",
        target_role="Machine Learning Engineer",
        years_experience=6,
        country="Germany",
        work_preference="hybrid",
        current_salary=75000,
        target_salary=90000,
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value={})
    return client


@pytest.fixture
def gateway(mock_llm_client) -> AIGateway:
    return AIGateway(mock_llm_client)


@pytest.fixture
def analysis_result(default_responses) -> AnalysisResult:
    return AnalysisResult.model_validate(
        {
            "metadata": {
                "analyzedAt": "2025-06-01T12:00:00+00:00",
                "cvFileName": "jane.pdf",
                "targetRole": "Machine Learning Engineer",
                "country": "Germany",
            },
            **default_responses["gap_analysis"],
            **default_responses["career_plan"],
            "jobMatch": default_responses["job_match"],
        }
    )
