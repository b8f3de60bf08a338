"""Models for Gap Analysis output."""

from __future__ import annotations

from pydantic import Field

from gapzero.models.base import WireModel


class FitScore(WireModel):
    score: int = Field(ge=0, le=10)
    label: str  # Strong Fit | Moderate Fit | Stretch | Significant Gap
    summary: str = ""


class Strength(WireModel):
    title: str
    description: str = ""
    relevance: str = ""
    tier: str = "supporting"  # differentiator | strong | supporting


class Gap(WireModel):
    skill: str
    severity: str = "moderate"  # critical | moderate | minor
    current_level: str = ""
    required_level: str = ""
    impact: str = ""
    closing_plan: str = ""
    time_to_close: str = ""
    resources: list[str] = []


class SalaryRange(WireModel):
    low: int
    mid: int
    high: int
    currency: str = "EUR"


class RoleRecommendation(WireModel):
    title: str
    fit_score: float = 0
    salary_range: SalaryRange | None = None
    reasoning: str = ""
    example_companies: list[str] = []
    time_to_ready: str = ""


class GapAnalysisResult(WireModel):
    fit_score: FitScore
    strengths: list[Strength]
    gaps: list[Gap]
    role_recommendations: list[RoleRecommendation] = []
