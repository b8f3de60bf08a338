"""The assembled analysis delivered to the client."""

from __future__ import annotations

from gapzero.models.ats import ATSScoreResult
from gapzero.models.base import WireModel
from gapzero.models.gap import FitScore, Gap, RoleRecommendation, Strength
from gapzero.models.job_match import JobMatch
from gapzero.models.plan import ActionPlan, SalaryAnalysis


class AnalysisMetadata(WireModel):
    analyzed_at: str  # ISO-8601
    cv_file_name: str
    target_role: str
    country: str


class AnalysisResult(WireModel):
    metadata: AnalysisMetadata
    fit_score: FitScore
    strengths: list[Strength]
    gaps: list[Gap]
    role_recommendations: list[RoleRecommendation] = []
    action_plan: ActionPlan
    salary_analysis: SalaryAnalysis
    job_match: JobMatch | None = None
    ats_score: ATSScoreResult | None = None
