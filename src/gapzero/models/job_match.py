"""Models for Job Match output."""

from __future__ import annotations

from pydantic import Field

from gapzero.models.base import WireModel


class CVSuggestion(WireModel):
    section: str
    current: str = ""
    suggested: str
    reasoning: str = ""


class JobMatch(WireModel):
    match_score: int = Field(ge=0, le=100)
    matching_skills: list[str] = []
    missing_skills: list[str] = []
    cv_suggestions: list[CVSuggestion] = []
    overall_advice: str = ""
