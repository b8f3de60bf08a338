"""Pydantic models for ATS keyword extraction, matching and the final score."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from gapzero.models.base import WireModel

KeywordCategory = str  # required | preferred | nice-to-have; other labels score the default weight
KeywordImportance = str  # high | medium | low
MatchStatus = Literal["exact_match", "semantic_match", "missing"]
Severity = Literal["critical", "warning", "info"]


def _normalize_label(value: object, sep: str) -> object:
    """'Nice to have' -> 'nice-to-have', 'Exact match' -> 'exact_match'."""
    if isinstance(value, str):
        return "".join(sep if c in " -_" else c for c in value.strip().lower())
    return value


class ExtractedKeyword(WireModel):
    keyword: str
    category: KeywordCategory
    importance: KeywordImportance
    variants: list[str] = []

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return _normalize_label(v, "-")

    @field_validator("importance", mode="before")
    @classmethod
    def normalize_importance(cls, v):
        v = _normalize_label(v, "")
        return "high" if v == "critical" else v


class KeywordExtraction(WireModel):
    keywords: list[ExtractedKeyword]
    role_level: str = "mid"
    domain: str = "General"


class KeywordMatch(ExtractedKeyword):
    status: MatchStatus
    matched_as: str | None = None
    cv_section: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_label(v, "_")


class ATSRecommendation(WireModel):
    action: str
    section: str = ""
    priority: str = "medium"  # critical | high | medium | low
    keywords: list[str] = []
    example: str | None = None


class MatchingResult(WireModel):
    matches: list[KeywordMatch]
    recommendations: list[ATSRecommendation] = []


class ATSKeyword(WireModel):
    keyword: str
    category: KeywordCategory
    importance: KeywordImportance
    matched_as: str | None = None
    cv_section: str | None = None


class KeywordTally(WireModel):
    required: int = 0
    matched: int = 0
    missing: int = 0


class ATSKeywordAnalysis(WireModel):
    matched: list[ATSKeyword] = []
    semantic_match: list[ATSKeyword] = []
    missing: list[ATSKeyword] = []
    total: KeywordTally = Field(default_factory=KeywordTally)


class FormatIssue(WireModel):
    issue: str
    severity: Severity
    description: str
    fix: str
    deduction: int = 0


class FormatStats(WireModel):
    page_count: int
    char_count: int
    is_text_extractable: bool
    has_images: bool
    estimated_columns: int
    file_size: int


class FormatAnalysis(WireModel):
    format_score: int
    issues: list[FormatIssue]
    stats: FormatStats


class CompanyATSInfo(WireModel):
    company: str
    ats_system: str
    tips: list[str] = []


class ATSScoreResult(WireModel):
    overall_score: int = Field(ge=0, le=100)
    keyword_score: int = Field(ge=0, le=100)
    format_score: int = Field(ge=0, le=100)
    keywords: ATSKeywordAnalysis
    format_issues: list[FormatIssue] = []
    recommendations: list[ATSRecommendation] = []
    company_ats: CompanyATSInfo | None = Field(default=None, alias="companyATS")
