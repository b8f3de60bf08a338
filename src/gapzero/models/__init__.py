"""Data models for the GapZero analysis pipeline."""

from gapzero.models.ats import (
    ATSKeyword,
    ATSKeywordAnalysis,
    ATSRecommendation,
    ATSScoreResult,
    CompanyATSInfo,
    ExtractedKeyword,
    FormatAnalysis,
    FormatIssue,
    FormatStats,
    KeywordExtraction,
    KeywordMatch,
    KeywordTally,
    MatchingResult,
)
from gapzero.models.document import ParsedDocument
from gapzero.models.events import ProgressEvent
from gapzero.models.gap import (
    FitScore,
    Gap,
    GapAnalysisResult,
    RoleRecommendation,
    SalaryRange,
    Strength,
)
from gapzero.models.job_match import CVSuggestion, JobMatch
from gapzero.models.plan import (
    ActionItem,
    ActionPlan,
    CareerPlanResult,
    MarketSalary,
    SalaryAnalysis,
)
from gapzero.models.profile import (
    EducationItem,
    ExperienceItem,
    ExtractedProfile,
    LanguageItem,
    SkillCategory,
)
from gapzero.models.request import AnalysisRequest, Questionnaire, UploadedDocument
from gapzero.models.result import AnalysisMetadata, AnalysisResult

__all__ = [
    "ATSKeyword",
    "ATSKeywordAnalysis",
    "ATSRecommendation",
    "ATSScoreResult",
    "ActionItem",
    "ActionPlan",
    "AnalysisMetadata",
    "AnalysisRequest",
    "AnalysisResult",
    "CVSuggestion",
    "CareerPlanResult",
    "CompanyATSInfo",
    "EducationItem",
    "ExperienceItem",
    "ExtractedKeyword",
    "ExtractedProfile",
    "FitScore",
    "FormatAnalysis",
    "FormatIssue",
    "FormatStats",
    "Gap",
    "GapAnalysisResult",
    "JobMatch",
    "KeywordExtraction",
    "KeywordMatch",
    "KeywordTally",
    "LanguageItem",
    "MarketSalary",
    "MatchingResult",
    "ParsedDocument",
    "ProgressEvent",
    "Questionnaire",
    "RoleRecommendation",
    "SalaryAnalysis",
    "SalaryRange",
    "SkillCategory",
    "Strength",
    "UploadedDocument",
]
