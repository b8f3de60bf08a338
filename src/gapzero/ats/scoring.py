"""Weighted keyword coverage and the overall ATS blend."""

from __future__ import annotations

from collections.abc import Iterable

from gapzero.models.ats import ATSKeyword, ATSKeywordAnalysis, KeywordMatch, KeywordTally
from gapzero.utils.rounding import round_half_up

# Weight per (category, importance)
KEYWORD_WEIGHTS: dict[str, dict[str, int]] = {
    "required": {"high": 10, "medium": 7, "low": 4},
    "preferred": {"high": 5, "medium": 3, "low": 2},
    "nice-to-have": {"high": 3, "medium": 2, "low": 1},
}
DEFAULT_WEIGHT = 2
SEMANTIC_MATCH_FACTOR = 0.7

KEYWORD_SHARE = 0.8
FORMAT_SHARE = 0.2

_MULTIPLIER = {"exact_match": 1.0, "semantic_match": SEMANTIC_MATCH_FACTOR, "missing": 0.0}


def keyword_weight(category: str, importance: str) -> int:
    return KEYWORD_WEIGHTS.get(category, {}).get(importance, DEFAULT_WEIGHT)


def compute_keyword_score(matches: Iterable[KeywordMatch]) -> tuple[int, ATSKeywordAnalysis]:
    """Score keyword coverage 0-100 and sort matches into buckets.

    Exact matches count their full weight, semantic matches 70% of it.
    Returns 0 when there are no keywords at all.
    """
    analysis = ATSKeywordAnalysis()
    total_weight = 0.0
    matched_weight = 0.0
    required_total = 0
    required_matched = 0.0

    for m in matches:
        weight = keyword_weight(m.category, m.importance)
        multiplier = _MULTIPLIER.get(m.status, 0.0)
        total_weight += weight
        matched_weight += weight * multiplier
        if m.category == "required":
            required_total += 1
            required_matched += multiplier

        entry = ATSKeyword(
            keyword=m.keyword,
            category=m.category,
            importance=m.importance,
            matched_as=m.matched_as if m.status != "missing" else None,
            cv_section=m.cv_section,
        )
        if m.status == "exact_match":
            analysis.matched.append(entry)
        elif m.status == "semantic_match":
            analysis.semantic_match.append(entry)
        else:
            analysis.missing.append(entry)

    matched_required = round_half_up(required_matched)
    analysis.total = KeywordTally(
        required=required_total,
        matched=matched_required,
        missing=required_total - matched_required,
    )
    score = round_half_up(100 * matched_weight / total_weight) if total_weight > 0 else 0
    return score, analysis


def blend_scores(keyword_score: int, format_score: int) -> int:
    return round_half_up(keyword_score * KEYWORD_SHARE + format_score * FORMAT_SHARE)
