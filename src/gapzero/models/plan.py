"""Models for Career Plan output."""

from __future__ import annotations

from gapzero.models.base import WireModel


class ActionItem(WireModel):
    action: str
    priority: str = "medium"  # critical | high | medium
    time_estimate: str = ""
    resource: str = ""
    expected_impact: str = ""


class ActionPlan(WireModel):
    thirty_days: list[ActionItem] = []
    ninety_days: list[ActionItem] = []
    twelve_months: list[ActionItem] = []


class MarketSalary(WireModel):
    low: int
    mid: int
    high: int
    currency: str
    region: str = ""


class SalaryAnalysis(WireModel):
    current_role_market: MarketSalary
    target_role_market: MarketSalary
    growth_potential: str = ""
    best_monetary_move: str = ""
    negotiation_tips: list[str] = []


class CareerPlanResult(WireModel):
    action_plan: ActionPlan
    salary_analysis: SalaryAnalysis
