"""Stage 3: Career Plan - action roadmap and salary comparison."""

from __future__ import annotations

import json
import logging

from gapzero.clients.gateway import AIGateway
from gapzero.models.gap import Gap, RoleRecommendation
from gapzero.models.plan import ActionPlan, CareerPlanResult, MarketSalary, SalaryAnalysis
from gapzero.models.profile import ExtractedProfile
from gapzero.models.request import Questionnaire

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a career coach and compensation analyst. Turn the gap analysis into a concrete, \
time-boxed plan and compare the salary of the current role with the target role.

Respond ONLY with a JSON object matching the schema below. No preamble, no markdown fences.

RULES:
- thirtyDays: quick wins; ninetyDays: skill building; twelveMonths: the career move itself
- priority: "critical", "high" or "medium"
- Every action names a real resource (course, certification, community) where one applies
- Salary bands are gross annual figures for the candidate's country. Use the local currency \
and end region with "(gross annual)", e.g. "Germany (gross annual)"
- Use the same currency for currentRoleMarket and targetRoleMarket

JSON SCHEMA:
{
  "actionPlan": {
    "thirtyDays": [{"action": "string", "priority": "critical|high|medium", "timeEstimate": "string", \
"resource": "string", "expectedImpact": "string"}],
    "ninetyDays": [],
    "twelveMonths": []
  },
  "salaryAnalysis": {
    "currentRoleMarket": {"low": 0, "mid": 0, "high": 0, "currency": "EUR", "region": "string"},
    "targetRoleMarket": {"low": 0, "mid": 0, "high": 0, "currency": "EUR", "region": "string"},
    "growthPotential": "string",
    "bestMonetaryMove": "string",
    "negotiationTips": ["string"]
  }
}"""

_UNKNOWN_MARKET = MarketSalary(low=0, mid=0, high=0, currency="EUR", region="Unknown")

CAREER_PLAN_FALLBACK = CareerPlanResult(
    action_plan=ActionPlan(),
    salary_analysis=SalaryAnalysis(
        current_role_market=_UNKNOWN_MARKET.model_copy(),
        target_role_market=_UNKNOWN_MARKET.model_copy(),
        growth_potential="Unable to estimate",
        best_monetary_move="Complete the analysis again for salary insights.",
        negotiation_tips=[],
    ),
)


class CareerPlanner:
    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def plan(
        self,
        profile: ExtractedProfile,
        questionnaire: Questionnaire,
        gaps: list[Gap],
        roles: list[RoleRecommendation],
    ) -> CareerPlanResult:
        """Build the plan from the gap analysis output."""
        gaps_json = json.dumps([g.to_payload() for g in gaps], indent=2, ensure_ascii=False)
        roles_json = json.dumps([r.to_payload() for r in roles], indent=2, ensure_ascii=False)
        prompt = f"""CANDIDATE:
- Name: {profile.name}
- Current Role: {profile.current_role}
- Summary: {profile.summary}
- Certifications: {", ".join(profile.certifications) or "none"}

QUESTIONNAIRE:
{questionnaire.describe()}

IDENTIFIED GAPS:
{gaps_json}

RECOMMENDED ROLES:
{roles_json}

Build the action plan and salary analysis as JSON."""

        result = await self.gateway.invoke(
            SYSTEM_PROMPT,
            prompt,
            expected=CareerPlanResult,
            fallback=CAREER_PLAN_FALLBACK,
            max_tokens=6144,
            temperature=0.3,
            stage="career_plan",
        )
        plan = result.value
        logger.info(
            "Plan: %d+%d+%d actions",
            len(plan.action_plan.thirty_days),
            len(plan.action_plan.ninety_days),
            len(plan.action_plan.twelve_months),
        )
        return plan
