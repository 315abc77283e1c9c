"""Financial health scoring engine - core business logic for budget analysis"""

import math

from budget_advisor.domain.models import BudgetData, HealthAssessment, ScoreFactors
from budget_advisor.domain.recommendations import generate_recommendations

EMERGENCY_FUND_KEYWORDS = ("emergency", "savings")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def has_emergency_fund(budget_data: BudgetData) -> bool:
    """True if any expense category label mentions an emergency fund or savings"""
    return any(
        keyword in (e.category or "").lower()
        for e in budget_data.expenses
        for keyword in EMERGENCY_FUND_KEYWORDS
    )


def calculate_health_score(budget_data: BudgetData) -> int:
    """
    Calculate financial health score from 0 (poor) to 100 (excellent).

    Scoring policy:
    - Start at 100
    - Expense ratio deduction, first matching band only:
      >90% -40, >80% -30, >70% -20, >60% -10
    - Savings rate bonus: >=20% +10, >=10% +5
    - No emergency fund / savings category: -15
    - No income: score is 0, nothing else applies
    """
    income = budget_data.monthly_income or 0
    expenses = budget_data.total_expenses or 0

    if income == 0:
        return 0

    expense_ratio = (expenses / income) * 100
    savings_rate = ((income - expenses) / income) * 100

    score = 100

    if expense_ratio > 90:
        score -= 40
    elif expense_ratio > 80:
        score -= 30
    elif expense_ratio > 70:
        score -= 20
    elif expense_ratio > 60:
        score -= 10

    if savings_rate >= 20:
        score += 10
    elif savings_rate >= 10:
        score += 5

    if not has_emergency_fund(budget_data):
        score -= 15

    return max(0, min(100, _round_half_up(score)))


def get_score_factors(budget_data: BudgetData) -> ScoreFactors:
    """Breakdown of the figures behind a health score (percentages unset without income)"""
    income = budget_data.monthly_income or 0
    expenses = budget_data.total_expenses or 0

    income_utilization = None
    savings_rate = None
    if income != 0:
        income_utilization = _round_half_up((expenses / income) * 100)
        savings_rate = _round_half_up(((income - expenses) / income) * 100)

    return ScoreFactors(
        income_utilization=income_utilization,
        savings_rate=savings_rate,
        expense_categories=len(budget_data.expenses),
        emergency_fund_present=has_emergency_fund(budget_data),
    )


def health_score_label(score: int) -> str:
    """Map score to qualitative band: excellent / good / fair / poor"""
    if score >= 80:
        return "excellent"
    elif score >= 60:
        return "good"
    elif score >= 40:
        return "fair"
    return "poor"


def assess_budget(budget_data: BudgetData) -> HealthAssessment:
    """
    Main entry point: score a budget and build recommendations.

    Returns complete HealthAssessment with score, label, factors and advice.
    """
    score = calculate_health_score(budget_data)

    return HealthAssessment(
        health_score=score,
        label=health_score_label(score),
        score_factors=get_score_factors(budget_data),
        recommendations=generate_recommendations(budget_data, score),
    )
