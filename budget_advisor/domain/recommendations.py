"""Rule-based budget recommendations"""

from typing import List

from budget_advisor.domain.models import BudgetData

BUILD_EMERGENCY_FUND = "Build an emergency fund covering 3-6 months of expenses"
REDUCE_NON_ESSENTIALS = "Look for ways to reduce non-essential expenses"
HIGH_EXPENSES = "Your expenses are high relative to income - consider budget optimization"
SUSTAINABLE_PLAN = "Focus on creating a sustainable budget plan"
MORE_INCOME = "Consider additional income sources or expense reduction"
REVIEW_MONTHLY = "Review and categorize all expenses monthly"
SET_SAVINGS_GOALS = "Set specific savings goals for the next 6 months"


def generate_recommendations(budget_data: BudgetData, health_score: int) -> List[str]:
    """
    Build ordered advice for a budget.

    Each rule is checked independently and appends in a fixed order; the
    last two entries are always the review and savings-goal reminders.
    Ratio-based rules do not fire when there is no income.
    """
    recommendations: List[str] = []
    income = budget_data.monthly_income or 0
    expenses = budget_data.total_expenses or 0

    if income != 0:
        savings_rate = ((income - expenses) / income) * 100

        if savings_rate < 10:
            recommendations.append(BUILD_EMERGENCY_FUND)
            recommendations.append(REDUCE_NON_ESSENTIALS)

        if expenses / income > 0.8:
            recommendations.append(HIGH_EXPENSES)

    if health_score < 50:
        recommendations.append(SUSTAINABLE_PLAN)
        recommendations.append(MORE_INCOME)

    recommendations.append(REVIEW_MONTHLY)
    recommendations.append(SET_SAVINGS_GOALS)

    return recommendations
