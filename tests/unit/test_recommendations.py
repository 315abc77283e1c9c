"""Unit tests for rule-based recommendations"""

import pytest
from conftest import make_budget
from budget_advisor.domain.health_score import calculate_health_score
from budget_advisor.domain.recommendations import (
    BUILD_EMERGENCY_FUND,
    HIGH_EXPENSES,
    MORE_INCOME,
    REDUCE_NON_ESSENTIALS,
    REVIEW_MONTHLY,
    SET_SAVINGS_GOALS,
    SUSTAINABLE_PLAN,
    generate_recommendations,
)

CLOSING = [
    "Review and categorize all expenses monthly",
    "Set specific savings goals for the next 6 months",
]


def test_healthy_budget_gets_only_closing_recommendations(healthy_budget):
    recommendations = generate_recommendations(healthy_budget, calculate_health_score(healthy_budget))
    assert recommendations == CLOSING


def test_all_rules_fire_in_order():
    """Low savings, high expenses and low score each append their advice"""
    budget = make_budget(1000, ("Rent", 950))

    recommendations = generate_recommendations(budget, calculate_health_score(budget))

    assert recommendations == [
        BUILD_EMERGENCY_FUND,
        REDUCE_NON_ESSENTIALS,
        HIGH_EXPENSES,
        SUSTAINABLE_PLAN,
        MORE_INCOME,
        REVIEW_MONTHLY,
        SET_SAVINGS_GOALS,
    ]


def test_high_expenses_without_low_savings():
    """85% expenses: savings rate 15% so only the expense warning fires"""
    budget = make_budget(1000, ("Rent", 850), ("Savings", 0))
    recommendations = generate_recommendations(budget, 75)

    assert recommendations == [HIGH_EXPENSES] + CLOSING


def test_low_score_only():
    recommendations = generate_recommendations(make_budget(1000, ("Food", 100)), 30)
    assert recommendations == [SUSTAINABLE_PLAN, MORE_INCOME] + CLOSING


def test_zero_income_skips_ratio_rules():
    """Without income the savings/expense ratios are undefined and do not trigger"""
    budget = make_budget(0, ("Rent", 500))

    recommendations = generate_recommendations(budget, calculate_health_score(budget))

    assert recommendations == [SUSTAINABLE_PLAN, MORE_INCOME] + CLOSING


@pytest.mark.parametrize("income", [0, 500, 1000, 3000])
@pytest.mark.parametrize("expenses", [0, 200, 700, 950, 1200])
def test_closing_entries_always_last(income, expenses):
    budget = make_budget(income, ("Living", expenses))
    recommendations = generate_recommendations(budget, calculate_health_score(budget))

    assert 2 <= len(recommendations) <= 7
    assert recommendations[-2:] == CLOSING


def test_recommendations_are_deterministic(healthy_budget):
    assert generate_recommendations(healthy_budget, 95) == generate_recommendations(healthy_budget, 95)
