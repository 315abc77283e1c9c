"""Unit tests for monthly normalization and budget summaries"""

import pytest
from budget_advisor.domain.aggregation import (
    budget_data_from_payload,
    build_budget_data,
    normalize_monthly,
    summarize_budget,
    total_monthly_expenses,
)
from budget_advisor.domain.models import Expense, Income


@pytest.mark.parametrize(
    "frequency, expected",
    [("daily", 3000), ("weekly", 433), ("bi-weekly", 217), ("monthly", 100)],
)
def test_normalize_monthly_multipliers(frequency, expected):
    assert normalize_monthly(100, frequency) == pytest.approx(expected)


def test_total_monthly_expenses_mixed_frequencies():
    expenses = [
        Expense(category="Coffee", amount=5, frequency="daily"),  # 150
        Expense(category="Groceries", amount=100, frequency="weekly"),  # 433
        Expense(category="Rent", amount=800, frequency="monthly"),  # 800
    ]
    assert total_monthly_expenses(expenses) == pytest.approx(1383)


def test_total_monthly_expenses_empty():
    assert total_monthly_expenses([]) == 0


def test_build_budget_data_groups_categories_in_first_seen_order():
    income = Income(amount=500, frequency="weekly", currency="GHS")
    expenses = [
        Expense(category="Food", amount=20, frequency="daily"),
        Expense(category="Rent", amount=1000),
        Expense(category="Food", amount=50, frequency="weekly"),
    ]

    budget_data = build_budget_data(income, expenses, budget_id="b-1")

    assert budget_data.monthly_income == pytest.approx(2165)
    assert budget_data.currency == "GHS"
    assert budget_data.budget_id == "b-1"
    assert [e.category for e in budget_data.expenses] == ["Food", "Rent"]
    assert budget_data.expenses[0].amount == pytest.approx(600 + 216.5)
    assert budget_data.total_expenses == pytest.approx(1816.5)


def test_build_budget_data_defaults_missing_parts():
    budget_data = build_budget_data(None, None)

    assert budget_data.monthly_income == 0
    assert budget_data.expenses == []
    assert budget_data.currency == "USD"


def test_budget_data_from_payload_uses_amounts_as_monthly():
    payload = {
        "id": "abc",
        "income": {"amount": 1000, "frequency": "weekly", "currency": "NGN"},
        "expenses": [{"category": "Rent", "amount": 300}, {"amount": 20}],
    }

    budget_data = budget_data_from_payload(payload)

    # Income amount is taken as-is: the payload is already monthly
    assert budget_data.monthly_income == 1000
    assert budget_data.total_expenses == 320
    assert budget_data.expenses[1].category == ""
    assert budget_data.budget_id == "abc"


def test_budget_data_from_payload_tolerates_missing_fields():
    assert budget_data_from_payload(None) is None

    budget_data = budget_data_from_payload({})
    assert budget_data.monthly_income == 0
    assert budget_data.expenses == []


@pytest.mark.parametrize(
    "expense_amount, tier",
    [(700, "Excellent"), (850, "Good"), (950, "Fair"), (1100, "Poor")],
)
def test_summarize_budget_tiers(expense_amount, tier):
    summary = summarize_budget(Income(amount=1000), [Expense(category="All", amount=expense_amount)])

    assert summary.monthly_income == 1000
    assert summary.total_expenses == expense_amount
    assert summary.surplus == 1000 - expense_amount
    assert summary.savings_tier == tier


def test_summarize_budget_zero_income():
    summary = summarize_budget(Income(amount=0), [Expense(category="Rent", amount=100)])

    assert summary.savings_rate == 0
    assert summary.surplus == -100
    assert summary.savings_tier == "Fair"
