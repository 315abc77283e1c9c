"""Budget aggregation - monthly normalization of income and expenses"""

from typing import Any, Dict, Iterable, List, Optional

from budget_advisor.domain.models import BudgetData, BudgetSummary, CategoryTotal, Expense, Income

FREQUENCY_MULTIPLIERS: Dict[str, float] = {
    "daily": 30,
    "weekly": 4.33,
    "bi-weekly": 2.17,
    "monthly": 1,
}


def normalize_monthly(amount: float, frequency: str) -> float:
    """Convert an amount recorded at the given cadence to a monthly figure"""
    return amount * FREQUENCY_MULTIPLIERS[frequency]


def total_monthly_expenses(expenses: Iterable[Expense]) -> float:
    """Sum of all expenses after monthly normalization"""
    return sum(normalize_monthly(e.amount, e.frequency) for e in expenses)


def monthly_income(income: Income) -> float:
    return normalize_monthly(income.amount, income.frequency)


def build_budget_data(
    income: Optional[Income],
    expenses: Optional[Iterable[Expense]],
    budget_id: Optional[str] = None,
) -> BudgetData:
    """
    Reduce raw income and expense lines into scorer input.

    Missing income counts as 0 and missing expenses as empty. Expenses are
    normalized to monthly amounts and collapsed per category, keeping the
    order in which categories were first seen.
    """
    currency = income.currency if income else "USD"
    income_amount = monthly_income(income) if income else 0.0

    totals: Dict[str, float] = {}
    for expense in expenses or []:
        totals[expense.category] = totals.get(expense.category, 0.0) + normalize_monthly(
            expense.amount, expense.frequency
        )

    return BudgetData(
        income=Income(amount=income_amount, frequency="monthly", currency=currency),
        expenses=[CategoryTotal(category=cat, amount=amount) for cat, amount in totals.items()],
        budget_id=budget_id,
    )


def budget_data_from_payload(payload: Optional[Dict[str, Any]]) -> Optional[BudgetData]:
    """
    Build scorer input from a loosely shaped ``{"income": {...}, "expenses": [...]}`` dict.

    Expense amounts are taken as already monthly. Absent fields default to 0/empty.
    """
    if payload is None:
        return None

    income = payload.get("income") or {}
    expenses = payload.get("expenses") or []

    return BudgetData(
        income=Income(
            amount=income.get("amount") or 0,
            frequency=income.get("frequency") or "monthly",
            currency=income.get("currency") or "USD",
        ),
        expenses=[
            CategoryTotal(category=e.get("category") or "", amount=e.get("amount") or 0)
            for e in expenses
        ],
        budget_id=payload.get("id"),
    )


def savings_tier(savings_rate: float) -> str:
    if savings_rate >= 20:
        return "Excellent"
    elif savings_rate >= 10:
        return "Good"
    elif savings_rate >= 0:
        return "Fair"
    return "Poor"


def summarize_budget(income: Income, expenses: List[Expense]) -> BudgetSummary:
    """Headline monthly figures for a budget (savings rate is 0 when there is no income)"""
    income_total = monthly_income(income)
    expense_total = total_monthly_expenses(expenses)
    surplus = income_total - expense_total
    rate = (surplus / income_total) * 100 if income_total > 0 else 0.0

    return BudgetSummary(
        monthly_income=round(income_total, 2),
        total_expenses=round(expense_total, 2),
        surplus=round(surplus, 2),
        savings_rate=round(rate, 1),
        savings_tier=savings_tier(rate),
    )
