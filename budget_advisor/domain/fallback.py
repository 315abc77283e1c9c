"""
Deterministic advisor replies used when the language model is unavailable.

Replies are routed by keywords in the user's message; the first matching
topic wins. Text is fixed prose with the user's budget figures filled in.
"""

from typing import List, Optional

from budget_advisor.domain.health_score import health_score_label
from budget_advisor.domain.market_analysis import format_amount
from budget_advisor.domain.models import BudgetData

OFFLINE_NOTE = (
    "Note: the AI advisor is temporarily unavailable, so this answer was prepared "
    "from your budget figures using built-in guidance."
)

SAVINGS_STRATEGY = """SAVINGS STRATEGY

1. Emergency fund first: set aside 3-6 months of essential expenses in an easily accessible account.
2. Target savings rate: aim to save at least 20% of your monthly income. If that is not possible yet, start with 10% and increase it by 1-2% every few months.
3. Pay yourself first: move savings to a separate account on payday, before any spending.

Practical tips:
- Automate transfers so saving does not depend on willpower
- Track every expense for one month to find leaks
- Cancel unused subscriptions and memberships
- Buy staples in bulk and compare prices before big purchases
- Put windfalls (bonuses, refunds, gifts) straight into savings"""

INVESTMENT_GUIDANCE = """INVESTMENT GUIDANCE

Before investing:
- Build an emergency fund covering 3-6 months of expenses
- Pay off high-interest debt first; its cost usually exceeds investment returns

Getting started:
1. Low risk: treasury bills, government bonds and fixed deposits
2. Moderate risk: diversified mutual funds and index funds
3. Higher risk: individual stocks; keep this to a small share of your portfolio

Principles:
- Diversify across asset types and currencies
- Invest regularly rather than trying to time the market
- Match investments to your time horizon and risk tolerance
- Review your portfolio at least once a year"""

CURRENCY_STRATEGY = """CURRENCY STRATEGY

- Keep most of your savings in the currency you spend day to day
- If your local currency is volatile, consider holding part of your long-term savings in a stable foreign currency
- Avoid converting large sums at once; spread conversions over time to average out rate swings
- Compare rates and fees across banks and transfer services before exchanging money
- Be cautious with speculative currency trading; it is high risk"""

BUDGET_OPTIMIZATION = """BUDGET OPTIMIZATION (50/30/20 RULE)

- 50% Needs: housing, utilities, groceries, transport, insurance, minimum debt payments
- 30% Wants: dining out, entertainment, shopping, subscriptions
- 20% Savings and debt repayment: emergency fund, investments, extra debt payments

How to apply it:
1. List all expenses and tag each one as a need, a want or savings
2. Compare your actual split with the 50/30/20 targets
3. Trim the category that is furthest over its target first
4. Revisit the split every month as your income and costs change"""

GENERIC_FALLBACK = """I can still help while the AI advisor is offline. Try asking about:

- "budget analysis" or "comprehensive analysis" for a full review of a saved budget
- "saving" for savings strategies and emergency fund sizing
- "invest" for investment guidance
- "health score" or "improve" for ways to raise your financial health score
- "currency" or "exchange" for currency strategy
- "optimize" for budget optimization using the 50/30/20 rule"""

HEALTH_TIPS_FOOTER = """Tips that help at every level:
- Review and categorize your expenses monthly
- Add an "Emergency Fund" or "Savings" line to your budget
- Set specific savings goals for the next 6 months"""


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def _budget_analysis(
    budget_data: BudgetData,
    health_score: Optional[int],
    recommendations: List[str],
    market_insights: str,
    exchange_insights: str,
) -> str:
    currency = budget_data.currency
    income = budget_data.monthly_income
    expenses = budget_data.total_expenses
    surplus = income - expenses
    savings_rate = (surplus / income) * 100 if income > 0 else 0.0

    lines = [
        "COMPREHENSIVE BUDGET ANALYSIS",
        "",
        "Financial Overview:",
        f"- Monthly Income: {currency} {format_amount(income)}",
        f"- Total Expenses: {currency} {format_amount(expenses)}",
        f"- Monthly Surplus: {currency} {format_amount(surplus)}",
        f"- Savings Rate: {savings_rate:.1f}%",
        "",
    ]

    if health_score is None:
        lines.append("Financial Health Score: not available")
    else:
        label = health_score_label(health_score)
        lines.append(f"Financial Health Score: {health_score}/100 ({label.capitalize()})")
        if label == "excellent":
            lines.append("Your finances are in excellent shape. Keep up the good habits.")
        elif label == "good":
            lines.append("Your finances are in good shape, with some room to improve.")
        elif label == "fair":
            lines.append("Your finances are moderate. A few changes would make a real difference.")
        else:
            lines.append("Your finances need attention. Focus on the priority actions below.")

    lines += ["", "Expense Breakdown:"]
    if budget_data.expenses:
        for item in budget_data.expenses:
            share = f"{(item.amount / income) * 100:.1f}% of income" if income > 0 else "n/a"
            lines.append(f"- {item.category}: {currency} {format_amount(item.amount)} ({share})")
    else:
        lines.append("- No expenses recorded")

    lines += ["", "Recommendations:"]
    if recommendations:
        lines += [f"{i}. {rec}" for i, rec in enumerate(recommendations, start=1)]
    elif surplus > 0:
        lines.append(
            f"1. Move part of your {currency} {format_amount(surplus)} monthly surplus into savings"
        )
        lines.append("2. Build an emergency fund covering 3-6 months of expenses")
    else:
        lines.append("1. Your expenses meet or exceed your income - cut non-essential spending first")
        lines.append("2. Look for additional income sources")

    text = "\n".join(lines)
    return f"{text}{market_insights}{exchange_insights}\n\n{OFFLINE_NOTE}"


def _health_score_advice(health_score: Optional[int]) -> str:
    if health_score is None:
        body = (
            "HOW TO IMPROVE YOUR FINANCIAL HEALTH\n\n"
            "Select a saved budget for analysis to get your personal health score."
        )
    elif health_score >= 70:
        body = (
            f"YOUR FINANCIAL HEALTH SCORE: {health_score}/100\n\n"
            "You are doing well. Priority actions:\n"
            "1. Grow your emergency fund towards 6 months of expenses\n"
            "2. Start or increase long-term investments\n"
            "3. Keep your savings rate at 20% or more"
        )
    elif health_score >= 40:
        body = (
            f"YOUR FINANCIAL HEALTH SCORE: {health_score}/100\n\n"
            "There is room to improve. Priority actions:\n"
            "1. Bring total expenses below 70% of your income\n"
            "2. Add a dedicated emergency fund or savings line to your budget\n"
            "3. Raise your savings rate to at least 10%"
        )
    else:
        body = (
            f"YOUR FINANCIAL HEALTH SCORE: {health_score}/100\n\n"
            "Your budget needs urgent attention. Priority actions:\n"
            "1. Cut non-essential spending immediately\n"
            "2. Make sure essentials (housing, food, utilities) are covered first\n"
            "3. Look for additional income sources\n"
            "4. Start a small emergency fund, even a few percent of income"
        )
    return f"{body}\n\n{HEALTH_TIPS_FOOTER}"


def generate_fallback_response(
    message: str,
    budget_data: Optional[BudgetData] = None,
    health_score: Optional[int] = None,
    recommendations: Optional[List[str]] = None,
    market_insights: str = "",
    exchange_insights: str = "",
) -> str:
    """
    Build an advisor reply without calling the language model.

    Topics are checked in order and exactly one reply is produced:
    budget analysis (needs budget data), saving, investing, health score,
    currency, budget optimization, then a generic pointer to these topics.
    """
    text = (message or "").lower()

    if budget_data is not None and _contains_any(text, ("analysis", "budget", "comprehensive")):
        return _budget_analysis(
            budget_data, health_score, recommendations or [], market_insights, exchange_insights
        )

    if _contains_any(text, ("save", "saving")):
        return SAVINGS_STRATEGY

    if "invest" in text:
        return INVESTMENT_GUIDANCE

    if _contains_any(text, ("health score", "improve")):
        return _health_score_advice(health_score)

    if _contains_any(text, ("currency", "exchange", "dollar")):
        if exchange_insights:
            return f"{CURRENCY_STRATEGY}{exchange_insights}"
        return CURRENCY_STRATEGY

    if _contains_any(text, ("optimize", "budget")):
        return BUDGET_OPTIMIZATION

    return GENERIC_FALLBACK
