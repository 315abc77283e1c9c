"""Summaries of recorded market prices and exchange rates for advisor context"""

from typing import Dict, List, Optional, Sequence

from budget_advisor.domain.models import (
    BudgetData,
    ExchangeRateRecord,
    MarketInsights,
    PriceRecord,
    ScoreFactors,
)

PRICE_SAMPLE_SIZE = 20
MAX_CURRENCY_PAIRS = 5


def _signed(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    return f"+{text}" if round(value, decimals) > 0 else text


def _percent(value: Optional[int]) -> str:
    return f"{value}%" if value is not None else "n/a"


def format_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def analyze_price_data(prices: Sequence[PriceRecord]) -> str:
    """
    Summarize the newest price observations per category.

    Expects records newest first. Only the newest PRICE_SAMPLE_SIZE rows are
    considered; change percent is averaged over rows that report one.
    """
    if not prices:
        return ""

    recent = list(prices[:PRICE_SAMPLE_SIZE])
    by_category: Dict[str, List[PriceRecord]] = {}
    for record in recent:
        by_category.setdefault(record.category, []).append(record)

    lines = []
    for category, items in by_category.items():
        changes = [i.change_percent for i in items if i.change_percent is not None]
        avg_change = sum(changes) / len(changes) if changes else 0.0
        lines.append(
            f"• {category}: Avg price trend {_signed(avg_change, 1)}% ({len(items)} items tracked)"
        )

    return "\n\nMARKET PRICE INTELLIGENCE (Last 30 Days):\n" + "\n".join(lines)


def analyze_exchange_data(rates: Sequence[ExchangeRateRecord]) -> str:
    """
    Summarize exchange-rate history for the first few currency pairs seen.

    Expects records newest first, so the first row of a pair is its latest rate.
    """
    if not rates:
        return ""

    by_pair: Dict[str, List[ExchangeRateRecord]] = {}
    for record in rates:
        by_pair.setdefault(record.pair, []).append(record)

    lines = []
    for pair in list(by_pair)[:MAX_CURRENCY_PAIRS]:
        pair_rates = by_pair[pair]
        latest_rate = pair_rates[0].rate or 0.0
        # Averaged over every row of the pair, rows without a change count as 0
        total_change = sum(r.change_percent for r in pair_rates if r.change_percent is not None)
        avg_change = total_change / len(pair_rates)
        lines.append(f"• {pair}: {latest_rate:.4f} ({_signed(avg_change, 2)}% trend)")

    return "\n\nEXCHANGE RATE INTELLIGENCE (Last 7 Days):\n" + "\n".join(lines)


def analyze_market_data(
    prices: Sequence[PriceRecord], rates: Sequence[ExchangeRateRecord]
) -> MarketInsights:
    return MarketInsights(
        market_insights=analyze_price_data(prices),
        exchange_insights=analyze_exchange_data(rates),
    )


def build_context_message(
    budget_data: Optional[BudgetData],
    health_score: Optional[int],
    score_factors: Optional[ScoreFactors],
    insights: MarketInsights,
) -> str:
    """Text appended to the user's message so the model sees their figures"""
    market_text = insights.market_insights + insights.exchange_insights

    if budget_data is None:
        return market_text

    currency = budget_data.currency
    income = budget_data.monthly_income
    expenses = budget_data.total_expenses
    categories = ", ".join(
        f"{e.category}: {currency} {format_amount(e.amount)}" for e in budget_data.expenses
    )
    utilization = _percent(score_factors.income_utilization) if score_factors else "n/a"
    savings = _percent(score_factors.savings_rate) if score_factors else "n/a"

    return (
        "\n\nCURRENT FINANCIAL CONTEXT:\n"
        f"- Monthly Income: {currency} {format_amount(income)}\n"
        f"- Total Monthly Expenses: {currency} {format_amount(expenses)}\n"
        f"- Remaining Budget: {currency} {format_amount(income - expenses)}\n"
        f"- Financial Health Score: {health_score}/100\n"
        f"- Score Factors: Income Utilization {utilization}, Savings Rate {savings}\n"
        f"- Budget Categories: {categories}"
        f"{market_text}"
    )
