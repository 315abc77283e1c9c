"""Unit tests for market and exchange-rate summaries"""

from conftest import make_budget
from budget_advisor.domain.market_analysis import (
    analyze_exchange_data,
    analyze_market_data,
    analyze_price_data,
    build_context_message,
)
from budget_advisor.domain.models import (
    ExchangeRateRecord,
    MarketInsights,
    PriceRecord,
    ScoreFactors,
)


def test_price_summary_groups_by_category():
    prices = [
        PriceRecord(category="Food", price=10, change_percent=2.0),
        PriceRecord(category="Fuel", price=20, change_percent=-1.0),
        PriceRecord(category="Food", price=12, change_percent=4.0),
        PriceRecord(category="Food", price=11),
    ]

    text = analyze_price_data(prices)

    assert text.startswith("\n\nMARKET PRICE INTELLIGENCE (Last 30 Days):\n")
    assert "• Food: Avg price trend +3.0% (3 items tracked)" in text
    assert "• Fuel: Avg price trend -1.0% (1 items tracked)" in text
    assert text.index("Food") < text.index("Fuel")


def test_price_summary_uses_newest_twenty_rows():
    prices = [PriceRecord(category="Food", price=1, change_percent=1.0)] * 20
    prices += [PriceRecord(category="Rent", price=1, change_percent=50.0)] * 5

    text = analyze_price_data(prices)

    assert "(20 items tracked)" in text
    assert "Rent" not in text


def test_price_summary_zero_change_has_no_sign():
    text = analyze_price_data([PriceRecord(category="Food", price=1)])
    assert "Avg price trend 0.0%" in text


def test_exchange_summary():
    rates = [
        ExchangeRateRecord(base_currency="USD", target_currency="GHS", rate=15.2, change_percent=1.0),
        ExchangeRateRecord(base_currency="EUR", target_currency="GHS", rate=16.5, change_percent=-0.5),
        ExchangeRateRecord(base_currency="USD", target_currency="GHS", rate=15.0),
    ]

    text = analyze_exchange_data(rates)

    assert text.startswith("\n\nEXCHANGE RATE INTELLIGENCE (Last 7 Days):\n")
    # Latest rate is the first (newest) row; missing changes count as zero
    assert "• USD/GHS: 15.2000 (+0.50% trend)" in text
    assert "• EUR/GHS: 16.5000 (-0.50% trend)" in text


def test_exchange_summary_limits_pairs():
    rates = [
        ExchangeRateRecord(base_currency="USD", target_currency=code, rate=1.0)
        for code in ("A", "B", "C", "D", "E", "F")
    ]

    text = analyze_exchange_data(rates)

    assert "USD/E" in text
    assert "USD/F" not in text


def test_empty_history_yields_empty_text():
    insights = analyze_market_data([], [])
    assert insights == MarketInsights(market_insights="", exchange_insights="")


def test_context_message_includes_budget_figures(healthy_budget):
    factors = ScoreFactors(
        income_utilization=55, savings_rate=45, expense_categories=2, emergency_fund_present=False
    )
    insights = MarketInsights(market_insights="\n\nMARKET", exchange_insights="\n\nFX")

    text = build_context_message(healthy_budget, 95, factors, insights)

    assert "CURRENT FINANCIAL CONTEXT" in text
    assert "Monthly Income: USD 1,000.00" in text
    assert "Remaining Budget: USD 450.00" in text
    assert "Financial Health Score: 95/100" in text
    assert "Income Utilization 55%, Savings Rate 45%" in text
    assert "Housing: USD 300.00, Food: USD 250.00" in text
    assert text.endswith("\n\nMARKET\n\nFX")


def test_context_message_zero_income():
    budget = make_budget(0, ("Rent", 100), currency="GHS")
    factors = ScoreFactors(
        income_utilization=None, savings_rate=None, expense_categories=1, emergency_fund_present=False
    )

    text = build_context_message(budget, 0, factors, MarketInsights())

    assert "Income Utilization n/a, Savings Rate n/a" in text
    assert "Remaining Budget: GHS -100.00" in text


def test_context_message_without_budget_is_market_only():
    insights = MarketInsights(market_insights="\n\nMARKET", exchange_insights="")
    assert build_context_message(None, None, None, insights) == "\n\nMARKET"
