"""Unit tests for the offline advisor replies"""

import pytest
from conftest import make_budget
from budget_advisor.domain.fallback import (
    BUDGET_OPTIMIZATION,
    CURRENCY_STRATEGY,
    GENERIC_FALLBACK,
    INVESTMENT_GUIDANCE,
    OFFLINE_NOTE,
    SAVINGS_STRATEGY,
    generate_fallback_response,
)
from budget_advisor.domain.recommendations import REVIEW_MONTHLY


ANALYSIS_PROMPT = (
    "Please provide a comprehensive financial analysis of my budget 'March plan'."
)


def test_comprehensive_analysis_with_budget(healthy_budget):
    reply = generate_fallback_response(
        ANALYSIS_PROMPT,
        budget_data=healthy_budget,
        health_score=95,
        recommendations=[REVIEW_MONTHLY],
    )

    assert reply.startswith("COMPREHENSIVE BUDGET ANALYSIS")
    assert "Monthly Income: USD 1,000.00" in reply
    assert "Total Expenses: USD 550.00" in reply
    assert "Monthly Surplus: USD 450.00" in reply
    assert "Savings Rate: 45.0%" in reply
    assert "Financial Health Score: 95/100 (Excellent)" in reply
    assert "- Housing: USD 300.00 (30.0% of income)" in reply
    assert f"1. {REVIEW_MONTHLY}" in reply
    assert reply.endswith(OFFLINE_NOTE)


def test_analysis_includes_market_insights(healthy_budget):
    reply = generate_fallback_response(
        "budget review please",
        budget_data=healthy_budget,
        market_insights="\n\nMARKET PRICE INTELLIGENCE (Last 30 Days):\n• Food: x",
        exchange_insights="\n\nEXCHANGE RATE INTELLIGENCE (Last 7 Days):\n• USD/GHS: y",
    )

    assert "MARKET PRICE INTELLIGENCE" in reply
    assert "EXCHANGE RATE INTELLIGENCE" in reply


def test_analysis_without_recommendations_uses_surplus():
    reply = generate_fallback_response("analysis", budget_data=make_budget(1000, ("Rent", 400)))

    assert "Health Score: not available" in reply
    assert "Move part of your USD 600.00 monthly surplus into savings" in reply


def test_analysis_with_deficit_and_no_income():
    reply = generate_fallback_response("analysis", budget_data=make_budget(0, ("Rent", 400)))

    assert "Savings Rate: 0.0%" in reply
    assert "- Rent: USD 400.00 (n/a)" in reply
    assert "cut non-essential spending first" in reply


def test_analysis_keywords_need_budget_data():
    """Without budget data 'budget' falls through to optimization advice"""
    assert generate_fallback_response("optimize my budget") == BUDGET_OPTIMIZATION
    assert generate_fallback_response(ANALYSIS_PROMPT) == BUDGET_OPTIMIZATION


@pytest.mark.parametrize(
    "message, expected",
    [
        ("How can I save more?", SAVINGS_STRATEGY),
        ("Tips for SAVING money", SAVINGS_STRATEGY),
        ("Should I invest in bonds?", INVESTMENT_GUIDANCE),
        ("What about the exchange rate?", CURRENCY_STRATEGY),
        ("Is the dollar strong?", CURRENCY_STRATEGY),
        ("How do I optimize spending?", BUDGET_OPTIMIZATION),
        ("Hello there", GENERIC_FALLBACK),
        ("", GENERIC_FALLBACK),
    ],
)
def test_keyword_routing(message, expected):
    assert generate_fallback_response(message) == expected


def test_first_matching_topic_wins():
    """Saving outranks investing, which outranks currency"""
    assert generate_fallback_response("save or invest in dollars?") == SAVINGS_STRATEGY
    assert generate_fallback_response("invest in another currency") == INVESTMENT_GUIDANCE


def test_currency_reply_appends_exchange_insights():
    insights = "\n\nEXCHANGE RATE INTELLIGENCE (Last 7 Days):\n• USD/GHS: 15.2000 (+0.50% trend)"
    reply = generate_fallback_response("currency advice", exchange_insights=insights)

    assert reply == CURRENCY_STRATEGY + insights


@pytest.mark.parametrize(
    "score, phrase",
    [
        (None, "Select a saved budget"),
        (85, "You are doing well"),
        (70, "You are doing well"),
        (55, "There is room to improve"),
        (40, "There is room to improve"),
        (20, "needs urgent attention"),
    ],
)
def test_health_score_advice_tiers(score, phrase):
    reply = generate_fallback_response("How do I improve my health score?", health_score=score)

    assert phrase in reply
    assert "Tips that help at every level" in reply
    if score is not None:
        assert f"{score}/100" in reply


def test_fallback_is_deterministic(healthy_budget):
    first = generate_fallback_response(ANALYSIS_PROMPT, budget_data=healthy_budget, health_score=95)
    second = generate_fallback_response(ANALYSIS_PROMPT, budget_data=healthy_budget, health_score=95)
    assert first == second
