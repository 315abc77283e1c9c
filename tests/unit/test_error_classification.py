"""Unit tests for advisor error classification"""

import pytest
from budget_advisor.domain.error_classification import (
    ErrorKind,
    classify_error,
    classify_error_message,
)


@pytest.mark.parametrize(
    "message, kind",
    [
        ("Advisor API error: 429 - insufficient_quota", ErrorKind.QUOTA_EXCEEDED),
        ("monthly quota reached", ErrorKind.QUOTA_EXCEEDED),
        ("Advisor API error: 429 - rate_limit_exceeded", ErrorKind.RATE_LIMITED),
        ("Advisor API network error: connection refused", ErrorKind.NETWORK_ERROR),
        ("TypeError: Failed to fetch", ErrorKind.NETWORK_ERROR),
        ("upstream timeout", ErrorKind.TIMEOUT),
        ("Advisor API error: 500 - boom", ErrorKind.UNKNOWN),
        ("", ErrorKind.UNKNOWN),
    ],
)
def test_classify_error_message(message, kind):
    assert classify_error_message(message) == kind


def test_classification_priority_first_match_wins():
    """Quota outranks rate limit, which outranks network and timeout"""
    assert classify_error_message("rate_limit hit, quota gone") == ErrorKind.QUOTA_EXCEEDED
    assert classify_error_message("network timeout with rate_limit") == ErrorKind.RATE_LIMITED
    assert classify_error_message("network timeout") == ErrorKind.NETWORK_ERROR


def test_classification_is_case_sensitive():
    assert classify_error_message("Request TIMEOUT") == ErrorKind.UNKNOWN
    assert classify_error_message("Network down") == ErrorKind.UNKNOWN


def test_classify_error_carries_user_facing_text():
    error = classify_error("Advisor API error: 429 - insufficient_quota")

    assert error.kind == ErrorKind.QUOTA_EXCEEDED
    assert error.title == "Service Temporarily Unavailable"
    assert "capacity" in error.description
    assert error.raw_message == "Advisor API error: 429 - insufficient_quota"


def test_classify_error_unknown_fallback_text():
    error = classify_error("something odd")

    assert error.title == "Error"
    assert error.description == "Failed to get response from financial advisor"
