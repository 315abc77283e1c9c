"""Classification of advisor failures into user-facing categories"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ErrorKind(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


# (title, description) shown to the user for each kind
ERROR_MESSAGES: Dict[ErrorKind, Tuple[str, str]] = {
    ErrorKind.QUOTA_EXCEEDED: (
        "Service Temporarily Unavailable",
        "AI service is at capacity. Please try again in a few minutes.",
    ),
    ErrorKind.RATE_LIMITED: (
        "Rate Limited",
        "Please wait a moment before sending another message.",
    ),
    ErrorKind.NETWORK_ERROR: (
        "Connection Error",
        "Please check your internet connection and try again. "
        "Use the Test Connection button to diagnose issues.",
    ),
    ErrorKind.TIMEOUT: (
        "Request Timeout",
        "The request took too long. Please try again with a shorter message.",
    ),
    ErrorKind.UNKNOWN: (
        "Error",
        "Failed to get response from financial advisor",
    ),
}


@dataclass
class ClassifiedError:
    """Final advisor failure with its user-facing explanation"""

    kind: ErrorKind
    title: str
    description: str
    raw_message: str


def classify_error_message(message: str) -> ErrorKind:
    """
    Pick an error category by inspecting the raw error text.

    Checks run in priority order; the first match wins.
    """
    message = message or ""

    if "quota" in message or "insufficient_quota" in message:
        return ErrorKind.QUOTA_EXCEEDED
    if "rate_limit" in message:
        return ErrorKind.RATE_LIMITED
    if "network" in message or "fetch" in message or "Failed to fetch" in message:
        return ErrorKind.NETWORK_ERROR
    if "timeout" in message:
        return ErrorKind.TIMEOUT
    return ErrorKind.UNKNOWN


def classify_error(message: str) -> ClassifiedError:
    kind = classify_error_message(message)
    title, description = ERROR_MESSAGES[kind]
    return ClassifiedError(kind=kind, title=title, description=description, raw_message=message)
