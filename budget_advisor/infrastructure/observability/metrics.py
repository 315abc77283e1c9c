"""Prometheus metrics for monitoring advisor outcomes, health scores, and remote call performance"""

from prometheus_client import Counter, Histogram

# Chat metrics
chat_outcome_counter = Counter(
    "budget_advisor_chat_total",
    "Total advisor chat exchanges",
    ["outcome"],  # remote | fallback | error | connection_test
)

health_score_histogram = Histogram(
    "budget_advisor_health_score",
    "Financial health scores calculated",
    buckets=[20, 40, 60, 80, 100],
)

health_band_counter = Counter(
    "budget_advisor_health_band_total",
    "Health scores issued by band",
    ["band"],  # excellent | good | fair | poor
)

# Language model metrics
advisor_latency_histogram = Histogram(
    "advisor_latency_seconds",
    "Language model response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

advisor_attempt_failures_counter = Counter(
    "advisor_attempt_failures_total",
    "Failed language model attempts (including retried ones)",
)

# Persistence metrics
persistence_failures_counter = Counter(
    "persistence_failures_total",
    "Failed writes of chat history or health score records",
    ["record"],  # chat_session | health_score
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(health_score: int, band: str) -> None:
    """Record the distribution of calculated health scores"""
    health_score_histogram.observe(health_score)
    health_band_counter.labels(band=band).inc()


def record_chat_outcome(outcome: str) -> None:
    chat_outcome_counter.labels(outcome=outcome).inc()
