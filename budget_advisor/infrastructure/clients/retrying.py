"""Advisor call wrapper with exponential backoff retry and connection probing"""

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from budget_advisor.config import settings
from budget_advisor.domain.error_classification import ClassifiedError, ErrorKind, classify_error
from budget_advisor.domain.exceptions import AdvisorAPIError
from budget_advisor.domain.models import AdvisorReply, ConnectionState
from budget_advisor.infrastructure.observability.metrics import (
    advisor_attempt_failures_counter,
    advisor_latency_histogram,
)

logger = logging.getLogger(__name__)

RemoteCall = Callable[[str, Optional[Dict[str, Any]]], Awaitable[AdvisorReply]]
ProbeCall = Callable[[], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[None]]

PROBE_FAILURE_MESSAGES = {
    ErrorKind.NETWORK_ERROR: "Network error - check your internet connection",
    ErrorKind.QUOTA_EXCEEDED: "AI service quota exceeded - try again later",
    ErrorKind.RATE_LIMITED: "Rate limit reached - wait before testing again",
}


class RetryPhase(str, Enum):
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SendOutcome:
    """Result of a retried advisor call: either a reply or a classified error"""

    state: ConnectionState
    attempts: int
    reply: Optional[AdvisorReply] = None
    error: Optional[ClassifiedError] = None
    delays_ms: List[int] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.reply is not None


@dataclass
class ConnectionProbe:
    """Outcome of a single connectivity check"""

    success: bool
    latency_ms: int
    message: str
    error: Optional[ClassifiedError] = None


class RetryingRequestClient:
    """
    Wraps a remote advisor call with bounded retry.

    Retry strategy:
    - Up to max_attempts calls in total (3 by default)
    - Delay before retry N is 2^N * backoff_base_ms: 2s, then 4s
    - No jitter; attempts run strictly one after another
    - Exceptions and replies with success=False are both failures
    """

    def __init__(
        self,
        call: RemoteCall,
        probe: ProbeCall | None = None,
        max_attempts: int | None = None,
        backoff_base_ms: int | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.call = call
        self.probe = probe
        self.max_attempts = max_attempts or settings.chat_max_attempts
        self.backoff_base_ms = backoff_base_ms or settings.chat_backoff_base_ms
        self.sleep = sleep
        self.clock = clock

    def backoff_delay_ms(self, attempt: int) -> int:
        """Delay after the given failed attempt (1-based) before the next one"""
        return (2**attempt) * self.backoff_base_ms

    async def _attempt(self, message: str, context: Optional[Dict[str, Any]]) -> AdvisorReply:
        with advisor_latency_histogram.time():
            reply = await self.call(message, context)
        if not reply.success:
            raise AdvisorAPIError(reply.error or "Failed to get response")
        return reply

    async def send(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        state: Optional[ConnectionState] = None,
    ) -> SendOutcome:
        """
        Call the remote advisor, retrying failures with exponential backoff.

        Returns:
            SendOutcome with the reply on success, or the last error classified
            after every attempt failed. The updated connection state is always set.
        """
        state = state or ConnectionState()
        phase = RetryPhase.ATTEMPTING
        attempt = 1
        reply: Optional[AdvisorReply] = None
        last_error = ""
        delays: List[int] = []

        while True:
            if phase is RetryPhase.ATTEMPTING:
                try:
                    reply = await self._attempt(message, context)
                    phase = RetryPhase.SUCCEEDED
                except Exception as e:
                    last_error = str(e)
                    state = replace(state, last_error=last_error, connection_status="failed")
                    advisor_attempt_failures_counter.inc()
                    logger.warning(
                        "Advisor attempt failed",
                        extra={"attempt": attempt, "max_attempts": self.max_attempts, "error": last_error},
                    )
                    phase = RetryPhase.WAITING if attempt < self.max_attempts else RetryPhase.FAILED

            elif phase is RetryPhase.WAITING:
                delay_ms = self.backoff_delay_ms(attempt)
                delays.append(delay_ms)
                logger.info("Retrying advisor call", extra={"attempt": attempt, "delay_ms": delay_ms})
                await self.sleep(delay_ms / 1000)
                attempt += 1
                phase = RetryPhase.ATTEMPTING

            elif phase is RetryPhase.SUCCEEDED:
                state = replace(state, retry_count=0, last_error=None, connection_status="success")
                return SendOutcome(state=state, attempts=attempt, reply=reply, delays_ms=delays)

            else:
                error = classify_error(last_error)
                state = replace(state, retry_count=state.retry_count + 1, connection_status="failed")
                logger.error(
                    "Advisor call failed after retries",
                    extra={"attempts": attempt, "error_kind": error.kind.value, "error": last_error},
                )
                return SendOutcome(state=state, attempts=attempt, error=error, delays_ms=delays)

    async def test_connection(
        self, state: Optional[ConnectionState] = None
    ) -> Tuple[ConnectionProbe, ConnectionState]:
        """
        Single non-retried connectivity check with round-trip latency.

        Only the connection status of the returned state changes.
        """
        state = state or ConnectionState()
        if self.probe is None:
            raise ValueError("No probe configured for connection test")

        start = self.clock()
        try:
            await self.probe()
        except Exception as e:
            latency_ms = int((self.clock() - start) * 1000)
            error = classify_error(str(e))
            logger.error("Connection test failed", extra={"error": str(e), "latency_ms": latency_ms})
            probe = ConnectionProbe(
                success=False,
                latency_ms=latency_ms,
                message=PROBE_FAILURE_MESSAGES.get(error.kind, "Connection test failed"),
                error=error,
            )
            return probe, replace(state, connection_status="failed")

        latency_ms = int((self.clock() - start) * 1000)
        logger.info("Connection test successful", extra={"latency_ms": latency_ms})
        probe = ConnectionProbe(
            success=True,
            latency_ms=latency_ms,
            message=f"AI advisor is working properly ({latency_ms}ms response time)",
        )
        return probe, replace(state, connection_status="success")
