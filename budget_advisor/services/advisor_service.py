"""
Advisor orchestration: scoring, market context, resilient model call and fallback.

Flow for one chat exchange:
1. Connection-test sentinel short-circuits to a single probe
2. Load chat history and recent market history (failures degrade to empty)
3. Score the budget and build recommendations
4. Call the language model with retry/backoff
5. On success persist the transcript and health score; on terminal failure
   answer with the deterministic fallback responder (when enabled)
"""

import asyncio
import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from budget_advisor.config import settings
from budget_advisor.domain.aggregation import build_budget_data
from budget_advisor.domain.error_classification import ClassifiedError
from budget_advisor.domain.exceptions import BudgetNotFoundError, PersistenceError
from budget_advisor.domain.fallback import generate_fallback_response
from budget_advisor.domain.health_score import assess_budget
from budget_advisor.domain.market_analysis import analyze_market_data, build_context_message
from budget_advisor.domain.models import (
    AdvisorReply,
    BudgetData,
    ChatMessage,
    ConnectionState,
    HealthAssessment,
    MarketInsights,
    ScoreFactors,
)
from budget_advisor.infrastructure.clients.advisor import AdvisorClient
from budget_advisor.infrastructure.clients.retrying import RetryingRequestClient, Sleep
from budget_advisor.infrastructure.database.models import Budget
from budget_advisor.infrastructure.database.repositories import (
    BudgetRepository,
    ChatSessionRepository,
    HealthScoreRepository,
    MarketDataRepository,
    budget_to_domain,
)
from budget_advisor.infrastructure.observability.metrics import (
    persistence_failures_counter,
    record_assessment,
)
from budget_advisor.utils.date_utils import days_ago, iso_timestamp

logger = logging.getLogger(__name__)

TEST_CONNECTION_SENTINEL = "__TEST_CONNECTION__"

SYSTEM_PROMPT = """You are CediWise Financial Advisor, an expert financial consultant specializing in West African markets (Ghana, Nigeria) and international finance.

CORE CAPABILITIES:
- Advanced budget analysis using real financial data
- Real-time market price intelligence and cost optimization
- Exchange rate analysis and currency strategy
- Data-driven financial health assessment
- Investment and savings strategies for West African contexts

ANALYSIS APPROACH:
1. Use actual data to provide specific, quantified recommendations
2. Compare user expenses against market prices for optimization opportunities
3. Analyze exchange rate trends for currency decisions
4. Calculate precise financial ratios and health metrics
5. Provide concrete action steps with specific amounts and timelines

Remember: Base all advice on the actual data provided - never give generic responses."""


def analysis_prompt(budget_name: str) -> str:
    return (
        f'Please provide a comprehensive financial analysis for the budget "{budget_name}". '
        "Include health score assessment, detailed expense breakdown, savings potential, "
        "and specific recommendations for improvement."
    )


@dataclass
class ChatResult:
    """Everything the API returns for one chat exchange"""

    success: bool
    state: ConnectionState
    response: Optional[str] = None
    health_score: Optional[int] = None
    score_factors: Optional[ScoreFactors] = None
    recommendations: List[str] = field(default_factory=list)
    session_id: Optional[str] = None
    fallback: bool = False
    error: Optional[ClassifiedError] = None
    attempts: int = 0
    latency_ms: Optional[int] = None

    @property
    def outcome(self) -> str:
        if self.fallback:
            return "fallback"
        return "remote" if self.success else "error"


class AdvisorService:
    """Runs advisor chat exchanges against the language model with graceful degradation"""

    def __init__(self, db: Session, advisor_client: AdvisorClient, sleep: Sleep = asyncio.sleep):
        self.db = db
        self.advisor_client = advisor_client
        self.budgets = BudgetRepository(db)
        self.sessions = ChatSessionRepository(db)
        self.health_scores = HealthScoreRepository(db)
        self.market_data = MarketDataRepository(db)
        self.retrying_client = RetryingRequestClient(
            call=self._remote_call,
            probe=advisor_client.list_models,
            sleep=sleep,
        )

    async def _remote_call(self, message: str, context: Optional[Dict[str, Any]]) -> AdvisorReply:
        context = context or {}
        history = [{"role": m["role"], "content": m["content"]} for m in context.get("history", [])]
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            *history,
            {"role": "user", "content": message + context.get("context_message", "")},
        ]
        logger.info("Sending request to advisor model", extra={"message_count": len(messages)})
        response = await self.advisor_client.complete(messages)
        return AdvisorReply(success=True, response=response)

    def load_market_insights(self) -> MarketInsights:
        """Summaries of recent price and exchange rate history (empty when unavailable)"""
        try:
            prices = self.market_data.recent_prices(
                days_ago(settings.price_lookback_days), settings.price_history_limit
            )
            rates = self.market_data.recent_exchange_rates(
                days_ago(settings.exchange_lookback_days), settings.exchange_history_limit
            )
        except PersistenceError as e:
            logger.warning("Market history unavailable", extra={"error": str(e)})
            return MarketInsights()
        return analyze_market_data(prices, rates)

    def _load_history(self, session_id: Optional[uuid.UUID]) -> List[Dict[str, Any]]:
        if session_id is None:
            return []
        try:
            session = self.sessions.get_session(session_id)
        except PersistenceError as e:
            logger.warning("Chat history unavailable", extra={"session_id": str(session_id), "error": str(e)})
            return []
        return list(session.messages or []) if session else []

    def _persist_exchange(
        self,
        session_id: Optional[uuid.UUID],
        message: str,
        reply: str,
        budget_data: Optional[BudgetData],
        assessment: Optional[HealthAssessment],
    ) -> None:
        """Store transcript and score; failures are logged and never reach the caller"""
        if session_id is not None:
            try:
                session = self.sessions.get_session(session_id)
                if session is not None:
                    self.sessions.append_exchange(
                        session,
                        [
                            ChatMessage(role="user", content=message, timestamp=iso_timestamp()),
                            ChatMessage(role="assistant", content=reply, timestamp=iso_timestamp()),
                        ],
                        context_data={
                            "budget_data": asdict(budget_data) if budget_data else None,
                            "health_score": assessment.health_score if assessment else None,
                            "score_factors": assessment.score_factors.to_dict() if assessment else None,
                        },
                    )
                    self.sessions.commit()
            except PersistenceError as e:
                persistence_failures_counter.labels(record="chat_session").inc()
                logger.error("Failed to save chat history", extra={"session_id": str(session_id), "error": str(e)})

        if assessment is not None and budget_data is not None and budget_data.budget_id:
            try:
                self.health_scores.create_score(uuid.UUID(str(budget_data.budget_id)), assessment)
                self.health_scores.commit()
            except (PersistenceError, ValueError) as e:
                persistence_failures_counter.labels(record="health_score").inc()
                logger.error(
                    "Failed to save health score",
                    extra={"budget_id": str(budget_data.budget_id), "error": str(e)},
                )

    async def test_connection(self, state: Optional[ConnectionState] = None) -> ChatResult:
        probe, state = await self.retrying_client.test_connection(state)
        return ChatResult(
            success=probe.success,
            state=state,
            response=probe.message,
            error=probe.error,
            attempts=1,
            latency_ms=probe.latency_ms,
        )

    async def chat(
        self,
        message: str,
        budget_data: Optional[BudgetData] = None,
        session_id: Optional[uuid.UUID] = None,
        state: Optional[ConnectionState] = None,
    ) -> ChatResult:
        """Answer one user message, with the budget's score and advice as context"""
        if message == TEST_CONNECTION_SENTINEL:
            return await self.test_connection(state)

        history = self._load_history(session_id)
        insights = self.load_market_insights()

        assessment = None
        if budget_data is not None:
            assessment = assess_budget(budget_data)
            record_assessment(assessment.health_score, assessment.label)

        context_message = build_context_message(
            budget_data,
            assessment.health_score if assessment else None,
            assessment.score_factors if assessment else None,
            insights,
        )
        window = settings.chat_history_window
        recent_history = history[-window:] if window > 0 else []

        outcome = await self.retrying_client.send(
            message,
            {"history": recent_history, "context_message": context_message},
            state,
        )

        result = ChatResult(
            success=outcome.success,
            state=outcome.state,
            health_score=assessment.health_score if assessment else None,
            score_factors=assessment.score_factors if assessment else None,
            recommendations=assessment.recommendations if assessment else [],
            session_id=str(session_id) if session_id else None,
            error=outcome.error,
            attempts=outcome.attempts,
        )

        if outcome.success:
            result.response = outcome.reply.response
            self._persist_exchange(session_id, message, result.response, budget_data, assessment)
        elif settings.fallback_enabled:
            logger.info("Using fallback advisor response", extra={"error_kind": outcome.error.kind.value})
            result.success = True
            result.fallback = True
            result.response = generate_fallback_response(
                message,
                budget_data,
                result.health_score,
                result.recommendations,
                insights.market_insights,
                insights.exchange_insights,
            )

        return result

    def load_saved_budget(self, budget_id: uuid.UUID) -> Tuple[Budget, BudgetData]:
        """Fetch a saved budget and its scorer input"""
        budget = self.budgets.get_budget(budget_id)
        if budget is None:
            raise BudgetNotFoundError(f"Budget {budget_id} not found")
        income, expenses = budget_to_domain(budget)
        return budget, build_budget_data(income, expenses, budget_id=str(budget.id))

    async def analyze_saved_budget(
        self,
        budget_id: uuid.UUID,
        session_id: Optional[uuid.UUID] = None,
        state: Optional[ConnectionState] = None,
    ) -> ChatResult:
        """Run the canned comprehensive analysis prompt for a saved budget"""
        budget, budget_data = self.load_saved_budget(budget_id)
        return await self.chat(analysis_prompt(budget.name), budget_data, session_id, state)
