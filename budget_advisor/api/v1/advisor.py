"""AI advisor endpoints - chat, saved budget analysis, connection test"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from budget_advisor.api.dependencies import get_advisor_service, get_request_id, parse_id
from budget_advisor.api.v1.schemas import (
    AnalysisRequest,
    ChatRequest,
    ChatResponse,
    ConnectionStateSchema,
    ConnectionTestRequest,
    ScoreFactorsSchema,
)
from budget_advisor.domain.aggregation import budget_data_from_payload
from budget_advisor.domain.exceptions import BudgetNotFoundError, PersistenceError
from budget_advisor.infrastructure.observability.logging import log_chat_outcome
from budget_advisor.infrastructure.observability.metrics import record_chat_outcome
from budget_advisor.services.advisor_service import TEST_CONNECTION_SENTINEL, AdvisorService, ChatResult

router = APIRouter()


def to_chat_response(result: ChatResult) -> ChatResponse:
    error = result.error
    return ChatResponse(
        success=result.success,
        response=result.response,
        health_score=result.health_score,
        score_factors=ScoreFactorsSchema(**result.score_factors.to_dict()) if result.score_factors else None,
        recommendations=result.recommendations,
        session_id=result.session_id,
        fallback=result.fallback,
        error=error.raw_message if error else None,
        error_kind=error.kind.value if error else None,
        error_title=error.title if error else None,
        error_description=error.description if error else None,
        latency_ms=result.latency_ms,
        connection=ConnectionStateSchema(
            retry_count=result.state.retry_count,
            connection_status=result.state.connection_status,
            last_error=result.state.last_error,
        ),
    )


def _finish(request_id: str, result: ChatResult, start_time: float, outcome: str | None = None) -> ChatResponse:
    outcome = outcome or result.outcome
    record_chat_outcome(outcome)
    log_chat_outcome(
        request_id,
        result.session_id,
        outcome,
        result.health_score,
        result.attempts,
        (time.time() - start_time) * 1000,
        error_kind=result.error.kind.value if result.error else None,
    )
    return to_chat_response(result)


@router.post("/advisor/chat", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    request: Request,
    service: AdvisorService = Depends(get_advisor_service),
):
    """
    Answer a user message with the AI advisor.

    Flow:
    1. "__TEST_CONNECTION__" runs a connectivity probe and returns
    2. Resolve budget context (saved budget or inline data)
    3. Score budget, call the model with retry, fall back when it fails
    4. Return reply plus score, factors, recommendations and connection state
    """
    start_time = time.time()
    request_id = get_request_id(request)
    state = request_body.connection.to_domain()
    session_id = parse_id(request_body.session_id, "session ID") if request_body.session_id else None

    try:
        budget_data = None
        is_probe = request_body.message == TEST_CONNECTION_SENTINEL
        if request_body.budget_id and not is_probe:
            _, budget_data = service.load_saved_budget(parse_id(request_body.budget_id, "budget ID"))
        elif request_body.budget_data is not None:
            budget_data = budget_data_from_payload(request_body.budget_data.model_dump())

        result = await service.chat(request_body.message, budget_data, session_id, state)
        return _finish(request_id, result, start_time, outcome="connection_test" if is_probe else None)

    except BudgetNotFoundError as e:
        logging.warning(f"Budget not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Budget not found")

    except PersistenceError as e:
        logging.error(f"Budget storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Budget storage unavailable")


@router.post("/advisor/budgets/{budget_id}/analysis", response_model=ChatResponse)
async def analyze_saved_budget(
    budget_id: str,
    request: Request,
    request_body: AnalysisRequest | None = None,
    service: AdvisorService = Depends(get_advisor_service),
):
    """Comprehensive AI analysis of a saved budget"""
    start_time = time.time()
    request_id = get_request_id(request)
    request_body = request_body or AnalysisRequest()
    session_id = parse_id(request_body.session_id, "session ID") if request_body.session_id else None

    try:
        result = await service.analyze_saved_budget(
            parse_id(budget_id, "budget ID"), session_id, request_body.connection.to_domain()
        )
        return _finish(request_id, result, start_time)

    except BudgetNotFoundError as e:
        logging.warning(f"Budget not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Budget not found")

    except PersistenceError as e:
        logging.error(f"Budget storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Budget storage unavailable")


@router.post("/advisor/test-connection", response_model=ChatResponse)
async def test_connection(
    request: Request,
    request_body: ConnectionTestRequest | None = None,
    service: AdvisorService = Depends(get_advisor_service),
):
    """Single, non-retried connectivity check against the language model"""
    start_time = time.time()
    request_body = request_body or ConnectionTestRequest()

    result = await service.test_connection(request_body.connection.to_domain())
    return _finish(get_request_id(request), result, start_time, outcome="connection_test")
