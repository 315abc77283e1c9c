"""Saved budget endpoints - /v1/budgets"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from budget_advisor.api.dependencies import parse_id
from budget_advisor.api.v1.schemas import (
    AnalysisResponse,
    BudgetCreateRequest,
    BudgetInput,
    BudgetListResponse,
    BudgetRenameRequest,
    BudgetResponse,
    BudgetSummaryResponse,
    ExpenseSchema,
    HealthScoreHistoryResponse,
    HealthScoreItem,
    IncomeSchema,
    ScoreFactorsSchema,
)
from budget_advisor.domain.aggregation import build_budget_data, summarize_budget
from budget_advisor.domain.exceptions import PersistenceError
from budget_advisor.domain.health_score import assess_budget
from budget_advisor.infrastructure.database.models import Budget
from budget_advisor.infrastructure.database.repositories import (
    BudgetRepository,
    HealthScoreRepository,
    budget_to_domain,
)
from budget_advisor.infrastructure.database.session import get_db
from budget_advisor.infrastructure.observability.metrics import record_assessment

router = APIRouter()


def to_budget_response(budget: Budget) -> BudgetResponse:
    income, expenses = budget_to_domain(budget)
    return BudgetResponse(
        budget_id=str(budget.id),
        name=budget.name,
        income=IncomeSchema(amount=income.amount, frequency=income.frequency, currency=income.currency),
        expenses=[
            ExpenseSchema(id=e.id, category=e.category, amount=e.amount, frequency=e.frequency)
            for e in expenses
        ],
        created_at=budget.created_at,
        updated_at=budget.updated_at,
    )


def _get_budget_or_404(repo: BudgetRepository, budget_id: str) -> Budget:
    try:
        budget = repo.get_budget(parse_id(budget_id, "budget ID"))
    except PersistenceError as e:
        logging.error(f"Failed to fetch budget: {e}")
        raise HTTPException(status_code=503, detail="Budget storage unavailable")
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")
    return budget


@router.post("/budgets", response_model=BudgetResponse, status_code=201)
def create_budget(request_body: BudgetCreateRequest, db: Session = Depends(get_db)):
    """Save the current income and expenses as a named snapshot"""
    name = request_body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Budget name must not be blank")

    repo = BudgetRepository(db)
    try:
        budget = repo.create_budget(
            name=name,
            income=request_body.income.to_domain(),
            expenses=[e.to_domain() for e in request_body.expenses],
        )
        repo.commit()
    except PersistenceError as e:
        logging.error(f"Failed to save budget: {e}")
        raise HTTPException(status_code=503, detail="Budget storage unavailable")

    return to_budget_response(budget)


@router.get("/budgets", response_model=BudgetListResponse)
def list_budgets(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """List saved budgets, newest first"""
    try:
        budgets = BudgetRepository(db).list_budgets(limit=limit)
    except PersistenceError as e:
        logging.error(f"Failed to list budgets: {e}")
        raise HTTPException(status_code=503, detail="Budget storage unavailable")

    return BudgetListResponse(budgets=[to_budget_response(b) for b in budgets])


@router.get("/budgets/{budget_id}", response_model=BudgetResponse)
def get_budget(budget_id: str, db: Session = Depends(get_db)):
    return to_budget_response(_get_budget_or_404(BudgetRepository(db), budget_id))


@router.patch("/budgets/{budget_id}", response_model=BudgetResponse)
def rename_budget(budget_id: str, request_body: BudgetRenameRequest, db: Session = Depends(get_db)):
    """Rename a saved budget; its figures cannot change"""
    name = request_body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Budget name must not be blank")

    repo = BudgetRepository(db)
    budget = _get_budget_or_404(repo, budget_id)
    try:
        repo.rename_budget(budget, name)
        repo.commit()
    except PersistenceError as e:
        logging.error(f"Failed to rename budget: {e}")
        raise HTTPException(status_code=503, detail="Budget storage unavailable")

    return to_budget_response(budget)


@router.get("/budgets/{budget_id}/summary", response_model=BudgetSummaryResponse)
def get_budget_summary(budget_id: str, db: Session = Depends(get_db)):
    """Monthly income, expenses, surplus and savings rate of a saved budget"""
    income, expenses = budget_to_domain(_get_budget_or_404(BudgetRepository(db), budget_id))
    summary = summarize_budget(income, expenses)
    return BudgetSummaryResponse(**vars(summary))


@router.get("/budgets/{budget_id}/health-scores", response_model=HealthScoreHistoryResponse)
def get_health_score_history(
    budget_id: str,
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Health scores recorded for a budget, newest first"""
    budget = _get_budget_or_404(BudgetRepository(db), budget_id)
    try:
        scores = HealthScoreRepository(db).list_scores(budget.id, limit=limit)
    except PersistenceError as e:
        logging.error(f"Failed to list health scores: {e}")
        raise HTTPException(status_code=503, detail="Budget storage unavailable")

    return HealthScoreHistoryResponse(
        budget_id=str(budget.id),
        scores=[
            HealthScoreItem(
                health_score_id=str(s.id),
                health_score=s.health_score,
                score_factors=ScoreFactorsSchema(**s.score_factors),
                recommendations=s.recommendations or [],
                calculated_at=s.calculated_at,
            )
            for s in scores
        ],
    )


@router.post("/budgets/analyze", response_model=AnalysisResponse)
def analyze_budget(request_body: BudgetInput):
    """
    Score an unsaved budget without contacting the AI advisor.

    Returns:
        Monthly summary, health score with factors, and recommendations
    """
    income = request_body.income.to_domain()
    expenses = [e.to_domain() for e in request_body.expenses]

    assessment = assess_budget(build_budget_data(income, expenses))
    record_assessment(assessment.health_score, assessment.label)

    return AnalysisResponse(
        summary=BudgetSummaryResponse(**vars(summarize_budget(income, expenses))),
        health_score=assessment.health_score,
        health_label=assessment.label,
        score_factors=ScoreFactorsSchema(**assessment.score_factors.to_dict()),
        recommendations=assessment.recommendations,
    )
