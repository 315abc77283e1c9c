"""Data access layer for budgeting entities"""

import uuid
from datetime import datetime
from typing import Callable, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_advisor.domain.exceptions import PersistenceError
from budget_advisor.domain.models import (
    ChatMessage,
    ExchangeRateRecord,
    Expense,
    HealthAssessment,
    Income,
    PriceRecord,
)
from budget_advisor.infrastructure.database.models import (
    Budget,
    ChatSession,
    ExchangeRateHistory,
    FinancialHealthScore,
    PriceHistory,
)

T = TypeVar("T")


class BaseRepository:
    """Shared session handling; database failures surface as PersistenceError"""

    def __init__(self, db: Session):
        self.db = db

    def _run(self, operation: Callable[[], T], action: str) -> T:
        try:
            return operation()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to {action}: {e}") from e

    def _add(self, record: T, action: str) -> T:
        def add() -> T:
            self.db.add(record)
            self.db.flush()  # Get ID without committing
            return record

        return self._run(add, action)

    def commit(self) -> None:
        self._run(self.db.commit, "commit transaction")


def budget_to_domain(budget: Budget) -> Tuple[Income, List[Expense]]:
    """Rebuild the income and expense lines stored in a saved budget"""
    income = Income(
        amount=budget.income_amount or 0,
        frequency=budget.income_frequency or "monthly",
        currency=budget.income_currency or "USD",
    )
    expenses = [
        Expense(
            id=e.get("id"),
            category=e.get("category") or "",
            amount=e.get("amount") or 0,
            frequency=e.get("frequency") or "monthly",
        )
        for e in (budget.expenses or [])
    ]
    return income, expenses


class BudgetRepository(BaseRepository):
    """Repository for saved budgets"""

    def create_budget(self, name: str, income: Income, expenses: List[Expense]) -> Budget:
        """Persist a budget snapshot"""
        db_budget = Budget(
            name=name,
            income_amount=income.amount,
            income_frequency=income.frequency,
            income_currency=income.currency,
            expenses=[
                {
                    "id": e.id or str(uuid.uuid4()),
                    "category": e.category,
                    "amount": e.amount,
                    "frequency": e.frequency,
                }
                for e in expenses
            ],
        )
        return self._add(db_budget, "save budget")

    def list_budgets(self, limit: int = 50) -> List[Budget]:
        """Fetch saved budgets, newest first"""
        return self._run(
            lambda: self.db.query(Budget).order_by(Budget.created_at.desc()).limit(limit).all(),
            "list budgets",
        )

    def get_budget(self, budget_id: uuid.UUID) -> Optional[Budget]:
        return self._run(
            lambda: self.db.query(Budget).filter(Budget.id == budget_id).first(),
            "fetch budget",
        )

    def rename_budget(self, budget: Budget, name: str) -> Budget:
        """Only the name of a saved budget may change"""
        budget.name = name
        return self._add(budget, "rename budget")


class ChatSessionRepository(BaseRepository):
    """Repository for advisor chat sessions"""

    def create_session(self, budget_id: Optional[uuid.UUID] = None) -> ChatSession:
        return self._add(ChatSession(budget_id=budget_id, messages=[], context_data={}), "create chat session")

    def get_session(self, session_id: uuid.UUID) -> Optional[ChatSession]:
        return self._run(
            lambda: self.db.query(ChatSession).filter(ChatSession.id == session_id).first(),
            "fetch chat session",
        )

    def append_exchange(
        self,
        session: ChatSession,
        new_messages: List[ChatMessage],
        context_data: dict,
    ) -> ChatSession:
        """Append messages to the transcript and replace the cached context"""
        # Assign a new list so the JSON column is flagged as modified
        session.messages = list(session.messages or []) + [m.to_dict() for m in new_messages]
        session.context_data = context_data
        return self._add(session, "update chat session")


class HealthScoreRepository(BaseRepository):
    """Repository for health score history"""

    def create_score(self, budget_id: Optional[uuid.UUID], assessment: HealthAssessment) -> FinancialHealthScore:
        db_score = FinancialHealthScore(
            budget_id=budget_id,
            health_score=assessment.health_score,
            score_factors=assessment.score_factors.to_dict(),
            recommendations=assessment.recommendations,
        )
        return self._add(db_score, "save health score")

    def list_scores(self, budget_id: uuid.UUID, limit: int = 20) -> List[FinancialHealthScore]:
        """Fetch recent scores for a budget, newest first"""
        return self._run(
            lambda: (
                self.db.query(FinancialHealthScore)
                .filter(FinancialHealthScore.budget_id == budget_id)
                .order_by(FinancialHealthScore.calculated_at.desc())
                .limit(limit)
                .all()
            ),
            "list health scores",
        )


class MarketDataRepository(BaseRepository):
    """Repository for recorded price and exchange rate history"""

    def add_price(self, record: PriceRecord, country: str) -> PriceHistory:
        db_price = PriceHistory(
            item_name=record.item_name,
            category=record.category,
            price=record.price,
            change_percent=record.change_percent,
            currency=record.currency,
            country=country,
        )
        if record.timestamp is not None:
            db_price.timestamp = record.timestamp
        return self._add(db_price, "record price")

    def add_exchange_rate(self, record: ExchangeRateRecord) -> ExchangeRateHistory:
        db_rate = ExchangeRateHistory(
            base_currency=record.base_currency,
            target_currency=record.target_currency,
            rate=record.rate,
            change_percent=record.change_percent,
        )
        if record.timestamp is not None:
            db_rate.timestamp = record.timestamp
        return self._add(db_rate, "record exchange rate")

    def recent_prices(self, since: datetime, limit: int) -> List[PriceRecord]:
        """Price observations since the given time, newest first"""
        rows = self._run(
            lambda: (
                self.db.query(PriceHistory)
                .filter(PriceHistory.timestamp >= since)
                .order_by(PriceHistory.timestamp.desc())
                .limit(limit)
                .all()
            ),
            "fetch price history",
        )
        return [
            PriceRecord(
                category=r.category,
                price=r.price,
                change_percent=r.change_percent,
                item_name=r.item_name,
                currency=r.currency,
                timestamp=r.timestamp,
            )
            for r in rows
        ]

    def recent_exchange_rates(self, since: datetime, limit: int) -> List[ExchangeRateRecord]:
        """Exchange rate observations since the given time, newest first"""
        rows = self._run(
            lambda: (
                self.db.query(ExchangeRateHistory)
                .filter(ExchangeRateHistory.timestamp >= since)
                .order_by(ExchangeRateHistory.timestamp.desc())
                .limit(limit)
                .all()
            ),
            "fetch exchange rate history",
        )
        return [
            ExchangeRateRecord(
                base_currency=r.base_currency,
                target_currency=r.target_currency,
                rate=r.rate,
                change_percent=r.change_percent,
                timestamp=r.timestamp,
            )
            for r in rows
        ]
