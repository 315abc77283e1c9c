"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from budget_advisor.domain.models import ConnectionState, Expense, Income

Frequency = Literal["daily", "weekly", "bi-weekly", "monthly"]
ConnectionStatus = Literal["unknown", "success", "failed"]


class IncomeSchema(BaseModel):
    """Income as entered by the user"""

    amount: float = Field(0, ge=0, description="Income amount per period")
    frequency: Frequency = "monthly"
    currency: str = Field("USD", min_length=1, description="ISO-like currency code")

    def to_domain(self) -> Income:
        return Income(amount=self.amount, frequency=self.frequency, currency=self.currency)


class ExpenseSchema(BaseModel):
    """Single recurring expense"""

    id: Optional[str] = None
    category: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    frequency: Frequency = "monthly"

    def to_domain(self) -> Expense:
        return Expense(id=self.id, category=self.category, amount=self.amount, frequency=self.frequency)


class BudgetInput(BaseModel):
    """In-memory budget: income plus expense lines"""

    income: IncomeSchema = Field(default_factory=IncomeSchema)
    expenses: List[ExpenseSchema] = Field(default_factory=list)


class BudgetCreateRequest(BudgetInput):
    """Request body for POST /v1/budgets"""

    name: str = Field(..., min_length=1, description="Budget name")


class BudgetRenameRequest(BaseModel):
    """Request body for PATCH /v1/budgets/{budget_id}"""

    name: str = Field(..., min_length=1)


class BudgetResponse(BaseModel):
    """Saved budget snapshot"""

    budget_id: str
    name: str
    income: IncomeSchema
    expenses: List[ExpenseSchema]
    created_at: datetime
    updated_at: datetime


class BudgetListResponse(BaseModel):
    budgets: List[BudgetResponse]


class BudgetSummaryResponse(BaseModel):
    """Monthly headline figures"""

    monthly_income: float
    total_expenses: float
    surplus: float
    savings_rate: float
    savings_tier: str


class ScoreFactorsSchema(BaseModel):
    income_utilization: Optional[int] = None
    savings_rate: Optional[int] = None
    expense_categories: int
    emergency_fund_present: bool


class AnalysisResponse(BaseModel):
    """Response for POST /v1/budgets/analyze"""

    summary: BudgetSummaryResponse
    health_score: int
    health_label: str
    score_factors: ScoreFactorsSchema
    recommendations: List[str]


class HealthScoreItem(BaseModel):
    """Single entry of a budget's score history"""

    health_score_id: str
    health_score: int
    score_factors: ScoreFactorsSchema
    recommendations: List[str]
    calculated_at: datetime


class HealthScoreHistoryResponse(BaseModel):
    budget_id: str
    scores: List[HealthScoreItem]


class CategoryAmountSchema(BaseModel):
    """Expense already normalized to a monthly amount"""

    category: str = ""
    amount: float = Field(0, ge=0)


class AdvisorBudgetData(BaseModel):
    """Budget context sent with a chat message (expense amounts are monthly)"""

    id: Optional[str] = None
    income: IncomeSchema = Field(default_factory=IncomeSchema)
    expenses: List[CategoryAmountSchema] = Field(default_factory=list)


class ConnectionStateSchema(BaseModel):
    """Retry bookkeeping owned by the caller and returned updated"""

    retry_count: int = Field(0, ge=0)
    connection_status: ConnectionStatus = "unknown"
    last_error: Optional[str] = None

    def to_domain(self) -> ConnectionState:
        return ConnectionState(
            retry_count=self.retry_count,
            connection_status=self.connection_status,
            last_error=self.last_error,
        )


class ChatRequest(BaseModel):
    """Request body for POST /v1/advisor/chat"""

    message: str = Field(..., min_length=1)
    budget_data: Optional[AdvisorBudgetData] = None
    budget_id: Optional[str] = Field(None, description="Analyze a saved budget instead of inline data")
    session_id: Optional[str] = None
    connection: ConnectionStateSchema = Field(default_factory=ConnectionStateSchema)


class AnalysisRequest(BaseModel):
    """Request body for POST /v1/advisor/budgets/{budget_id}/analysis"""

    session_id: Optional[str] = None
    connection: ConnectionStateSchema = Field(default_factory=ConnectionStateSchema)


class ConnectionTestRequest(BaseModel):
    connection: ConnectionStateSchema = Field(default_factory=ConnectionStateSchema)


class ChatResponse(BaseModel):
    """Response for advisor endpoints"""

    success: bool
    response: Optional[str] = None
    health_score: Optional[int] = None
    score_factors: Optional[ScoreFactorsSchema] = None
    recommendations: List[str] = Field(default_factory=list)
    session_id: Optional[str] = None
    fallback: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None
    error_title: Optional[str] = None
    error_description: Optional[str] = None
    latency_ms: Optional[int] = None
    connection: ConnectionStateSchema


class ChatMessageSchema(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: str


class ChatSessionCreateRequest(BaseModel):
    budget_id: Optional[str] = None


class ChatSessionResponse(BaseModel):
    session_id: str
    budget_id: Optional[str] = None
    messages: List[ChatMessageSchema]
    created_at: datetime


class PriceRecordRequest(BaseModel):
    """Request body for POST /v1/market/prices"""

    item_name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    currency: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    change_percent: Optional[float] = None
    timestamp: Optional[datetime] = None


class ExchangeRateRecordRequest(BaseModel):
    """Request body for POST /v1/market/exchange-rates"""

    base_currency: str = Field(..., min_length=1)
    target_currency: str = Field(..., min_length=1)
    rate: float = Field(..., gt=0)
    change_percent: Optional[float] = None
    timestamp: Optional[datetime] = None


class RecordCreatedResponse(BaseModel):
    record_id: str


class MarketInsightsResponse(BaseModel):
    """Response for GET /v1/market/insights"""

    market_insights: str
    exchange_insights: str
