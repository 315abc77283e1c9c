"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

FREQUENCIES = ("daily", "weekly", "bi-weekly", "monthly")


@dataclass
class Income:
    """Income entered by the user"""

    amount: float
    frequency: str = "monthly"  # daily | weekly | bi-weekly | monthly
    currency: str = "USD"


@dataclass
class Expense:
    """Single recurring expense line"""

    category: str
    amount: float
    frequency: str = "monthly"
    id: Optional[str] = None


@dataclass
class CategoryTotal:
    """Monthly-normalized spend for one expense category"""

    category: str
    amount: float


@dataclass
class BudgetData:
    """Scorer input: monthly income plus monthly totals per category"""

    income: Income
    expenses: List[CategoryTotal] = field(default_factory=list)
    budget_id: Optional[str] = None

    @property
    def monthly_income(self) -> float:
        return self.income.amount

    @property
    def total_expenses(self) -> float:
        return sum(e.amount for e in self.expenses)

    @property
    def currency(self) -> str:
        return self.income.currency


@dataclass
class BudgetSummary:
    """Headline figures shown for a budget"""

    monthly_income: float
    total_expenses: float
    surplus: float
    savings_rate: float
    savings_tier: str


@dataclass
class ScoreFactors:
    """Inputs used to explain a health score"""

    income_utilization: Optional[int]
    savings_rate: Optional[int]
    expense_categories: int
    emergency_fund_present: bool

    def to_dict(self) -> dict:
        return {
            "income_utilization": self.income_utilization,
            "savings_rate": self.savings_rate,
            "expense_categories": self.expense_categories,
            "emergency_fund_present": self.emergency_fund_present,
        }


@dataclass
class HealthAssessment:
    """Output of budget analysis"""

    health_score: int
    label: str
    score_factors: ScoreFactors
    recommendations: List[str]


@dataclass
class PriceRecord:
    """Recorded commodity price observation"""

    category: str
    price: float
    change_percent: Optional[float] = None
    item_name: str = ""
    currency: str = ""
    timestamp: Optional[datetime] = None


@dataclass
class ExchangeRateRecord:
    """Recorded exchange rate observation"""

    base_currency: str
    target_currency: str
    rate: float
    change_percent: Optional[float] = None
    timestamp: Optional[datetime] = None

    @property
    def pair(self) -> str:
        return f"{self.base_currency}/{self.target_currency}"


@dataclass
class MarketInsights:
    """Short text blocks summarizing recent market history"""

    market_insights: str = ""
    exchange_insights: str = ""


@dataclass
class ChatMessage:
    """One entry of a chat transcript"""

    role: str  # "user" or "assistant"
    content: str
    timestamp: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


@dataclass
class AdvisorReply:
    """Result of one remote assistant call"""

    success: bool
    response: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ConnectionState:
    """Caller-owned retry bookkeeping threaded through each advisor call"""

    retry_count: int = 0
    connection_status: str = "unknown"  # unknown | success | failed
    last_error: Optional[str] = None
