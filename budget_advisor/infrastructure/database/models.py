"""SQLAlchemy ORM models for budgets, chat history, health scores and market history"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


Base = declarative_base()


class Budget(Base):
    """Saved budget snapshot"""

    __tablename__ = "budgets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    income_amount = Column(Float, nullable=False, default=0)
    income_frequency = Column(Text, nullable=False, default="monthly")
    income_currency = Column(Text, nullable=False, default="USD")
    expenses = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    health_scores = relationship("FinancialHealthScore", back_populates="budget", cascade="all, delete-orphan")


class ChatSession(Base):
    """Advisor conversation log and last used context"""

    __tablename__ = "chat_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    budget_id = Column(UUID(as_uuid=True), ForeignKey("budgets.id", ondelete="SET NULL"), nullable=True)
    messages = Column(JSON, nullable=False, default=list)
    context_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


class FinancialHealthScore(Base):
    """Append-only history of health scores per budget"""

    __tablename__ = "financial_health_scores"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    budget_id = Column(UUID(as_uuid=True), ForeignKey("budgets.id", ondelete="CASCADE"), nullable=True, index=True)
    health_score = Column(Integer, nullable=False)
    score_factors = Column(JSON, nullable=False)
    recommendations = Column(JSON, nullable=True)
    calculated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    budget = relationship("Budget", back_populates="health_scores")


class PriceHistory(Base):
    """Recorded commodity price observation"""

    __tablename__ = "price_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    item_name = Column(Text, nullable=False)
    category = Column(Text, nullable=False, index=True)
    price = Column(Float, nullable=False)
    change_percent = Column(Float, nullable=True)
    currency = Column(Text, nullable=False)
    country = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)


class ExchangeRateHistory(Base):
    """Recorded exchange rate observation"""

    __tablename__ = "exchange_rate_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    base_currency = Column(Text, nullable=False)
    target_currency = Column(Text, nullable=False)
    rate = Column(Float, nullable=False)
    change_percent = Column(Float, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
