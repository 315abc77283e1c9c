"""Market history endpoints - recorded prices, exchange rates and their summaries"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from budget_advisor.api.dependencies import get_advisor_service
from budget_advisor.api.v1.schemas import (
    ExchangeRateRecordRequest,
    MarketInsightsResponse,
    PriceRecordRequest,
    RecordCreatedResponse,
)
from budget_advisor.domain.exceptions import PersistenceError
from budget_advisor.domain.models import ExchangeRateRecord, PriceRecord
from budget_advisor.infrastructure.database.repositories import MarketDataRepository
from budget_advisor.infrastructure.database.session import get_db
from budget_advisor.services.advisor_service import AdvisorService

router = APIRouter()


@router.get("/market/insights", response_model=MarketInsightsResponse)
def get_market_insights(service: AdvisorService = Depends(get_advisor_service)):
    """Text summaries of recent price and exchange rate trends, as given to the advisor"""
    insights = service.load_market_insights()
    return MarketInsightsResponse(
        market_insights=insights.market_insights,
        exchange_insights=insights.exchange_insights,
    )


@router.post("/market/prices", response_model=RecordCreatedResponse, status_code=201)
def record_price(request_body: PriceRecordRequest, db: Session = Depends(get_db)):
    repo = MarketDataRepository(db)
    try:
        row = repo.add_price(
            PriceRecord(
                category=request_body.category,
                price=request_body.price,
                change_percent=request_body.change_percent,
                item_name=request_body.item_name,
                currency=request_body.currency,
                timestamp=request_body.timestamp,
            ),
            country=request_body.country,
        )
        repo.commit()
    except PersistenceError as e:
        logging.error(f"Failed to record price: {e}")
        raise HTTPException(status_code=503, detail="Market data storage unavailable")

    return RecordCreatedResponse(record_id=str(row.id))


@router.post("/market/exchange-rates", response_model=RecordCreatedResponse, status_code=201)
def record_exchange_rate(request_body: ExchangeRateRecordRequest, db: Session = Depends(get_db)):
    repo = MarketDataRepository(db)
    try:
        row = repo.add_exchange_rate(
            ExchangeRateRecord(
                base_currency=request_body.base_currency,
                target_currency=request_body.target_currency,
                rate=request_body.rate,
                change_percent=request_body.change_percent,
                timestamp=request_body.timestamp,
            )
        )
        repo.commit()
    except PersistenceError as e:
        logging.error(f"Failed to record exchange rate: {e}")
        raise HTTPException(status_code=503, detail="Market data storage unavailable")

    return RecordCreatedResponse(record_id=str(row.id))
