"""Dependency injection for FastAPI endpoints"""

import asyncio
import uuid

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from budget_advisor.infrastructure.clients.advisor import AdvisorClient
from budget_advisor.infrastructure.clients.retrying import Sleep
from budget_advisor.infrastructure.database.session import get_db
from budget_advisor.services.advisor_service import AdvisorService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_advisor_client() -> AdvisorClient:
    """Provide language model client instance"""
    return AdvisorClient()


def get_sleep() -> Sleep:
    """Backoff sleep used between advisor retries"""
    return asyncio.sleep


def get_advisor_service(
    db: Session = Depends(get_db),
    advisor_client: AdvisorClient = Depends(get_advisor_client),
    sleep: Sleep = Depends(get_sleep),
) -> AdvisorService:
    return AdvisorService(db, advisor_client, sleep=sleep)


def parse_id(value: str, label: str = "ID") -> uuid.UUID:
    """Parse a path/body identifier, rejecting malformed values with 400"""
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {label} format")
