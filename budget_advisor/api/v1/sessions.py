"""Chat session endpoints - /v1/chat-sessions"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from budget_advisor.api.dependencies import parse_id
from budget_advisor.api.v1.schemas import ChatMessageSchema, ChatSessionCreateRequest, ChatSessionResponse
from budget_advisor.domain.exceptions import PersistenceError
from budget_advisor.infrastructure.database.models import ChatSession
from budget_advisor.infrastructure.database.repositories import ChatSessionRepository
from budget_advisor.infrastructure.database.session import get_db

router = APIRouter()


def to_session_response(session: ChatSession) -> ChatSessionResponse:
    return ChatSessionResponse(
        session_id=str(session.id),
        budget_id=str(session.budget_id) if session.budget_id else None,
        messages=[ChatMessageSchema(**m) for m in (session.messages or [])],
        created_at=session.created_at,
    )


@router.post("/chat-sessions", response_model=ChatSessionResponse, status_code=201)
def create_chat_session(
    request_body: ChatSessionCreateRequest | None = None,
    db: Session = Depends(get_db),
):
    """Start an empty advisor conversation"""
    budget_id = None
    if request_body and request_body.budget_id:
        budget_id = parse_id(request_body.budget_id, "budget ID")

    repo = ChatSessionRepository(db)
    try:
        session = repo.create_session(budget_id=budget_id)
        repo.commit()
    except PersistenceError as e:
        logging.error(f"Failed to create chat session: {e}")
        raise HTTPException(status_code=503, detail="Chat storage unavailable")

    return to_session_response(session)


@router.get("/chat-sessions/{session_id}", response_model=ChatSessionResponse)
def get_chat_session(session_id: str, db: Session = Depends(get_db)):
    """Retrieve a conversation transcript"""
    try:
        session = ChatSessionRepository(db).get_session(parse_id(session_id, "session ID"))
    except PersistenceError as e:
        logging.error(f"Failed to fetch chat session: {e}")
        raise HTTPException(status_code=503, detail="Chat storage unavailable")
    if not session:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return to_session_response(session)
