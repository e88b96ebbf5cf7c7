"""Chat API endpoints."""

from fastapi import APIRouter, Depends, Request

from src.core.rate_limiter import enforce_rate_limit

from .memory import SessionStore
from .models import ChatRequest, ChatResponse, HistoryResponse
from .service import ChatService

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_chat_service(request: Request) -> ChatService:
    """Get the chat service bound to this application."""
    return request.app.state.chat_service


def get_session_store(request: Request) -> SessionStore:
    """Get the session store bound to this application."""
    return request.app.state.session_store


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_rate_limit)],
)
async def chat(body: ChatRequest, service: ChatService = Depends(get_chat_service)):
    """
    Send a message and get a response.

    Falls back to a canned reply when no AI backend is configured.
    Maintains conversation history via sessionId.
    """
    return await service.chat(
        message=body.message,
        session_id=body.session_id,
        context=body.context,
    )


@router.get(
    "/history/{session_id}",
    response_model=HistoryResponse,
    response_model_exclude_none=True,
)
async def get_history(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Return the full transcript for a session, or an empty list if unknown."""
    session = store.get(session_id)
    if session is None:
        return HistoryResponse(messages=[], session_id=session_id)

    return HistoryResponse(
        messages=session.messages,
        session_id=session_id,
        created_at=session.created_at,
        last_activity=session.last_activity,
    )
