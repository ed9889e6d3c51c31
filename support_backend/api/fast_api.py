"""
FastAPI Routers — Chat • Health
===============================

Purpose
-------
Defines the HTTP API for:
- Chat: send a message and receive the agent's reply, read a session's
  transcript, start a new session
- Health: liveness/readiness of the API, the database and the LLM provider

Key Notes
---------
- Input validation via Pydantic models in `support_backend.api.models`.
- Collaborators (`ChatService`, `ChatStore`, `ReplyGenerator`) are created by
  the application factory and read from `app.state` through dependencies.
- Errors are raised as `SupportError` subclasses and rendered by
  `support_backend.api.exception_handlers`.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response

from support_backend.api.llm_pipeline import ReplyGenerator
from support_backend.api.models import (
    ChatMessageRequest,
    ChatResponse,
    ConversationHistory,
    ErrorResponse,
    HealthStatus,
    MessageOut,
    NewConversationResponse,
)
from support_backend.database.core.store import ChatStore
from support_backend.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["chat"])
"""Chat routes (`/chat/...`)."""

health_router = APIRouter(tags=["health"])
"""Health probe route."""


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


def get_generator(request: Request) -> ReplyGenerator:
    return request.app.state.generator


@router.post(
    "/message",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def send_message(data: ChatMessageRequest, service: ChatService = Depends(get_chat_service)):
    """Send a user message and return the generated reply.

    Request body:
        ChatMessageRequest {message, sessionId?}

    Behavior:
        - Continues `sessionId` (created on first use) or starts a new session.
        - On a generator failure the apology is stored in the transcript and the
          error is returned with its own status (401/429/503/504/500).

    Response:
        200: {'reply': str, 'sessionId': str}
    """
    exchange = await service.send_message(data.message, data.sessionId)
    return ChatResponse(reply=exchange.reply, sessionId=exchange.session_id)


@router.get(
    "/history/{session_id}",
    response_model=ConversationHistory,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_history(session_id: str, service: ChatService = Depends(get_chat_service)):
    """Return every stored message of a session, oldest first.

    400 when `session_id` is not a UUID-v4, 404 when the session does not exist.
    """
    messages = service.get_history(session_id)
    return ConversationHistory(
        sessionId=session_id,
        messages=[MessageOut.model_validate(m) for m in messages],
    )


@router.post("/new", response_model=NewConversationResponse)
async def new_conversation(service: ChatService = Depends(get_chat_service)):
    """Start an empty session and return its id."""
    session_id = service.start_new_conversation()
    return NewConversationResponse(sessionId=session_id)


@health_router.get("/health", response_model=HealthStatus, responses={503: {"model": HealthStatus}})
async def health(
    response: Response,
    store: ChatStore = Depends(get_store),
    generator: ReplyGenerator = Depends(get_generator),
):
    """Report service health; `degraded` (503) when the database or the provider is unreachable."""
    llm_healthy = await generator.check_health()
    db_healthy = store.ping()
    healthy = llm_healthy and db_healthy

    response.status_code = 200 if healthy else 503
    return HealthStatus(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        services={
            "api": "healthy",
            "database": "healthy" if db_healthy else "unhealthy",
            "llm": "healthy" if llm_healthy else "unhealthy",
        },
    )
