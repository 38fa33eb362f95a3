"""Chat session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from docnav.api import deps
from docnav.models.chat import ChatState, NewChatRequest, NotificationsResponse, SendMessageRequest
from docnav.services.registry import ChatSessionRegistry

router = APIRouter()


@router.get("", response_model=ChatState, summary="Current state of a chat session.")
async def read_state(
    session_id: str = Query(..., min_length=1),
    registry: ChatSessionRegistry = Depends(deps.get_registry),
) -> ChatState:
    return deps.require_session(registry, session_id).state()


@router.post(
    "/messages",
    response_model=ChatState,
    status_code=status.HTTP_200_OK,
    summary="Ask a question in a chat session.",
)
async def send_message(
    request: SendMessageRequest,
    registry: ChatSessionRegistry = Depends(deps.get_registry),
) -> ChatState:
    """Run one exchange and return the settled session state."""

    try:
        validated = deps.validate_message(request)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    entry = registry.get_or_create(validated.session_id)
    await entry.orchestrator.send_message(validated.content)
    return entry.state()


@router.post("/new", response_model=ChatState, summary="Start over in a chat session.")
async def new_chat(
    request: NewChatRequest | None = None,
    registry: ChatSessionRegistry = Depends(deps.get_registry),
) -> ChatState:
    entry = registry.get_or_create(request.session_id if request else None)
    entry.orchestrator.new_chat()
    return entry.state()


@router.get(
    "/notifications",
    response_model=NotificationsResponse,
    summary="Drain pending user-visible notifications of a chat session.",
)
async def drain_notifications(
    session_id: str = Query(..., min_length=1),
    registry: ChatSessionRegistry = Depends(deps.get_registry),
) -> NotificationsResponse:
    entry = deps.require_session(registry, session_id)
    return NotificationsResponse(notifications=entry.notifier.drain())
