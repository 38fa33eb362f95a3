"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from docnav.models.chat import SendMessageRequest
from docnav.services.registry import ChatSessionEntry, ChatSessionRegistry


def get_registry(request: Request) -> ChatSessionRegistry:
    """Return the session registry attached to the running application."""

    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise RuntimeError("Chat session registry is not initialised.")
    return registry


def require_session(registry: ChatSessionRegistry, session_id: str) -> ChatSessionEntry:
    entry = registry.get(session_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown chat session {session_id}.")
    return entry


def validate_message(request: SendMessageRequest) -> SendMessageRequest:
    """Reject questions that are blank once stripped."""

    content = request.content.strip()
    if not content:
        raise ValueError("Message must not be empty.")
    return SendMessageRequest(content=content, session_id=request.session_id)
