"""Primary API route definitions."""

from fastapi import APIRouter, Request

health_router = APIRouter()


@health_router.get("/", summary="Readiness check", tags=["health"])
async def healthcheck(request: Request) -> dict[str, str]:
    """Report whether the chat session is ready to accept questions."""

    ready = getattr(request.app.state, "registry", None) is not None
    return {"status": "ok", "chat": "ready" if ready else "starting"}
