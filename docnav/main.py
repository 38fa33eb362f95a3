"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .core import db
from .core.config import AppSettings, get_settings
from .core.logging import get_logger, setup_logging
from .services.exchange import ExchangeClient, HttpExchangeClient
from .services.message_log import MessageLog
from .services.notifier import Notifier
from .services.orchestrator import ChatOrchestrator
from .services.registry import ChatSessionRegistry
from .services.session import ConversationSession, ConversationStore, SqlConversationStore

logger = get_logger(__name__)


def build_orchestrator(
    settings: AppSettings,
    *,
    store: ConversationStore,
    client: ExchangeClient,
    notifier: Notifier,
) -> ChatOrchestrator:
    """Wire the chat collaborators according to settings."""

    return ChatOrchestrator(
        session=ConversationSession(store, title_max_chars=settings.conversation_title_max_chars),
        log=MessageLog(fallback_answer=settings.fallback_answer),
        client=client,
        notifier=notifier,
        serialize=settings.serialize_sends,
        generic_error_message=settings.generic_error_message,
    )


def build_registry(
    settings: AppSettings,
    *,
    store: ConversationStore,
    client: ExchangeClient,
) -> ChatSessionRegistry:
    """Create a registry handing every chat session its own orchestrator."""

    return ChatSessionRegistry(
        lambda notifier: build_orchestrator(settings, store=store, client=client, notifier=notifier),
        notification_buffer_size=settings.notification_buffer_size,
        max_sessions=settings.max_sessions,
    )


def create_app(
    settings: AppSettings | None = None,
    *,
    registry: ChatSessionRegistry | None = None,
) -> FastAPI:
    """Construct the FastAPI application instance.

    A prebuilt registry skips the lifespan wiring of the database and
    the HTTP client.
    """

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Lifecycle hooks for startup and shutdown."""

        setup_logging(settings.log_level)
        logger.info(
            "application.startup",
            environment=settings.environment,
            version=settings.version,
            answer_service_url=settings.answer_service_url,
            serialize_sends=settings.serialize_sends,
        )

        client: HttpExchangeClient | None = None
        if app.state.registry is None:
            await db.init_models()
            client = HttpExchangeClient(
                settings.answer_service_url,
                headers=settings.answer_service_headers,
                timeout=settings.exchange_timeout_seconds,
            )
            app.state.registry = build_registry(
                settings,
                store=SqlConversationStore(db.get_session_factory()),
                client=client,
            )

        try:
            yield
        finally:
            if client is not None:
                await client.aclose()
                await db.dispose_engine()
            logger.info("application.shutdown")

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.registry = registry

    if settings.cors_allowed_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    application.include_router(api_router, prefix="/v1")

    @application.get("/", tags=["meta"], summary="Service metadata")
    async def root() -> dict[str, str]:
        """Service metadata root endpoint."""

        return {"service": settings.project_name, "version": settings.version}

    return application


app = create_app()
