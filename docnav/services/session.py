"""Lazily created conversation identity."""

from __future__ import annotations

import uuid
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docnav.core.logging import get_logger
from docnav.models.tables import ChatConversation
from docnav.services.errors import SessionCreationError

logger = get_logger(__name__)

TITLE_SUFFIX = "..."


def derive_title(question: str, max_chars: int = 50) -> str:
    """Shorten a question into a conversation title."""

    if len(question) <= max_chars:
        return question
    return question[:max_chars] + TITLE_SUFFIX


class ConversationStore(Protocol):
    async def create_conversation(self, title: str) -> str:
        """Persist a new conversation and return its identifier."""
        ...


class SqlConversationStore:
    """Store conversations in the ``chat_conversations`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_conversation(self, title: str) -> str:
        conversation = ChatConversation(id=str(uuid.uuid4()), title=title)
        try:
            async with self._session_factory() as session:
                session.add(conversation)
                await session.commit()
        except SQLAlchemyError as exc:
            raise SessionCreationError(f"Could not create conversation: {exc}") from exc
        return conversation.id


class ConversationSession:
    """Hold the conversation id of the active chat session.

    The id is created on the first :meth:`ensure` call and reused until
    :meth:`reset`. Creation failures are logged and leave the session
    unpersisted so the exchange can still proceed.
    """

    def __init__(self, store: ConversationStore, *, title_max_chars: int = 50) -> None:
        self._store = store
        self._title_max_chars = title_max_chars
        self._id: str | None = None
        self._epoch = 0

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def is_persisted(self) -> bool:
        return self._id is not None

    async def ensure(self, question: str) -> str | None:
        """Return the conversation id, creating the conversation if needed."""

        if self._id is not None:
            return self._id

        epoch = self._epoch
        title = derive_title(question, self._title_max_chars)

        try:
            created_id = await self._store.create_conversation(title)
        except Exception as exc:
            logger.warning("session.create.failed", title=title, error=str(exc), exc_info=exc)
            return self._id

        if epoch != self._epoch:
            # reset() ran meanwhile; the id belongs to the abandoned session only.
            logger.info("session.create.superseded", conversation_id=created_id)
            return created_id

        if self._id is not None:
            logger.warning("session.create.orphaned", conversation_id=created_id, kept=self._id)
            return self._id

        self._id = created_id
        logger.info("session.created", conversation_id=created_id)
        return created_id

    def reset(self) -> None:
        """Forget the current conversation id."""

        self._id = None
        self._epoch += 1
