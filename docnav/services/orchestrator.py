"""Chat session orchestration."""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager, nullcontext

from docnav.core.logging import get_logger
from docnav.models.chat import ChatState, ExchangeResult, Message
from docnav.services.errors import ExchangeError
from docnav.services.exchange import ExchangeClient
from docnav.services.message_log import MessageLog
from docnav.services.notifier import Notifier
from docnav.services.session import ConversationSession

logger = get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Une erreur est survenue"


class ChatOrchestrator:
    """Drive one chat session from user submission to settled answer.

    Each :meth:`send_message` call appends the user turn, makes sure a
    conversation exists, runs one exchange and either appends the answer or
    records the failure. Failures never propagate to the caller; they end up
    in :attr:`error` and on the notifier.

    With ``serialize`` enabled (the default) the exchanges of overlapping
    sends run one after another in submission order. User turns are always
    appended on submission, so overlapping sends show several questions
    before their answers either way.
    """

    def __init__(
        self,
        *,
        session: ConversationSession,
        log: MessageLog,
        client: ExchangeClient,
        notifier: Notifier,
        serialize: bool = True,
        generic_error_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> None:
        self._session = session
        self._log = log
        self._client = client
        self._notifier = notifier
        self._lock: asyncio.Lock | None = asyncio.Lock() if serialize else None
        self.generic_error_message = generic_error_message
        self._error: str | None = None
        self._pending = 0
        self._generation = 0

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._log.messages

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    @property
    def conversation_id(self) -> str | None:
        return self._session.id

    @property
    def log(self) -> MessageLog:
        return self._log

    def state(self) -> ChatState:
        """Return a snapshot suitable for rendering."""

        return ChatState(
            messages=list(self._log.messages),
            is_loading=self.is_loading,
            error=self._error,
            conversation_id=self._session.id,
        )

    def _turn_guard(self) -> AbstractAsyncContextManager[object]:
        if self._lock is None:
            return nullcontext()
        return self._lock

    async def send_message(self, content: str) -> Message | None:
        """Submit a question and return the assistant turn, or None on failure.

        The user turn is appended before waiting for earlier sends, so it is
        visible right away even when the exchange is queued.
        """

        if not content.strip():
            logger.info("chat.send.ignored_blank")
            return None

        generation = self._generation
        self._error = None
        user_message = self._log.append_user(content)
        self._pending += 1
        try:
            async with self._turn_guard():
                if generation != self._generation:
                    logger.info("chat.send.skipped_stale", generation=generation)
                    return None
                return await self._run_turn(user_message, generation)
        finally:
            self._pending -= 1

    async def _run_turn(self, user_message: Message, generation: int) -> Message | None:
        content = user_message.content
        conversation_id = await self._session.ensure(content)
        if generation != self._generation:
            logger.info("chat.send.skipped_stale", generation=generation, conversation_id=conversation_id)
            return None

        try:
            result = await self._exchange(content, conversation_id)
        except Exception as exc:
            if generation != self._generation:
                logger.info("chat.exchange.stale_discarded", outcome="failure", error=str(exc))
                return None
            self._fail(user_message, exc)
            return None

        if generation != self._generation:
            logger.info("chat.exchange.stale_discarded", outcome="success", conversation_id=conversation_id)
            return None

        assistant_message = self._log.append_assistant(
            result.answer,
            result.sources,
            reply_to=user_message.id,
        )
        self._error = None
        logger.info(
            "chat.exchange.completed",
            conversation_id=conversation_id,
            fallback=not result.answer,
            source_count=len(result.sources) if result.sources is not None else None,
        )
        return assistant_message

    async def _exchange(self, content: str, conversation_id: str | None) -> ExchangeResult:
        logger.debug("chat.exchange.start", conversation_id=conversation_id)
        return await self._client.exchange(content, conversation_id)

    def _fail(self, user_message: Message, exc: Exception) -> None:
        message = str(exc).strip() or self.generic_error_message
        if isinstance(exc, ExchangeError):
            logger.warning("chat.exchange.failed", error=message, error_type=type(exc).__name__)
        else:
            logger.exception("chat.exchange.unexpected_error", exc_info=exc)

        self._error = message
        self._log.mark_failed(user_message.id)
        try:
            self._notifier.notify(message)
        except Exception as notify_exc:
            logger.exception("chat.notify.failed", exc_info=notify_exc)

    def new_chat(self) -> None:
        """Start over with an empty log and no conversation.

        Sends still in flight keep running but their results are dropped.
        """

        self._generation += 1
        self._log.clear()
        self._session.reset()
        self._error = None
        logger.info("chat.new", generation=self._generation)
