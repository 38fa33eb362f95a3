"""Chat sessions keyed by client session id."""

from __future__ import annotations

import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from docnav.core.logging import get_logger
from docnav.models.chat import ChatState
from docnav.services.notifier import BufferedNotifier, Notifier
from docnav.services.orchestrator import ChatOrchestrator

logger = get_logger(__name__)

OrchestratorFactory = Callable[[Notifier], ChatOrchestrator]


@dataclass(slots=True)
class ChatSessionEntry:
    """Orchestrator and notification buffer of a single client session."""

    session_id: str
    orchestrator: ChatOrchestrator
    notifier: BufferedNotifier

    def state(self) -> ChatState:
        return self.orchestrator.state().model_copy(update={"session_id": self.session_id})


class ChatSessionRegistry:
    """Create and look up chat sessions by id.

    At most ``max_sessions`` sessions are kept; the least recently used idle
    session is evicted first. Sessions with a send in flight are never evicted.
    """

    def __init__(
        self,
        factory: OrchestratorFactory,
        *,
        notification_buffer_size: int = 50,
        max_sessions: int = 1000,
    ) -> None:
        self._factory = factory
        self._sessions: OrderedDict[str, ChatSessionEntry] = OrderedDict()
        self.notification_buffer_size = notification_buffer_size
        self.max_sessions = max_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> ChatSessionEntry | None:
        entry = self._sessions.get(session_id)
        if entry is not None:
            self._sessions.move_to_end(session_id)
        return entry

    def get_or_create(self, session_id: str | None = None) -> ChatSessionEntry:
        """Return the session for ``session_id``, creating it when unknown."""

        session_id = session_id or str(uuid.uuid4())
        entry = self.get(session_id)
        if entry is not None:
            return entry

        notifier = BufferedNotifier(max_items=self.notification_buffer_size)
        entry = ChatSessionEntry(session_id=session_id, orchestrator=self._factory(notifier), notifier=notifier)
        self._sessions[session_id] = entry
        logger.info("chat.session.created", session_id=session_id, active_sessions=len(self._sessions))
        self._evict()
        return entry

    def _evict(self) -> None:
        overflow = len(self._sessions) - self.max_sessions
        if overflow <= 0:
            return

        for session_id in list(self._sessions)[:-1]:
            if overflow <= 0:
                break
            if self._sessions[session_id].orchestrator.is_loading:
                continue
            del self._sessions[session_id]
            overflow -= 1
            logger.info("chat.session.evicted", session_id=session_id)
