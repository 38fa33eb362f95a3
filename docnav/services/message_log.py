"""Ordered log of the turns shown to the user."""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Sequence

from docnav.models.chat import Message, Role, Source, TurnStatus

DEFAULT_FALLBACK_ANSWER = "Désolé, je n'ai pas pu générer de réponse."


def _message_id(role: Role) -> str:
    return f"{role}-{uuid.uuid4().hex}"


class MessageLog:
    """Append-only sequence of chat turns.

    User turns are appended before their answer is known and start out
    ``pending``. They become ``answered`` when an assistant turn replies to
    them or ``failed`` when the exchange does not produce one. Appended
    messages are never edited or removed, only cleared wholesale.
    """

    def __init__(self, *, fallback_answer: str = DEFAULT_FALLBACK_ANSWER) -> None:
        self.fallback_answer = fallback_answer
        self._messages: list[Message] = []
        self._status: dict[str, TurnStatus] = {}

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append_user(self, content: str) -> Message:
        """Record a user turn right away and return it."""

        message = Message(id=_message_id("user"), role="user", content=content)
        self._messages.append(message)
        self._status[message.id] = TurnStatus.PENDING
        return message

    def append_assistant(
        self,
        content: str | None,
        sources: Sequence[Source] | None,
        *,
        reply_to: str | None = None,
    ) -> Message:
        """Record an assistant turn, substituting the fallback for a missing answer."""

        message = Message(
            id=_message_id("assistant"),
            role="assistant",
            content=content or self.fallback_answer,
            sources=tuple(sources) if sources is not None else None,
        )
        self._messages.append(message)
        if reply_to is not None and reply_to in self._status:
            self._status[reply_to] = TurnStatus.ANSWERED
        return message

    def mark_failed(self, message_id: str) -> None:
        if message_id in self._status:
            self._status[message_id] = TurnStatus.FAILED

    def status_of(self, message_id: str) -> TurnStatus | None:
        """Return the status of a user turn, or None for unknown ids."""

        return self._status.get(message_id)

    def clear(self) -> None:
        self._messages.clear()
        self._status.clear()
