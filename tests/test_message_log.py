"""Tests for the optimistic message log."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docnav.models.chat import Source, TurnStatus
from docnav.services.message_log import DEFAULT_FALLBACK_ANSWER, MessageLog


def test_append_user_returns_pending_turn_immediately() -> None:
    log = MessageLog()

    message = log.append_user("What is the pressure limit?")

    assert log.messages == (message,)
    assert message.role == "user"
    assert message.sources is None
    assert message.id.startswith("user-")
    assert log.status_of(message.id) is TurnStatus.PENDING


def test_append_assistant_marks_reply_answered() -> None:
    log = MessageLog()
    question = log.append_user("question")
    source = Source(document="ISO-1234", chunk_id=3)

    answer = log.append_assistant("answer", [source], reply_to=question.id)

    assert [m.role for m in log] == ["user", "assistant"]
    assert answer.sources == (source,)
    assert log.status_of(question.id) is TurnStatus.ANSWERED


@pytest.mark.parametrize("content", [None, ""])
def test_missing_answer_is_replaced_by_fallback(content) -> None:
    log = MessageLog()

    answer = log.append_assistant(content, None)

    assert answer.content == DEFAULT_FALLBACK_ANSWER
    assert answer.sources is None


def test_custom_fallback_answer() -> None:
    log = MessageLog(fallback_answer="No answer available.")

    assert log.append_assistant(None, None).content == "No answer available."


def test_mark_failed_keeps_user_turn() -> None:
    log = MessageLog()
    question = log.append_user("question")

    log.mark_failed(question.id)

    assert len(log) == 1
    assert log.status_of(question.id) is TurnStatus.FAILED


def test_message_ids_are_unique_for_rapid_appends() -> None:
    log = MessageLog()

    ids = {log.append_user("same").id for _ in range(500)}

    assert len(ids) == 500


def test_messages_are_immutable() -> None:
    log = MessageLog()
    message = log.append_user("question")

    with pytest.raises(ValidationError):
        message.content = "edited"  # type: ignore[misc]


def test_clear_empties_log_and_statuses() -> None:
    log = MessageLog()
    question = log.append_user("question")
    log.append_assistant("answer", None, reply_to=question.id)

    log.clear()

    assert len(log) == 0
    assert log.status_of(question.id) is None
