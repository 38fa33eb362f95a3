"""Exceptions raised by the chat collaborators."""

from __future__ import annotations


class ChatError(Exception):
    """Base class for chat session failures."""


class SessionCreationError(ChatError):
    """The conversation record could not be created."""


class ExchangeError(ChatError):
    """An exchange with the answering service did not produce an answer."""


class ExchangeTransportError(ExchangeError):
    """The request could not complete or the response was unusable."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExchangeApplicationError(ExchangeError):
    """The answering service replied with an explicit error message."""
