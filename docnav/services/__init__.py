"""Service exports."""

from . import errors, exchange, message_log, notifier, orchestrator, registry, session

__all__ = ["errors", "exchange", "message_log", "notifier", "orchestrator", "registry", "session"]
