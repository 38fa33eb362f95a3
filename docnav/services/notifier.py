"""User-visible notification channels."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Protocol

from docnav.core.logging import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class BufferedNotifier:
    """Keep the most recent notifications until a client drains them."""

    def __init__(self, *, max_items: int = 50) -> None:
        self._items: Deque[str] = deque(maxlen=max_items)

    def __len__(self) -> int:
        return len(self._items)

    def notify(self, message: str) -> None:
        if self._items.maxlen is not None and len(self._items) == self._items.maxlen:
            logger.warning("notifier.dropped_oldest", dropped=self._items[0])
        self._items.append(message)

    def drain(self) -> List[str]:
        """Return pending notifications oldest first and forget them."""

        items = list(self._items)
        self._items.clear()
        return items
