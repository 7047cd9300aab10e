"""Local view state shared by the poller and the subscription."""
import threading
from typing import Any, Dict, List

MessageData = Dict[str, Any]


class MessageFeed:
    """
    Messages as the client currently sees them.

    Polls overwrite the whole list; pushed records are appended unless a
    record with the same id is already present. Nothing else reconciles the
    two sources, so ordering between them is whatever arrived last.
    """

    def __init__(self):
        self._messages: List[MessageData] = []
        self._lock = threading.Lock()

    def replace(self, messages: List[MessageData]) -> None:
        with self._lock:
            self._messages = list(messages)

    def add(self, message: MessageData) -> bool:
        """Append a pushed record; returns False if its id is already known."""
        with self._lock:
            if any(existing.get("id") == message.get("id") for existing in self._messages):
                return False
            self._messages.append(message)
            return True

    def snapshot(self) -> List[MessageData]:
        with self._lock:
            return list(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
