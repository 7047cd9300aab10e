"""Interface for message storage (Repository Pattern)."""
from abc import ABC, abstractmethod
from typing import List

from fileshare.domain.entities.message import Message


class IMessageStore(ABC):
    """Append-only, insertion-ordered storage of chat messages."""

    @abstractmethod
    def append(self, message: Message) -> None:
        """
        Append a message to the end of the store.

        Args:
            message: Message to store
        """
        pass

    @abstractmethod
    def list_all(self) -> List[Message]:
        """
        Return every stored message.

        Returns:
            Messages in insertion order (a snapshot, safe to mutate)
        """
        pass
