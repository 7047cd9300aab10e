"""Interfaces for publish/subscribe fan-out of new messages."""
from abc import ABC, abstractmethod
from typing import Optional

from fileshare.domain.entities.message import Message

MESSAGE_ADDED = "MESSAGE_ADDED"


class ISubscription(ABC):
    """Handle for one receiver registered on a topic."""

    @abstractmethod
    def get(self, timeout: Optional[float] = None) -> Optional[Message]:
        """
        Wait for the next published message.

        Args:
            timeout: Seconds to wait, None blocks until a message arrives

        Returns:
            The next message, or None when the timeout expired or the
            subscription was closed
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Stop receiving messages. Idempotent."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass

    def __enter__(self) -> "ISubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class IBroadcastChannel(ABC):
    """
    Fan-out publish/subscribe channel.

    Every subscriber receives every message published after it subscribed.
    There is no replay of history and no backpressure.
    """

    @abstractmethod
    def publish(self, topic: str, message: Message) -> int:
        """
        Publish a message to all current subscribers of a topic.

        Args:
            topic: Topic name
            message: Message to deliver

        Returns:
            Number of subscribers the message was handed to
        """
        pass

    @abstractmethod
    def subscribe(self, topic: str) -> ISubscription:
        """
        Register a new receiver on a topic.

        Args:
            topic: Topic name

        Returns:
            Subscription handle
        """
        pass

    @abstractmethod
    def subscriber_count(self, topic: str) -> int:
        """Return the number of open subscriptions on a topic."""
        pass
