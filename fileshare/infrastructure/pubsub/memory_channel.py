"""In-process broadcast channel with one queue per subscriber."""
import logging
import queue
import threading
from typing import Dict, Optional, Set

from fileshare.domain.entities.message import Message
from fileshare.domain.interfaces.broadcast_channel import IBroadcastChannel, ISubscription

# Wakes up a blocked get() when the subscription is closed
_CLOSED = object()


class InMemorySubscription(ISubscription):
    """Unbounded per-subscriber queue registered on an InMemoryBroadcastChannel."""

    def __init__(self, channel: "InMemoryBroadcastChannel", topic: str):
        self.topic = topic
        self._channel = channel
        self._queue: "queue.Queue" = queue.Queue()
        self._closed = False

    def deliver(self, message: Message) -> None:
        if not self._closed:
            self._queue.put(message)

    def get(self, timeout: Optional[float] = None) -> Optional[Message]:
        if self._closed and self._queue.empty():
            return None
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        return None if item is _CLOSED else item

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel.unsubscribe(self)
        self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed


class InMemoryBroadcastChannel(IBroadcastChannel):
    """
    Fan-out channel for a single process.

    publish() copies the message into the queue of every subscription open on
    the topic at that moment; later subscribers never see it.
    """

    def __init__(self):
        self._subscribers: Dict[str, Set[InMemorySubscription]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def publish(self, topic: str, message: Message) -> int:
        with self._lock:
            receivers = list(self._subscribers.get(topic, ()))
        for subscription in receivers:
            subscription.deliver(message)
        self._logger.debug(f"Published {message.id} on {topic} to {len(receivers)} subscriber(s)")
        return len(receivers)

    def subscribe(self, topic: str) -> InMemorySubscription:
        subscription = InMemorySubscription(self, topic)
        with self._lock:
            self._subscribers.setdefault(topic, set()).add(subscription)
        return subscription

    def unsubscribe(self, subscription: InMemorySubscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.topic)
            if subscribers is not None:
                subscribers.discard(subscription)
                if not subscribers:
                    del self._subscribers[subscription.topic]

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, ()))
