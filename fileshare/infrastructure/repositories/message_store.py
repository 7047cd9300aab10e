"""Message store implementations (Repository Pattern)."""
import json
import logging
import threading
from typing import List, Optional

import redis

from fileshare.domain.entities.message import Message
from fileshare.domain.interfaces.message_store import IMessageStore


class InMemoryMessageStore(IMessageStore):
    """
    Process-lifetime list of messages.

    Appends are serialised with a lock and reads return a copy, so request
    threads never observe a list being mutated under them.
    """

    def __init__(self):
        self._messages: List[Message] = []
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def append(self, message: Message) -> None:
        with self._lock:
            self._messages.append(message)
            size = len(self._messages)
        self._logger.debug(f"Stored message {message.id} ({size} total)")

    def list_all(self) -> List[Message]:
        with self._lock:
            return list(self._messages)


class RedisMessageStore(IMessageStore):
    """
    Message store backed by a Redis list.

    Lets several server processes share one history. Messages are stored as
    JSON documents, appended with RPUSH and read back with LRANGE.
    """

    def __init__(self, redis_client: Optional[redis.Redis], key_prefix: str = "fileshare:"):
        """
        Initialize the store.

        Args:
            redis_client: Redis client instance (Dependency Injection)
            key_prefix: Prefix for the list key
        """
        if redis_client is None:
            raise RuntimeError("Redis not available - cannot create message store")
        self.redis = redis_client
        self._key = f"{key_prefix}messages"
        self._logger = logging.getLogger(__name__)

    def append(self, message: Message) -> None:
        try:
            size = self.redis.rpush(self._key, json.dumps(message.to_dict()))
            self._logger.debug(f"Stored message {message.id} in Redis ({size} total)")
        except redis.RedisError as e:
            self._logger.error(f"Failed to store message {message.id}: {e}")
            raise

    def list_all(self) -> List[Message]:
        raw_messages = self.redis.lrange(self._key, 0, -1)
        messages = []
        for raw in raw_messages:
            try:
                messages.append(Message.from_dict(json.loads(raw)))
            except (json.JSONDecodeError, KeyError, TypeError) as e:
                self._logger.error(f"Skipping unreadable message entry: {e}")
        return messages
