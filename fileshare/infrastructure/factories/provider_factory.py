"""Factory for creating backend instances (Factory Pattern)."""
import logging
from typing import Optional

import redis

from fileshare.domain.interfaces.broadcast_channel import IBroadcastChannel
from fileshare.domain.interfaces.message_store import IMessageStore
from fileshare.infrastructure.pubsub.memory_channel import InMemoryBroadcastChannel
from fileshare.infrastructure.pubsub.redis_channel import RedisBroadcastChannel
from fileshare.infrastructure.repositories.message_store import InMemoryMessageStore, RedisMessageStore


logger = logging.getLogger(__name__)


class ProviderFactory:
    """
    Factory for creating store and channel implementations.

    Centralizes backend selection so the rest of the app only sees interfaces.
    """

    @staticmethod
    def create_message_store(
        store_type: str = "memory",
        redis_client: Optional[redis.Redis] = None,
        key_prefix: str = "fileshare:",
    ) -> IMessageStore:
        """
        Create a message store.

        Args:
            store_type: "memory" or "redis"
            redis_client: Redis client, required for the redis backend
            key_prefix: Redis key prefix

        Returns:
            IMessageStore instance

        Raises:
            ValueError: If store type is not supported
        """
        store_type = store_type.lower()

        if store_type == "memory":
            return InMemoryMessageStore()
        elif store_type == "redis":
            return RedisMessageStore(redis_client, key_prefix=key_prefix)
        else:
            raise ValueError(f"Unsupported message store type: {store_type}")

    @staticmethod
    def create_broadcast_channel(
        backend: str = "memory",
        redis_client: Optional[redis.Redis] = None,
        key_prefix: str = "fileshare:",
    ) -> IBroadcastChannel:
        """
        Create a broadcast channel.

        Args:
            backend: "memory" or "redis"
            redis_client: Redis client, required for the redis backend
            key_prefix: Redis channel prefix

        Returns:
            IBroadcastChannel instance

        Raises:
            ValueError: If backend is not supported
        """
        backend = backend.lower()

        if backend == "memory":
            return InMemoryBroadcastChannel()
        elif backend == "redis":
            return RedisBroadcastChannel(redis_client, key_prefix=key_prefix)
        else:
            raise ValueError(f"Unsupported broadcast backend: {backend}")
