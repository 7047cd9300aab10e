"""Redis pub/sub broadcast channel for multi-process deployments."""
import json
import logging
from typing import Optional

import redis

from fileshare.domain.entities.message import Message
from fileshare.domain.interfaces.broadcast_channel import IBroadcastChannel, ISubscription


class RedisSubscription(ISubscription):
    """Wraps a redis PubSub object subscribed to a single channel."""

    def __init__(self, pubsub, channel_name: str):
        self._pubsub = pubsub
        self._channel_name = channel_name
        self._closed = False
        self._logger = logging.getLogger(__name__)

    def get(self, timeout: Optional[float] = None) -> Optional[Message]:
        if self._closed:
            return None
        try:
            event = self._pubsub.get_message(ignore_subscribe_messages=True, timeout=timeout)
        except redis.ConnectionError as e:
            self._logger.warning(f"Lost Redis subscription on {self._channel_name}: {e}")
            self.close()
            return None
        if not event or event.get("type") != "message":
            return None
        try:
            return Message.from_dict(json.loads(event["data"]))
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            self._logger.error(f"Discarding unreadable event on {self._channel_name}: {e}")
            return None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._pubsub.unsubscribe(self._channel_name)
            self._pubsub.close()
        except redis.RedisError as e:
            self._logger.debug(f"Error closing Redis subscription: {e}")

    @property
    def closed(self) -> bool:
        return self._closed


class RedisBroadcastChannel(IBroadcastChannel):
    """
    Broadcast channel on top of Redis PUBLISH/SUBSCRIBE.

    Messages travel as JSON, so every server process subscribed to the topic
    receives them.
    """

    def __init__(self, redis_client: Optional[redis.Redis], key_prefix: str = "fileshare:"):
        """
        Args:
            redis_client: Redis client instance (Dependency Injection)
            key_prefix: Prefix for channel names
        """
        if redis_client is None:
            raise RuntimeError("Redis not available - cannot create broadcast channel")
        self.redis = redis_client
        self._key_prefix = key_prefix
        self._logger = logging.getLogger(__name__)

    def _channel_name(self, topic: str) -> str:
        return f"{self._key_prefix}{topic}"

    def publish(self, topic: str, message: Message) -> int:
        receivers = self.redis.publish(self._channel_name(topic), json.dumps(message.to_dict()))
        self._logger.debug(f"Published {message.id} on {topic} to {receivers} Redis subscriber(s)")
        return int(receivers)

    def subscribe(self, topic: str) -> RedisSubscription:
        channel_name = self._channel_name(topic)
        pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(channel_name)
        return RedisSubscription(pubsub, channel_name)

    def subscriber_count(self, topic: str) -> int:
        channel_name = self._channel_name(topic)
        counts = dict(self.redis.pubsub_numsub(channel_name))
        return int(counts.get(channel_name, 0))
