"""Broadcast channel implementations."""
from fileshare.infrastructure.pubsub.memory_channel import InMemoryBroadcastChannel, InMemorySubscription
from fileshare.infrastructure.pubsub.redis_channel import RedisBroadcastChannel, RedisSubscription

__all__ = [
    "InMemoryBroadcastChannel",
    "InMemorySubscription",
    "RedisBroadcastChannel",
    "RedisSubscription",
]
