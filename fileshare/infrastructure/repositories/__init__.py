"""Repository implementations."""
from fileshare.infrastructure.repositories.message_store import InMemoryMessageStore, RedisMessageStore

__all__ = ["InMemoryMessageStore", "RedisMessageStore"]
