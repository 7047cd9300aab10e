"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from typing import Optional

from fileshare.application.services.chat_service import ChatService
from fileshare.config.settings import Config
from fileshare.domain.interfaces.broadcast_channel import IBroadcastChannel
from fileshare.domain.interfaces.message_store import IMessageStore
from fileshare.infrastructure.factories.provider_factory import ProviderFactory
from fileshare.infrastructure.redis_client import RedisClientFactory
from fileshare.infrastructure.storage.file_sink import LocalFileSink


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    Singleton: every request thread and WebSocket connection shares the same
    store and channel, which is what makes fan-out work in one process.
    """

    _instance: Optional['ServiceContainer'] = None
    _config: type[Config] = Config
    _message_store: Optional[IMessageStore] = None
    _file_sink: Optional[LocalFileSink] = None
    _broadcast_channel: Optional[IBroadcastChannel] = None
    _chat_service: Optional[ChatService] = None

    def __new__(cls, config: Optional[type[Config]] = None):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config: Optional[type[Config]] = None):
        """
        Args:
            config: Configuration class; kept from earlier calls when omitted
        """
        self._logger = logging.getLogger(__name__)
        if config is not None:
            ServiceContainer._config = config

    @property
    def config(self) -> type[Config]:
        return ServiceContainer._config

    def _redis_client_for(self, backend: str):
        if backend.lower() != "redis":
            return None
        return RedisClientFactory.get_client(self.config.REDIS_URL)

    def get_message_store(self) -> IMessageStore:
        """Get or create the message store."""
        if ServiceContainer._message_store is None:
            store_type = self.config.MESSAGE_STORE_TYPE
            ServiceContainer._message_store = ProviderFactory.create_message_store(
                store_type,
                redis_client=self._redis_client_for(store_type),
                key_prefix=self.config.REDIS_KEY_PREFIX,
            )
            self._logger.info(f"MessageStore created: {store_type}")
        return ServiceContainer._message_store

    def get_file_sink(self) -> LocalFileSink:
        """Get or create the upload file sink."""
        if ServiceContainer._file_sink is None:
            ServiceContainer._file_sink = LocalFileSink(self.config.UPLOAD_DIR, self.config.PUBLIC_URL)
            self._logger.info(f"FileSink created at {ServiceContainer._file_sink.upload_dir}")
        return ServiceContainer._file_sink

    def get_broadcast_channel(self) -> IBroadcastChannel:
        """Get or create the broadcast channel."""
        if ServiceContainer._broadcast_channel is None:
            backend = self.config.BROADCAST_BACKEND
            ServiceContainer._broadcast_channel = ProviderFactory.create_broadcast_channel(
                backend,
                redis_client=self._redis_client_for(backend),
                key_prefix=self.config.REDIS_KEY_PREFIX,
            )
            self._logger.info(f"BroadcastChannel created: {backend}")
        return ServiceContainer._broadcast_channel

    def get_chat_service(self) -> ChatService:
        """Get or create the chat service."""
        if ServiceContainer._chat_service is None:
            ServiceContainer._chat_service = ChatService(
                message_store=self.get_message_store(),
                file_sink=self.get_file_sink(),
                broadcast_channel=self.get_broadcast_channel(),
                require_body=self.config.REQUIRE_MESSAGE_BODY,
            )
            self._logger.info("ChatService created")
        return ServiceContainer._chat_service

    @classmethod
    def reset(cls) -> None:
        """Reset all service instances (useful for testing)."""
        cls._instance = None
        cls._config = Config
        cls._message_store = None
        cls._file_sink = None
        cls._broadcast_channel = None
        cls._chat_service = None
