"""Shared Redis connection for the redis message store and broadcast channel."""
import logging
import time
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import redis
from redis.connection import ConnectionPool

_logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("redis", "rediss", "unix")


def mask_url(url: str) -> str:
    """Hide the password in a Redis URL so it can be logged."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


class RedisClientFactory:
    """
    One pooled client per process.

    The store and the channel share it; pub/sub subscriptions take their own
    connections from the same pool.
    """

    _pool: Optional[ConnectionPool] = None
    _client: Optional[redis.Redis] = None
    _url: Optional[str] = None

    @classmethod
    def create_pool(cls, url: str, max_connections: int = 50) -> ConnectionPool:
        if cls._pool is None:
            _logger.debug(f"Creating Redis connection pool for {mask_url(url)}")
            # Subscribers block in get_message(), so there is no socket_timeout
            cls._pool = ConnectionPool.from_url(
                url,
                max_connections=max_connections,
                decode_responses=True,
                socket_connect_timeout=10,
                socket_keepalive=True,
                health_check_interval=30,
            )
        return cls._pool

    @classmethod
    def get_client(cls, url: str, attempts: int = 3) -> Optional[redis.Redis]:
        """
        Return the shared client, connecting on first use.

        Args:
            url: Redis URL (redis://, rediss:// or unix://)
            attempts: Pings tried before giving up

        Returns:
            Connected client, or None when the URL is unusable or Redis is down
        """
        if cls._client is not None:
            if url != cls._url:
                _logger.warning(f"Ignoring {mask_url(url)}: already connected to {mask_url(cls._url)}")
            return cls._client

        if not url:
            _logger.warning("REDIS_URL not configured")
            return None
        if urlsplit(url).scheme not in SUPPORTED_SCHEMES:
            _logger.warning(f"Unsupported Redis URL scheme in {mask_url(url)}")
            return None

        client = redis.Redis(connection_pool=cls.create_pool(url))
        for attempt in range(1, attempts + 1):
            try:
                client.ping()
                break
            except redis.AuthenticationError as e:
                _logger.error(f"Redis authentication failed for {mask_url(url)}: {e}")
                cls.close()
                return None
            except redis.ConnectionError as e:
                if attempt == attempts:
                    _logger.warning(f"Failed to connect to Redis at {mask_url(url)}: {e}")
                    cls.close()
                    return None
                _logger.debug(f"Redis ping failed ({attempt}/{attempts}), retrying")
                time.sleep(1)

        _logger.info(f"Connected to Redis at {mask_url(url)}")
        cls._client = client
        cls._url = url
        return client

    @classmethod
    def close(cls) -> None:
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            cls._url = None
        if cls._pool is not None:
            cls._pool.disconnect()
            cls._pool = None
