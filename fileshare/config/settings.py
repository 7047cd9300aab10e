"""Application configuration with environment-based settings."""
import os
from typing import Optional
from dotenv import load_dotenv


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Base configuration class, values read from the environment."""

    # Load environment variables
    load_dotenv()

    # Server
    PORT: int = int(os.getenv("PORT", "4000"))
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    PUBLIC_URL: str = os.getenv("PUBLIC_URL", "http://localhost:4000").rstrip("/")
    GRAPHQL_PATH: str = "/graphql"

    # Optional request size cap in bytes (unset = unlimited)
    MAX_CONTENT_LENGTH: Optional[int] = (
        int(os.getenv("MAX_CONTENT_LENGTH")) if os.getenv("MAX_CONTENT_LENGTH") else None
    )

    # Messages without content and file are accepted unless this is enabled
    REQUIRE_MESSAGE_BODY: bool = _env_flag("REQUIRE_MESSAGE_BODY", "false")

    # Storage / fan-out backends ("memory" or "redis")
    MESSAGE_STORE_TYPE: str = os.getenv("MESSAGE_STORE_TYPE", "memory").lower()
    BROADCAST_BACKEND: str = os.getenv("BROADCAST_BACKEND", "memory").lower()

    # Redis Configuration
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "fileshare:")

    # WebSocket subscriptions
    WS_KEEPALIVE_INTERVAL: float = float(os.getenv("WS_KEEPALIVE_INTERVAL", "10"))
    SOCK_SERVER_OPTIONS = {
        "ping_interval": 25,
        "subprotocols": ["graphql-ws"],
    }

    # Rate Limiting
    RATELIMIT_ENABLED: bool = _env_flag("RATELIMIT_ENABLED", "false")
    RATELIMIT_DEFAULT: str = os.getenv("RATELIMIT_DEFAULT", "600 per minute")
    RATELIMIT_STORAGE_URL: str = os.getenv("RATELIMIT_STORAGE_URL", "memory://")

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = _env_flag("ENABLE_METRICS", "true")

    # Client defaults
    CLIENT_SERVER_URL: str = os.getenv("CLIENT_SERVER_URL", "http://localhost:4000")
    CLIENT_POLL_INTERVAL: float = float(os.getenv("CLIENT_POLL_INTERVAL", "0.5"))

    # Application
    DEBUG: bool = _env_flag("DEBUG", "false")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    BACKEND_TYPES = ("memory", "redis")

    @classmethod
    def uses_redis(cls) -> bool:
        """Whether any backend is configured to use Redis."""
        return "redis" in (cls.MESSAGE_STORE_TYPE, cls.BROADCAST_BACKEND)

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        problems = []
        if cls.MESSAGE_STORE_TYPE not in cls.BACKEND_TYPES:
            problems.append(f"MESSAGE_STORE_TYPE={cls.MESSAGE_STORE_TYPE}")
        if cls.BROADCAST_BACKEND not in cls.BACKEND_TYPES:
            problems.append(f"BROADCAST_BACKEND={cls.BROADCAST_BACKEND}")
        if cls.CLIENT_POLL_INTERVAL <= 0:
            problems.append(f"CLIENT_POLL_INTERVAL={cls.CLIENT_POLL_INTERVAL}")
        if problems:
            raise ValueError(f"Invalid configuration values: {', '.join(problems)}")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = False
    MESSAGE_STORE_TYPE = "memory"
    BROADCAST_BACKEND = "memory"
    ENABLE_METRICS = False
    RATELIMIT_ENABLED = False
    SENTRY_DSN = None
    REDIS_URL = "redis://localhost:6379/15"  # Use different DB for tests


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
