"""Rate limiting middleware using Flask-Limiter."""
import logging
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


def create_rate_limiter(app) -> Limiter:
    """
    Create and configure Flask-Limiter instance.

    Clients poll the message list twice a second, so the default limit is
    per-minute and generous. Limits are off unless RATELIMIT_ENABLED is set.

    Args:
        app: Flask application instance

    Returns:
        Configured Limiter instance
    """
    enabled = bool(app.config.get("RATELIMIT_ENABLED"))
    storage_uri = app.config.get("RATELIMIT_STORAGE_URL", "memory://")
    default_limits = [app.config.get("RATELIMIT_DEFAULT", "600 per minute")]

    try:
        return Limiter(
            app=app,
            key_func=get_remote_address,
            default_limits=default_limits,
            storage_uri=storage_uri,
            strategy="fixed-window",
            headers_enabled=True,
            enabled=enabled,
        )
    except Exception as e:
        logging.warning(f"Failed to initialize rate limiter with {storage_uri}: {e}, using memory storage")
        return Limiter(
            app=app,
            key_func=get_remote_address,
            default_limits=default_limits,
            storage_uri="memory://",
            enabled=enabled,
        )
