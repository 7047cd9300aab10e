"""Monitoring and metrics middleware using Prometheus."""
import logging
import time
from functools import wraps
from typing import Callable
from flask import request
from prometheus_client import Counter, Histogram, Gauge, make_wsgi_app
from werkzeug.middleware.dispatcher import DispatcherMiddleware

logger = logging.getLogger(__name__)

# Prometheus metrics
messages_posted_total = Counter(
    'fileshare_messages_posted_total',
    'Total number of chat messages posted',
    ['has_file']
)

upload_bytes_total = Counter(
    'fileshare_upload_bytes_total',
    'Total number of bytes written by file uploads'
)

graphql_requests_total = Counter(
    'fileshare_graphql_requests_total',
    'Total number of GraphQL operations',
    ['transport', 'status']
)

graphql_request_duration = Histogram(
    'fileshare_graphql_request_duration_seconds',
    'Time spent executing GraphQL HTTP requests',
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

active_subscriptions = Gauge(
    'fileshare_active_subscriptions',
    'Number of open GraphQL subscriptions'
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS"):
        return

    # Wrap app with Prometheus WSGI middleware, served at /metrics
    app.wsgi_app = DispatcherMiddleware(app.wsgi_app, {
        '/metrics': make_wsgi_app()
    })

    logger.info("Prometheus metrics enabled at /metrics")


def track_graphql_request(f: Callable) -> Callable:
    """Decorator recording count and duration of GraphQL HTTP requests."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            response = f(*args, **kwargs)
        except Exception:
            graphql_requests_total.labels(transport="http", status=500).inc()
            raise
        status_code = response[1] if isinstance(response, tuple) else 200
        graphql_requests_total.labels(transport="http", status=status_code).inc()
        graphql_request_duration.observe(time.time() - start_time)
        logger.debug(f"{request.method} {request.path} -> {status_code}")
        return response

    return wrapper


def track_message_posted(has_file: bool) -> None:
    """Count a posted message."""
    try:
        messages_posted_total.labels(has_file=str(has_file).lower()).inc()
    except Exception as e:
        # Don't fail if metrics tracking fails
        logger.debug(f"Failed to track posted message: {e}")


def track_upload(size: int) -> None:
    """Count bytes written by an upload."""
    try:
        upload_bytes_total.inc(size)
    except Exception as e:
        logger.debug(f"Failed to track upload size: {e}")


def track_subscription(opened: bool) -> None:
    """Adjust the open subscriptions gauge and count websocket operations."""
    try:
        if opened:
            active_subscriptions.inc()
            graphql_requests_total.labels(transport="ws", status="started").inc()
        else:
            active_subscriptions.dec()
    except Exception as e:
        logger.debug(f"Failed to track subscription: {e}")
