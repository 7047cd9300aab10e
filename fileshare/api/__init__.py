"""API endpoints module.

This module contains all HTTP and WebSocket endpoints.
"""

from fileshare.api.graphql import graphql_blueprint, sock
from fileshare.api.uploads import uploads_blueprint
from fileshare.api.health import health_blueprint

__all__ = [
    "graphql_blueprint",
    "uploads_blueprint",
    "health_blueprint",
    "sock",
]
