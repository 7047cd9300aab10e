"""Flask application factory for the GraphQL file-sharing chat server."""
import logging
import sys
from typing import Optional

from flask import Flask

from fileshare.config.settings import Config, get_config
from fileshare.infrastructure.service_container import ServiceContainer
from fileshare.middleware.rate_limiter import create_rate_limiter
from fileshare.middleware.monitoring import register_metrics_middleware
from fileshare.middleware.error_handler import init_error_handlers
from fileshare.api import graphql_blueprint, uploads_blueprint, health_blueprint, sock

ROOT_MESSAGE = "GraphQL File Sharing Server is running! Use POST /graphql"


def create_app(config_class: Optional[type[Config]] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_class: Optional configuration class (for testing)

    Returns:
        Configured Flask application
    """
    config = config_class or get_config()
    _configure_logging(config)
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)
    app.config.from_object(config)

    try:
        config.validate()
    except ValueError as e:
        _logger.warning(f"Configuration validation warning: {e}")

    app.register_blueprint(graphql_blueprint)
    app.register_blueprint(uploads_blueprint)
    app.register_blueprint(health_blueprint)
    sock.init_app(app)

    @app.route("/", methods=["GET"])
    def root():
        """Liveness string for browsers hitting the bare host."""
        return ROOT_MESSAGE, 200, {"Content-Type": "text/plain; charset=utf-8"}

    _initialize_middleware(app)
    _initialize_services(app, config)

    _logger.info(f"App routes registered: {[str(rule) for rule in app.url_map.iter_rules()]}")
    return app


def _configure_logging(config: type[Config]) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )


def _initialize_middleware(app: Flask) -> None:
    """
    Initialize middleware (rate limiting, monitoring, error handling).

    Args:
        app: Flask application instance
    """
    app.extensions["fileshare_limiter"] = create_rate_limiter(app)
    register_metrics_middleware(app)
    init_error_handlers(app)


def _initialize_services(app: Flask, config: type[Config]) -> None:
    """
    Build the service container eagerly so the upload directory exists
    and backend problems show up at startup rather than on first request.

    Args:
        app: Flask application instance
        config: Configuration class the services read from
    """
    container = ServiceContainer(config)
    app.config["service_container"] = container
    container.get_chat_service()
    logging.getLogger(__name__).info("Services initialized successfully")
