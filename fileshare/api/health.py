"""Health check endpoints."""
import logging
from flask import Blueprint, current_app, jsonify

from fileshare.infrastructure.redis_client import RedisClientFactory
from fileshare.infrastructure.service_container import ServiceContainer

health_blueprint = Blueprint("health", __name__)
_logger = logging.getLogger(__name__)


@health_blueprint.route("/health", methods=["GET"])
def health_check():
    """
    Basic health check endpoint.

    Returns:
        JSON response with health status
    """
    return jsonify({
        "status": "healthy",
        "service": "fileshare"
    }), 200


@health_blueprint.route("/health/ready", methods=["GET"])
def readiness_check():
    """
    Readiness check endpoint (checks dependencies).

    Redis is only checked when a Redis backend is configured.

    Returns:
        JSON response with readiness status
    """
    container = current_app.config.get("service_container") or ServiceContainer()
    checks = {"uploads": False}

    try:
        checks["uploads"] = container.get_file_sink().is_writable()
    except Exception as e:
        _logger.error(f"Upload directory check failed: {e}")

    if container.config.uses_redis():
        checks["redis"] = False
        try:
            redis_client = RedisClientFactory.get_client(container.config.REDIS_URL)
            checks["redis"] = bool(redis_client and redis_client.ping())
        except Exception as e:
            _logger.error(f"Redis health check failed: {e}")

    checks["overall"] = all(checks.values())
    status_code = 200 if checks["overall"] else 503

    return jsonify({
        "status": "ready" if checks["overall"] else "not_ready",
        "checks": checks
    }), status_code


@health_blueprint.route("/health/live", methods=["GET"])
def liveness_check():
    """
    Liveness check endpoint (for Kubernetes).

    Returns:
        JSON response with liveness status
    """
    return jsonify({
        "status": "alive",
        "service": "fileshare"
    }), 200
