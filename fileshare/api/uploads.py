"""Static serving of uploaded files."""
import logging
from flask import Blueprint, abort, current_app, send_file

from fileshare.infrastructure.service_container import ServiceContainer

uploads_blueprint = Blueprint("uploads", __name__)
_logger = logging.getLogger(__name__)


@uploads_blueprint.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename: str):
    """Return the bytes of an uploaded file; 404 if it does not exist."""
    container = current_app.config.get("service_container") or ServiceContainer()
    path = container.get_file_sink().resolve(filename)
    if path is None:
        _logger.debug(f"Upload not found: {filename}")
        abort(404)
    _logger.debug(f"Serving upload {filename}")
    return send_file(path)
