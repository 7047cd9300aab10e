"""GraphQL endpoint: HTTP queries/mutations (JSON or multipart) and WebSocket subscriptions."""
import json
import logging
from typing import Any, Dict

from ariadne import combine_multipart_data, graphql_sync
from ariadne.exceptions import HttpBadRequestError
from ariadne.explorer import ExplorerGraphiQL
from flask import Blueprint, current_app, jsonify, request
from flask_sock import Sock

from fileshare.api.subscriptions import GraphQLWSSession
from fileshare.application.services.chat_service import ChatService
from fileshare.infrastructure.service_container import ServiceContainer
from fileshare.middleware.monitoring import track_graphql_request
from fileshare.schema import schema

graphql_blueprint = Blueprint("graphql", __name__)
sock = Sock()
_logger = logging.getLogger(__name__)

explorer_html = ExplorerGraphiQL(title="File Sharing GraphQL").html(None)


def get_chat_service() -> ChatService:
    """Fetch the chat service from the app's service container."""
    container = current_app.config.get("service_container")
    if not container:
        _logger.warning("Service container not in app.config, creating new instance")
        container = ServiceContainer()
        current_app.config["service_container"] = container
    return container.get_chat_service()


def read_operation_payload() -> Dict[str, Any]:
    """
    Read the GraphQL operation from the request body.

    Multipart bodies follow the GraphQL multipart request convention:
    an ``operations`` JSON field, a ``map`` JSON field and one file part per
    mapped upload.

    Raises:
        ValueError: If the body cannot be read as an operation
    """
    content_type = request.content_type or ""

    if content_type.startswith("multipart/form-data"):
        try:
            operations = json.loads(request.form.get("operations") or "")
            files_map = json.loads(request.form.get("map") or "{}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid multipart operations or map: {e}") from e
        try:
            # Substitutes the file parts into the operation variables in place
            combine_multipart_data(operations, files_map, request.files.to_dict())
        except HttpBadRequestError as e:
            raise ValueError(str(e) or "Invalid multipart request") from e
        return operations

    data = request.get_json(silent=True)
    if data is None:
        raise ValueError("Request body must be JSON or multipart/form-data")
    return data


@graphql_blueprint.route("/graphql", methods=["GET"])
def graphql_explorer():
    """Serve the GraphiQL explorer."""
    return explorer_html, 200


@graphql_blueprint.route("/graphql", methods=["POST"])
@track_graphql_request
def graphql_server():
    """Execute a query or mutation."""
    try:
        data = read_operation_payload()
    except ValueError as e:
        _logger.info(f"Rejected GraphQL request: {e}")
        return jsonify({"errors": [{"message": str(e)}]}), 400

    success, result = graphql_sync(
        schema,
        data,
        context_value={"request": request, "chat_service": get_chat_service()},
        debug=current_app.debug,
    )

    return jsonify(result), 200 if success else 400


@sock.route("/graphql", bp=graphql_blueprint)
def graphql_subscriptions(ws):
    """Serve graphql-ws subscriptions on the same path as HTTP."""
    session = GraphQLWSSession(
        ws,
        schema,
        get_chat_service(),
        keepalive_interval=current_app.config.get("WS_KEEPALIVE_INTERVAL", 10.0),
        debug=current_app.debug,
    )
    session.run()
