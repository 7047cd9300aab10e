"""
GraphQL subscriptions over WebSocket, ``graphql-ws`` sub-protocol.

This is the protocol spoken by subscriptions-transport-ws clients (Apollo's
WebSocketLink). One GraphQLWSSession serves one socket; every started
subscription gets its own broadcast subscription and a daemon thread that
executes the selection set against each published message.
"""
import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ariadne import format_error
from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    OperationType,
    execute_sync,
    get_operation_ast,
    parse,
    validate,
)
from simple_websocket import ConnectionClosed

from fileshare.application.services.chat_service import ChatService
from fileshare.domain.entities.message import Message
from fileshare.domain.interfaces.broadcast_channel import ISubscription
from fileshare.middleware.monitoring import track_subscription

GRAPHQL_WS = "graphql-ws"

# Client -> server
GQL_CONNECTION_INIT = "connection_init"
GQL_START = "start"
GQL_STOP = "stop"
GQL_CONNECTION_TERMINATE = "connection_terminate"

# Server -> client
GQL_CONNECTION_ACK = "connection_ack"
GQL_CONNECTION_ERROR = "connection_error"
GQL_CONNECTION_KEEP_ALIVE = "ka"
GQL_DATA = "data"
GQL_ERROR = "error"
GQL_COMPLETE = "complete"

# How often pump threads re-check their stop flag
_PUMP_POLL_SECONDS = 1.0

_logger = logging.getLogger(__name__)


@dataclass
class ActiveOperation:
    """A started subscription operation on one socket."""

    id: str
    document: DocumentNode
    variables: Optional[Dict[str, Any]]
    operation_name: Optional[str]
    subscription: ISubscription
    stop_event: threading.Event = field(default_factory=threading.Event)
    thread: Optional[threading.Thread] = None


class GraphQLWSSession:
    """
    Serve one WebSocket connection.

    Args:
        ws: Object with send(str), receive(timeout) and close(), such as a
            simple_websocket.Server
        schema: Executable schema
        chat_service: Service placed into the execution context
        keepalive_interval: Seconds of client silence before a ``ka`` frame
        debug: Include tracebacks in formatted errors
    """

    def __init__(
        self,
        ws,
        schema: GraphQLSchema,
        chat_service: ChatService,
        keepalive_interval: float = 10.0,
        debug: bool = False,
    ):
        self.ws = ws
        self.schema = schema
        self.chat_service = chat_service
        self.keepalive_interval = keepalive_interval
        self.debug = debug
        self.operations: Dict[str, ActiveOperation] = {}
        self._acknowledged = False
        self._terminated = False
        self._send_lock = threading.Lock()
        self._ops_lock = threading.Lock()

    @property
    def context(self) -> Dict[str, Any]:
        return {"chat_service": self.chat_service}

    def run(self) -> None:
        """Read client frames until the socket closes or the client terminates."""
        _logger.info("WebSocket connected for subscriptions")
        try:
            while not self._terminated:
                raw = self.ws.receive(timeout=self.keepalive_interval)
                if raw is None:
                    if self._acknowledged:
                        self.send({"type": GQL_CONNECTION_KEEP_ALIVE})
                    continue
                self.handle_message(raw)
        except ConnectionClosed:
            pass
        finally:
            self.stop_all()
            _logger.info("WebSocket disconnected")

    def send(self, message: Dict[str, Any]) -> None:
        with self._send_lock:
            self.ws.send(json.dumps(message))

    def handle_message(self, raw: Any) -> None:
        """Dispatch one client frame."""
        try:
            message = json.loads(raw)
        except (TypeError, ValueError):
            self.send({"type": GQL_ERROR, "id": None, "payload": {"message": "Message must be JSON"}})
            return
        if not isinstance(message, dict):
            self.send({"type": GQL_ERROR, "id": None, "payload": {"message": "Message must be a JSON object"}})
            return

        message_type = message.get("type")
        op_id = message.get("id")

        if message_type == GQL_CONNECTION_INIT:
            self._acknowledged = True
            self.send({"type": GQL_CONNECTION_ACK})
            self.send({"type": GQL_CONNECTION_KEEP_ALIVE})
        elif message_type == GQL_START:
            if op_id is None:
                self.send({"type": GQL_ERROR, "id": None, "payload": {"message": "start requires an id"}})
                return
            self.start_operation(str(op_id), message.get("payload"))
        elif message_type == GQL_STOP:
            if op_id is not None:
                self.stop_operation(str(op_id))
                self.send({"type": GQL_COMPLETE, "id": op_id})
        elif message_type == GQL_CONNECTION_TERMINATE:
            self._terminated = True
            self.stop_all()
            self.ws.close()
        else:
            self.send({
                "type": GQL_CONNECTION_ERROR if op_id is None else GQL_ERROR,
                "id": op_id,
                "payload": {"message": f"Unsupported message type: {message_type}"},
            })

    def start_operation(self, op_id: str, payload: Any) -> None:
        """
        Validate and start (or execute) the operation carried by a ``start`` frame.

        A malformed payload or unparsable query is answered with an ``error``
        frame; validation errors arrive as a ``data`` frame carrying
        ``errors``, followed by ``complete``. Either way the connection and
        its other operations stay up.
        """
        # Reusing an id replaces the earlier operation
        self.stop_operation(op_id)

        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            self._send_error(op_id, "start payload must be an object")
            return

        query = payload.get("query")
        variables = payload.get("variables")
        operation_name = payload.get("operationName")
        if not isinstance(query, str):
            self._send_error(op_id, "payload.query must be a string")
            return
        if variables is not None and not isinstance(variables, dict):
            self._send_error(op_id, "payload.variables must be an object")
            return
        if operation_name is not None and not isinstance(operation_name, str):
            self._send_error(op_id, "payload.operationName must be a string")
            return

        try:
            document = parse(query)
        except GraphQLError as error:
            self._send_error(op_id, error.message)
            return

        errors = validate(self.schema, document)
        if errors:
            self._send_failed_result(op_id, errors)
            return

        operation = get_operation_ast(document, operation_name)
        if operation is None:
            self._send_failed_result(op_id, [GraphQLError("Unknown or ambiguous operation")])
            return

        if operation.operation != OperationType.SUBSCRIPTION:
            # Queries and mutations over the socket run once and complete
            try:
                result = execute_sync(
                    self.schema,
                    document,
                    context_value=self.context,
                    variable_values=variables,
                    operation_name=operation_name,
                )
            except (GraphQLError, TypeError) as error:
                _logger.warning(f"Operation {op_id} failed: {error}")
                self._send_error(op_id, str(error))
                return
            self._send_result(op_id, result)
            self.send({"type": GQL_COMPLETE, "id": op_id})
            return

        active = ActiveOperation(
            id=op_id,
            document=document,
            variables=variables,
            operation_name=operation_name,
            subscription=self.chat_service.subscribe(),
        )
        active.thread = threading.Thread(
            target=self._pump, args=(active,), name=f"graphql-ws-{op_id}", daemon=True
        )
        with self._ops_lock:
            self.operations[op_id] = active
        track_subscription(opened=True)
        active.thread.start()
        _logger.debug(f"Subscription {op_id} started")

    def stop_operation(self, op_id: str) -> None:
        with self._ops_lock:
            active = self.operations.pop(op_id, None)
        if active is None:
            return
        active.stop_event.set()
        active.subscription.close()
        track_subscription(opened=False)
        _logger.debug(f"Subscription {op_id} stopped")

    def stop_all(self) -> None:
        with self._ops_lock:
            op_ids = list(self.operations)
        for op_id in op_ids:
            self.stop_operation(op_id)

    def _pump(self, active: ActiveOperation) -> None:
        while not active.stop_event.is_set():
            message = active.subscription.get(timeout=_PUMP_POLL_SECONDS)
            if message is None:
                if active.subscription.closed:
                    break
                continue
            try:
                self._send_event(active, message)
            except ConnectionClosed:
                _logger.debug(f"Socket closed while delivering to subscription {active.id}")
                self.stop_operation(active.id)
                break

    def _send_event(self, active: ActiveOperation, message: Message) -> None:
        result = execute_sync(
            self.schema,
            active.document,
            root_value=message,
            context_value=self.context,
            variable_values=active.variables,
            operation_name=active.operation_name,
        )
        self._send_result(active.id, result)

    def _send_result(self, op_id: str, result) -> None:
        payload: Dict[str, Any] = {"data": result.data}
        if result.errors:
            payload["errors"] = [format_error(error, self.debug) for error in result.errors]
        self.send({"type": GQL_DATA, "id": op_id, "payload": payload})

    def _send_failed_result(self, op_id: str, errors) -> None:
        self.send({
            "type": GQL_DATA,
            "id": op_id,
            "payload": {"errors": [format_error(error, self.debug) for error in errors]},
        })
        self.send({"type": GQL_COMPLETE, "id": op_id})

    def _send_error(self, op_id: str, message: str) -> None:
        self.send({"type": GQL_ERROR, "id": op_id, "payload": {"message": message}})
