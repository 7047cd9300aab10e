"""WebSocket client for the ``messageAdded`` subscription."""
import json
import logging
import threading
from typing import Any, Dict, Iterator, Optional

import simple_websocket
from simple_websocket import ConnectionClosed

from fileshare.client.http_client import MESSAGE_SUBSCRIPTION

GRAPHQL_WS = "graphql-ws"
SUBSCRIPTION_ID = "1"


def websocket_url(base_url: str) -> str:
    """http://host:port -> ws://host:port/graphql (https -> wss)."""
    base_url = base_url.rstrip("/")
    if base_url.startswith("https://"):
        base_url = "wss://" + base_url[len("https://"):]
    elif base_url.startswith("http://"):
        base_url = "ws://" + base_url[len("http://"):]
    return f"{base_url}/graphql"


class SubscriptionClient:
    """
    Speaks the graphql-ws protocol and yields each ``messageAdded`` record.

    Reconnects after a dropped or refused connection until stopped.
    """

    def __init__(
        self,
        url: str,
        query: str = MESSAGE_SUBSCRIPTION,
        reconnect: bool = True,
        reconnect_delay: float = 1.0,
        receive_timeout: float = 1.0,
    ):
        self.url = url
        self.query = query
        self.reconnect = reconnect
        self.reconnect_delay = reconnect_delay
        self.receive_timeout = receive_timeout
        self._logger = logging.getLogger(__name__)

    def connect(self):
        ws = simple_websocket.Client(self.url, subprotocols=[GRAPHQL_WS])
        ws.send(json.dumps({"type": "connection_init", "payload": {}}))
        ws.send(json.dumps({"type": "start", "id": SUBSCRIPTION_ID, "payload": {"query": self.query}}))
        return ws

    def messages(self, stop_event: Optional[threading.Event] = None) -> Iterator[Dict[str, Any]]:
        """Yield pushed messages until ``stop_event`` is set."""
        stop_event = stop_event or threading.Event()

        while not stop_event.is_set():
            try:
                ws = self.connect()
            except (OSError, ConnectionClosed) as e:
                self._logger.warning(f"Subscription connect to {self.url} failed: {e}")
            else:
                self._logger.info(f"Subscribed to messageAdded at {self.url}")
                try:
                    yield from self._receive(ws, stop_event)
                except ConnectionClosed:
                    self._logger.warning("Subscription connection closed")
                finally:
                    self._close(ws)

            if not self.reconnect:
                return
            stop_event.wait(self.reconnect_delay)

    def _receive(self, ws, stop_event: threading.Event) -> Iterator[Dict[str, Any]]:
        while not stop_event.is_set():
            raw = ws.receive(timeout=self.receive_timeout)
            if raw is None:
                continue
            try:
                frame = json.loads(raw)
            except ValueError:
                self._logger.warning(f"Ignoring non-JSON frame: {raw!r}")
                continue

            frame_type = frame.get("type")
            if frame_type == "data":
                payload = frame.get("payload") or {}
                if payload.get("errors"):
                    self._logger.warning(f"Subscription errors: {payload['errors']}")
                message = (payload.get("data") or {}).get("messageAdded")
                if message:
                    yield message
            elif frame_type in ("error", "connection_error"):
                self._logger.warning(f"Subscription error: {frame.get('payload')}")
            elif frame_type == "complete":
                return

    @staticmethod
    def _close(ws) -> None:
        try:
            ws.close()
        except ConnectionClosed:
            pass
