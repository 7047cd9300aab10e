"""Shared fixtures: a fresh app, container and upload directory per test."""
import json
import queue

import pytest
from simple_websocket import ConnectionClosed

from fileshare import create_app
from fileshare.config.settings import TestingConfig
from fileshare.infrastructure.service_container import ServiceContainer


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def config_class(upload_dir):
    class _TestConfig(TestingConfig):
        UPLOAD_DIR = str(upload_dir)
        PUBLIC_URL = "http://localhost:4000"
        WS_KEEPALIVE_INTERVAL = 0.05

    return _TestConfig


@pytest.fixture
def app(config_class):
    ServiceContainer.reset()
    app = create_app(config_class)
    yield app
    ServiceContainer.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def chat_service(app):
    return app.config["service_container"].get_chat_service()


class FakeWebSocket:
    """Stand-in for simple_websocket.Server: scripted input, recorded output."""

    def __init__(self, incoming=None):
        self.incoming = queue.Queue()
        for frame in incoming or []:
            self.push(frame)
        self.sent = queue.Queue()
        self.closed = False

    def push(self, frame):
        self.incoming.put(frame if isinstance(frame, str) else json.dumps(frame))

    def hang_up(self):
        self.incoming.put(None)

    def receive(self, timeout=None):
        try:
            frame = self.incoming.get(timeout=timeout)
        except queue.Empty:
            return None
        if frame is None:
            self.closed = True
            raise ConnectionClosed()
        return frame

    def send(self, data):
        if self.closed:
            raise ConnectionClosed()
        self.sent.put(json.loads(data))

    def close(self):
        self.closed = True

    def next_sent(self, timeout=2.0):
        return self.sent.get(timeout=timeout)

    def next_of_type(self, frame_type, timeout=2.0):
        """Skip keep-alives and other frames until one of the given type arrives."""
        while True:
            frame = self.next_sent(timeout=timeout)
            if frame["type"] == frame_type:
                return frame


@pytest.fixture
def fake_ws():
    return FakeWebSocket()
