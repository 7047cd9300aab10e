"""Tests for ChatService."""
import io
from unittest.mock import Mock

import pytest

from fileshare.application.services.chat_service import ChatService, MessageRejected
from fileshare.domain.entities.upload import Upload
from fileshare.domain.interfaces.file_sink import FileSinkError
from fileshare.infrastructure.pubsub.memory_channel import InMemoryBroadcastChannel
from fileshare.infrastructure.repositories.message_store import InMemoryMessageStore
from fileshare.infrastructure.storage.file_sink import LocalFileSink


@pytest.fixture
def service(upload_dir):
    return ChatService(
        message_store=InMemoryMessageStore(),
        file_sink=LocalFileSink(str(upload_dir), "http://localhost:4000"),
        broadcast_channel=InMemoryBroadcastChannel(),
    )


def test_post_text_message(service):
    message = service.post_message("Alice", content="hi")

    assert message.id
    assert message.sender == "Alice"
    assert message.content == "hi"
    assert message.file is None
    assert service.list_messages() == [message]


def test_same_content_twice_gets_distinct_ids(service):
    first = service.post_message("Alice", content="hi")
    second = service.post_message("Alice", content="hi")

    assert first.id != second.id
    assert [m.id for m in service.list_messages()] == [first.id, second.id]


def test_post_with_upload(upload_dir, service):
    upload = Upload(stream=io.BytesIO(b"file body"), filename="a.txt", mimetype="text/plain")

    message = service.post_message("Bob", upload=upload)

    assert message.content is None
    assert message.file.filename == "a.txt"
    assert message.file.url == "http://localhost:4000/uploads/a.txt"
    assert (upload_dir / "a.txt").read_bytes() == b"file body"


def test_subscriber_before_post_receives_it(service):
    subscription = service.subscribe()

    message = service.post_message("Alice", content="hi")

    assert subscription.get(timeout=1) == message


def test_subscriber_after_post_does_not(service):
    service.post_message("Alice", content="hi")

    subscription = service.subscribe()

    assert subscription.get(timeout=0.05) is None


def test_empty_message_allowed_by_default(service):
    message = service.post_message("Alice")

    assert (message.content, message.file) == (None, None)
    assert len(service.list_messages()) == 1


def test_empty_message_rejected_when_required(service):
    service.require_body = True

    with pytest.raises(MessageRejected):
        service.post_message("Alice")

    assert service.list_messages() == []


def test_failed_upload_stores_and_publishes_nothing():
    sink = Mock()
    sink.save.side_effect = FileSinkError("disk full")
    channel = InMemoryBroadcastChannel()
    subscription = channel.subscribe("MESSAGE_ADDED")
    service = ChatService(InMemoryMessageStore(), sink, channel)

    with pytest.raises(FileSinkError):
        service.post_message("Alice", upload=Upload(stream=io.BytesIO(b"x"), filename="a.txt"))

    assert service.list_messages() == []
    assert subscription.get(timeout=0.05) is None
