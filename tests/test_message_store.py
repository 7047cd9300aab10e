"""Tests for message store implementations."""
import json
from unittest.mock import Mock

import pytest

from fileshare.domain.entities.message import FileDescriptor, Message
from fileshare.infrastructure.repositories.message_store import InMemoryMessageStore, RedisMessageStore


class TestInMemoryMessageStore:

    def test_empty_store_lists_nothing(self):
        store = InMemoryMessageStore()

        assert store.list_all() == []

    def test_keeps_insertion_order(self):
        store = InMemoryMessageStore()
        first = Message.create("Alice", "one")
        second = Message.create("Bob", "two")

        store.append(first)
        store.append(second)

        assert store.list_all() == [first, second]

    def test_list_all_returns_a_copy(self):
        store = InMemoryMessageStore()
        store.append(Message.create("Alice", "hi"))

        snapshot = store.list_all()
        snapshot.clear()

        assert len(store.list_all()) == 1


class TestRedisMessageStore:

    def test_requires_a_client(self):
        with pytest.raises(RuntimeError):
            RedisMessageStore(None)

    def test_append_pushes_json_to_prefixed_key(self):
        redis_client = Mock()
        redis_client.rpush.return_value = 1
        store = RedisMessageStore(redis_client, key_prefix="test:")
        message = Message.create("Alice", "hi")

        store.append(message)

        key, payload = redis_client.rpush.call_args[0]
        assert key == "test:messages"
        assert json.loads(payload) == message.to_dict()

    def test_list_all_decodes_entries_in_order(self):
        file_data = FileDescriptor("a.txt", "text/plain", "7bit", "http://localhost:4000/uploads/a.txt")
        first = Message.create("Alice", "hi")
        second = Message.create("Bob", None, file_data)
        redis_client = Mock()
        redis_client.lrange.return_value = [json.dumps(first.to_dict()), json.dumps(second.to_dict())]

        store = RedisMessageStore(redis_client)

        assert store.list_all() == [first, second]
        redis_client.lrange.assert_called_once_with("fileshare:messages", 0, -1)

    def test_unreadable_entries_are_skipped(self):
        good = Message.create("Alice", "hi")
        redis_client = Mock()
        redis_client.lrange.return_value = ["not json", json.dumps(good.to_dict())]

        store = RedisMessageStore(redis_client)

        assert store.list_all() == [good]

    @pytest.mark.parametrize("raw", ["[1, 2]", "42", "\"text\"", "null"])
    def test_json_that_is_not_an_object_is_skipped(self, raw):
        good = Message.create("Alice", "hi")
        redis_client = Mock()
        redis_client.lrange.return_value = [raw, json.dumps(good.to_dict())]

        assert RedisMessageStore(redis_client).list_all() == [good]
