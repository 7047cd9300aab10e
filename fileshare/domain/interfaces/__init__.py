"""Domain interfaces following Dependency Inversion Principle."""

from fileshare.domain.interfaces.message_store import IMessageStore
from fileshare.domain.interfaces.broadcast_channel import IBroadcastChannel, ISubscription, MESSAGE_ADDED
from fileshare.domain.interfaces.file_sink import IFileSink, FileSinkError

__all__ = [
    "IMessageStore",
    "IBroadcastChannel",
    "ISubscription",
    "IFileSink",
    "FileSinkError",
    "MESSAGE_ADDED",
]
