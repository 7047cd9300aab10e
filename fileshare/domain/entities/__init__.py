"""Domain entities - core business objects."""
from fileshare.domain.entities.message import Message, FileDescriptor
from fileshare.domain.entities.upload import Upload

__all__ = [
    "Message",
    "FileDescriptor",
    "Upload",
]
