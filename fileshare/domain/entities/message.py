"""Message domain entities."""
import uuid
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class FileDescriptor:
    """Stored attachment: where it lives and how it was sent."""

    filename: str
    mimetype: str
    encoding: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileDescriptor":
        return cls(
            filename=data["filename"],
            mimetype=data["mimetype"],
            encoding=data["encoding"],
            url=data["url"],
        )


@dataclass(frozen=True)
class Message:
    """
    Domain entity representing a chat message.

    A message carries text content, a file attachment, or both. Instances are
    immutable once created and are never removed from the store.
    """

    id: str
    sender: str
    content: Optional[str] = None
    file: Optional[FileDescriptor] = None

    @classmethod
    def create(
        cls,
        sender: str,
        content: Optional[str] = None,
        file: Optional[FileDescriptor] = None,
    ) -> "Message":
        """Build a new message with a freshly generated identifier."""
        return cls(id=str(uuid.uuid4()), sender=sender, content=content, file=file)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sender": self.sender,
            "content": self.content,
            "file": self.file.to_dict() if self.file else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        if not isinstance(data, dict):
            raise TypeError(f"Message record must be an object, got {type(data).__name__}")
        file_data = data.get("file")
        return cls(
            id=data["id"],
            sender=data["sender"],
            content=data.get("content"),
            file=FileDescriptor.from_dict(file_data) if file_data else None,
        )
