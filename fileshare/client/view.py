"""Console rendering for the sender and receiver views."""
import sys
import threading
from typing import Any, Dict, Iterable, Optional, TextIO

ROLE_TITLES = {
    "sender": "Sender - Upload File",
    "receiver": "Receiver",
}

_MEDIA_PREFIXES = (
    ("image/", "image"),
    ("audio/", "audio"),
    ("video/", "video"),
)


def attachment_kind(mimetype: Optional[str]) -> str:
    """Media kind used to pick how an attachment is shown."""
    for prefix, kind in _MEDIA_PREFIXES:
        if (mimetype or "").startswith(prefix):
            return kind
    return "document"


def format_message(message: Dict[str, Any]) -> str:
    line = f"{message.get('sender')}:"
    if message.get("content"):
        line += f" {message['content']}"

    file_data = message.get("file")
    if file_data:
        kind = attachment_kind(file_data.get("mimetype"))
        line += f"\n    [{kind}] {file_data.get('filename')} -> {file_data.get('url')}"
    return line


def format_uploaded(file_data: Dict[str, Any]) -> str:
    return (
        "Uploaded File:\n"
        f"  Filename: {file_data.get('filename')}\n"
        f"  Type: {file_data.get('mimetype')}\n"
        f"  View / Download: {file_data.get('url')}"
    )


class ChatView:
    """Prints each message once, whichever source (poll or push) delivered it first."""

    def __init__(self, role: str, out: TextIO = sys.stdout):
        if role not in ROLE_TITLES:
            raise ValueError(f"Unknown role: {role}")
        self.role = role
        self.out = out
        self._rendered_ids = set()
        self._lock = threading.Lock()

    @property
    def title(self) -> str:
        return ROLE_TITLES[self.role]

    def show_title(self) -> None:
        self.write(self.title)

    def render(self, messages: Iterable[Dict[str, Any]]) -> int:
        """Print messages not shown before; returns how many were printed."""
        printed = 0
        with self._lock:
            for message in messages:
                message_id = message.get("id")
                if message_id in self._rendered_ids:
                    continue
                self._rendered_ids.add(message_id)
                self.out.write(format_message(message) + "\n")
                printed += 1
            self.out.flush()
        return printed

    def show_uploaded(self, file_data: Optional[Dict[str, Any]]) -> None:
        if file_data:
            self.write(format_uploaded(file_data))

    def write(self, text: str) -> None:
        with self._lock:
            self.out.write(text + "\n")
            self.out.flush()
