"""Upload value object handed from the transport layer to the domain."""
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass
class Upload:
    """An in-flight file transfer: a readable byte stream plus its metadata."""

    stream: BinaryIO
    filename: str
    mimetype: Optional[str] = None
    encoding: Optional[str] = None
