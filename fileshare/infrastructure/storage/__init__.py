"""File storage implementations."""
from fileshare.infrastructure.storage.file_sink import LocalFileSink

__all__ = ["LocalFileSink"]
