"""Local disk file sink for uploaded attachments."""
import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional
from urllib.parse import quote

from fileshare.domain.entities.message import FileDescriptor
from fileshare.domain.interfaces.file_sink import IFileSink, FileSinkError
from fileshare.middleware.monitoring import track_upload

DEFAULT_MIMETYPE = "application/octet-stream"
DEFAULT_ENCODING = "7bit"
CHUNK_SIZE = 64 * 1024


class LocalFileSink(IFileSink):
    """
    Writes uploads into a single directory, named by their original filename.

    Files with the same name overwrite each other. Only the final path
    component of the supplied name is used, so writes stay inside the
    upload directory.
    """

    def __init__(self, upload_dir: str, public_url: str):
        """
        Args:
            upload_dir: Directory uploads are written to (created if missing)
            public_url: Base URL the server is reachable at
        """
        self.upload_dir = Path(upload_dir).resolve()
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.public_url = public_url.rstrip("/")
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def stored_name(filename: str) -> str:
        """Reduce a client-supplied filename to its last path component."""
        name = PurePosixPath((filename or "").replace("\\", "/")).name
        if name in ("", ".", ".."):
            raise FileSinkError(f"Invalid upload filename: {filename!r}")
        return name

    def url_for(self, name: str) -> str:
        return f"{self.public_url}/uploads/{quote(name)}"

    def save(
        self,
        stream: BinaryIO,
        filename: str,
        mimetype: Optional[str] = None,
        encoding: Optional[str] = None,
    ) -> FileDescriptor:
        name = self.stored_name(filename)
        target = self.upload_dir / name

        try:
            with open(target, "wb") as out:
                shutil.copyfileobj(stream, out, CHUNK_SIZE)
                size = out.tell()
        except OSError as e:
            self._logger.error(f"Failed to write upload {name}: {e}", exc_info=True)
            raise FileSinkError(f"Could not save file {name}: {e}") from e

        self._logger.info(f"Saved upload {name} ({size} bytes) to {target}")
        track_upload(size)

        return FileDescriptor(
            filename=name,
            mimetype=mimetype or DEFAULT_MIMETYPE,
            encoding=encoding or DEFAULT_ENCODING,
            url=self.url_for(name),
        )

    def resolve(self, filename: str) -> Optional[str]:
        try:
            name = self.stored_name(filename)
        except FileSinkError:
            return None
        if name != filename:
            return None
        path = self.upload_dir / name
        return str(path) if path.is_file() else None

    def is_writable(self) -> bool:
        """Check that the upload directory exists and accepts new files."""
        probe = self.upload_dir / ".write-check"
        try:
            probe.touch()
            probe.unlink()
            return True
        except OSError:
            return False
