"""Chat service: posting, listing and streaming messages."""
import logging
from typing import List, Optional

from fileshare.domain.entities.message import Message, FileDescriptor
from fileshare.domain.entities.upload import Upload
from fileshare.domain.interfaces.broadcast_channel import IBroadcastChannel, ISubscription, MESSAGE_ADDED
from fileshare.domain.interfaces.file_sink import IFileSink
from fileshare.domain.interfaces.message_store import IMessageStore
from fileshare.middleware.monitoring import track_message_posted


class MessageRejected(ValueError):
    """Raised when a message fails the optional body requirement."""


class ChatService:
    """
    Application service behind the GraphQL resolvers.

    Depends only on domain interfaces; concrete store, sink and channel are
    injected by the ServiceContainer.
    """

    def __init__(
        self,
        message_store: IMessageStore,
        file_sink: IFileSink,
        broadcast_channel: IBroadcastChannel,
        require_body: bool = False,
    ):
        self.message_store = message_store
        self.file_sink = file_sink
        self.broadcast_channel = broadcast_channel
        self.require_body = require_body
        self._logger = logging.getLogger(__name__)

    def post_message(
        self,
        sender: str,
        content: Optional[str] = None,
        upload: Optional[Upload] = None,
    ) -> Message:
        """
        Store a new message and publish it to subscribers.

        The upload, if any, is fully written before the message is created.
        A failed write raises and nothing is stored or published.

        Args:
            sender: Display name of the author
            content: Optional text
            upload: Optional file transfer

        Returns:
            The stored message

        Raises:
            FileSinkError: If the upload cannot be written
            MessageRejected: If body enforcement is on and the message is empty
        """
        if self.require_body and not content and upload is None:
            raise MessageRejected("A message needs content or a file")

        file_data: Optional[FileDescriptor] = None
        if upload is not None:
            file_data = self.file_sink.save(
                upload.stream,
                upload.filename,
                mimetype=upload.mimetype,
                encoding=upload.encoding,
            )

        message = Message.create(sender=sender, content=content, file=file_data)
        self.message_store.append(message)
        receivers = self.broadcast_channel.publish(MESSAGE_ADDED, message)

        self._logger.info(
            f"Message {message.id} posted by {sender}"
            f"{' with file ' + file_data.filename if file_data else ''}"
            f" (delivered to {receivers} subscriber(s))"
        )
        track_message_posted(has_file=file_data is not None)
        return message

    def list_messages(self) -> List[Message]:
        """Return every message in insertion order."""
        return self.message_store.list_all()

    def subscribe(self) -> ISubscription:
        """Open a subscription receiving messages posted from now on."""
        return self.broadcast_channel.subscribe(MESSAGE_ADDED)
