"""GraphQL resolvers, thin adapters over ChatService."""
import logging
from typing import Any, Optional

from ariadne import MutationType, QueryType, SubscriptionType
from werkzeug.datastructures import FileStorage

from fileshare.application.services.chat_service import ChatService
from fileshare.domain.entities.upload import Upload

query = QueryType()
mutation = MutationType()
subscription = SubscriptionType()

_logger = logging.getLogger(__name__)


def get_chat_service(info) -> ChatService:
    """ChatService is placed in the context by the transport that executes the operation."""
    return info.context["chat_service"]


def to_upload(file: Any) -> Optional[Upload]:
    """
    Convert a multipart file part into an Upload.

    Anything that is not a file part (e.g. a plain string sent in the JSON
    variables) is ignored and the message is stored without an attachment.
    """
    if file is None:
        return None
    if not isinstance(file, FileStorage):
        _logger.warning(f"Ignoring non-upload value for file argument: {type(file).__name__}")
        return None
    return Upload(
        stream=file.stream,
        filename=file.filename or "",
        mimetype=file.mimetype or None,
        encoding=file.headers.get("Content-Transfer-Encoding"),
    )


@query.field("messages")
def resolve_messages(_, info):
    return get_chat_service(info).list_messages()


@mutation.field("postMessage")
def resolve_post_message(_, info, sender: str, content: Optional[str] = None, file: Any = None):
    return get_chat_service(info).post_message(sender, content=content, upload=to_upload(file))


@subscription.field("messageAdded")
def resolve_message_added(message, info):
    # Root value of each subscription event is the published Message
    return message
