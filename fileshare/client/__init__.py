"""Console client: sender and receiver views over HTTP polling and WebSocket push."""
from fileshare.client.feed import MessageFeed
from fileshare.client.http_client import FileShareClient, GraphQLClientError
from fileshare.client.subscription_client import SubscriptionClient, websocket_url
from fileshare.client.view import ChatView, attachment_kind

__all__ = [
    "MessageFeed",
    "FileShareClient",
    "GraphQLClientError",
    "SubscriptionClient",
    "websocket_url",
    "ChatView",
    "attachment_kind",
]
