"""Console chat client (``fileshare-client``)."""
import argparse
import logging
import sys
import threading
from typing import Iterable, List, Optional

import requests

from fileshare.client.feed import MessageFeed
from fileshare.client.http_client import FileShareClient, GraphQLClientError
from fileshare.client.subscription_client import SubscriptionClient, websocket_url
from fileshare.client.view import ChatView
from fileshare.config.settings import Config

HELP_TEXT = "Commands: /name NAME, /upload PATH, /quit. Any other line is sent as a text message."

logger = logging.getLogger(__name__)


class ChatSession:
    """
    Runs one client view: a poller, a subscription and the command loop.

    The poller refetches the full list every ``poll_interval`` seconds and
    overwrites the feed; the subscription appends pushed records by id.
    """

    def __init__(
        self,
        client: FileShareClient,
        subscription: SubscriptionClient,
        view: ChatView,
        sender: Optional[str] = None,
        poll_interval: float = 0.5,
    ):
        self.client = client
        self.subscription = subscription
        self.view = view
        self.sender = sender
        self.poll_interval = poll_interval
        self.feed = MessageFeed()
        self.stop_event = threading.Event()
        self._threads: List[threading.Thread] = []

    def start(self) -> None:
        for target, name in ((self._poll_loop, "poller"), (self._subscribe_loop, "subscription")):
            thread = threading.Thread(target=target, name=name, daemon=True)
            thread.start()
            self._threads.append(thread)

    def stop(self) -> None:
        self.stop_event.set()
        for thread in self._threads:
            thread.join(timeout=2.0)
        self.client.close()

    def poll_once(self) -> None:
        try:
            messages = self.client.fetch_messages()
        except (requests.RequestException, GraphQLClientError) as e:
            logger.warning(f"Error fetching messages: {e}")
            return
        self.feed.replace(messages)
        self.view.render(self.feed.snapshot())

    def _poll_loop(self) -> None:
        while not self.stop_event.is_set():
            self.poll_once()
            self.stop_event.wait(self.poll_interval)

    def _subscribe_loop(self) -> None:
        for message in self.subscription.messages(self.stop_event):
            if self.feed.add(message):
                self.view.render(self.feed.snapshot())

    def upload(self, file_path: str) -> None:
        if not self.sender:
            self.view.write("Set your name first with /name NAME")
            return
        if not file_path:
            self.view.write("Usage: /upload PATH")
            return
        try:
            message = self.client.post_message(self.sender, content=None, file_path=file_path)
        except (OSError, requests.RequestException, GraphQLClientError) as e:
            logger.error(f"Upload failed: {e}")
            return
        self.view.show_uploaded(message.get("file"))

    def send_text(self, text: str) -> None:
        if not self.sender:
            self.view.write("Set your name first with /name NAME")
            return
        try:
            self.client.post_message(self.sender, content=text)
        except (requests.RequestException, GraphQLClientError) as e:
            logger.error(f"Sending message failed: {e}")

    def handle_line(self, line: str) -> bool:
        """Process one input line; returns False when the user quits."""
        line = line.strip()
        if not line:
            return True
        if line == "/quit":
            return False
        if line == "/help":
            self.view.write(HELP_TEXT)
        elif line.startswith("/name"):
            self.sender = line[len("/name"):].strip() or None
        elif line.startswith("/upload"):
            self.upload(line[len("/upload"):].strip())
        else:
            self.send_text(line)
        return True

    def run(self, lines: Iterable[str]) -> None:
        self.view.show_title()
        self.view.write(HELP_TEXT)
        self.start()
        try:
            for line in lines:
                if not self.handle_line(line):
                    break
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fileshare-client", description="File-sharing chat client")
    parser.add_argument("--role", choices=["sender", "receiver"], default="receiver",
                        help="Which view to run (default: receiver)")
    parser.add_argument("--name", default=None, help="Sender name used for posted messages")
    parser.add_argument("--server", default=Config.CLIENT_SERVER_URL,
                        help=f"Server base URL (default: {Config.CLIENT_SERVER_URL})")
    parser.add_argument("--poll-interval", type=float, default=Config.CLIENT_POLL_INTERVAL,
                        help=f"Seconds between message list refreshes (default: {Config.CLIENT_POLL_INTERVAL})")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    session = ChatSession(
        client=FileShareClient(args.server),
        subscription=SubscriptionClient(websocket_url(args.server)),
        view=ChatView(args.role),
        sender=args.name,
        poll_interval=args.poll_interval,
    )
    session.run(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())
