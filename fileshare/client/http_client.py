"""HTTP GraphQL client for queries and (upload) mutations."""
import json
import logging
import mimetypes
import os
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

MESSAGE_FIELDS = """
    id
    sender
    content
    file {
        filename
        url
        mimetype
    }
"""

GET_MESSAGES = f"query {{ messages {{ {MESSAGE_FIELDS} }} }}"

MESSAGE_SUBSCRIPTION = f"subscription {{ messageAdded {{ {MESSAGE_FIELDS} }} }}"

POST_MESSAGE = f"""
    mutation($sender: String!, $content: String, $file: Upload) {{
        postMessage(sender: $sender, content: $content, file: $file) {{ {MESSAGE_FIELDS} }}
    }}
"""


class GraphQLClientError(Exception):
    """The server answered with GraphQL errors."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        messages = "; ".join(str(error.get("message", error)) for error in errors)
        super().__init__(messages or "GraphQL request failed")


class FileShareClient:
    """Talks to POST /graphql with JSON bodies, or multipart bodies for uploads."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.graphql_url = f"{self.base_url}/graphql"
        self.timeout = timeout
        self._session = self._create_session()
        self._logger = logging.getLogger(__name__)

    def _create_session(self) -> requests.Session:
        """Create a requests session with connection pooling."""
        session = requests.Session()

        # Retry connection failures only, so a mutation is never sent twice
        retry_strategy = Retry(
            total=2,
            connect=2,
            read=0,
            status=0,
            backoff_factor=0.2,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=4, pool_maxsize=4)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _handle_response(self, response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            response.raise_for_status()
            raise GraphQLClientError([{"message": f"Unexpected response: {response.text[:200]}"}])

        if body.get("errors"):
            raise GraphQLClientError(body["errors"])
        response.raise_for_status()
        return body.get("data") or {}

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a query or mutation and return its ``data``.

        Raises:
            GraphQLClientError: If the response carries errors
            requests.RequestException: On transport failures
        """
        response = self._session.post(
            self.graphql_url,
            json={"query": query, "variables": variables or {}},
            timeout=self.timeout,
        )
        return self._handle_response(response)

    def fetch_messages(self) -> List[Dict[str, Any]]:
        """Fetch the full message list."""
        return self.execute(GET_MESSAGES).get("messages") or []

    def post_message(
        self,
        sender: str,
        content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Post a message, uploading ``file_path`` as its attachment if given.

        Returns:
            The created message as returned by the server
        """
        variables = {"sender": sender, "content": content, "file": None}

        if file_path is None:
            return self.execute(POST_MESSAGE, variables)["postMessage"]

        filename = os.path.basename(file_path)
        mimetype = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        operations = {"query": POST_MESSAGE, "variables": variables}
        files_map = {"0": ["variables.file"]}

        with open(file_path, "rb") as fh:
            response = self._session.post(
                self.graphql_url,
                data={"operations": json.dumps(operations), "map": json.dumps(files_map)},
                files={"0": (filename, fh, mimetype)},
                timeout=self.timeout,
            )
        self._logger.debug(f"Uploaded {filename} ({mimetype})")
        return self._handle_response(response)["postMessage"]

    def close(self) -> None:
        self._session.close()
