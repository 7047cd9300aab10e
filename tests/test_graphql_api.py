"""End-to-end tests of the HTTP surface through Flask's test client."""
import io
import json
from urllib.parse import urlparse

from fileshare import ROOT_MESSAGE

MESSAGE_FIELDS = "id sender content file { filename mimetype encoding url }"
GET_MESSAGES = f"query {{ messages {{ {MESSAGE_FIELDS} }} }}"
POST_MESSAGE = f"""
    mutation($sender: String!, $content: String, $file: Upload) {{
        postMessage(sender: $sender, content: $content, file: $file) {{ {MESSAGE_FIELDS} }}
    }}
"""


def run_graphql(client, query, variables=None):
    return client.post("/graphql", json={"query": query, "variables": variables or {}})


def post_message(client, sender, content=None):
    response = run_graphql(client, POST_MESSAGE, {"sender": sender, "content": content})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["data"]["postMessage"]


def upload_file(client, sender, filename, body, mimetype="text/plain"):
    operations = {"query": POST_MESSAGE, "variables": {"sender": sender, "content": None, "file": None}}
    data = {
        "operations": json.dumps(operations),
        "map": json.dumps({"0": ["variables.file"]}),
        "0": (io.BytesIO(body), filename, mimetype),
    }
    return client.post("/graphql", data=data, content_type="multipart/form-data")


def fetch_messages(client):
    response = run_graphql(client, GET_MESSAGES)
    assert response.status_code == 200, response.get_json()
    return response.get_json()["data"]["messages"]


def test_root_liveness_string(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.get_data(as_text=True) == ROOT_MESSAGE


def test_no_messages_yet(client):
    assert fetch_messages(client) == []


def test_post_text_message(client):
    message = post_message(client, "Alice", "hi")

    assert message["id"]
    assert message["sender"] == "Alice"
    assert message["content"] == "hi"
    assert message["file"] is None


def test_repeated_posts_are_distinct_and_ordered(client):
    first = post_message(client, "Alice", "hi")
    second = post_message(client, "Alice", "hi")

    assert first["id"] != second["id"]
    assert [m["id"] for m in fetch_messages(client)] == [first["id"], second["id"]]


def test_content_is_optional(client):
    message = post_message(client, "Alice")

    assert message["content"] is None
    assert message["file"] is None


def test_upload_is_served_back_unchanged(client, upload_dir):
    body = b"exact bytes \x00\x01\x02"

    response = upload_file(client, "Bob", "a.txt", body)

    assert response.status_code == 200, response.get_json()
    file_data = response.get_json()["data"]["postMessage"]["file"]
    assert file_data["filename"] == "a.txt"
    assert file_data["mimetype"] == "text/plain"
    assert file_data["encoding"] == "7bit"
    assert file_data["url"] == "http://localhost:4000/uploads/a.txt"

    download = client.get(urlparse(file_data["url"]).path)
    assert download.status_code == 200
    assert download.data == body


def test_uploaded_message_appears_in_query(client):
    upload_file(client, "Bob", "photo.png", b"\x89PNG", mimetype="image/png")

    messages = fetch_messages(client)

    assert len(messages) == 1
    assert messages[0]["sender"] == "Bob"
    assert messages[0]["file"]["mimetype"] == "image/png"


def test_missing_upload_returns_404(client):
    assert client.get("/uploads/nope.txt").status_code == 404


def test_missing_sender_is_a_validation_error(client):
    response = run_graphql(client, "mutation { postMessage(content: \"hi\") { id } }")

    assert response.status_code == 400
    assert response.get_json()["errors"]
    assert fetch_messages(client) == []


def test_subscription_over_http_is_rejected(client):
    response = run_graphql(client, "subscription { messageAdded { id } }")

    assert response.status_code == 400
    assert response.get_json()["errors"]


def test_non_json_body_is_rejected(client):
    response = client.post("/graphql", data="not json", content_type="text/plain")

    assert response.status_code == 400
    assert response.get_json()["errors"][0]["message"]


def test_bad_multipart_operations_is_rejected(client):
    response = client.post(
        "/graphql",
        data={"operations": "{broken", "map": "{}"},
        content_type="multipart/form-data",
    )

    assert response.status_code == 400


def test_write_failure_surfaces_as_graphql_error(client, upload_dir):
    (upload_dir / "taken").mkdir()

    response = upload_file(client, "Bob", "taken", b"data")

    body = response.get_json()
    assert body["data"]["postMessage"] is None
    assert body["errors"]
    assert fetch_messages(client) == []


def test_empty_message_rejected_when_body_required(app, client, chat_service):
    chat_service.require_body = True

    response = run_graphql(client, POST_MESSAGE, {"sender": "Alice"})

    body = response.get_json()
    assert body["data"]["postMessage"] is None
    assert "content or a file" in body["errors"][0]["message"]


def test_explorer_page(client):
    response = client.get("/graphql")

    assert response.status_code == 200
    assert b"<html" in response.data.lower()


def test_health_endpoints(client):
    assert client.get("/health").get_json()["status"] == "healthy"
    assert client.get("/health/live").get_json()["status"] == "alive"

    ready = client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.get_json()["checks"] == {"uploads": True, "overall": True}


def test_unknown_route_uses_json_error(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.get_json() == {"status": "error", "message": "Resource not found"}


def test_upload_route_only_serves_stored_names(client, upload_dir):
    upload_file(client, "Bob", "a.txt", b"data")
    (upload_dir / "nested").mkdir()
    (upload_dir / "nested" / "a.txt").write_bytes(b"hidden")

    assert client.get("/uploads/a.txt").data == b"data"
    assert client.get("/uploads/nested/a.txt").status_code == 404
    assert client.get("/uploads/nested").status_code == 404
