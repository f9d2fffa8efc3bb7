"""Tests for the chat REST API client."""

import json

import httpx
import pytest

from support_console.api_client import MAX_IMAGE_BYTES, ChatApiClient
from support_console.errors import (
    ApiError,
    InvalidInputError,
    MalformedResponseError,
    TransportError,
)
from support_console.models import ConversationStatus

CONVERSATION = {
    "id": 1,
    "userId": 10,
    "status": "OPEN",
    "lastMessageAt": "2024-01-01T12:00:00.000Z",
    "unreadCount": 2,
    "user": {"id": 10, "email": "user@example.com"},
    "messages": [],
    "_count": {"messages": 4},
}

MESSAGE = {
    "id": 5,
    "senderId": 10,
    "senderType": "user",
    "content": "hello",
    "imageUrl": None,
    "createdAt": "2024-01-01T12:00:00.000Z",
    "isRead": True,
}


def json_response(body, status_code=200) -> httpx.Response:
    return httpx.Response(status_code, json=body)


def make_client(handler) -> ChatApiClient:
    transport = httpx.MockTransport(handler)
    return ChatApiClient(
        client=httpx.AsyncClient(transport=transport, base_url="http://api.test")
    )


class TestListConversations:
    """Tests for list_conversations()."""

    @pytest.mark.asyncio
    async def test_parses_envelope(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return json_response({"data": [CONVERSATION]})

        client = make_client(handler)
        conversations = await client.list_conversations(ConversationStatus.CLOSED)

        assert requests[0].url.path == "/api/chat/conversations"
        assert requests[0].url.params["status"] == "CLOSED"
        assert len(conversations) == 1
        assert conversations[0].unread_count == 2
        assert conversations[0].message_count == 4

    @pytest.mark.asyncio
    async def test_non_json_error_response(self):
        """Test that an HTML 500 page raises ApiError with a body snippet."""

        def handler(request):
            return httpx.Response(
                500,
                headers={"content-type": "text/html"},
                text="<html>" + "x" * 500 + "</html>",
            )

        client = make_client(handler)
        with pytest.raises(ApiError) as exc_info:
            await client.list_conversations(ConversationStatus.OPEN)

        assert exc_info.value.status_code == 500
        assert len(exc_info.value.message) == 200

    @pytest.mark.asyncio
    async def test_json_error_body_is_surfaced(self):
        def handler(request):
            return json_response({"error": "Unauthorized"}, status_code=401)

        client = make_client(handler)
        with pytest.raises(ApiError, match="Unauthorized"):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_error_without_body_uses_status(self):
        def handler(request):
            return httpx.Response(503)

        client = make_client(handler)
        with pytest.raises(ApiError, match="HTTP 503: Service Unavailable"):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_non_json_success_is_malformed(self):
        def handler(request):
            return httpx.Response(
                200, headers={"content-type": "text/html"}, text="<html></html>"
            )

        client = make_client(handler)
        with pytest.raises(MalformedResponseError, match="Expected JSON"):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_empty_body_is_malformed(self):
        def handler(request):
            return httpx.Response(
                200, headers={"content-type": "application/json"}, content=b"  "
            )

        client = make_client(handler)
        with pytest.raises(MalformedResponseError, match="empty"):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(self):
        def handler(request):
            return httpx.Response(
                200, headers={"content-type": "application/json"}, content=b"{data:"
            )

        client = make_client(handler)
        with pytest.raises(MalformedResponseError, match="Invalid JSON"):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_missing_envelope_is_malformed(self):
        def handler(request):
            return json_response([CONVERSATION])

        client = make_client(handler)
        with pytest.raises(MalformedResponseError, match="data envelope"):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_invalid_items_are_malformed(self):
        def handler(request):
            return json_response({"data": [{"id": "not-a-conversation"}]})

        client = make_client(handler)
        with pytest.raises(MalformedResponseError):
            await client.list_conversations(ConversationStatus.OPEN)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError):
            await client.list_conversations(ConversationStatus.OPEN)


class TestListMessages:
    """Tests for list_messages()."""

    @pytest.mark.asyncio
    async def test_passes_conversation_and_limit(self):
        requests = []

        def handler(request):
            requests.append(request)
            return json_response({"data": [MESSAGE]})

        client = make_client(handler)
        messages = await client.list_messages(42, limit=50)

        assert requests[0].url.params["conversationId"] == "42"
        assert requests[0].url.params["limit"] == "50"
        assert messages[0].content == "hello"


class TestUploadImage:
    """Tests for upload_image()."""

    @pytest.mark.asyncio
    async def test_uploads_multipart_image_field(self):
        requests = []

        def handler(request):
            requests.append(request)
            return json_response({"data": {"imageUrl": "/uploads/chat/a.png"}})

        client = make_client(handler)
        url = await client.upload_image("a.png", b"\x89PNG", "image/png")

        assert url == "/uploads/chat/a.png"
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/api/chat/upload-image"
        body = requests[0].read()
        assert b'name="image"' in body
        assert b'filename="a.png"' in body

    @pytest.mark.asyncio
    async def test_rejects_non_image_without_request(self):
        requests = []

        def handler(request):
            requests.append(request)
            return json_response({"data": {}})

        client = make_client(handler)
        with pytest.raises(InvalidInputError, match="image file"):
            await client.upload_image("notes.txt", b"text", "text/plain")
        assert requests == []

    @pytest.mark.asyncio
    async def test_rejects_oversized_image(self):
        client = make_client(lambda request: json_response({"data": {}}))
        with pytest.raises(InvalidInputError, match="5MB"):
            await client.upload_image("big.png", b"0" * (MAX_IMAGE_BYTES + 1), "image/png")

    @pytest.mark.asyncio
    async def test_missing_image_url_is_malformed(self):
        def handler(request):
            return httpx.Response(
                200,
                headers={"content-type": "application/json"},
                content=json.dumps({"data": {}}).encode(),
            )

        client = make_client(handler)
        with pytest.raises(MalformedResponseError, match="imageUrl"):
            await client.upload_image("a.png", b"\x89PNG", "image/png")
