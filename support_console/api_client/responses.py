"""Defensive response handling for the chat API."""

import json
from typing import Any

import httpx

from ..errors import ApiError, MalformedResponseError, TransportError

ERROR_SNIPPET_LENGTH = 200


def ensure_success(response: httpx.Response) -> httpx.Response:
    """Raise ApiError for non-2xx responses, with the backend's message when it sent one."""
    if response.is_success:
        return response

    message = f"HTTP {response.status_code}: {response.reason_phrase}"
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            message = str(body["error"])
    elif response.text:
        message = response.text[:ERROR_SNIPPET_LENGTH]

    raise ApiError(response.status_code, message)


def parse_json(response: httpx.Response) -> Any:
    """Parse a JSON body, refusing non-JSON content types and empty bodies."""
    content_type = response.headers.get("content-type")
    if not content_type or "application/json" not in content_type:
        raise MalformedResponseError(
            f"Expected JSON but got {content_type}. "
            f"Response: {response.text[:ERROR_SNIPPET_LENGTH]}"
        )

    if response.headers.get("content-length") == "0":
        raise MalformedResponseError("Response is empty")

    text = response.text
    if not text or not text.strip():
        raise MalformedResponseError("Response body is empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Invalid JSON response: {e}") from e


def unwrap_data(body: Any) -> Any:
    """Return the `data` member of a `{data: ...}` envelope."""
    if not isinstance(body, dict) or "data" not in body:
        raise MalformedResponseError("Response has no data envelope")
    return body["data"]


async def fetch_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs,
) -> Any:
    """Send a request and return its parsed, unwrapped JSON data."""
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.RequestError as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    ensure_success(response)
    return unwrap_data(parse_json(response))
