"""Chat REST API client module."""

from .client import MAX_IMAGE_BYTES, ChatApiClient, IChatApi, validate_image
from .responses import ensure_success, fetch_json, parse_json, unwrap_data

__all__ = [
    "MAX_IMAGE_BYTES",
    "ChatApiClient",
    "IChatApi",
    "validate_image",
    "ensure_success",
    "fetch_json",
    "parse_json",
    "unwrap_data",
]
