"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_PATH = LOGS_DIR / "console.log"

PRODUCTION_SOCKET_URL = "https://app-trader.railway.internal"
DEVELOPMENT_SOCKET_URL = "http://localhost:3000"
DEFAULT_API_BASE_URL = "http://localhost:4321"


def resolve_socket_url(
    override: str | None = None,
    environment: str | None = None,
) -> str:
    """Resolve the push-channel URL: explicit override, else per-environment default."""
    if override:
        return override

    if (environment or "").lower() == "production":
        return PRODUCTION_SOCKET_URL
    return DEVELOPMENT_SOCKET_URL


def resolve_image_url(image_url: str, main_app_url: str) -> str:
    """Make an uploaded image path loadable from the console."""
    if image_url.startswith("http"):
        return image_url
    if image_url.startswith("/uploads/"):
        return f"{main_app_url.rstrip('/')}{image_url}"
    return image_url


@dataclass
class ConsoleConfig:
    """Runtime settings for the console."""

    socket_url: str = DEVELOPMENT_SOCKET_URL
    api_base_url: str = DEFAULT_API_BASE_URL
    main_app_url: str = DEFAULT_API_BASE_URL
    admin_sender_id: int = 0
    refresh_interval: float = 5.0  # seconds
    message_history_limit: int = 50
    reconcile_tolerance: float = 5.0  # seconds
    scroll_delay: float = 0.1  # seconds
    http_timeout: float = 10.0
    api_host: str = "localhost"
    api_port: int = 8000

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Build config from environment variables."""
        return cls(
            socket_url=resolve_socket_url(
                os.getenv("SOCKET_URL"), os.getenv("APP_ENV")
            ),
            api_base_url=os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL),
            main_app_url=os.getenv("MAIN_APP_URL", DEFAULT_API_BASE_URL),
            admin_sender_id=int(os.getenv("ADMIN_SENDER_ID", "0")),
            refresh_interval=float(os.getenv("CONVERSATION_REFRESH_INTERVAL", "5")),
            message_history_limit=int(os.getenv("MESSAGE_HISTORY_LIMIT", "50")),
            reconcile_tolerance=float(os.getenv("RECONCILE_TOLERANCE_SECONDS", "5")),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=int(os.getenv("API_PORT", "8000")),
        )
