"""Push channel backed by a socket.io client."""

from typing import Protocol

from pydantic import ValidationError
import socketio
from socketio import exceptions as socketio_exceptions

from ..errors import ChannelError
from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import (
    AdminNotification,
    ChannelErrorReceived,
    Connected,
    Disconnected,
    EventKind,
    Message,
    NewMessageReceived,
    OutboundEvent,
)

logger = get_logger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"


class IPushChannel(Protocol):
    """Bidirectional push channel to the chat server."""

    @property
    def connected(self) -> bool:
        """Whether the underlying connection is up."""
        ...

    async def connect(self, url: str) -> None:
        """Open the connection. Reconnects automatically after drops."""
        ...

    async def disconnect(self) -> None:
        """Close the connection and release it."""
        ...

    async def emit(self, event: OutboundEvent, payload: dict) -> None:
        """Send an event. Raises ChannelError when it cannot be sent."""
        ...


class SocketIOChannel:
    """Translates socket.io callbacks into typed events on the EventBus."""

    def __init__(
        self,
        event_bus: IEventBus,
        client: socketio.AsyncClient | None = None,
        wait_timeout: float = 10.0,
        retry: bool = True,
    ):
        self._event_bus = event_bus
        self._client = client or socketio.AsyncClient(reconnection=True)
        self._wait_timeout = wait_timeout
        self._retry = retry
        # The client flips .connected only after the connect handler returns,
        # so handlers that emit need a flag raised before Connected goes out.
        self._namespace_connected = False

        self._client.on(EventKind.CONNECTED.value, self._on_connect)
        self._client.on(EventKind.DISCONNECTED.value, self._on_disconnect)
        self._client.on(EventKind.NEW_MESSAGE.value, self._on_new_message)
        self._client.on(EventKind.ADMIN_NOTIFICATION.value, self._on_admin_notification)
        self._client.on(EventKind.ERROR.value, self._on_error)
        self._client.on("connect_error", self._on_connect_error)

    @property
    def connected(self) -> bool:
        return self._namespace_connected

    async def connect(self, url: str) -> None:
        logger.info("Connecting to push channel at %s", url)
        try:
            await self._client.connect(
                url,
                transports=["websocket"],
                wait_timeout=self._wait_timeout,
                retry=self._retry,
            )
        except socketio_exceptions.ConnectionError as e:
            raise ChannelError(f"Push channel connection failed: {e}") from e

    async def disconnect(self) -> None:
        self._namespace_connected = False
        await self._client.disconnect()

    async def emit(self, event: OutboundEvent, payload: dict) -> None:
        if not self.connected:
            raise ChannelError("Push channel is not connected")
        try:
            await self._client.emit(event.value, payload)
        except socketio_exceptions.SocketIOError as e:
            raise ChannelError(f"Failed to emit {event.value}: {e}") from e

    async def _on_connect(self) -> None:
        self._namespace_connected = True
        logger.info(
            "Admin connected to push channel",
            extra={"event": EventKind.CONNECTED.value},
        )
        await self._event_bus.publish(Connected())

    async def _on_disconnect(self, *args) -> None:
        self._namespace_connected = False
        reason = str(args[0]) if args else None
        logger.warning(
            "Push channel disconnected: %s",
            reason,
            extra={"event": EventKind.DISCONNECTED.value},
        )
        await self._event_bus.publish(Disconnected(reason=reason))

    async def _on_new_message(self, data) -> None:
        try:
            message = Message.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Dropping malformed new-message payload: %s",
                e,
                extra={"event": EventKind.NEW_MESSAGE.value},
            )
            return
        logger.debug(
            "Received new-message %s",
            message.id,
            extra={
                "event": EventKind.NEW_MESSAGE.value,
                "conversation_id": message.conversation_id,
            },
        )
        await self._event_bus.publish(NewMessageReceived(message=message))

    async def _on_admin_notification(self, data=None) -> None:
        payload = data if isinstance(data, dict) else {}
        await self._event_bus.publish(AdminNotification(payload=payload))

    async def _on_error(self, data=None) -> None:
        message = data.get("message") if isinstance(data, dict) else None
        logger.error(
            "Push channel error received: %s",
            data,
            extra={"event": EventKind.ERROR.value},
        )
        await self._event_bus.publish(
            ChannelErrorReceived(message=message or UNKNOWN_ERROR)
        )

    async def _on_connect_error(self, data=None) -> None:
        logger.warning("Push channel connect error: %s", data)
