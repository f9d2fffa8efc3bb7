"""Application bootstrap and lifecycle management."""

import asyncio
from typing import Protocol

from .api_client import ChatApiClient, IChatApi
from .channel import IPushChannel, SocketIOChannel
from .config import ConsoleConfig
from .errors import ChannelError
from .event_bus import EventBus
from .logging_config import get_logger
from .notifier import ConsoleNotifier
from .session import ConversationSessionManager

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Owns one admin console: channel, API client, notifier and session."""

    def __init__(
        self,
        config: ConsoleConfig | None = None,
        event_bus: EventBus | None = None,
        channel: IPushChannel | None = None,
        api_client: IChatApi | None = None,
        notifier: ConsoleNotifier | None = None,
    ):
        self._config = config or ConsoleConfig.from_env()

        # Injected components are kept; the rest are built in start()
        self._event_bus = event_bus
        self._channel = channel
        self._api_client = api_client
        self._owns_api_client = api_client is None
        self._notifier = notifier
        self._session: ConversationSessionManager | None = None
        self._connect_task: asyncio.Task | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting support console")

        # 1. EventBus (no dependencies)
        if self._event_bus is None:
            self._event_bus = EventBus()

        # 2. Push channel (publishes to EventBus)
        if self._channel is None:
            self._channel = SocketIOChannel(self._event_bus)

        # 3. Chat API client
        if self._api_client is None:
            self._api_client = ChatApiClient(
                base_url=self._config.api_base_url,
                timeout=self._config.http_timeout,
            )

        # 4. Notifier
        if self._notifier is None:
            self._notifier = ConsoleNotifier()

        # 5. Session (depends on all of the above)
        self._session = ConversationSessionManager(
            channel=self._channel,
            api_client=self._api_client,
            notifier=self._notifier,
            config=self._config,
        )
        self._event_bus.subscribe_all(self._session.handle_event)
        await self._session.start()
        logger.info("Session started")

        # Connect in the background so the console API is up immediately
        self._connect_task = asyncio.create_task(self._connect())

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._connect_task:
            self._connect_task.cancel()
            try:
                await self._connect_task
            except asyncio.CancelledError:
                pass
            self._connect_task = None
        if self._session:
            await self._session.stop()
            logger.info("Session stopped")
        if self._api_client and self._owns_api_client:
            await self._api_client.close()
            logger.info("Chat API client closed")

    async def _connect(self) -> None:
        try:
            await self.session.connect()
        except ChannelError as e:
            logger.error("Push channel unavailable: %s", e)

    @property
    def config(self) -> ConsoleConfig:
        return self._config

    @property
    def session(self) -> ConversationSessionManager:
        """Get session instance."""
        if not self._session:
            raise RuntimeError("Application not started")
        return self._session

    @property
    def notifier(self) -> ConsoleNotifier:
        """Get notifier instance."""
        if not self._notifier:
            raise RuntimeError("Application not started")
        return self._notifier
