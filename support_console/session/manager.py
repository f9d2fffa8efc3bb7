"""Conversation session manager: live view of the selected conversation."""

import asyncio
from datetime import timedelta
from typing import Coroutine, Protocol

from ..api_client import IChatApi, validate_image
from ..channel import IPushChannel
from ..config import ConsoleConfig
from ..errors import ChannelError, ConsoleError, InvalidInputError, SessionNotReadyError
from ..logging_config import get_logger
from ..models import (
    AdminNotification,
    ChannelErrorReceived,
    Connected,
    ConnectionState,
    Conversation,
    ConversationStatus,
    Disconnected,
    InboundEvent,
    JoinConversation,
    Message,
    NewMessageReceived,
    OutboundEvent,
    SendMessage,
    SessionState,
    make_provisional_message,
)
from ..notifier import INotifier
from .reconcile import ReconcileOutcome, find_provisional_match, reconcile

logger = get_logger(__name__)


class ISessionManager(Protocol):
    """Live view of one conversation thread plus the conversation list."""

    async def start(self) -> None:
        """Start the periodic conversation-list refresh."""
        ...

    async def stop(self) -> None:
        """Cancel the refresh timer and close the push channel."""
        ...

    async def connect(self) -> None:
        """Open the push channel."""
        ...

    async def select_conversation(self, conversation_id: int) -> list[Message]:
        """Make a conversation active, join its room, reload its history."""
        ...

    async def send_message(
        self, content: str | None = None, image_url: str | None = None
    ) -> Message:
        """Optimistically append an admin message and emit it."""
        ...

    async def load_conversations(
        self, status_filter: ConversationStatus | None = None
    ) -> bool:
        """Replace the cached conversation list."""
        ...

    async def handle_event(self, event: InboundEvent) -> None:
        """Apply one inbound push-channel event."""
        ...


class ConversationSessionManager:
    """Owns selection, message thread and reconciliation for one admin console."""

    def __init__(
        self,
        channel: IPushChannel,
        api_client: IChatApi,
        notifier: INotifier,
        config: ConsoleConfig | None = None,
    ):
        self._channel = channel
        self._api = api_client
        self._notifier = notifier
        self._config = config or ConsoleConfig()
        self._tolerance = timedelta(seconds=self._config.reconcile_tolerance)

        self._state = SessionState()
        self._selection_token = 0
        self._conversations_seq = 0
        self._conversations_applied_seq = 0
        self._pending_join = False

        self._running = False
        self._refresh_task: asyncio.Task | None = None
        self._background: set[asyncio.Task] = set()

    # State accessors

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def messages(self) -> list[Message]:
        return list(self._state.messages)

    @property
    def conversations(self) -> list[Conversation]:
        return list(self._state.conversations)

    @property
    def selected_conversation_id(self) -> int | None:
        return self._state.selected_conversation_id

    @property
    def unread_total(self) -> int:
        return self._state.unread_total

    @property
    def is_connected(self) -> bool:
        return (
            self._state.connection is ConnectionState.CONNECTED
            and self._channel.connected
        )

    @property
    def pending_join(self) -> bool:
        return self._pending_join

    # Lifecycle

    async def start(self) -> None:
        """Start the periodic conversation-list refresh."""
        if self._running:
            return
        logger.info("Starting conversation session")
        self._running = True
        self._refresh_task = asyncio.create_task(self._refresh_loop())

    async def stop(self) -> None:
        """Cancel the refresh timer and background reloads, close the channel."""
        logger.info("Stopping conversation session")
        self._running = False

        tasks = list(self._background)
        if self._refresh_task:
            tasks.append(self._refresh_task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._refresh_task = None

        try:
            await self._channel.disconnect()
        except Exception as e:
            logger.error("Error closing push channel: %s", e)
        self._state.connection = ConnectionState.DISCONNECTED

    async def wait_idle(self) -> None:
        """Wait for fire-and-forget conversation reloads to settle."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def connect(self) -> None:
        """Open the push channel. Room re-join happens on the connect event."""
        if self._state.connection is not ConnectionState.DISCONNECTED:
            return

        self._state.connection = ConnectionState.CONNECTING
        try:
            await self._channel.connect(self._config.socket_url)
        except ChannelError as e:
            self._state.connection = ConnectionState.DISCONNECTED
            self._notifier.show_error(str(e))
            raise

    # Inbound events

    async def handle_event(self, event: InboundEvent) -> None:
        """Apply one inbound push-channel event."""
        if isinstance(event, Connected):
            await self.on_connect()
        elif isinstance(event, Disconnected):
            await self.on_disconnect(event.reason)
        elif isinstance(event, NewMessageReceived):
            await self.on_message_received(event.message)
        elif isinstance(event, AdminNotification):
            await self.on_admin_notification(event.payload)
        elif isinstance(event, ChannelErrorReceived):
            await self.on_channel_error(event.message)
        else:
            logger.warning("Unhandled channel event: %r", event)

    async def on_connect(self) -> None:
        self._state.connection = ConnectionState.CONNECTED
        conversation_id = self._state.selected_conversation_id
        if conversation_id is not None:
            # Covers both a deferred join and re-join after reconnect
            await self._join(conversation_id)
        else:
            self._pending_join = False

    async def on_disconnect(self, reason: str | None = None) -> None:
        logger.warning("Push channel dropped (%s), waiting for reconnect", reason)
        self._state.connection = ConnectionState.DISCONNECTED
        if self._state.selected_conversation_id is not None:
            self._pending_join = True

    async def on_message_received(self, message: Message) -> ReconcileOutcome | None:
        """Reconcile a pushed message into the thread if it belongs to it."""
        self._spawn(self.load_conversations())

        current = self._state.selected_conversation_id
        if current is None or message.conversation_id != current:
            logger.debug(
                "Message %s is for another conversation (current: %s)",
                message.id,
                current,
                extra={"conversation_id": message.conversation_id},
            )
            return None

        updated, outcome = reconcile(self._state.messages, message, self._tolerance)
        if outcome is ReconcileOutcome.DUPLICATE:
            logger.debug("Message %s already present, skipping", message.id)
            return outcome

        self._state.messages = updated
        self._schedule_scroll()
        return outcome

    async def on_admin_notification(self, payload: dict) -> None:
        self._state.unread_total += 1
        self._notifier.notify_new_message(self._state.unread_total)
        self._notifier.update_badge(self._state.unread_total)
        self._spawn(self.load_conversations())

    async def on_channel_error(self, message: str) -> None:
        self._notifier.show_error(message)

    # Commands

    async def select_conversation(self, conversation_id: int) -> list[Message]:
        """Make a conversation active, join its room, reload its history."""
        self._selection_token += 1
        self._state.selected_conversation_id = conversation_id
        self._state.messages = []

        if self.is_connected:
            await self._join(conversation_id)
        else:
            logger.warning(
                "Push channel not connected, will join when connected",
                extra={"conversation_id": conversation_id},
            )
            self._pending_join = True

        await self.load_messages(conversation_id)
        return self.messages

    async def load_messages(self, conversation_id: int) -> bool:
        """Reload history; a response for a superseded selection is dropped."""
        token = self._selection_token
        try:
            history = await self._api.list_messages(
                conversation_id, limit=self._config.message_history_limit
            )
        except ConsoleError as e:
            logger.error(
                "Failed to load messages: %s",
                e,
                extra={"conversation_id": conversation_id},
            )
            return False

        if (
            token != self._selection_token
            or self._state.selected_conversation_id != conversation_id
        ):
            logger.info(
                "Discarding stale history response",
                extra={"conversation_id": conversation_id},
            )
            return False

        # Keep anything pushed or sent while the history was in flight
        merged = list(history)
        for message in self._state.messages:
            if message.provisional and any(
                find_provisional_match([message], confirmed, self._tolerance) is not None
                for confirmed in history
            ):
                continue
            merged, _ = reconcile(merged, message, self._tolerance)
        self._state.messages = merged
        self._schedule_scroll()
        return True

    async def send_message(
        self, content: str | None = None, image_url: str | None = None
    ) -> Message:
        """Optimistically append an admin message and emit it."""
        if (content is None) == (image_url is None):
            raise InvalidInputError("Provide either message text or an image URL")
        if content is not None:
            content = content.strip()
            if not content:
                raise InvalidInputError("Message text is empty")
        elif not image_url.strip():
            raise InvalidInputError("Image URL is empty")

        conversation_id = self._require_ready()
        await self.retry_pending_join()
        provisional = make_provisional_message(
            self._config.admin_sender_id, content=content, image_url=image_url
        )
        self._state.messages = [*self._state.messages, provisional]
        self._schedule_scroll()

        outbound = SendMessage(
            conversation_id=conversation_id,
            sender_id=self._config.admin_sender_id,
            content=content,
            image_url=image_url,
        )
        try:
            await self._channel.emit(OutboundEvent.SEND_MESSAGE, outbound.to_payload())
        except ChannelError as e:
            logger.error(
                "Error sending message: %s",
                e,
                extra={"conversation_id": conversation_id},
            )
            self._state.messages = [
                m for m in self._state.messages if m.id != provisional.id
            ]
            raise

        return provisional

    async def send_image(
        self, filename: str, content: bytes, content_type: str | None
    ) -> Message:
        """Validate, upload and send an image attachment."""
        self._require_ready()
        validate_image(filename, content, content_type)
        image_url = await self._api.upload_image(filename, content, content_type)
        return await self.send_message(image_url=image_url)

    async def load_conversations(
        self, status_filter: ConversationStatus | None = None
    ) -> bool:
        """Replace the cached conversation list and recompute the unread total.

        A given filter becomes the current one. Responses for a filter that
        is no longer current, or older than one already applied, are dropped.
        Failures leave the previous list untouched.
        """
        if status_filter is not None:
            self._state.status_filter = status_filter
        status = self._state.status_filter

        self._conversations_seq += 1
        seq = self._conversations_seq
        try:
            conversations = await self._api.list_conversations(status)
        except ConsoleError as e:
            logger.error("Failed to load conversations: %s", e)
            return False

        if (
            status != self._state.status_filter
            or seq < self._conversations_applied_seq
        ):
            logger.debug("Discarding stale %s conversation list", status.value)
            return False

        self._conversations_applied_seq = seq
        self._state.conversations = conversations
        self._state.unread_total = sum(c.unread_count for c in conversations)
        self._notifier.update_badge(self._state.unread_total)
        return True

    async def retry_pending_join(self) -> bool:
        """Join the selected room if an earlier join never went out."""
        conversation_id = self._state.selected_conversation_id
        if not self._pending_join or conversation_id is None or not self.is_connected:
            return False
        await self._join(conversation_id)
        return not self._pending_join

    # Internals

    def _require_ready(self) -> int:
        conversation_id = self._state.selected_conversation_id
        if conversation_id is None:
            raise SessionNotReadyError("No conversation selected")
        if not self.is_connected:
            raise SessionNotReadyError("Push channel is not connected")
        return conversation_id

    async def _join(self, conversation_id: int) -> None:
        try:
            await self._channel.emit(
                OutboundEvent.JOIN_CONVERSATION,
                JoinConversation(conversation_id).to_payload(),
            )
        except ChannelError as e:
            logger.warning(
                "Could not join conversation room: %s",
                e,
                extra={"conversation_id": conversation_id},
            )
            self._pending_join = True
            return
        self._pending_join = False
        logger.info(
            "Joined conversation room", extra={"conversation_id": conversation_id}
        )

    def _schedule_scroll(self) -> None:
        loop = asyncio.get_running_loop()
        loop.call_later(self._config.scroll_delay, self._notifier.scroll_to_bottom)

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh_loop(self) -> None:
        """Retry a pending room join and reload the conversation list on an interval."""
        while self._running:
            try:
                await self.retry_pending_join()
                await self.load_conversations()
            except Exception as e:
                logger.error("Conversation refresh error: %s", e, exc_info=True)
            await asyncio.sleep(self._config.refresh_interval)
