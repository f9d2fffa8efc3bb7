"""Exceptions raised by the support console."""


class ConsoleError(Exception):
    """Base class for console errors."""


class TransportError(ConsoleError):
    """Network failure talking to the chat API."""


class MalformedResponseError(ConsoleError):
    """Response was not a usable JSON envelope."""


class ApiError(ConsoleError):
    """Chat API answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class InvalidInputError(ConsoleError):
    """Input rejected before any network call."""


class SessionNotReadyError(ConsoleError):
    """No conversation selected or push channel not connected."""


class ChannelError(ConsoleError):
    """Push-channel failure (connect, emit)."""
