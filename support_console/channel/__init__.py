"""Push channel module."""

from .socketio_channel import IPushChannel, SocketIOChannel

__all__ = ["IPushChannel", "SocketIOChannel"]
