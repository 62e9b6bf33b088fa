"""API routers."""

from app.api import chats, messages, realtime

__all__ = [
    "chats",
    "messages",
    "realtime",
]
