"""
Enum definitions for the application.

Event names are the transport vocabulary shared with the mobile client.
"""

from enum import Enum


class ClientEvent(str, Enum):
    """Events a client may send over the realtime transport."""

    REGISTER = "register"
    JOIN_CHAT = "joinChat"
    GET_ONLINE_USERS = "getOnlineUsers"
    PING = "ping"
    # Mirrors of REST mutations sent by older clients; accepted, never re-broadcast
    SEND_MESSAGE = "sendMessage"
    UPDATE_MESSAGE = "updateMessage"
    DELETE_MESSAGE = "deleteMessage"
    CHAT_DELETED = "chatDeleted"


class ServerEvent(str, Enum):
    """Events the server pushes to clients."""

    NEW_MESSAGE = "newMessage"
    CHAT_LAST_MESSAGE_UPDATE = "chatLastMessageUpdate"
    USER_STATUS_CHANGE = "userStatusChange"
    ONLINE_USERS = "onlineUsers"
    NEW_CHAT_CREATED = "newChatCreated"
    MESSAGE_DELETED = "messageDeleted"
    MESSAGE_UPDATED = "messageUpdated"
    CHAT_DELETED = "chatDeleted"
    PONG = "pong"


class PresenceStatus(str, Enum):
    """User presence status."""

    ONLINE = "online"
    OFFLINE = "offline"


class DeliveryScope(str, Enum):
    """
    How an event reaches sessions.

    ROOM = sessions joined to the event's chat
    BROADCAST = every connected session
    USERS = current sessions of specific user identities
    """

    ROOM = "ROOM"
    BROADCAST = "BROADCAST"
    USERS = "USERS"
