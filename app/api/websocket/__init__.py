"""Real-time board sync over WebSocket: registry, connections, fan-out, gateway."""

from app.api.websocket.broadcaster import Broadcaster
from app.api.websocket.connection import Connection
from app.api.websocket.gateway import SyncGateway
from app.api.websocket.manager import ConnectionRegistry

__all__ = ["Broadcaster", "Connection", "ConnectionRegistry", "SyncGateway"]
