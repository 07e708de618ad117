from .broadcast_socket import BroadcastSocket, SocketEntry, SocketState
from .types import ReceiveHandler, TaskSpawner

__all__ = [
    "BroadcastSocket",
    "SocketEntry",
    "SocketState",
    "ReceiveHandler",
    "TaskSpawner",
]
