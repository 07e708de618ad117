from multicast_beacon.aio import BroadcastSocket, SocketState
from multicast_beacon.inet import (
    Endpoint,
    InterfaceRecord,
    NotMulticastError,
    cidr_distance,
    common_bits,
    enumerate_interfaces,
    guess_local_address,
    is_any,
    is_local,
    is_loopback,
    is_multicast,
    is_teredo,
    multicast_endpoint,
    supports_ipv6,
)

__all__ = [
    "BroadcastSocket",
    "SocketState",
    "Endpoint",
    "InterfaceRecord",
    "NotMulticastError",
    "cidr_distance",
    "common_bits",
    "enumerate_interfaces",
    "guess_local_address",
    "is_any",
    "is_local",
    "is_loopback",
    "is_multicast",
    "is_teredo",
    "multicast_endpoint",
    "supports_ipv6",
]
