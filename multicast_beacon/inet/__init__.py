from .types import InetAddress, RawData
from .port import Port, port, EPHEMERAL_PORT
from .classify import (
    cidr_distance,
    common_bits,
    is_any,
    is_local,
    is_loopback,
    is_multicast,
    is_teredo,
    supports_ipv6,
)
from .endpoint import Endpoint, NotMulticastError, multicast_endpoint
from .interface import InterfaceRecord, enumerate_interfaces
from .guess import guess_local_address

__all__ = [
    "InetAddress",
    "RawData",
    "Port",
    "port",
    "EPHEMERAL_PORT",
    "Endpoint",
    "NotMulticastError",
    "multicast_endpoint",
    "InterfaceRecord",
    "enumerate_interfaces",
    "guess_local_address",
    "cidr_distance",
    "common_bits",
    "is_any",
    "is_local",
    "is_loopback",
    "is_multicast",
    "is_teredo",
    "supports_ipv6",
]
