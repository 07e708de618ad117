import ipaddress
import random
import socket
import struct

import pytest

from multicast_beacon.inet import (
    Endpoint,
    InterfaceRecord,
    enumerate_interfaces,
    is_any,
    is_loopback,
    multicast_endpoint,
)


@pytest.fixture
def anyio_backend():
    return "trio"


def _can_bind(address: str) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        try:
            sock.bind((address, 0))
        except OSError:
            return False
    return True


@pytest.fixture
def secondary_loopback() -> InterfaceRecord:
    """
    127.0.0.2 is not the loopback constant, so the broadcast socket treats it
    like any other interface address.
    """
    if not _can_bind("127.0.0.2"):
        pytest.skip("127.0.0.2 is not bindable on this host")
    return InterfaceRecord(name="lo", address=ipaddress.ip_address("127.0.0.2"))


@pytest.fixture
def group() -> Endpoint:
    return multicast_endpoint("239.255.77.1", random.randint(40000, 60000))


def _multicast_loopback_works(group: Endpoint, source: InterfaceRecord) -> bool:
    with (
        socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as rx,
        socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as tx,
    ):
        try:
            rx.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            rx.bind(("0.0.0.0", group.port))
            rx.setsockopt(
                socket.IPPROTO_IP,
                socket.IP_ADD_MEMBERSHIP,
                struct.pack("4s4s", group.address.packed, bytes(4)),
            )
            rx.settimeout(1.0)
            tx.bind((str(source.address), 0))
            tx.sendto(b"ping", group.as_sockaddr())
            return rx.recv(64) == b"ping"
        except OSError:
            return False


@pytest.fixture
def live_multicast(group: Endpoint) -> Endpoint:
    candidates = [
        r
        for r in enumerate_interfaces()
        if r.address.version == 4 and not is_loopback(r.address) and not is_any(r.address)
    ]
    if not candidates or not _multicast_loopback_works(group, candidates[0]):
        pytest.skip("multicast loopback is not available on this host")
    return group
