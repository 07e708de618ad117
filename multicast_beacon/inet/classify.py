"""
Address classification helpers.

Every predicate here is total: it accepts an address object or its textual
form and answers ``False`` for anything it cannot interpret.
"""

import ipaddress
import socket

from multicast_beacon import constants
from multicast_beacon.inet.types import InetAddress


def _as_address(addr: InetAddress | str) -> InetAddress | None:
    if isinstance(addr, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return addr
    try:
        return ipaddress.ip_address(addr)
    except ValueError:
        return None


def is_local(addr: InetAddress | str) -> bool:
    """
    Is this a link-local IPv6 address or an RFC 1918 IPv4 address?
    """
    a = _as_address(addr)
    match a:
        case ipaddress.IPv6Address():
            return a.is_link_local
        case ipaddress.IPv4Address():
            return any(a in network for network in constants.PRIVATE_IPV4_NETWORKS)
        case _:
            return False


def is_loopback(addr: InetAddress | str) -> bool:
    a = _as_address(addr)
    if a is None:
        return False
    if a.version == 4:
        return a == constants.IPV4_LOOPBACK
    return a == constants.IPV6_LOOPBACK


def is_multicast(addr: InetAddress | str) -> bool:
    a = _as_address(addr)
    return a is not None and a.is_multicast


def is_any(addr: InetAddress | str) -> bool:
    a = _as_address(addr)
    match a:
        case ipaddress.IPv4Address():
            return a == constants.IPV4_ANY
        case ipaddress.IPv6Address() if a.ipv4_mapped is not None:
            return a.ipv4_mapped == constants.IPV4_ANY
        case ipaddress.IPv6Address():
            return a == constants.IPV6_ANY
        case _:
            return False


def is_teredo(addr: InetAddress | str) -> bool:
    a = _as_address(addr)
    if not isinstance(a, ipaddress.IPv6Address):
        return False
    return a.packed[:4] == constants.TEREDO_PREFIX


def supports_ipv6() -> bool:
    """
    Can the host's address parser handle an IPv6 literal? This says nothing
    about whether IPv6 traffic can actually be routed.
    """
    if not socket.has_ipv6:
        return False
    try:
        socket.inet_pton(socket.AF_INET6, "::1")
    except (OSError, ValueError):
        return False
    return True


def common_bits(b1: bytes, b2: bytes, n: int | None = None) -> int:
    """
    Count the leading bits ``b1`` and ``b2`` share, most significant bit of
    the first byte first.
    """
    if n is None:
        n = min(len(b1), len(b2))

    for i in range(n):
        diff = b1[i] ^ b2[i]
        if diff == 0:
            continue
        return i * 8 + 8 - diff.bit_length()

    return n * 8


def _v6_bytes(addr: InetAddress) -> bytes:
    if addr.version == 4:
        return ipaddress.IPv6Address(b"\x00" * 10 + b"\xff\xff" + addr.packed).packed
    return addr.packed


def cidr_distance(a1: InetAddress | str, a2: InetAddress | str) -> int:
    """
    Number of bits left after the longest common prefix of the two addresses,
    scanning from the most significant bit. Mixed families are compared in
    their IPv4-mapped IPv6 form. An operand that is not an address is as far
    away as its partner's family allows: 32 next to IPv4, 128 otherwise.
    """
    addr1, addr2 = _as_address(a1), _as_address(a2)
    if addr1 is None or addr2 is None:
        other = addr2 if addr1 is None else addr1
        return 32 if other is not None and other.version == 4 else 128

    if addr1.version == 4 and addr2.version == 4:
        b1, b2 = addr1.packed, addr2.packed
    else:
        b1, b2 = _v6_bytes(addr1), _v6_bytes(addr2)

    return len(b1) * 8 - common_bits(b1, b2, len(b1))
