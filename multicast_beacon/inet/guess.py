from multicast_beacon import constants
from multicast_beacon.inet.classify import is_any, is_local, is_loopback, is_multicast
from multicast_beacon.inet.interface import InterfaceRecord, enumerate_interfaces
from multicast_beacon.inet.types import InetAddress


def guess_local_address(
    interfaces: list[InterfaceRecord] | None = None,
) -> InetAddress:
    """
    Make a best guess at the address this host is reachable on.

    The first globally routable IPv4 address wins outright. Otherwise the
    last private IPv4 address seen is used, which a later IPv6 address may
    still replace. With nothing usable at all, IPv4 loopback is returned.
    """
    if interfaces is None:
        interfaces = enumerate_interfaces()

    ret: InetAddress = constants.IPV4_ANY
    for record in interfaces:
        a = record.address
        if is_loopback(a) or is_multicast(a) or is_any(a):
            continue

        if a.version == 4:
            if not is_local(a):
                return a
            ret = a
        elif ret != constants.IPV4_ANY:
            ret = a

    if ret == constants.IPV4_ANY:
        ret = constants.IPV4_LOOPBACK
    return ret
