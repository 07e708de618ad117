import ipaddress
import socket
from dataclasses import dataclass

from multicast_beacon.inet.types import InetAddress
from multicast_beacon.logging import Logger
from multicast_beacon.netifaces import Netifaces


@dataclass(eq=True, frozen=True)
class InterfaceRecord:
    name: str
    address: InetAddress
    netmask: str | None = None
    # Kernel interface index, only meaningful for IPv6 link-local addresses
    scope_id: int = 0

    @property
    def family(self) -> socket.AddressFamily:
        if self.address.version == 4:
            return socket.AF_INET
        return socket.AF_INET6

    def bind_sockaddr(self, portNumber: int = 0) -> tuple:
        if self.address.version == 4:
            return (str(self.address), portNumber)
        return (str(self.address), portNumber, 0, self.scope_id)


def _scope_id(name: str, address: InetAddress) -> int:
    if address.version != 6 or not address.is_link_local:
        return 0
    try:
        return socket.if_nametoindex(name)
    except OSError:
        return 0


def enumerate_interfaces(
    nif: Netifaces | None = None, logger: Logger | None = None
) -> list[InterfaceRecord]:
    """
    List every IPv4 and IPv6 address configured on the host, interface by
    interface, IPv4 first. Failures are logged and skipped so callers always
    get a (possibly empty) list back.
    """
    nif = nif or Netifaces()
    logger = logger or Logger()

    records: list[InterfaceRecord] = []

    try:
        names = nif.interfaces()
    except (OSError, ValueError) as e:
        logger.warning("Unable to enumerate network interfaces: %s" % e)
        return records

    for name in names:
        try:
            addrs = nif.ifaddresses(name)
        except (OSError, ValueError) as e:
            logger.debug("Skipping interface %s: %s" % (name, e))
            continue

        for family in (nif.AF_INET, nif.AF_INET6):
            for entry in addrs.get(family, []):
                try:
                    address = ipaddress.ip_address(entry["addr"].split("%", 1)[0])
                except (KeyError, ValueError) as e:
                    logger.debug("Skipping address entry %r on %s: %s" % (entry, name, e))
                    continue

                records.append(
                    InterfaceRecord(
                        name=name,
                        address=address,
                        netmask=entry.get("mask"),
                        scope_id=_scope_id(name, address),
                    )
                )

    return records
