import ipaddress
import socket
from dataclasses import dataclass
from typing import Any, Self

from multicast_beacon.inet.classify import is_multicast
from multicast_beacon.inet.port import Port, port
from multicast_beacon.inet.types import InetAddress


class NotMulticastError(ValueError):
    pass


@dataclass(frozen=True)
class Endpoint:
    address: InetAddress
    port: Port

    @property
    def family(self) -> socket.AddressFamily:
        if self.address.version == 4:
            return socket.AF_INET
        return socket.AF_INET6

    def as_sockaddr(self, scope_id: int = 0) -> tuple[Any, ...]:
        if self.address.version == 4:
            return (str(self.address), self.port)
        return (str(self.address), self.port, 0, scope_id)

    @classmethod
    def from_sockaddr(cls, sockaddr: tuple[Any, ...]) -> Self:
        # Link-local senders come back as "fe80::1%eth0"
        host = str(sockaddr[0]).split("%", 1)[0]
        return cls(ipaddress.ip_address(host), port(int(sockaddr[1])))

    @classmethod
    def parse(cls, text: str) -> Self:
        host, sep, port_text = text.strip().rpartition(":")
        if not sep or not host or not port_text.isdigit():
            raise ValueError(f"Expecting A.B.C.D:P or [v6]:P, got {text!r}")

        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        elif ":" in host:
            raise ValueError(f"IPv6 endpoints must be bracketed, got {text!r}")

        return cls(ipaddress.ip_address(host), port(int(port_text)))

    def __str__(self) -> str:
        if self.address.version == 6:
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"


def multicast_endpoint(address: InetAddress | str, portNumber: int) -> Endpoint:
    addr = ipaddress.ip_address(address)
    if not is_multicast(addr):
        raise NotMulticastError(f"{addr} is not a multicast address")
    return Endpoint(addr, port(portNumber))
