import ipaddress
from typing import TypeAlias

InetAddress: TypeAlias = ipaddress.IPv4Address | ipaddress.IPv6Address
RawData: TypeAlias = bytes | bytearray | memoryview
