import ipaddress

# Local service discovery group, IPv4 and IPv6 flavours
DISCOVERY_MCAST_ADDR = "239.192.152.143"
DISCOVERY_MCAST_ADDR6 = "ff15::efc0:988f"
DISCOVERY_MCAST_PORT = 6771

IPV4_ANY = ipaddress.IPv4Address("0.0.0.0")
IPV6_ANY = ipaddress.IPv6Address("::")
IPV4_LOOPBACK = ipaddress.IPv4Address("127.0.0.1")
IPV6_LOOPBACK = ipaddress.IPv6Address("::1")

PRIVATE_IPV4_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)

TEREDO_PREFIX = b"\x20\x01\x00\x00"

# Largest datagram a discovery announcement is allowed to be
RECEIVE_BUFFER_SIZE = 1500
MULTICAST_HOPS = 255

LOGGER_NAME = "multicast_beacon"
