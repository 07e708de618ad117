import ipaddress
import socket

import pytest

from multicast_beacon.inet import Endpoint, NotMulticastError, multicast_endpoint, port


def test_port_range():
    assert port(0) == 0
    assert port(65535) == 65535
    with pytest.raises(ValueError):
        port(65536)
    with pytest.raises(ValueError):
        port(-1)


def test_parse_ipv4():
    endpoint = Endpoint.parse("239.192.152.143:6771")
    assert endpoint.address == ipaddress.ip_address("239.192.152.143")
    assert endpoint.port == 6771
    assert endpoint.family == socket.AF_INET
    assert endpoint.as_sockaddr() == ("239.192.152.143", 6771)
    assert str(endpoint) == "239.192.152.143:6771"


def test_parse_ipv6():
    endpoint = Endpoint.parse("[ff15::efc0:988f]:6771")
    assert endpoint.address == ipaddress.ip_address("ff15::efc0:988f")
    assert endpoint.family == socket.AF_INET6
    assert endpoint.as_sockaddr(3) == ("ff15::efc0:988f", 6771, 0, 3)
    assert str(endpoint) == "[ff15::efc0:988f]:6771"


@pytest.mark.parametrize(
    "text", ["", "1.2.3.4", "1.2.3.4:", ":80", "1.2.3.4:http", "ff02::1:80", "1.2.3.999:80", "1.2.3.4:70000"]
)
def test_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        Endpoint.parse(text)


def test_from_sockaddr_strips_scope():
    endpoint = Endpoint.from_sockaddr(("fe80::1%eth0", 5000, 0, 2))
    assert endpoint == Endpoint(ipaddress.ip_address("fe80::1"), 5000)


def test_multicast_endpoint_requires_group_address():
    assert multicast_endpoint("224.0.0.251", 5353).port == 5353
    with pytest.raises(NotMulticastError):
        multicast_endpoint("192.168.1.1", 5353)
    assert issubclass(NotMulticastError, ValueError)
