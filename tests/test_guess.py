import ipaddress

from multicast_beacon.inet import InterfaceRecord, guess_local_address


def records(*addresses):
    return [InterfaceRecord(name=f"if{i}", address=ipaddress.ip_address(a)) for i, a in enumerate(addresses)]


def test_only_loopback_and_wildcard_falls_back_to_loopback():
    assert guess_local_address(records("127.0.0.1", "::1", "0.0.0.0", "::")) == ipaddress.ip_address("127.0.0.1")


def test_empty_list_falls_back_to_loopback():
    assert guess_local_address([]) == ipaddress.ip_address("127.0.0.1")


def test_global_address_wins_in_either_order():
    assert guess_local_address(records("8.8.4.4", "192.168.1.5")) == ipaddress.ip_address("8.8.4.4")
    assert guess_local_address(records("192.168.1.5", "8.8.4.4")) == ipaddress.ip_address("8.8.4.4")


def test_first_global_address_wins():
    assert guess_local_address(records("10.0.0.2", "1.1.1.1", "9.9.9.9")) == ipaddress.ip_address("1.1.1.1")


def test_last_private_address_is_the_fallback():
    assert guess_local_address(records("10.0.0.2", "192.168.1.5")) == ipaddress.ip_address("192.168.1.5")


def test_multicast_addresses_are_ignored():
    assert guess_local_address(records("239.1.1.1", "10.0.0.2")) == ipaddress.ip_address("10.0.0.2")


def test_ipv6_only_replaces_an_existing_candidate():
    # No IPv4 candidate seen yet, so the IPv6 address is not remembered
    assert guess_local_address(records("2001:db8::1")) == ipaddress.ip_address("127.0.0.1")
    assert guess_local_address(records("10.0.0.2", "2001:db8::1")) == ipaddress.ip_address("2001:db8::1")
    assert guess_local_address(records("2001:db8::1", "10.0.0.2")) == ipaddress.ip_address("10.0.0.2")


def test_enumerates_when_no_list_given(monkeypatch):
    monkeypatch.setattr(
        "multicast_beacon.inet.guess.enumerate_interfaces",
        lambda: records("172.20.0.3", "203.0.113.9"),
    )
    assert guess_local_address() == ipaddress.ip_address("203.0.113.9")
