import netifaces
from netifaces.defs import Address as _NetifacesAddress
from netifaces.defs import AddressType as _NetifacesAddressType

NetifacesEntry = dict[_NetifacesAddressType, list[_NetifacesAddress]]


class Netifaces:
    @property
    def AF_INET(self) -> int:
        return netifaces.InterfaceType.AF_INET

    @property
    def AF_INET6(self) -> int:
        return netifaces.InterfaceType.AF_INET6

    def interfaces(self) -> list[str]:
        return netifaces.interfaces()

    def ifaddresses(self, interface: str) -> NetifacesEntry:
        return netifaces.ifaddresses(interface)
