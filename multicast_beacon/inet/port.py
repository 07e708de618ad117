from typing import NewType

Port = NewType("Port", int)

EPHEMERAL_PORT = Port(0)


def port(portNumber: int) -> Port:
    if 0 <= portNumber <= 0xFFFF:
        return Port(portNumber)
    else:
        raise ValueError(f"{portNumber} is not within the valid port range")
