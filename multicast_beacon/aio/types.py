from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from multicast_beacon.inet import Endpoint


class TaskSpawner(Protocol):
    """A trio nursery, or an anyio task group running on trio."""

    def start_soon(
        self, async_fn: Callable[..., Awaitable[Any]], *args: Any, name: object = None
    ) -> None: ...


ReceiveHandler: TypeAlias = Callable[[Endpoint, bytearray, int], None]
