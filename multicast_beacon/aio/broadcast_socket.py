import enum
import math
import socket
import struct
from dataclasses import dataclass

import trio

from multicast_beacon import constants
from multicast_beacon.aio.types import ReceiveHandler, TaskSpawner
from multicast_beacon.inet import (
    EPHEMERAL_PORT,
    Endpoint,
    InetAddress,
    InterfaceRecord,
    NotMulticastError,
    RawData,
    enumerate_interfaces,
    is_any,
    is_loopback,
    is_multicast,
)
from multicast_beacon.logging import Logger


class SocketState(enum.Enum):
    OPEN = enum.auto()
    RECEIVING = enum.auto()
    IDLE = enum.auto()
    CLOSED = enum.auto()


@dataclass(eq=False)
class SocketEntry:
    socket: trio.socket.SocketType | None
    local: Endpoint
    buffer: bytearray
    remote: Endpoint | None = None
    state: SocketState = SocketState.OPEN
    scope_id: int = 0
    # Payloads waiting for this socket's sender task
    outbox: trio.MemorySendChannel[bytes] | None = None

    def close(self) -> None:
        if self.outbox is not None:
            self.outbox.close()
            self.outbox = None
        if self.socket is None:
            return
        sock, self.socket = self.socket, None
        self.state = SocketState.CLOSED
        sock.close()


class BroadcastSocket:
    """
    Best-effort multicast announce/listen channel spanning every usable
    interface of the host.

    One socket joins the group on the wildcard address to hear
    announcements. One more socket is bound to each interface address of the
    group's family and is used both to send to the group and to hear unicast
    replies. Sending fans the same datagram out through every interface
    socket, since on a multi-homed host no single socket is guaranteed to
    reach every attached segment.

    Nothing here raises once construction has validated the endpoint: a
    socket that fails to set up is left out, a failed send is dropped, and a
    receive that errors (or reads zero bytes) leaves that socket idle until
    ``close()``. ``failed_sockets`` counts the sockets that could not be
    opened.

    ``on_receive`` is handed the socket's own receive buffer, which the next
    datagram overwrites; copy ``buffer[:length]`` to keep it.

    All methods must be called from the trio run that owns ``nursery``.
    """

    def __init__(
        self,
        nursery: TaskSpawner,
        multicast_endpoint: Endpoint,
        on_receive: ReceiveHandler,
        loopback: bool = True,
        join_group: bool = True,
        *,
        interfaces: list[InterfaceRecord] | None = None,
        buffer_size: int = constants.RECEIVE_BUFFER_SIZE,
        logger: Logger | None = None,
    ):
        if not is_multicast(multicast_endpoint.address):
            raise NotMulticastError(
                f"{multicast_endpoint.address} is not a multicast address"
            )

        self.multicast_endpoint = multicast_endpoint
        self.logger = logger or Logger()
        self.failed_sockets = 0

        self._nursery = nursery
        self._on_receive: ReceiveHandler | None = on_receive
        self._buffer_size = buffer_size
        self._sockets: list[SocketEntry] = []
        self._unicast_sockets: list[SocketEntry] = []
        self._closed = False

        if interfaces is None:
            interfaces = enumerate_interfaces(logger=self.logger)

        family = multicast_endpoint.family

        if join_group:
            if family == socket.AF_INET:
                self._open_multicast_socket(constants.IPV4_ANY, loopback)
            else:
                self._open_multicast_socket(constants.IPV6_ANY, loopback)

        for record in interfaces:
            # only multicast on compatible networks
            if record.family != family:
                continue
            if is_loopback(record.address) or is_any(record.address):
                continue
            self._open_unicast_socket(record)

        self.logger.info(
            "Broadcast socket for %s: %d group, %d interface socket(s), %d failed"
            % (
                multicast_endpoint,
                len(self._sockets),
                len(self._unicast_sockets),
                self.failed_sockets,
            )
        )

    @property
    def receive_sockets(self) -> tuple[SocketEntry, ...]:
        return tuple(self._sockets)

    @property
    def unicast_sockets(self) -> tuple[SocketEntry, ...]:
        return tuple(self._unicast_sockets)

    @property
    def closed(self) -> bool:
        return self._closed

    def _membership_request(self) -> tuple[int, int, bytes]:
        group = self.multicast_endpoint.address
        if group.version == 4:
            mreq = struct.pack("4s4s", group.packed, constants.IPV4_ANY.packed)
            return socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, mreq
        # Interface index 0 lets the kernel pick
        mreq = group.packed + struct.pack("@I", 0)
        return socket.IPPROTO_IPV6, socket.IPV6_JOIN_GROUP, mreq

    def _open_multicast_socket(self, addr: InetAddress, loopback: bool) -> None:
        local = Endpoint(addr, self.multicast_endpoint.port)
        if local.family == socket.AF_INET:
            level, hops_opt, loop_opt = (
                socket.IPPROTO_IP,
                socket.IP_MULTICAST_TTL,
                socket.IP_MULTICAST_LOOP,
            )
        else:
            level, hops_opt, loop_opt = (
                socket.IPPROTO_IPV6,
                socket.IPV6_MULTICAST_HOPS,
                socket.IPV6_MULTICAST_LOOP,
            )

        sock = None
        step = "open"
        try:
            sock = socket.socket(local.family, socket.SOCK_DGRAM)
            step = "reuse address"
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            step = "bind"
            sock.bind(local.as_sockaddr())
            step = "join group"
            sock.setsockopt(*self._membership_request())
            step = "hop limit"
            sock.setsockopt(level, hops_opt, constants.MULTICAST_HOPS)
            step = "loopback"
            sock.setsockopt(level, loop_opt, int(loopback))
        except OSError as e:
            self._abandon(sock, local, step, e)
            return

        entry = SocketEntry(
            socket=trio.socket.from_stdlib_socket(sock),
            local=local,
            buffer=bytearray(self._buffer_size),
        )
        self._sockets.append(entry)
        self._start_receiving(entry)

    def _open_unicast_socket(self, record: InterfaceRecord) -> None:
        local = Endpoint(record.address, EPHEMERAL_PORT)

        sock = None
        step = "open"
        try:
            sock = socket.socket(record.family, socket.SOCK_DGRAM)
            step = "bind"
            sock.bind(record.bind_sockaddr(EPHEMERAL_PORT))
            local = Endpoint.from_sockaddr(sock.getsockname())
        except OSError as e:
            self._abandon(sock, local, step, e)
            return

        entry = SocketEntry(
            socket=trio.socket.from_stdlib_socket(sock),
            local=local,
            buffer=bytearray(self._buffer_size),
            scope_id=record.scope_id,
        )
        self._unicast_sockets.append(entry)
        self._start_sending(entry)
        self._start_receiving(entry)

    def _abandon(
        self, sock: socket.socket | None, local: Endpoint, step: str, error: OSError
    ) -> None:
        self.failed_sockets += 1
        if sock is not None:
            sock.close()
        self.logger.debug("Socket on %s dropped, %s failed: %s" % (local, step, error))

    def _start_receiving(self, entry: SocketEntry) -> None:
        entry.state = SocketState.RECEIVING
        self._nursery.start_soon(
            self._receive_loop, entry, name=f"receive {entry.local}"
        )

    async def _receive_loop(self, entry: SocketEntry) -> None:
        while entry.socket is not None:
            try:
                nbytes, sockaddr = await entry.socket.recvfrom_into(entry.buffer)
            except trio.ClosedResourceError:
                return
            except OSError as e:
                # close() may land between wakeup and the read
                if entry.socket is None:
                    return
                self.logger.debug("Receive on %s stopped: %s" % (entry.local, e))
                entry.state = SocketState.IDLE
                return

            # A completion that lands after close() is dropped
            if entry.socket is None or self._on_receive is None:
                return

            if nbytes == 0:
                self.logger.debug("Receive on %s stopped: empty datagram" % entry.local)
                entry.state = SocketState.IDLE
                return

            entry.remote = Endpoint.from_sockaddr(sockaddr)
            self._on_receive(entry.remote, entry.buffer, nbytes)

    def _start_sending(self, entry: SocketEntry) -> None:
        entry.outbox, receive_channel = trio.open_memory_channel[bytes](math.inf)
        self._nursery.start_soon(
            self._send_loop, entry, receive_channel, name=f"send {entry.local}"
        )

    async def _send_loop(
        self, entry: SocketEntry, receive_channel: trio.MemoryReceiveChannel[bytes]
    ) -> None:
        # Sole caller of sendto on this socket
        destination = self.multicast_endpoint.as_sockaddr(entry.scope_id)
        async with receive_channel:
            async for payload in receive_channel:
                if entry.socket is None:
                    return
                try:
                    await entry.socket.sendto(payload, destination)
                except (OSError, trio.ClosedResourceError) as e:
                    self.logger.debug(
                        "Send from %s to %s dropped: %s"
                        % (entry.local, self.multicast_endpoint, e)
                    )

    def send(self, buffer: RawData) -> None:
        """
        Queue ``buffer`` for delivery to the group through every interface
        socket. Returns immediately; the outcome of each send is discarded.
        Datagrams leave each socket in the order they were queued.
        """
        payload = bytes(buffer)
        for entry in self._unicast_sockets:
            if entry.socket is None or entry.outbox is None:
                continue
            try:
                entry.outbox.send_nowait(payload)
            except (trio.BrokenResourceError, trio.ClosedResourceError):
                continue

    def close(self) -> None:
        for entry in self._sockets:
            entry.close()
        for entry in self._unicast_sockets:
            entry.close()

        self._on_receive = None
        self._closed = True
