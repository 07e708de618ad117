import ipaddress
from typing import Annotated, Optional

import anyio
import rich
import rich.markup
import rich.table
import trio
import typer

from multicast_beacon import constants
from multicast_beacon.aio import BroadcastSocket
from multicast_beacon.inet import (
    Endpoint,
    InetAddress,
    InterfaceRecord,
    cidr_distance,
    enumerate_interfaces,
    guess_local_address,
    is_any,
    is_local,
    is_loopback,
    is_multicast,
    is_teredo,
    multicast_endpoint,
)
from multicast_beacon.logging import Logger

app = typer.Typer(no_args_is_help=True)
interfaces_app = typer.Typer(no_args_is_help=True)
app.add_typer(interfaces_app, name="interface", help="Inspect local interfaces.")

DEFAULT_ENDPOINT = f"{constants.DISCOVERY_MCAST_ADDR}:{constants.DISCOVERY_MCAST_PORT}"


def parse_multicast_endpoint(value: str) -> Endpoint:
    try:
        endpoint = Endpoint.parse(value)
        return multicast_endpoint(endpoint.address, endpoint.port)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def parse_address(value: str, param_hint: str) -> InetAddress:
    try:
        return ipaddress.ip_address(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint=param_hint) from exc


MulticastEndpointArg = Annotated[
    Endpoint,
    typer.Argument(
        parser=parse_multicast_endpoint,
        help="Multicast group as A.B.C.D:P or [v6]:P.",
    ),
]


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else ""


def _records_table(records: list[InterfaceRecord]) -> rich.table.Table:
    table = rich.table.Table()
    table.add_column("interface")
    table.add_column("address", no_wrap=True)
    table.add_column("netmask")
    for column in ("local", "loopback", "multicast", "any", "teredo"):
        table.add_column(column, justify="center")

    for record in records:
        a = record.address
        table.add_row(
            record.name,
            str(a),
            record.netmask or "",
            _flag(is_local(a)),
            _flag(is_loopback(a)),
            _flag(is_multicast(a)),
            _flag(is_any(a)),
            _flag(is_teredo(a)),
        )
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option(help="Enable verbose output.")] = False,
    logfile: Annotated[Optional[str], typer.Option(help="Save logs to this file.")] = None,
    syslog: Annotated[bool, typer.Option(help="Also send logs to syslog.")] = False,
):
    ctx.obj = Logger.configure(
        foreground=True, logfile=logfile, verbose=verbose, syslog=syslog
    )


@interfaces_app.command("list")
def list_interfaces(ctx: typer.Context):
    rich.print(_records_table(enumerate_interfaces(logger=ctx.obj)))


@interfaces_app.command("info")
def interface_info(ctx: typer.Context, interface: str):
    records = [r for r in enumerate_interfaces(logger=ctx.obj) if r.name == interface]
    if not records:
        rich.print(f"{interface} is not a valid interface or has no IP addresses.")
        raise typer.Exit(code=1)

    rich.print(_records_table(records))


@app.command()
def guess():
    """Print the best guess at this host's own address."""
    rich.print(str(guess_local_address()))


@app.command()
def distance(first: str, second: str):
    """Print the CIDR distance between two addresses."""
    rich.print(
        cidr_distance(parse_address(first, "FIRST"), parse_address(second, "SECOND"))
    )


async def _listen(endpoint: Endpoint, loopback: bool, duration: float | None, logger: Logger):
    def on_receive(sender: Endpoint, buffer: bytearray, length: int) -> None:
        text = bytes(buffer[:length]).decode("utf-8", errors="replace")
        rich.print(f"{sender} => {length} bytes: {rich.markup.escape(text)}")

    async with anyio.create_task_group() as tg:
        beacon = BroadcastSocket(tg, endpoint, on_receive, loopback, True, logger=logger)
        if not beacon.receive_sockets:
            logger.warning("Could not join %s, listening for unicast replies only" % endpoint)

        try:
            if duration is None:
                await anyio.sleep_forever()
            else:
                await anyio.sleep(duration)
        finally:
            beacon.close()
            tg.cancel_scope.cancel()


@app.command()
def listen(
    ctx: typer.Context,
    endpoint: MulticastEndpointArg = DEFAULT_ENDPOINT,
    loopback: Annotated[bool, typer.Option(help="Receive our own host's announcements.")] = True,
    duration: Annotated[
        Optional[float], typer.Option(min=0, help="Stop after this many seconds.")
    ] = None,
):
    """Join a multicast group and print every datagram heard."""
    try:
        trio.run(_listen, endpoint, loopback, duration, ctx.obj)
    except KeyboardInterrupt:
        pass


async def _announce(
    endpoint: Endpoint, message: bytes, interval: float, count: int | None, logger: Logger
):
    async with anyio.create_task_group() as tg:
        beacon = BroadcastSocket(tg, endpoint, lambda *_: None, join_group=False, logger=logger)
        if not beacon.unicast_sockets:
            logger.warning("No usable interface to announce %s on" % endpoint)

        sent = 0
        try:
            while count is None or sent < count:
                beacon.send(message)
                sent += 1
                await anyio.sleep(interval)
        finally:
            beacon.close()
            tg.cancel_scope.cancel()


@app.command()
def announce(
    ctx: typer.Context,
    message: str,
    endpoint: MulticastEndpointArg = DEFAULT_ENDPOINT,
    interval: Annotated[float, typer.Option(min=0.05, help="Seconds between announcements.")] = 5.0,
    count: Annotated[
        Optional[int], typer.Option(min=1, help="Stop after this many announcements.")
    ] = None,
):
    """Send MESSAGE to a multicast group from every interface."""
    try:
        trio.run(_announce, endpoint, message.encode(), interval, count, ctx.obj)
    except KeyboardInterrupt:
        pass
