"""
Tracking CLI

Command-line interface for dispatch tracking administration.

Commands:
- ensure-streams: Create the tracking streams and consumer groups
- publish-preparing: Publish a DispatchPreparing event
- publish-completed: Publish a DispatchCompleted event
- stream-info: Show stream length, entries and consumer groups
- tail: Show the latest tracking status updates
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import redis
import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from tracking_core.contracts.envelope import MessageEnvelope, parse_timestamp
from tracking_core.contracts.messages import (
    DispatchCompleted,
    DispatchPreparing,
    TrackingMessage,
    parse_tracking_status,
)
from tracking_core.errors import TrackingError
from tracking_core.streams.groups import (
    DISPATCH_TRACKING_STREAM,
    TRACKING_STATUS_STREAM,
    ensure_tracking_streams,
    get_stream_info,
)
from tracking_core.streams.producer import TrackingStreamProducer

app = typer.Typer(
    name="tracking-cli",
    help="Dispatch tracking CLI",
)

console = Console()


def get_redis() -> redis.Redis:
    """Get Redis client."""
    from basecore.redis import get_redis_client
    return get_redis_client()


def parse_order_id(order_id: str) -> UUID:
    try:
        return UUID(order_id)
    except ValueError:
        rprint(f"[red]Invalid order ID: {order_id}[/red]")
        raise typer.Exit(1)


def publish_dispatch_event(message: TrackingMessage, stream: str) -> None:
    producer = TrackingStreamProducer(get_redis())

    try:
        msg_id = producer.send(stream, message)
    except TrackingError as e:
        rprint(f"[red]Failed to publish: {e}[/red]")
        raise typer.Exit(1)

    rprint(f"[green]Published {type(message).__name__} to {stream}[/green]")
    rprint(f"  Message ID: {msg_id}")
    rprint(f"  Order ID: {message.order_id}")


@app.command()
def ensure_streams():
    """
    Create the tracking streams and consumer groups.

    Safe to run repeatedly; existing groups are left alone.
    """
    try:
        ensure_tracking_streams(get_redis())
    except redis.RedisError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    rprint("[green]Tracking streams ready[/green]")


@app.command()
def publish_preparing(
    order_id: str = typer.Argument(..., help="Order UUID"),
    stream: str = typer.Option(DISPATCH_TRACKING_STREAM, help="Inbound stream name"),
):
    """
    Publish a DispatchPreparing event for an order.
    """
    order_uuid = parse_order_id(order_id)
    publish_dispatch_event(DispatchPreparing(order_id=order_uuid), stream)


@app.command()
def publish_completed(
    order_id: str = typer.Argument(..., help="Order UUID"),
    date: Optional[str] = typer.Option(None, help="Completion timestamp (ISO-8601), defaults to now"),
    stream: str = typer.Option(DISPATCH_TRACKING_STREAM, help="Inbound stream name"),
):
    """
    Publish a DispatchCompleted event for an order.
    """
    order_uuid = parse_order_id(order_id)

    if date:
        try:
            parse_timestamp(date)
        except ValueError:
            rprint(f"[red]Invalid ISO-8601 date: {date}[/red]")
            raise typer.Exit(1)
    else:
        date = datetime.now(timezone.utc).isoformat()

    publish_dispatch_event(DispatchCompleted(order_id=order_uuid, date=date), stream)


@app.command()
def stream_info(
    stream: str = typer.Argument(DISPATCH_TRACKING_STREAM, help="Stream name"),
):
    """
    Show information about a Redis stream.
    """
    try:
        info = get_stream_info(get_redis(), stream)
    except redis.RedisError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    rprint(f"\n[cyan]Stream: {stream}[/cyan]")
    rprint(f"  Length: {info.get('length', 0)}")

    if info.get("error"):
        rprint(f"  [yellow]{info['error']}[/yellow]")
    if info.get("first_entry"):
        rprint(f"  First entry: {info['first_entry'][0]}")
    if info.get("last_entry"):
        rprint(f"  Last entry: {info['last_entry'][0]}")

    groups = info.get("groups", [])
    if groups:
        rprint("\n  Consumer Groups:")
        for group in groups:
            rprint(f"    - {group.get('name')}: {group.get('pending')} pending, {group.get('consumers')} consumers")


@app.command()
def tail(
    stream: str = typer.Argument(TRACKING_STATUS_STREAM, help="Tracking status stream name"),
    count: int = typer.Option(10, help="Number of updates to show"),
):
    """
    Show the latest tracking status updates.
    """
    try:
        entries = get_redis().xrevrange(stream, count=count)
    except redis.RedisError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not entries:
        rprint(f"[yellow]No messages in {stream}[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Tracking updates on {stream}")
    table.add_column("Message ID", style="dim")
    table.add_column("Order")
    table.add_column("Status")
    table.add_column("Date")

    for msg_id, data in entries:
        try:
            update = parse_tracking_status(MessageEnvelope.from_stream_message(msg_id, data))
        except TrackingError as e:
            table.add_row(msg_id, "-", f"[red]unreadable: {e}[/red]", "-")
            continue

        table.add_row(
            msg_id,
            str(update.order_id),
            update.status.value,
            update.date or "-",
        )

    console.print(table)


if __name__ == "__main__":
    app()
