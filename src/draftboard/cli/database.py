"""Database inspection CLI commands for draftboard.

Adds query helpers for inspecting canvases, elements and chat logs stored by
the database backend. The URL is taken from DATABASE_URL.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

import rich_click as click
from rich.console import Console
from rich.table import Table

from draftboard.exceptions import CanvasNotFoundError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime
    from uuid import UUID

    from draftboard.storage.db.storage import DatabaseStorage

T = TypeVar("T")

console = Console()


def run_with_storage(operation: Callable[[DatabaseStorage], Awaitable[T]]) -> T:
    """Run ``operation`` against a freshly initialized database storage."""
    from draftboard.storage.db import DatabaseManager, DatabaseStorage

    async def _run() -> T:
        manager = DatabaseManager()
        await manager.init()
        try:
            return await operation(DatabaseStorage(manager.session))
        finally:
            await manager.close()

    return asyncio.run(_run())


def _when(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


@click.group(name="query", help="Query database tables for debugging and inspection.")
def query_group() -> None:
    """Query database tables for debugging and inspection."""


@query_group.command(name="canvases", help="List canvases, newest first.")
@click.option("--limit", "-l", default=20, help="Number of canvases to show")
def query_canvases(limit: int) -> None:
    """List canvases, newest first."""
    canvases = run_with_storage(lambda storage: storage.list_canvases())[:limit]

    table = Table(title=f"Canvases (showing {len(canvases)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Background", style="yellow")
    table.add_column("Created", style="magenta")

    for canvas in canvases:
        table.add_row(
            str(canvas.id),
            canvas.name,
            f"{canvas.width:g}x{canvas.height:g}",
            canvas.background_color,
            _when(canvas.created_at),
        )

    console.print(table)


@query_group.command(name="elements", help="List the elements of a canvas in z-order.")
@click.argument("canvas_id", type=click.UUID)
def query_elements(canvas_id: UUID) -> None:
    """List the elements of a canvas in z-order."""
    try:
        elements = run_with_storage(lambda storage: storage.list_elements(canvas_id))
    except CanvasNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return

    table = Table(title=f"Elements on {canvas_id} ({len(elements)})")
    table.add_column("Z", style="dim", justify="right")
    table.add_column("ID", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Position", style="green")
    table.add_column("Size", style="yellow")
    table.add_column("Flags", style="magenta")

    for element in elements:
        flags = [name for name, on in (("hidden", not element.visible), ("locked", element.locked)) if on]
        table.add_row(
            str(element.z_index),
            str(element.id),
            str(element.element_type),
            f"({element.position.x:g}, {element.position.y:g})",
            f"{element.size.width:g}x{element.size.height:g}" if element.size else "-",
            ", ".join(flags) or "-",
        )

    console.print(table)


@query_group.command(name="messages", help="Show the chat log of a canvas, newest first.")
@click.argument("canvas_id", type=click.UUID)
@click.option("--limit", "-l", default=20, help="Number of messages to show")
def query_messages(canvas_id: UUID, limit: int) -> None:
    """Show the chat log of a canvas, newest first."""
    try:
        messages = run_with_storage(lambda storage: storage.list_chat_messages(canvas_id))[:limit]
    except CanvasNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return

    table = Table(title=f"Chat on {canvas_id} (showing {len(messages)})")
    table.add_column("When", style="magenta")
    table.add_column("Role", style="cyan")
    table.add_column("Content")
    table.add_column("Created", style="green", justify="right")

    for message in messages:
        created = len(message.elements_created) if message.elements_created else 0
        table.add_row(_when(message.timestamp), str(message.role), message.content, str(created))

    console.print(table)
