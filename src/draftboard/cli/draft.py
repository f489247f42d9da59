"""CLI commands for previewing interpreter output."""

from __future__ import annotations

import msgspec
import rich_click as click
from rich.console import Console
from rich.table import Table

from draftboard.core.interpreter import generate
from draftboard.core.models import ContextElement, ElementDraft, Point, Size

console = Console()

# Stand-in for an existing element when previewing context placement.
PREVIEW_CONTEXT = ContextElement(position=Point(0.0, 0.0), size=Size(100.0, 100.0))


def _describe(draft: ElementDraft) -> str:
    if draft.text_props is not None:
        return repr(draft.text_props.content)
    if draft.line_props is not None:
        lp = draft.line_props
        return f"({lp.x1:g}, {lp.y1:g}) -> ({lp.x2:g}, {lp.y2:g})"
    if draft.rectangle_props is not None and draft.rectangle_props.border_radius:
        return f"radius {draft.rectangle_props.border_radius:g}"
    return "-"


def _color(draft: ElementDraft) -> str:
    if draft.fill is not None:
        return draft.fill.color
    if draft.stroke is not None:
        return draft.stroke.color
    return "-"


@click.group(name="draft", help="Inspect prompt interpretation without touching storage.")
def draft_group() -> None:
    """Inspect prompt interpretation without touching storage."""


@draft_group.command(name="preview", help="Show the element drafts a prompt would produce.")
@click.argument("prompt")
@click.option("--width", default=1920.0, type=float, help="Canvas width")
@click.option("--height", default=1080.0, type=float, help="Canvas height")
@click.option("--with-context", is_flag=True, help="Place drafts as if the canvas already had an element")
@click.option("--json", "as_json", is_flag=True, help="Print drafts as JSON")
def draft_preview(prompt: str, width: float, height: float, with_context: bool, as_json: bool) -> None:
    """Show the element drafts a prompt would produce."""
    context = [PREVIEW_CONTEXT] if with_context else []
    drafts = generate(prompt, width, height, context)

    if as_json:
        click.echo(msgspec.json.format(msgspec.json.encode(drafts), indent=2).decode())
        return

    table = Table(title=f"Drafts for {prompt!r} on {width:g}x{height:g}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Position", style="green")
    table.add_column("Size", style="yellow")
    table.add_column("Color", style="magenta")
    table.add_column("Details", style="blue")

    for index, draft in enumerate(drafts, 1):
        size = f"{draft.size.width:g}x{draft.size.height:g}" if draft.size else "-"
        table.add_row(
            str(index),
            str(draft.element_type),
            f"({draft.position.x:g}, {draft.position.y:g})",
            size,
            _color(draft),
            _describe(draft),
        )

    console.print(table)
