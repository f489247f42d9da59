"""Litestar CLI extensions for draftboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar.plugins import CLIPluginProtocol

from draftboard.cli.database import query_group
from draftboard.cli.draft import draft_group

if TYPE_CHECKING:
    from click import Group

__all__ = ["DraftboardCLIPlugin", "draft_group", "query_group"]


class DraftboardCLIPlugin(CLIPluginProtocol):
    """CLI plugin that adds the draft preview and database query commands.

    Adds the `draft` command group with subcommands:
    - preview: Show the element drafts a prompt would produce

    Adds the `query` command group with subcommands:
    - canvases: List canvases
    - elements: List the elements of a canvas
    - messages: Show the chat log of a canvas
    """

    def on_cli_init(self, cli: Group) -> None:
        """Register the draft and query command groups."""
        cli.add_command(draft_group)
        cli.add_command(query_group)
