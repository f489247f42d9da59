"""Tests for the CLI commands."""

from __future__ import annotations

import json
from uuid import uuid4

import pytest
from click.testing import CliRunner
from rich_click import RichGroup

from draftboard.cli import DraftboardCLIPlugin, draft_group, query_group


@pytest.fixture
def runner() -> CliRunner:
    """Create a click test runner."""
    return CliRunner()


class TestDraftPreview:
    """Tests for `draft preview`."""

    def test_json_output(self, runner: CliRunner) -> None:
        """Test the JSON rendering of a preview."""
        result = runner.invoke(draft_group, ["preview", "Add a red circle", "--json"])
        assert result.exit_code == 0, result.output
        [draft] = json.loads(result.output)
        assert draft["element_type"] == "circle"
        assert draft["position"] == {"x": 910.0, "y": 490.0}
        assert draft["fill"]["color"] == "#EF4444"

    def test_canvas_size_and_context(self, runner: CliRunner) -> None:
        """Test that --width/--height and --with-context affect placement."""
        result = runner.invoke(
            draft_group,
            ["preview", "a square", "--width", "400", "--height", "200", "--with-context", "--json"],
        )
        assert result.exit_code == 0, result.output
        [draft] = json.loads(result.output)
        assert draft["position"] == {"x": 200.0, "y": 100.0}
        assert draft["size"] == {"width": 100.0, "height": 100.0}

    def test_table_output(self, runner: CliRunner) -> None:
        """Test the table rendering of a preview."""
        result = runner.invoke(draft_group, ["preview", 'Add text that says "Hello"'])
        assert result.exit_code == 0, result.output
        assert "text" in result.output
        assert "Hello" in result.output


class TestCLIPlugin:
    """Tests for the Litestar CLI plugin."""

    def test_registers_command_groups(self) -> None:
        """Test that the plugin adds the draft and query groups."""
        cli = RichGroup(name="litestar")
        DraftboardCLIPlugin().on_cli_init(cli)
        assert cli.commands["draft"] is draft_group
        assert cli.commands["query"] is query_group
        assert set(query_group.commands) == {"canvases", "elements", "messages"}


@pytest.mark.db
class TestQueryCommands:
    """Tests for `query` against an empty database."""

    @pytest.fixture(autouse=True)
    def memory_database(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Point the commands at a throwaway in-memory database."""
        pytest.importorskip("aiosqlite")
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    def test_canvases(self, runner: CliRunner) -> None:
        """Test listing canvases of an empty database."""
        result = runner.invoke(query_group, ["canvases"])
        assert result.exit_code == 0, result.output
        assert "Canvases (showing 0)" in result.output

    def test_elements_of_missing_canvas(self, runner: CliRunner) -> None:
        """Test that an unknown canvas is reported."""
        result = runner.invoke(query_group, ["elements", str(uuid4())])
        assert result.exit_code == 0, result.output
        assert "not found" in result.output
