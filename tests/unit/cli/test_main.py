"""Unit tests for CLI main entry point."""

from scaffold_ledger import __version__
from scaffold_ledger.cli import cli


class TestCLIMain:
    """Test suite for CLI main entry point."""

    def test_cli_help_text(self, runner):
        """Test that CLI help text is informative."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Scaffold Ledger CLI" in result.output
        assert "Commands:" in result.output

    def test_cli_version_flag(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_commands_registered(self, runner):
        result = runner.invoke(cli, ["--help"])

        for command in ("recompute", "breakdown", "activities", "most-used"):
            assert command in result.output

    def test_unknown_command_shows_error(self, runner):
        """Test that unknown commands show helpful error."""
        result = runner.invoke(cli, ["unknown-command"])

        assert result.exit_code != 0
        assert "No such command" in result.output
