"""Error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
import pydantic
from googleapiclient.errors import HttpError

from scaffold_ledger.cli.utils.formatters import format_error, format_warning
from scaffold_ledger.errors import NotFoundError, StoreError, ValidationError
from scaffold_ledger.services.retry_handler import CircuitBreakerError

EXIT_CONFIGURATION = 1
EXIT_STORE = 2
EXIT_VALIDATION = 3
EXIT_NOT_FOUND = 4
EXIT_PERMISSION = 6
EXIT_UNAVAILABLE = 8
EXIT_CANCELLED = 130
EXIT_UNEXPECTED = 255


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


def _hint(text: str) -> None:
    click.echo(format_warning(f"Hint: {text}"))


def _http_status(error: BaseException) -> Optional[int]:
    cause = error.__cause__
    while cause is not None:
        if isinstance(cause, HttpError):
            return cause.resp.status
        cause = cause.__cause__
    return None


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace

    Returns:
        Exit code for the error type
    """
    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        if error.recovery_hint:
            _hint(error.recovery_hint)
        return EXIT_CONFIGURATION

    if isinstance(error, pydantic.ValidationError):
        click.echo(format_error("Configuration Error: invalid settings"))
        for detail in error.errors():
            location = ".".join(str(part) for part in detail.get("loc", ()))
            click.echo(f"  - {location}: {detail.get('msg')}")
        _hint("Check your .env file and environment variables")
        return EXIT_CONFIGURATION

    if isinstance(error, ValidationError):
        click.echo(format_error(f"Validation Error: {error}"))
        if error.report is not None and debug:
            click.echo(error.report.format())
        return EXIT_VALIDATION

    if isinstance(error, NotFoundError):
        click.echo(format_error(f"Not Found: {error}"))
        _hint("Verify the project or entry id")
        return EXIT_NOT_FOUND

    if isinstance(error, CircuitBreakerError):
        click.echo(format_error("Document store temporarily unavailable"))
        _hint("Too many consecutive failures; wait a minute before retrying")
        return EXIT_UNAVAILABLE

    if isinstance(error, StoreError):
        status_code = _http_status(error)
        if status_code in (401, 403):
            click.echo(format_error("Permission Denied"))
            _hint(
                "Check the service account credentials and its Firestore "
                "access (or run `gcloud auth application-default login`)"
            )
            return EXIT_PERMISSION
        click.echo(format_error(f"Store Error: {error}"))
        return EXIT_STORE

    if isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return EXIT_CANCELLED

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
    click.echo(str(error))
    if debug:
        click.echo("\nFull stack trace:")
        click.echo(traceback.format_exc())
    else:
        click.echo(format_warning("\nRun with --debug flag for full stack trace"))
    return EXIT_UNEXPECTED


def with_error_handling(debug: bool = False):
    """
    Context manager that turns exceptions into messages and exit codes.

    Example:
        @click.command()
        @click.option("--debug", is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                ...
    """

    class ErrorHandler:
        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and isinstance(exc_val, Exception):
                sys.exit(handle_cli_error(exc_val, self.show_debug))
            return False

    return ErrorHandler(debug)
