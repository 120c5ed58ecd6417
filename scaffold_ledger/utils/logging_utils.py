"""Logging helpers for the ledger.

Two kinds of help live here:

- Structured fields. ``LogContext`` pushes fields such as ``project_id``
  or ``correlation_id`` for the duration of a block. ``LogFieldsFilter``
  (installed on every handler by ``configure_logging``) copies them onto
  each record, where the JSON formatter emits them as top-level keys.
- Safe payload logging. ``redact_secrets`` masks credential values before
  configuration dictionaries reach a log line.
"""

import contextvars
import functools
import logging
import time
import uuid
from typing import Any, Callable, Dict, Optional, Union

REDACTED = "[redacted]"

# Key fragments that mark a value as a secret (matched case-insensitively)
SECRET_KEY_MARKERS = (
    "password",
    "secret",
    "token",
    "private_key",
    "api_key",
    "credential",
    "authorization",
)

_log_fields: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "scaffold_ledger_log_fields", default={}
)


def new_correlation_id() -> str:
    """Return a fresh id tying together the log lines of one mutation chain."""
    return uuid.uuid4().hex


def current_log_fields() -> Dict[str, Any]:
    """Return a copy of the structured fields active in this context."""
    return dict(_log_fields.get())


class LogContext:
    """
    Attach structured fields to every record logged inside a ``with`` block.

    Nested blocks see the union of all active fields; inner values win on
    key clashes and the outer set is restored on exit, also when the block
    raises.

    Example:
        with LogContext(project_id="p-1", aggregate="cost"):
            logger.info("Recomputing")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_fields.set({**_log_fields.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_fields.reset(self._token)
            self._token = None


class LogFieldsFilter(logging.Filter):
    """Copies the active ``LogContext`` fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in current_log_fields().items():
            setattr(record, key, value)
        return True


def _is_secret_key(key: Any) -> bool:
    lowered = str(key).lower()
    return any(marker in lowered for marker in SECRET_KEY_MARKERS)


def redact_secrets(payload: Any) -> Any:
    """
    Return a copy of ``payload`` with secret values masked.

    Dictionaries are walked recursively, including dictionaries inside
    lists. A key counts as secret when it contains one of
    ``SECRET_KEY_MARKERS``; its value becomes ``REDACTED`` unless it is
    None, so absent credentials stay visibly absent.

    Args:
        payload: Mapping (or list, or scalar) about to be logged

    Returns:
        A redacted copy; scalars are returned unchanged
    """
    if isinstance(payload, dict):
        return {
            key: (
                (None if value is None else REDACTED)
                if _is_secret_key(key)
                else redact_secrets(value)
            )
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact_secrets(item) for item in payload]
    return payload


def _describe_arguments(args: tuple, kwargs: Dict[str, Any]) -> str:
    parts = [repr(arg) for arg in args]
    parts.extend(f"{name}={value!r}" for name, value in kwargs.items())
    return ", ".join(parts)


def log_calls(
    func: Optional[Callable] = None,
    *,
    level: Union[int, str] = logging.DEBUG,
    include_args: bool = False,
) -> Callable:
    """
    Decorator logging the start, duration and failure of a call.

    Usable bare (``@log_calls``) or with options
    (``@log_calls(level="INFO", include_args=True)``). Failures are logged
    with the traceback and re-raised unchanged.
    """
    numeric_level = (
        logging.getLevelName(level.upper()) if isinstance(level, str) else level
    )

    def decorate(target: Callable) -> Callable:
        log = logging.getLogger(target.__module__)
        name = target.__qualname__

        @functools.wraps(target)
        def wrapper(*args, **kwargs):
            if include_args:
                log.log(
                    numeric_level,
                    "Calling %s(%s)",
                    name,
                    _describe_arguments(args, kwargs),
                )
            else:
                log.log(numeric_level, "Calling %s", name)

            started = time.perf_counter()
            try:
                result = target(*args, **kwargs)
            except Exception as error:
                log.exception("%s raised %s: %s", name, type(error).__name__, error)
                raise

            elapsed_ms = (time.perf_counter() - started) * 1000
            log.log(numeric_level, "%s finished in %.1f ms", name, elapsed_ms)
            return result

        return wrapper

    if func is None:
        return decorate
    return decorate(func)
