# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Diagnostic log sink built on loguru.

Lines have the form::

    [10-18-2026 03:04:05,678] [WARN] at app.loader:load:42 in thread MainThread: message

The library is silent by default; ``configure_logging`` installs the sinks
and enables the ``genro_multitree`` records as well, so insertions and
searches show up at DEBUG level.

Example:
    >>> configure_logging(sys.stderr, level=Severity.INFO)
    >>> log('tree loaded', Severity.INFO)
"""

from __future__ import annotations

import io
import sys
from enum import IntEnum
from typing import Any, Callable

from loguru import logger


class Severity(IntEnum):
    """Log severities, from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4


_LOGURU_LEVELS = {
    Severity.DEBUG: 'DEBUG',
    Severity.INFO: 'INFO',
    Severity.WARN: 'WARNING',
    Severity.ERROR: 'ERROR',
    Severity.FATAL: 'CRITICAL',
}
_SEVERITY_NAMES = {name: severity.name for severity, name in _LOGURU_LEVELS.items()}

_FORMAT = (
    "[{time:MM-DD-YYYY hh:mm:ss,SSS}] [{extra[severity]}] "
    "at {name}:{function}:{line} in thread {thread.name}: {message}\n{exception}"
)

# Handler ids installed by configure_logging
_handler_ids: list[int] = []


def clamp(level: int) -> Severity:
    """Bring any integer level into the DEBUG..FATAL range."""
    return Severity(min(Severity.FATAL, max(Severity.DEBUG, int(level))))


def _formatter(record: dict[str, Any]) -> str:
    level = record['level'].name
    record['extra'].setdefault('severity', _SEVERITY_NAMES.get(level, level))
    return _FORMAT


def _unique(sinks: tuple[Any, ...]) -> list[Any]:
    result: list[Any] = []
    for sink in sinks:
        if sink not in result:
            result.append(sink)
    return result


def _byte_writer(stream: Any) -> Callable[[Any], None]:
    def write(message: Any) -> None:
        stream.write(str(message).encode('utf-8'))
        stream.flush()
    return write


def configure_logging(*sinks: Any, level: int = Severity.DEBUG) -> list[int]:
    """Send log lines to ``sinks`` only, replacing every loguru handler.

    Args:
        *sinks: Text streams, binary streams, file paths or callables
            accepted by loguru. Repeated sinks are written only once.
            Defaults to sys.stdout.
        level: Minimum severity, clamped into range.

    Returns:
        The loguru handler ids that were added.
    """
    # Drop every handler, loguru's default stderr one included
    logger.remove()
    _handler_ids.clear()
    threshold = _LOGURU_LEVELS[clamp(level)]
    for sink in _unique(sinks or (sys.stdout,)):
        if isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
            sink = _byte_writer(sink)
        _handler_ids.append(logger.add(sink, level=threshold, format=_formatter))
    logger.enable('genro_multitree')
    return list(_handler_ids)


def reset_logging() -> None:
    """Remove the sinks installed by ``configure_logging``."""
    while _handler_ids:
        logger.remove(_handler_ids.pop())
    logger.disable('genro_multitree')


def _emit(message: str, severity: int, depth: int) -> None:
    severity = clamp(severity)
    logger.opt(depth=depth + 1).bind(severity=severity.name).log(
        _LOGURU_LEVELS[severity], message
    )


def log(message: str, severity: int = Severity.INFO) -> None:
    """Write ``message`` with the caller as the reported call-site."""
    _emit(message, severity, depth=1)


def log_if(message: str, severity: int, condition: bool) -> None:
    """Write ``message`` only when ``condition`` is true."""
    if condition:
        _emit(message, severity, depth=1)


def log_value(obj: Any, describe: bool = True) -> None:
    """Write ``obj`` at DEBUG level, optionally prefixed with its type."""
    message = f"variable of {type(obj)} = {obj}" if describe else str(obj)
    _emit(message, Severity.DEBUG, depth=1)
