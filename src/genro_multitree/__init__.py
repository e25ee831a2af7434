# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-MultiTree - Labeled N-ary trees with tree-style text rendering.

A small library providing MultiTree, a node that is also the root of its
own subtree, with sibling-unique labels, shallow and shortest-match deep
search, and ``tree``-command style pretty printing.
"""

__version__ = "0.1.0"

from loguru import logger

from .exceptions import (
    DuplicateKeyError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvariantViolationError,
    MultiTreeError,
)
from .log import Severity, configure_logging, log, log_if, log_value, reset_logging
from .node import MultiTree
from .render import (
    ASCII_STYLE,
    UNICODE_STYLE,
    RenderStyle,
    cancel_escape_sequences,
    render,
)

# Library records stay silent until the host application enables them
logger.disable("genro_multitree")

__all__ = [
    # Core classes
    "MultiTree",
    # Rendering
    "RenderStyle",
    "UNICODE_STYLE",
    "ASCII_STYLE",
    "render",
    "cancel_escape_sequences",
    # Logging
    "Severity",
    "configure_logging",
    "reset_logging",
    "log",
    "log_if",
    "log_value",
    # Exceptions
    "MultiTreeError",
    "InvalidArgumentError",
    "DuplicateKeyError",
    "IndexOutOfRangeError",
    "InvariantViolationError",
]
