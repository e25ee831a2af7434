# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MultiTree exceptions."""

from __future__ import annotations


class MultiTreeError(Exception):
    """Base exception for MultiTree errors."""

    pass


class InvalidArgumentError(MultiTreeError, ValueError):
    """Raised when a missing payload or an unusable node is supplied."""

    pass


class DuplicateKeyError(MultiTreeError, KeyError):
    """Raised when a payload is already carried by a sibling."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ''


class IndexOutOfRangeError(MultiTreeError, IndexError):
    """Raised when a child position is outside the children list."""

    pass


class InvariantViolationError(MultiTreeError, RuntimeError):
    """Raised when the tree is found in an inconsistent state.

    Only reachable if the children of a node were altered bypassing
    ``insert``; it signals a programming error, not a recoverable condition.
    """

    pass
