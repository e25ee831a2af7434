# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Text rendering of a MultiTree, in the style of the ``tree`` command.

Example:
    >>> print(render(languages))
    Languages
    ├── Compiled
    │    └── Java
    └── Interpreted

Every ancestor column of a line is drawn either as a continuation bar, when
that ancestor still has children to print below, or as blank space. The
renderer keeps the indentation built so far next to each pending node on an
explicit stack, so depth is not bounded by recursion, rendering never touches
the nodes themselves, and the same tree always renders the same text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from .node import MultiTree


_ESCAPE_TABLE = str.maketrans({'\t': '\\t', '\n': '\\n', '\r': '\\r'})


def cancel_escape_sequences(text: str) -> str:
    """Replace tab, newline and carriage return with their visible escapes.

    Example:
        >>> cancel_escape_sequences('a\\tb')
        'a\\\\tb'
    """
    return text.translate(_ESCAPE_TABLE)


@dataclass(frozen=True)
class RenderStyle:
    """Glyphs and spacing used to draw the tree.

    Attributes:
        vertical: Continuation bar drawn under an ancestor with more children.
        corner: Connector of the last child.
        tee: Connector of every other child.
        horizontal: Stroke repeated twice after the connector.
        padding: Spaces following each ancestor column.
    """

    vertical: str = '│'
    corner: str = '└'
    tee: str = '├'
    horizontal: str = '─'
    padding: int = 4

    def __post_init__(self) -> None:
        if self.padding < 0:
            raise InvalidArgumentError(f"padding must be >= 0, got {self.padding}")

    def column(self, has_more: bool) -> str:
        """Indentation drawn for one ancestor level."""
        return (self.vertical if has_more else ' ') + ' ' * self.padding

    def connector(self, is_last: bool) -> str:
        """Branch glyph placed in front of a child's label."""
        return (self.corner if is_last else self.tee) + self.horizontal * 2


UNICODE_STYLE = RenderStyle()
ASCII_STYLE = RenderStyle(vertical='|', corner='`', tee='+', horizontal='-')


def render(
    tree: MultiTree,
    style: RenderStyle = UNICODE_STYLE,
    escape: bool | None = None,
) -> str:
    """Render ``tree`` and all of its descendants as multi-line text.

    Args:
        tree: Node whose subtree is rendered; it is drawn as the top line
            even when it has a parent.
        style: Glyph set, ``UNICODE_STYLE`` by default.
        escape: Neutralize tabs and line breaks in labels. ``None`` uses the
            tree's own ``escape_sequences`` preference.

    Returns:
        The rendering, one node per line, without a trailing newline.
    """
    if escape is None:
        escape = tree.escape_sequences

    def label(node: MultiTree) -> str:
        text = str(node.value)
        return cancel_escape_sequences(text) if escape else text

    lines = [label(tree)]
    # (node, indentation of its line, is last among its siblings)
    stack = [(child, '', is_last) for child, is_last in _reversed_with_last(tree)]
    while stack:
        node, prefix, is_last = stack.pop()
        lines.append(f"{prefix}{style.connector(is_last)} {label(node)}")
        child_prefix = prefix + style.column(not is_last)
        stack.extend(
            (child, child_prefix, child_is_last)
            for child, child_is_last in _reversed_with_last(node)
        )
    return '\n'.join(lines)


def _reversed_with_last(node: MultiTree) -> Iterator[tuple[MultiTree, bool]]:
    children = node.children
    last = len(children) - 1
    for i in range(last, -1, -1):
        yield children[i], i == last
