# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MultiTree - a labeled N-ary tree where every node is also a tree.

A MultiTree instance holds a payload (its label) and an ordered list of
children. Payloads are unique among siblings: each node keeps the set of its
children's payloads, which gives O(1) duplicate checks on insert and an O(1)
pre-check before scanning the children.

Example:
    >>> languages = MultiTree('Languages')
    >>> compiled, interpreted = languages.insert('Compiled', 'Interpreted')
    >>> compiled.insert('Java')
    [MultiTree('Java', children=[])]
    >>> languages.deep_search('Java').parent is compiled
    True
    >>> print(languages)
    Languages
    ├── Compiled
    │    └── Java
    └── Interpreted

Ownership goes strictly downwards: a node holds its children, while the
upward link is a weak reference. Once inserted, a node stays attached to its
parent; there is no detach or re-parenting operation.
"""

from __future__ import annotations

import sys
import weakref
from typing import Any, Iterator, TextIO

from loguru import logger

from .exceptions import (
    DuplicateKeyError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvariantViolationError,
)
from .render import UNICODE_STYLE, RenderStyle, render


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _check_hashable(value: Any) -> None:
    if not _is_hashable(value):
        raise InvalidArgumentError(
            f"Node value must be hashable, got {type(value).__name__}"
        )


class MultiTree:
    """A node of a labeled N-ary tree, and the root of its own subtree.

    Attributes:
        escape_sequences: When True (default), tabs and line breaks in
            payloads are shown as ``\\t``, ``\\n``, ``\\r`` when rendering.

    Example:
        >>> tree = MultiTree('root')
        >>> tree.insert('a', 'b')
        [MultiTree('a', children=[]), MultiTree('b', children=[])]
        >>> tree.child_at(1).value
        'b'
    """

    __slots__ = ('_value', '_parent', '_children', '_entries',
                 'escape_sequences', '__weakref__')

    def __init__(self, value: Any, *, escape_sequences: bool = True) -> None:
        """Initialize a detached MultiTree node.

        Args:
            value: The node's payload. Must not be None and must be hashable.
            escape_sequences: Rendering preference, see class attributes.

        Raises:
            InvalidArgumentError: If value is None or unhashable.
        """
        if value is None:
            raise InvalidArgumentError("Root node value cannot be None")
        _check_hashable(value)
        self._value = value
        self._parent: weakref.ref[MultiTree] | None = None
        self._children: list[MultiTree] = []
        self._entries: set[Any] = set()
        self.escape_sequences = escape_sequences

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        labels = [child._value for child in self._children]
        return f"{type(self).__name__}({self._value!r}, children={labels!r})"

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        """Return the number of direct children."""
        return len(self._children)

    def __iter__(self) -> Iterator[MultiTree]:
        """Iterate over direct children in insertion order."""
        return iter(self._children)

    def __contains__(self, value: Any) -> bool:
        """Check if a direct child carries ``value``."""
        return _is_hashable(value) and value in self._entries

    def __eq__(self, other: object) -> bool:
        """Compare payloads and children level by level; parents are ignored."""
        if self is other:
            return True
        if not isinstance(other, MultiTree):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if left._value != right._value or len(left._children) != len(right._children):
                return False
            pending.extend(zip(left._children, right._children))
        return True

    def __hash__(self) -> int:
        return hash(self._value)

    # ==================== Properties ====================

    @property
    def value(self) -> Any:
        """The node's payload."""
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        if value is None:
            raise InvalidArgumentError("Node value cannot be None")
        _check_hashable(value)
        parent = self.parent
        if parent is not None and value != self._value:
            if value in parent._entries:
                raise DuplicateKeyError(
                    f"Duplicate entry into tree: {value!r} already under {parent._value!r}"
                )
            parent._entries.discard(self._value)
            parent._entries.add(value)
        self._value = value

    @property
    def parent(self) -> MultiTree | None:
        """The node this one was inserted into, or None for a root."""
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> tuple[MultiTree, ...]:
        """Direct children in insertion order."""
        return tuple(self._children)

    @property
    def entries(self) -> frozenset[Any]:
        """Payloads carried by the direct children."""
        return frozenset(self._entries)

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return not self._children

    @property
    def is_root(self) -> bool:
        """True if this node has no parent."""
        return self.parent is None

    @property
    def root(self) -> MultiTree:
        """Get the topmost ancestor of this node."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def depth(self) -> int:
        """Get the depth of this node in the hierarchy (root=0)."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    # ==================== Insertion ====================

    def insert(self, *values: Any) -> list[MultiTree]:
        """Insert children from payloads or prebuilt nodes.

        Plain payloads are wrapped in new nodes that inherit this node's
        ``escape_sequences`` preference; MultiTree arguments are attached
        as they are.

        Args:
            *values: Payloads and/or detached MultiTree nodes.

        Returns:
            The inserted child nodes, in argument order.

        Raises:
            InvalidArgumentError: If any argument is None.
            DuplicateKeyError: If a payload is already among the children.
        """
        if any(value is None for value in values):
            raise InvalidArgumentError("Cannot insert None into tree")
        nodes = [
            value if isinstance(value, MultiTree)
            else MultiTree(value, escape_sequences=self.escape_sequences)
            for value in values
        ]
        return self.insert_nodes(*nodes)

    def insert_nodes(self, *nodes: MultiTree) -> list[MultiTree]:
        """Attach prebuilt nodes as children, all or nothing.

        Every node is validated before the first one is attached, so a
        failing call leaves this node unchanged.

        Args:
            *nodes: Detached MultiTree nodes.

        Returns:
            The inserted nodes, in argument order.

        Raises:
            InvalidArgumentError: If a node is None, not a MultiTree, already
                has a parent, or is this node or one of its ancestors.
            DuplicateKeyError: If a payload is already among the children or
                appears twice in ``nodes``.
        """
        seen: set[Any] = set()
        for node in nodes:
            self._check_insertable(node)
            if node._value in self._entries or node._value in seen:
                raise DuplicateKeyError(f"Duplicate entry into tree: {node!r}")
            seen.add(node._value)

        for node in nodes:
            node._parent = weakref.ref(self)
            self._children.append(node)
            self._entries.add(node._value)
        if nodes:
            logger.debug(
                "Inserted {} under {!r}", [node._value for node in nodes], self._value
            )
        return list(nodes)

    def _check_insertable(self, node: Any) -> None:
        if node is None:
            raise InvalidArgumentError("Cannot insert None into tree")
        if not isinstance(node, MultiTree):
            raise InvalidArgumentError(
                f"Expected MultiTree, got {type(node).__name__}"
            )
        if node.parent is not None:
            raise InvalidArgumentError(
                f"{node!r} is already attached to {node.parent._value!r}"
            )
        ancestor: MultiTree | None = self
        while ancestor is not None:
            if ancestor is node:
                raise InvalidArgumentError(
                    f"Inserting {node!r} under {self._value!r} would create a cycle"
                )
            ancestor = ancestor.parent

    # ==================== Lookup ====================

    def child_at(self, index: int) -> MultiTree:
        """Get the direct child at ``index`` in insertion order.

        Raises:
            IndexOutOfRangeError: If index is negative or past the last child.
        """
        if index < 0 or index >= len(self._children):
            raise IndexOutOfRangeError(
                f"Child index {index} out of range (0-{len(self._children) - 1})"
            )
        return self._children[index]

    def search_children(self, value: Any) -> MultiTree | None:
        """Find the direct child carrying ``value``.

        Only the children of this node are considered, never deeper
        descendants.

        Returns:
            The matching child, or None if not found.
        """
        if not _is_hashable(value) or value not in self._entries:
            return None
        for child in self._children:
            if child._value == value:
                return child
        return None

    def deep_search(self, value: Any) -> MultiTree | None:
        """Find the shallowest node carrying ``value`` in this subtree.

        This node is checked first, then the tree is inspected one level at
        a time: the children's payload sets of each level are queried in
        insertion order, so a match closer to this node always wins and, at
        equal depth, the match reached first in insertion order wins.

        Returns:
            The matching node, or None if no node carries ``value``.

        Raises:
            InvariantViolationError: If several children of the same node
                carry ``value``.
        """
        if not _is_hashable(value):
            return None
        if self._value == value:
            return self
        level: list[MultiTree] = [self]
        while level:
            for node in level:
                if value in node._entries:
                    found = node._single_child_with(value)
                    logger.debug(
                        "Deep search for {!r} from {!r} matched at depth {}",
                        value, self._value, found.depth - self.depth,
                    )
                    return found
            level = [child for node in level for child in node._children]
        logger.debug("Deep search for {!r} from {!r} found nothing", value, self._value)
        return None

    def _single_child_with(self, value: Any) -> MultiTree:
        matches = [child for child in self._children if child._value == value]
        if len(matches) != 1:
            logger.error(
                "{} children of {!r} carry {!r}", len(matches), self._value, value
            )
            raise InvariantViolationError(
                f"Multiple children of {self!r} have the same value {value!r}"
                if matches else
                f"Child value {value!r} of {self!r} is recorded but not present"
            )
        return matches[0]

    # ==================== Walk ====================

    def walk(self) -> Iterator[MultiTree]:
        """Yield every descendant in pre-order, children in insertion order.

        Example:
            >>> [node.value for node in languages.walk()]
            ['Compiled', 'Java', 'Interpreted']
        """
        stack = list(reversed(self._children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    # ==================== Rendering ====================

    def render(
        self,
        style: RenderStyle = UNICODE_STYLE,
        escape: bool | None = None,
    ) -> str:
        """Get this subtree as text resembling the ``tree`` command output.

        See ``genro_multitree.render.render`` for the arguments.
        """
        return render(self, style=style, escape=escape)

    def print_tree(
        self,
        file: TextIO | None = None,
        style: RenderStyle = UNICODE_STYLE,
    ) -> None:
        """Write the rendering of this subtree followed by a newline.

        Args:
            file: Destination stream, sys.stdout by default.
            style: Glyph set used for the rendering.
        """
        print(self.render(style=style), file=file if file is not None else sys.stdout)
