"""
PATRICIA tree (radix tree) over path-like byte-string keys.

The tree is a set: a key is either stored or not, there is no payload.
Every node holds a *fragment* and the concatenation of fragments from the
root down to a node is the prefix shared by everything stored beneath it.

Techniques used:
  - Shared descent: lookup, delete, insert and prefix search all call
    :meth:`PatriciaTree._descend`, which classifies how the key meets the
    node it lands on.  Each operation only differs in what it does with
    that classification.
  - Atomic splits: replacement nodes are fully built before the node being
    split is rewritten, so a ``MemoryError`` mid-split leaves the tree intact.
  - Iterative traversal: descent, subtree release and both enumerations use
    loops and explicit stacks, so key depth never hits the recursion limit.

Complexity (n = key length, m = number of results, b = branching factor):
  add / lookup / delete       - O(n * b)
  lookup_prefix_full/partial  - O(n * b + size of the enumerated subtree)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterator

from pathtrie.children import ChildList, add_child, find_child
from pathtrie.errors import InvalidArgumentError
from pathtrie.fragments import (
    as_delimiter,
    as_key,
    as_text,
    common_prefix_length,
    substring,
)
from pathtrie.sink import ResultSink
from pathtrie.stats import TreeStats

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Node:
    """One fragment of one or more stored keys."""

    fragment: bytes = b""
    children: ChildList = field(default_factory=ChildList)
    # The path from the root to this node is itself a stored key.  Leaves
    # are always terminal.
    terminal: bool = False

    def is_leaf(self) -> bool:
        return self.children.is_empty()


class Match(enum.Enum):
    """How a key meets the node the descent stopped at."""

    MISS = "miss"            # no child continues the key
    EXACT = "exact"          # key ends exactly at the end of the fragment
    INTERIOR = "interior"    # key and fragment diverge inside the fragment
    BOUNDARY = "boundary"    # key ends inside the fragment


@dataclass
class Descent:
    match: Match
    # For MISS this is the node a new leaf would hang off.
    node: Node
    # Ancestors of ``node``, root first.
    path: list[Node]
    # Unmatched part of the key, relative to ``node``.  For MISS it is the
    # suffix that no child accounts for.
    remaining: bytes
    # Common prefix length between ``remaining`` and ``node.fragment``.
    common: int

    @property
    def parent(self) -> Node | None:
        return self.path[-1] if self.path else None


class PatriciaTree:
    """A compressed prefix tree storing a set of path-like keys.

    >>> t = PatriciaTree()
    >>> t.add("usr/bin/env")
    True
    >>> t.add("usr/lib")
    True
    >>> t.lookup("usr/lib")
    True
    >>> list(t.lookup_prefix_partial("usr/"))
    ['bin', 'lib']
    >>> list(t.lookup_prefix_full("usr/b"))
    ['usr/bin/env']
    """

    def __init__(
        self,
        delimiter: str | bytes | int = b"/",
        stats: TreeStats | None = None,
    ) -> None:
        self.delimiter = as_delimiter(delimiter)
        self.stats = stats if stats is not None else TreeStats()
        self._root = self._new_node(b"")
        self._size = 0
        self._destroyed = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, key: str | bytes) -> bool:
        """Store *key*.  Returns ``False`` if it was already present."""
        self._check_alive()
        data = as_key(key)
        descent = self._descend(data)
        node = descent.node

        if descent.match is Match.MISS:
            add_child(node, self._new_node(descent.remaining, terminal=True))
        elif descent.match is Match.EXACT:
            if node.terminal:
                return False
            node.terminal = True
        elif descent.match is Match.INTERIOR:
            self._split(node, descent.common, descent.remaining[descent.common:])
        else:
            self._split(node, descent.common, None)

        self._size += 1
        logger.debug("Added key=%r (%s)", data, descent.match.value)
        return True

    def lookup(self, key: str | bytes) -> bool:
        """Return ``True`` if *key* is stored."""
        self._check_alive()
        descent = self._descend(as_key(key))
        return descent.match is Match.EXACT and descent.node.terminal

    def delete(self, key: str | bytes) -> bool:
        """Remove *key* together with every stored key it is a prefix of.

        Returns ``False`` and leaves the tree untouched when *key* is not
        stored.
        """
        self._check_alive()
        data = as_key(key)
        descent = self._descend(data)
        if descent.match is not Match.EXACT or not descent.node.terminal:
            return False

        parent = descent.parent
        parent.children.remove(descent.node)
        removed = self._release(descent.node)
        self._size -= removed
        self._prune(descent.path)
        logger.debug("Deleted key=%r (%d keys removed)", data, removed)
        return True

    def lookup_prefix_full(
        self,
        prefix: str | bytes,
        sink: ResultSink | None = None,
    ) -> ResultSink | None:
        """Collect every stored key beginning with *prefix*.

        Returns ``None`` when nothing is stored under *prefix*, otherwise
        the sink the keys were appended to, in lexicographic byte order.
        """
        self._check_alive()
        located = self._locate(as_key(prefix, allow_empty=True))
        if located is None:
            return None
        node, base = located
        if sink is None:
            sink = ResultSink()
        for path in self._walk(node, base + node.fragment):
            sink.append(as_text(path))
        return sink

    def lookup_prefix_partial(
        self,
        prefix: str | bytes,
        sink: ResultSink | None = None,
    ) -> ResultSink | None:
        """Collect the distinct next segments below *prefix*.

        Each stored key under *prefix* contributes the text following the
        prefix up to (not including) the next delimiter, like one
        directory listing level.  When the prefix does not already end
        with the delimiter, a single delimiter directly after it is
        skipped, so ``"usr"`` and ``"usr/"`` list the same entries.
        Returns ``None`` when nothing is stored under *prefix*.
        """
        self._check_alive()
        data = as_key(prefix, allow_empty=True)
        located = self._locate(data)
        if located is None:
            return None
        node, base = located
        if sink is None:
            sink = ResultSink()

        offset = len(data)
        delimiter = bytes([self.delimiter])
        skip_leading = not data.endswith(delimiter)
        seen: set[bytes] = set()

        stack: list[tuple[Node, bytes]] = [(node, base + node.fragment)]
        while stack:
            current, path = stack.pop()
            rest = path[offset:]
            if skip_leading and rest.startswith(delimiter):
                rest = rest[1:]
            cut = rest.find(delimiter)
            if cut >= 0:
                # Segment complete; nothing deeper on this branch is listed.
                segment = rest[:cut]
            elif current.terminal:
                segment = rest
            else:
                segment = b""
            if segment and segment not in seen:
                seen.add(segment)
                sink.append(as_text(segment))
            if cut >= 0:
                continue
            for child in reversed(current.children):
                stack.append((child, path + child.fragment))
        return sink

    def destroy(self) -> None:
        """Release every node.  The tree cannot be used afterwards."""
        if self._destroyed:
            return
        self._release(self._root)
        self._size = 0
        self._destroyed = True
        logger.debug("Destroyed tree")

    def get_key_count(self) -> int:
        """Count stored keys by walking the whole tree."""
        self._check_alive()
        count = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            if node.terminal:
                count += 1
            stack.extend(node.children)
        return count

    def print_stats(self) -> dict[str, int]:
        """Log key, node and byte totals and return them."""
        self.stats.total_keys = self.get_key_count()
        self.stats.log()
        return self.stats.as_dict()

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, bytes)) or not key:
            return False
        return self.lookup(key)

    def __iter__(self) -> Iterator[str]:
        self._check_alive()
        for path in self._walk(self._root, b""):
            yield as_text(path)

    # ------------------------------------------------------------------
    # Structural checks
    # ------------------------------------------------------------------

    def check_invariants(self) -> None:
        """Raise ``AssertionError`` if the node structure is inconsistent."""
        self._check_alive()
        if self._root.fragment != b"":
            raise AssertionError("root fragment must be empty")
        stack = [self._root]
        while stack:
            node = stack.pop()
            children = list(node.children)
            if node is not self._root:
                if not node.fragment:
                    raise AssertionError("only the root may hold an empty fragment")
                if not children and not node.terminal:
                    raise AssertionError(
                        f"leaf {node.fragment!r} does not represent a stored key"
                    )
            firsts = [child.fragment[0] for child in children]
            if len(firsts) != len(set(firsts)):
                raise AssertionError(f"children of {node.fragment!r} share a first byte")
            fragments = [child.fragment for child in children]
            if fragments != sorted(fragments):
                raise AssertionError(f"children of {node.fragment!r} are out of order")
            stack.extend(children)

    def snapshot(self) -> tuple:
        """Nested ``(fragment, terminal, children)`` tuples for comparisons."""
        self._check_alive()

        def freeze(node: Node) -> tuple:
            return (
                node.fragment,
                node.terminal,
                tuple(freeze(child) for child in node.children),
            )

        # Only used by tests on small trees, so plain recursion is fine here.
        return freeze(self._root)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_alive(self) -> None:
        if self._destroyed:
            raise InvalidArgumentError("tree has been destroyed")

    @staticmethod
    def _build_node(
        fragment: bytes,
        children: ChildList | None = None,
        terminal: bool = False,
    ) -> Node:
        """Allocate a node without counting it."""
        return Node(
            fragment=fragment,
            children=children if children is not None else ChildList(),
            terminal=terminal,
        )

    def _new_node(
        self,
        fragment: bytes,
        children: ChildList | None = None,
        terminal: bool = False,
    ) -> Node:
        node = self._build_node(fragment, children, terminal)
        self.stats.node_created(fragment)
        return node

    def _descend(self, key: bytes) -> Descent:
        """Walk from the root towards *key* and classify where it stops."""
        node = self._root
        path: list[Node] = []
        remaining = key
        while True:
            fragment = node.fragment
            common = common_prefix_length(remaining, fragment)
            if (
                node is self._root
                or common == 0
                or (common < len(remaining) and common >= len(fragment))
            ):
                rest = remaining[common:]
                child = find_child(node, rest[0])
                if child is None:
                    return Descent(Match.MISS, node, path, rest, common)
                path.append(node)
                node, remaining = child, rest
                continue
            if common == len(remaining):
                if common == len(fragment):
                    return Descent(Match.EXACT, node, path, remaining, common)
                return Descent(Match.BOUNDARY, node, path, remaining, common)
            return Descent(Match.INTERIOR, node, path, remaining, common)

    def _split(self, node: Node, at: int, tail: bytes | None) -> None:
        """Cut *node*'s fragment after *at* bytes.

        The old remainder moves to a new child that takes over the old
        children and terminal flag.  With *tail* a second, leaf child is
        created for it; without one *node* itself becomes the stored key.
        """
        fragment = node.fragment
        head = substring(fragment, 0, at)
        moved = self._build_node(
            substring(fragment, at, len(fragment) - at),
            children=node.children,
            terminal=node.terminal,
        )
        leaf = self._build_node(tail, terminal=True) if tail is not None else None
        children = ChildList()

        created = [moved] if leaf is None else [moved, leaf]
        self.stats.node_created(*(new.fragment for new in created))
        self.stats.fragment_changed(fragment, head)
        node.fragment = head
        node.children = children
        node.terminal = leaf is None
        add_child(node, moved)
        if leaf is not None:
            add_child(node, leaf)

    def _release(self, node: Node) -> int:
        """Free *node* and its whole subtree; return the keys it held."""
        keys = 0
        stack = [node]
        while stack:
            current = stack.pop()
            stack.extend(current.children)
            if current.terminal:
                keys += 1
            current.children.destroy()
            self.stats.node_released(current.fragment)
        return keys

    def _prune(self, path: list[Node]) -> None:
        """Drop ancestors left as childless, non-terminal nodes."""
        for i in range(len(path) - 1, 0, -1):
            node = path[i]
            if node.terminal or not node.is_leaf():
                break
            path[i - 1].children.remove(node)
            self._release(node)

    def _locate(self, data: bytes) -> tuple[Node, bytes] | None:
        """Find the node *data* ends in and the part of *data* above it."""
        if not data:
            return self._root, b""
        descent = self._descend(data)
        if descent.match not in (Match.EXACT, Match.BOUNDARY):
            return None
        return descent.node, data[:len(data) - descent.common]

    @staticmethod
    def _walk(node: Node, path: bytes) -> Iterator[bytes]:
        """Yield the full path of every terminal node, depth first."""
        stack: list[tuple[Node, bytes]] = [(node, path)]
        while stack:
            current, acc = stack.pop()
            if current.terminal:
                yield acc
            for child in reversed(current.children):
                stack.append((child, acc + child.fragment))


def init(delimiter: str | bytes | int = b"/", stats: TreeStats | None = None) -> PatriciaTree:
    """Create an empty tree."""
    return PatriciaTree(delimiter=delimiter, stats=stats)
