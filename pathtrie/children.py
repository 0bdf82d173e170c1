"""Ordered child collection and the lexicographic ordering policy.

Each node owns one :class:`ChildList`.  The tree only relies on the small set
of primitives below, so the backing store (a plain Python list) can change
without touching the matching engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from pathtrie.tree import Node


class ChildList:
    """Ordered collection of child nodes with identity-based removal."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[Node] = []

    def is_empty(self) -> bool:
        return not self._items

    def insert_head(self, node: Node) -> None:
        self._items.insert(0, node)

    def append(self, node: Node) -> None:
        self._items.append(node)

    def insert_before(self, existing: Node, node: Node) -> None:
        """Insert *node* immediately before *existing*."""
        self._items.insert(self._index(existing), node)

    def remove(self, node: Node) -> None:
        del self._items[self._index(node)]

    def head(self) -> Node | None:
        return self._items[0] if self._items else None

    def next(self, current: Node) -> Node | None:
        i = self._index(current) + 1
        return self._items[i] if i < len(self._items) else None

    def destroy(self) -> None:
        """Drop the collection; the nodes themselves are left alone."""
        self._items = []

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._items))

    def __reversed__(self) -> Iterator[Node]:
        return reversed(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def _index(self, node: Node) -> int:
        for i, item in enumerate(self._items):
            if item is node:
                return i
        raise LookupError(f"node {node.fragment!r} is not in this child list")


# ---------------------------------------------------------------------------
# Ordering policy
# ---------------------------------------------------------------------------


def add_child(parent: Node, child: Node) -> None:
    """Attach *child* to *parent*, keeping siblings sorted by fragment."""
    children = parent.children
    if children.is_empty():
        children.insert_head(child)
        return
    node = children.head()
    while node is not None:
        if child.fragment < node.fragment:
            children.insert_before(node, child)
            return
        node = children.next(node)
    children.append(child)


def find_child(parent: Node, first_byte: int) -> Node | None:
    """Return the child whose fragment starts with *first_byte*, if any."""
    for child in parent.children:
        if child.fragment[0] == first_byte:
            return child
    return None
