"""Counters updated by a tree as nodes are created and released."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)


@dataclass
class TreeStats:
    """Diagnostic counters; they never influence lookups or mutations.

    ``total_bytes`` is the sum of fragment lengths currently held by live
    nodes.  ``total_keys`` is only refreshed by :meth:`PatriciaTree.print_stats`.
    """

    total_nodes: int = 0
    total_bytes: int = 0
    total_keys: int = 0

    def node_created(self, *fragments: bytes) -> None:
        self.total_nodes += len(fragments)
        self.total_bytes += sum(len(fragment) for fragment in fragments)

    def node_released(self, fragment: bytes) -> None:
        self.total_nodes -= 1
        self.total_bytes -= len(fragment)

    def fragment_changed(self, old: bytes, new: bytes) -> None:
        self.total_bytes += len(new) - len(old)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    def log(self, level: int = logging.INFO) -> None:
        logger.log(
            level,
            "keys=%d nodes=%d bytes=%d",
            self.total_keys, self.total_nodes, self.total_bytes,
        )
