"""In-memory PATRICIA tree for hierarchical, path-like keys."""

from pathtrie.errors import InvalidArgumentError, OutOfCapacityError, PatriciaError
from pathtrie.sink import ResultSink
from pathtrie.stats import TreeStats
from pathtrie.tree import Match, Node, PatriciaTree, init

__all__ = [
    "InvalidArgumentError",
    "Match",
    "Node",
    "OutOfCapacityError",
    "PatriciaError",
    "PatriciaTree",
    "ResultSink",
    "TreeStats",
    "init",
]

__version__ = "1.0.0"
