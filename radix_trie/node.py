"""
Node/edge model of the compressed trie.

Each node carries the `prefix` it consumes on arrival, an optional leaf and
an ordered list of outgoing edges.  An edge is keyed by the first character
of the child's prefix, so at most one edge per leading character exists.

Edges are kept in a sorted list rather than a dict:
  - in-order traversal of the list yields keys in lexicographic order,
    and the first/last edge lead towards the minimum/maximum key;
  - branching factors are small in practice, so a binary search over a
    short list is both compact and fast.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any

from radix_trie.errors import InvariantError

logger = logging.getLogger(__name__)


@dataclass
class Leaf:
    """A stored key/value pair. `key` is the full key, not the remainder."""

    key: str
    value: Any


@dataclass
class Edge:
    label: str
    node: Node


def edge_label(edge: Edge) -> str:
    return edge.label


@dataclass
class Node:
    """Internal node of the compressed trie."""

    prefix: str = ""
    leaf: Leaf | None = None
    # Sorted ascending by label.
    edges: list[Edge] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.leaf is not None

    def _search(self, label: str) -> int:
        return bisect_left(self.edges, label, key=edge_label)

    def add_edge(self, edge: Edge) -> None:
        """Insert *edge* at its sorted position. The label must be new."""
        idx = self._search(edge.label)
        self.edges.insert(idx, edge)

    def update_edge(self, label: str, node: Node) -> None:
        """Point the existing edge for *label* at *node*."""
        idx = self._search(label)
        if idx < len(self.edges) and self.edges[idx].label == label:
            self.edges[idx].node = node
            return
        raise InvariantError(f"replacing missing edge {label!r}")

    def get_edge(self, label: str) -> Node | None:
        idx = self._search(label)
        if idx < len(self.edges) and self.edges[idx].label == label:
            return self.edges[idx].node
        return None

    def del_edge(self, label: str) -> None:
        idx = self._search(label)
        if idx < len(self.edges) and self.edges[idx].label == label:
            del self.edges[idx]

    def merge_child(self) -> None:
        """Absorb the only child into this node.

        Concatenates the prefixes and adopts the child's leaf and edges. The
        label of the edge leading here is unchanged since our own prefix
        still starts with the same character.
        """
        if len(self.edges) != 1:
            raise InvariantError(
                f"merge_child on a node with {len(self.edges)} edges"
            )
        child = self.edges[0].node
        logger.debug("merging %r into %r", child.prefix, self.prefix)
        self.prefix = self.prefix + child.prefix
        self.leaf = child.leaf
        self.edges = child.edges


def longest_prefix(a: str, b: str) -> int:
    """Return the length of the longest common prefix of *a* and *b*."""
    i = 0
    n = min(len(a), len(b))
    while i < n and a[i] == b[i]:
        i += 1
    return i
