"""
Radix tree: an ordered dictionary of string keys with prefix queries.

Techniques used:
  - Path compression: chains of single-child nodes are collapsed into one
    node carrying a multi-character prefix.  Insertion splits a node when a
    key diverges inside its prefix; deletion merges a leafless node with
    its only child so no pass-through nodes survive an operation.
  - Sorted edges: each node keeps its outgoing edges ordered by label, so
    pre-order traversal yields keys in lexicographic order and
    `minimum` / `maximum` only follow the first / last edge.
  - Mutation-tolerant walks: `walk`, `walk_prefix` and `walk_path` let
    the visitor delete keys (even ones that trigger a merge of the node
    being iterated) without skipping or repeating entries.

Complexity (n = key length, m = number of visited entries):
  insert / get / delete / longest_prefix  - O(n)
  minimum / maximum                       - O(depth)
  walk_prefix / delete_prefix             - O(n + m)
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Any, Callable, Iterator, Mapping

from radix_trie.node import Edge, Leaf, Node, edge_label, longest_prefix

logger = logging.getLogger(__name__)

# Called with (key, value); a truthy return stops the walk.
WalkFn = Callable[[str, Any], Any]


class Tree:
    """A radix tree mapping string keys to arbitrary values.

    >>> t = Tree()
    >>> t.insert("romane", 1)
    (None, False)
    >>> t.insert("romanus", 2)
    (None, False)
    >>> t.get("romane")
    (1, True)
    >>> t.longest_prefix("romanesque")
    ('romane', 1, True)
    >>> list(t)
    ['romane', 'romanus']
    """

    def __init__(self, mapping: Mapping[str, Any] | None = None) -> None:
        self._root = Node()
        self._size = 0
        if mapping is not None:
            for key, value in mapping.items():
                self.insert(key, value)

    @classmethod
    def from_map(cls, mapping: Mapping[str, Any]) -> Tree:
        """Build a tree holding every entry of *mapping*."""
        return cls(mapping)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, key: str, value: Any) -> tuple[Any, bool]:
        """Add or update *key*.

        Returns ``(old_value, True)`` when an existing entry was updated,
        ``(None, False)`` otherwise.
        """
        parent = None
        node = self._root
        search = key
        while True:
            # Key exhausted, the entry lives on this node.
            if not search:
                if node.is_leaf:
                    old = node.leaf.value
                    node.leaf.value = value
                    return old, True
                node.leaf = Leaf(key, value)
                self._size += 1
                return None, False

            parent = node
            node = node.get_edge(search[0])

            # No edge, hang a new leaf node off the parent.
            if node is None:
                parent.add_edge(
                    Edge(search[0], Node(prefix=search, leaf=Leaf(key, value)))
                )
                self._size += 1
                return None, False

            common = longest_prefix(search, node.prefix)
            if common == len(node.prefix):
                search = search[common:]
                continue

            # The key diverges inside node.prefix: split it.
            self._size += 1
            split = Node(prefix=search[:common])
            parent.update_edge(search[0], split)

            split.add_edge(Edge(node.prefix[common], node))
            node.prefix = node.prefix[common:]
            logger.debug("split %r at %r", key, split.prefix)

            leaf = Leaf(key, value)
            search = search[common:]
            if not search:
                split.leaf = leaf
                return None, False
            split.add_edge(Edge(search[0], Node(prefix=search, leaf=leaf)))
            return None, False

    def delete(self, key: str) -> tuple[Any, bool]:
        """Remove *key*. Returns ``(old_value, True)`` if it existed."""
        parent = None
        label = ""
        node = self._root
        search = key
        while search:
            parent = node
            label = search[0]
            node = node.get_edge(label)
            if node is None or not search.startswith(node.prefix):
                return None, False
            search = search[len(node.prefix):]

        if not node.is_leaf:
            return None, False

        leaf = node.leaf
        node.leaf = None
        self._size -= 1

        # Drop the node entirely once it has nothing left to hold.
        if parent is not None and not node.edges:
            parent.del_edge(label)

        # A leafless node with one child becomes a pass-through: merge it.
        if node is not self._root and len(node.edges) == 1:
            node.merge_child()

        # Removing our edge may have left the parent as a pass-through.
        if (
            parent is not None
            and parent is not self._root
            and not parent.is_leaf
            and len(parent.edges) == 1
        ):
            parent.merge_child()

        return leaf.value, True

    def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with *prefix*; return how many."""
        parent = None
        label = ""
        node = self._root
        search = prefix
        while search:
            label = search[0]
            child = node.get_edge(label)
            if child is None:
                return 0
            if child.prefix.startswith(search):
                # The cut lands inside (or at the end of) child.prefix, so
                # every key below child has the prefix.
                search = ""
            elif search.startswith(child.prefix):
                search = search[len(child.prefix):]
            else:
                return 0
            parent = node
            node = child

        # Empty every node of the subtree in place so a walk that is still
        # inside it stops instead of reaching the removed keys.
        removed = 0
        stack = [node]
        while stack:
            current = stack.pop()
            if current.is_leaf:
                removed += 1
            stack.extend(edge.node for edge in current.edges)
            current.leaf = None
            current.edges.clear()
        if removed == 0:
            return 0

        if parent is not None:
            parent.del_edge(label)
            if (
                parent is not self._root
                and not parent.is_leaf
                and len(parent.edges) == 1
            ):
                parent.merge_child()

        self._size -= removed
        logger.debug("deleted %d keys under prefix %r", removed, prefix)
        return removed

    def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` for *key*, or ``(None, False)``."""
        node = self._root
        search = key
        while True:
            if not search:
                if node.is_leaf:
                    return node.leaf.value, True
                break

            node = node.get_edge(search[0])
            if node is None:
                break

            if search.startswith(node.prefix):
                search = search[len(node.prefix):]
            else:
                break
        return None, False

    def longest_prefix(self, key: str) -> tuple[str | None, Any, bool]:
        """Find the longest stored key that is a prefix of *key*.

        Returns ``(matched_key, value, True)`` or ``(None, None, False)``.
        """
        last = None
        node = self._root
        search = key
        while True:
            if node.leaf is not None:
                last = node.leaf

            if not search:
                break

            node = node.get_edge(search[0])
            if node is None:
                break

            if search.startswith(node.prefix):
                search = search[len(node.prefix):]
            else:
                break
        if last is not None:
            return last.key, last.value, True
        return None, None, False

    def minimum(self) -> tuple[str | None, Any, bool]:
        """Return the smallest entry as ``(key, value, found)``."""
        node = self._root
        while True:
            if node.is_leaf:
                return node.leaf.key, node.leaf.value, True
            if node.edges:
                node = node.edges[0].node
            else:
                break
        return None, None, False

    def maximum(self) -> tuple[str | None, Any, bool]:
        """Return the largest entry as ``(key, value, found)``."""
        node = self._root
        while True:
            if node.edges:
                node = node.edges[-1].node
                continue
            if node.is_leaf:
                return node.leaf.key, node.leaf.value, True
            break
        return None, None, False

    def walk(self, fn: WalkFn) -> None:
        """Call ``fn(key, value)`` for every entry in ascending key order.

        A truthy return from *fn* stops the walk. *fn* may delete keys.
        """
        _recursive_walk(self._root, fn)

    def walk_prefix(self, prefix: str, fn: WalkFn) -> None:
        """Like `walk`, restricted to keys starting with *prefix*."""
        node = self._seek(prefix)
        if node is not None:
            _recursive_walk(node, fn)

    def walk_path(self, path: str, fn: WalkFn) -> None:
        """Visit the entries whose keys are prefixes of *path*.

        This walks the entries *above* *path* from the root down, where
        `walk_prefix` walks the ones *under* it.
        """
        node = self._root
        search = path
        while True:
            if node.leaf is not None and fn(node.leaf.key, node.leaf.value):
                return

            if not search:
                return

            node = node.get_edge(search[0])
            if node is None:
                return

            if search.startswith(node.prefix):
                search = search[len(node.prefix):]
            else:
                return

    def to_map(self) -> dict[str, Any]:
        """Return a dict of every entry, inserted in ascending key order."""
        out: dict[str, Any] = {}

        def collect(key: str, value: Any) -> bool:
            out[key] = value
            return False

        self.walk(collect)
        return out

    def items(self, prefix: str = "") -> Iterator[tuple[str, Any]]:
        """Yield ``(key, value)`` pairs under *prefix* in order, lazily.

        The tree must not be modified while the generator is live; use
        `walk_prefix` for that.
        """
        node = self._seek(prefix)
        if node is not None:
            for leaf in _iter_leaves(node):
                yield leaf.key, leaf.value

    def keys(self, prefix: str = "") -> Iterator[str]:
        """Yield all keys that begin with *prefix*, lazily."""
        for key, _ in self.items(prefix):
            yield key

    def node_count(self) -> int:
        """Return the number of nodes, the root included."""
        total = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(edge.node for edge in node.edges)
        return total

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: str) -> bool:
        return self.get(key)[1]

    def __getitem__(self, key: str) -> Any:
        value, found = self.get(key)
        if not found:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.insert(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.delete(key)[1]:
            raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return self.keys()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_map()!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _seek(self, prefix: str) -> Node | None:
        """Return the root of the subtree holding keys under *prefix*.

        The prefix may end inside a compressed node; that node qualifies
        when its prefix starts with what remains of the search.
        """
        node = self._root
        search = prefix
        while search:
            node = node.get_edge(search[0])
            if node is None:
                return None
            if search.startswith(node.prefix):
                search = search[len(node.prefix):]
                continue
            if node.prefix.startswith(search):
                return node
            return None
        return node


def _iter_leaves(node: Node) -> Iterator[Leaf]:
    """Pre-order leaves of the subtree at *node*, using an explicit stack."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.leaf is not None:
            yield current.leaf
        stack.extend(edge.node for edge in reversed(current.edges))


def _recursive_walk(node: Node, fn: WalkFn) -> bool:
    """Pre-order walk of *node*. Returns True if *fn* aborted the walk.

    The visitor may delete entries.  A deletion can merge a node with its
    only remaining child, which swaps in the child's leaf and edge list, so
    live state is re-read after every visit instead of being cached.
    """
    leaf = node.leaf
    if leaf is not None:
        if fn(leaf.key, leaf.value):
            return True
        # Deleting this leaf merged the child below into this node.
        if node.leaf is not None and node.leaf.key != leaf.key:
            return _recursive_walk(node, fn)

    edges = node.edges
    i = 0
    while i < len(edges):
        label = edges[i].label
        if _recursive_walk(edges[i].node, fn):
            return True

        if node.edges is not edges:
            # This node merged with its sole remaining child, whose edge is
            # the one left in the old list.  Walk the merged node again only
            # if that child had not been visited yet.
            if edges and edges[0].label > label:
                return _recursive_walk(node, fn)
            return False

        # Resume after the edge just visited, wherever it now sits.
        i = bisect_right(edges, label, key=edge_label)
    return False
