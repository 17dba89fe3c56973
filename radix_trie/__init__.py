"""Ordered, prefix-compressed string dictionary (radix / Patricia tree)."""

from radix_trie.errors import InvariantError, RadixTreeError
from radix_trie.tree import Tree, WalkFn

__all__ = ["Tree", "WalkFn", "RadixTreeError", "InvariantError"]

__version__ = "1.0.0"
