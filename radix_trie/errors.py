"""Exceptions raised by the radix tree."""


class RadixTreeError(Exception):
    pass


class InvariantError(RadixTreeError):
    """An internal structural invariant was violated.

    This points at a bug in the tree engine, never at bad caller input,
    so nothing inside the package catches it.
    """
