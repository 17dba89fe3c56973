import pytest

from radix_trie.tree import Tree

LATIN = {
    "romane": 1,
    "romanus": 2,
    "romulus": 3,
    "rubens": 4,
    "ruber": 5,
    "rubicon": 6,
    "rubicundus": 7,
}


def check_invariants(tree):
    """Walk the raw nodes and assert every structural invariant."""
    leaves = 0
    stack = [(tree._root, "", True)]
    while stack:
        node, path, is_root = stack.pop()
        path += node.prefix
        if is_root:
            assert node.prefix == ""
        else:
            assert node.prefix, "non-root node with empty prefix"
            assert node.leaf is not None or len(node.edges) >= 2, (
                f"pass-through node at {path!r}"
            )
        if node.leaf is not None:
            leaves += 1
            assert node.leaf.key == path
        labels = [edge.label for edge in node.edges]
        assert labels == sorted(set(labels))
        for edge in node.edges:
            assert edge.node.prefix[:1] == edge.label
            stack.append((edge.node, path, False))
    assert leaves == len(tree)


@pytest.fixture
def assert_invariants():
    return check_invariants


@pytest.fixture
def latin():
    tree = Tree()
    for key, value in LATIN.items():
        tree.insert(key, value)
    return tree


@pytest.fixture
def latin_entries():
    return dict(LATIN)
