import random

from radix_trie import Tree


def test_walk_prefix_delete_then_walk_delete(assert_invariants):
    t = Tree()
    for key in [
        "init0/0", "init0/1", "init0/2", "init0/3",
        "init1/0", "init1/1", "init1/2", "init1/3",
        "init2",
    ]:
        t.insert(key, None)

    def delete(key, value):
        t.delete(key)
        return False

    t.walk_prefix("init1", delete)
    for key in ["init0/0", "init0/1", "init0/2", "init0/3", "init2"]:
        assert key in t
    assert len(t) == 5
    assert_invariants(t)

    t.walk(delete)
    assert len(t) == 0
    assert t.to_map() == {}
    assert_invariants(t)


def test_deleting_every_visited_key_visits_each_once(assert_invariants):
    rng = random.Random(2024)
    for _ in range(50):
        keys = {
            "".join(rng.choice("abc") for _ in range(rng.randint(0, 6)))
            for _ in range(40)
        }
        t = Tree.from_map({k: k for k in keys})
        seen = []

        def delete(key, value):
            seen.append(key)
            assert t.delete(key) == (value, True)

        t.walk(delete)
        assert seen == sorted(keys)
        assert len(t) == 0
        assert_invariants(t)


def test_deleting_visited_key_merges_into_unvisited_sibling(assert_invariants):
    t = Tree.from_map({"xa": 1, "xb": 2, "xbc": 3, "xbd": 4})
    seen = []

    def visit(key, value):
        seen.append(key)
        if key == "xa":
            t.delete(key)

    t.walk(visit)
    assert seen == ["xa", "xb", "xbc", "xbd"]
    assert t.to_map() == {"xb": 2, "xbc": 3, "xbd": 4}
    assert_invariants(t)


def test_deleting_last_sibling_does_not_revisit_earlier_one(assert_invariants):
    t = Tree.from_map({"xa": 1, "xb": 2})
    seen = []

    def visit(key, value):
        seen.append(key)
        if key == "xb":
            t.delete(key)

    t.walk(visit)
    assert seen == ["xa", "xb"]
    assert t.to_map() == {"xa": 1}
    assert_invariants(t)


def test_deleting_earlier_key_does_not_skip_later_ones(assert_invariants):
    t = Tree.from_map({k: k for k in ["ka", "kb", "kc", "kd"]})
    seen = []

    def visit(key, value):
        seen.append(key)
        if key == "kb":
            t.delete("ka")

    t.walk(visit)
    assert seen == ["ka", "kb", "kc", "kd"]
    assert list(t) == ["kb", "kc", "kd"]
    assert_invariants(t)


def test_deleting_leaf_of_pass_through_parent(assert_invariants):
    # Removing "ab" leaves its node with a single child, which merges up.
    t = Tree.from_map({"ab": 1, "abcd": 2, "x": 3})
    seen = []

    def visit(key, value):
        seen.append(key)
        t.delete(key)

    t.walk(visit)
    assert seen == ["ab", "abcd", "x"]
    assert len(t) == 0
    assert_invariants(t)


def test_walk_prefix_with_deletes_leaves_other_keys(assert_invariants):
    t = Tree.from_map({k: k for k in ["romane", "romanus", "romulus", "rubens"]})
    seen = []

    def visit(key, value):
        seen.append(key)
        t.delete(key)

    t.walk_prefix("rom", visit)
    assert seen == ["romane", "romanus", "romulus"]
    assert list(t) == ["rubens"]
    assert_invariants(t)


def test_delete_prefix_during_walk_skips_removed_keys(assert_invariants):
    t = Tree.from_map({k: k for k in ["romane", "romanus", "romulus", "rubens"]})
    seen = []

    def visit(key, value):
        seen.append(key)
        if key == "romane":
            assert t.delete_prefix("rom") == 3

    t.walk(visit)
    assert seen == ["romane", "rubens"]
    assert t.to_map() == {"rubens": "rubens"}
    assert_invariants(t)
