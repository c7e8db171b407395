from avl_tree import build_tree
from snapshot import (collect_values, count_nodes, iter_nodes, layout_tree,
                      tree_height, validate_avl)


def leaf(value, node_id, height=1):
    return {"value": value, "id": node_id, "height": height, "markers": [],
            "left": None, "right": None}


def test_empty_snapshot():
    assert tree_height(None) == 0
    assert count_nodes(None) == 0
    assert collect_values(None) == []
    assert validate_avl(None) == (True, [])


def test_counts_and_values(perfect_tree):
    snap = perfect_tree.snapshot()
    assert count_nodes(snap) == 7
    assert tree_height(snap) == 3
    assert collect_values(snap) == [20, 30, 40, 50, 60, 70, 80]
    assert [n["value"] for n in iter_nodes(snap)] == [50, 30, 20, 40, 70, 60, 80]


def test_layout_is_keyed_by_id_and_ordered(perfect_tree):
    positions = {}
    layout_tree(perfect_tree.snapshot(), 0, 0.0, 1.0, positions)
    assert len(positions) == 7
    root = positions[perfect_tree.root.id]
    assert (root["x"], root["y"]) == (0.5, 0)
    xs = [p["x"] for p in sorted(positions.values(), key=lambda p: p["value"])]
    assert xs == sorted(xs)
    assert max(p["y"] for p in positions.values()) == 2


def test_layout_handles_repeated_values():
    root = leaf(40, 0, height=2)
    root["right"] = leaf(40, 1)
    positions = {}
    layout_tree(root, 0, 0.0, 1.0, positions)
    assert set(positions) == {0, 1}


def test_validate_detects_problems():
    root = leaf(10, 0, height=3)
    root["left"] = leaf(5, 1, height=2)
    root["left"]["left"] = leaf(7, 2)
    ok, problems = validate_avl(root)
    assert not ok
    assert "order violated at 7" in problems
    assert any("unbalanced" in p for p in problems)


def test_validate_detects_stale_height():
    root = leaf(10, 0, height=5)
    ok, problems = validate_avl(root)
    assert not ok and problems == ["height of 10 is 5, expected 1"]


def test_validate_accepts_live_tree():
    tree = build_tree(range(50))
    assert validate_avl(tree.snapshot()) == (True, [])
