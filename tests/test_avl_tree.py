import random

from avl_tree import (AVLNode, AVLTree, balance_factor, build_tree, height,
                      min_value_node, rotate_left, rotate_right)
from snapshot import validate_avl


def check_node(node):
    """Recursively verify heights and balance; return the real height."""
    if node is None:
        return 0
    hl = check_node(node.left)
    hr = check_node(node.right)
    assert node.height == 1 + max(hl, hr)
    assert abs(hl - hr) <= 1
    if node.left is not None:
        assert node.left.value < node.value
    if node.right is not None:
        assert node.right.value > node.value
    return node.height


def test_height_and_balance_of_absent_node():
    assert height(None) == 0
    assert balance_factor(None) == 0


def test_rotate_right_recomputes_heights():
    y, x, a = AVLNode(30, 0), AVLNode(20, 1), AVLNode(10, 2)
    y.left, x.left = x, a
    x.height, y.height = 2, 3

    new_root = rotate_right(y)

    assert new_root is x
    assert x.left is a and x.right is y
    assert y.left is None
    assert (y.height, x.height) == (1, 2)


def test_rotate_left_mirrors_rotate_right():
    x, y, b = AVLNode(10, 0), AVLNode(20, 1), AVLNode(15, 2)
    x.right, y.left = y, b
    y.height, x.height = 2, 3

    new_root = rotate_left(x)

    assert new_root is y
    assert y.left is x and x.right is b
    assert (x.height, y.height) == (2, 3)


def test_min_value_node(perfect_tree):
    assert min_value_node(perfect_tree.root).value == 20
    assert min_value_node(perfect_tree.root.right).value == 60


def test_ll_case_gives_single_right_rotation_root_20():
    tree = build_tree([30, 20])
    tree.insert(10)
    assert tree.root.value == 20
    assert (tree.root.left.value, tree.root.right.value) == (10, 30)


def test_rr_case_gives_single_left_rotation_root_20():
    tree = build_tree([10, 20, 30])
    assert tree.root.value == 20
    assert (tree.root.left.value, tree.root.right.value) == (10, 30)


def test_lr_case_final_shape():
    tree = build_tree([30, 10, 20])
    assert tree.root.value == 20
    assert (tree.root.left.value, tree.root.right.value) == (10, 30)
    check_node(tree.root)


def test_rl_case_final_shape():
    tree = build_tree([10, 30, 20])
    assert tree.root.value == 20
    assert (tree.root.left.value, tree.root.right.value) == (10, 30)


def test_duplicate_insert_leaves_tree_unchanged(perfect_tree):
    before = perfect_tree.snapshot()
    perfect_tree.insert(40)
    assert perfect_tree.snapshot() == before
    assert len(perfect_tree) == 7


def test_delete_leaf(perfect_tree):
    perfect_tree.delete(20)
    assert perfect_tree.inorder_traversal() == [30, 40, 50, 60, 70, 80]
    assert perfect_tree.search(20) is None
    check_node(perfect_tree.root)


def test_delete_two_children_promotes_successor_keeping_id(perfect_tree):
    target_id = perfect_tree.search(30).id
    successor_id = perfect_tree.search(40).id

    perfect_tree.delete(30)

    assert perfect_tree.inorder_traversal() == [20, 40, 50, 60, 70, 80]
    promoted = perfect_tree.search(40)
    assert promoted.id == target_id
    ids = {n.id for n in perfect_tree._iter_nodes()}
    assert successor_id not in ids
    check_node(perfect_tree.root)


def test_delete_root_with_two_children(perfect_tree):
    perfect_tree.delete(50)
    assert perfect_tree.root.value == 60
    assert perfect_tree.inorder_traversal() == [20, 30, 40, 60, 70, 80]
    check_node(perfect_tree.root)


def test_delete_rebalances_rr():
    tree = build_tree([20, 10, 30, 40])
    tree.delete(10)
    assert tree.root.value == 30
    assert (tree.root.left.value, tree.root.right.value) == (20, 40)
    check_node(tree.root)


def test_delete_rebalances_rl():
    tree = build_tree([20, 10, 30, 25])
    tree.delete(10)
    assert tree.root.value == 25
    assert (tree.root.left.value, tree.root.right.value) == (20, 30)


def test_delete_missing_value_is_bit_for_bit_noop(perfect_tree):
    before = perfect_tree.snapshot()
    perfect_tree.delete(45)
    assert perfect_tree.snapshot() == before


def test_delete_from_empty_tree():
    tree = AVLTree()
    steps = tree.delete(1)
    assert tree.root is None
    assert [st.kind for st in steps] == ["not_found"]


def test_delete_last_node_empties_tree():
    tree = build_tree([5])
    tree.delete(5)
    assert tree.root is None
    assert tree.inorder_traversal() == []


def test_search_is_pure(perfect_tree):
    before = perfect_tree.inorder_traversal()
    snap = perfect_tree.snapshot()
    assert perfect_tree.search(60).value == 60
    assert perfect_tree.search(65) is None
    perfect_tree.search_with_trace(60)
    perfect_tree.search_with_trace(65)
    assert perfect_tree.inorder_traversal() == before
    assert perfect_tree.snapshot() == snap
    assert 80 in perfect_tree and 81 not in perfect_tree


def test_ids_are_scoped_to_the_tree():
    a = build_tree([1, 2, 3])
    b = build_tree([7])
    assert sorted(n.id for n in a._iter_nodes()) == [0, 1, 2]
    assert b.root.id == 0


def test_float_keys():
    tree = build_tree([1.5, 0.25, 3, 2.75])
    assert tree.inorder_traversal() == [0.25, 1.5, 2.75, 3]


def test_random_sequences_keep_avl_invariants():
    rng = random.Random(1234)
    for _ in range(40):
        tree, expected = AVLTree(), set()
        for _ in range(rng.randint(20, 120)):
            v = rng.randint(0, 60)
            if expected and rng.random() < 0.4:
                v = rng.choice(sorted(expected)) if rng.random() < 0.8 else v
                tree.delete(v)
                expected.discard(v)
            else:
                tree.insert(v)
                expected.add(v)
            check_node(tree.root)
            ok, problems = validate_avl(tree.snapshot())
            assert ok, problems
            assert tree.inorder_traversal() == sorted(expected)
        assert len(tree) == len(expected)
