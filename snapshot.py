"""
Snapshot helpers.

Pure functions over snapshot dict-trees (see ``avl_tree`` for the
schema).  Used by:
  • Stats panel (height, node count, validity)
  • Layout computation for canvas / image drawing
  • Tests
"""


def iter_nodes(node):
    """Pre-order iterator over the nodes of a snapshot dict-tree."""
    stack = [node] if node is not None else []
    while stack:
        n = stack.pop()
        yield n
        if n.get("right") is not None:
            stack.append(n["right"])
        if n.get("left") is not None:
            stack.append(n["left"])


def tree_height(node):
    """
    Compute the real height of a snapshot dict-tree.

    Args:
        node (dict|None): Snapshot root.

    Returns:
        int: Height (0 for None / empty, 1 for a single node).
    """
    if node is None:
        return 0
    return 1 + max(tree_height(node.get("left")),
                   tree_height(node.get("right")))


def count_nodes(node):
    """Count total nodes in a snapshot dict-tree."""
    return sum(1 for _ in iter_nodes(node))


def collect_values(node):
    """In-order traversal to collect all values from a snapshot dict-tree."""
    if node is None:
        return []
    return (collect_values(node.get("left"))
            + [node["value"]]
            + collect_values(node.get("right")))


def find_marked(node, marker):
    """All snapshot nodes carrying ``marker``, in pre-order."""
    return [n for n in iter_nodes(node) if marker in n.get("markers", ())]


def layout_tree(node, depth, lo, hi, positions):
    """
    Compute normalised (0..1) x-positions for each node via
    in-order midpoint splitting.

    Positions are keyed by node id: during successor promotion two
    nodes briefly hold the same value.

    Args:
        node      (dict|None) : Current snapshot node.
        depth     (int)       : Current depth (0 = root).
        lo, hi    (float)     : Horizontal range [lo, hi) in [0, 1].
        positions (dict)      : Output — id → {"x", "y", "value", "markers"}.
    """
    if node is None:
        return
    mid = (lo + hi) / 2.0
    positions[node["id"]] = {"x": mid, "y": depth,
                             "value": node["value"],
                             "markers": list(node.get("markers", ()))}
    layout_tree(node.get("left"),  depth + 1, lo, mid, positions)
    layout_tree(node.get("right"), depth + 1, mid, hi, positions)


def validate_avl(node):
    """
    Validate AVL properties on a snapshot dict-tree.

    Checks:
        • BST order (strict, so duplicates are reported)
        • Cached heights match real heights
        • |balance factor| <= 1 everywhere

    Returns:
        tuple[bool, list[str]]: (is_valid, problems).
    """
    problems = []

    def _check(n, lo, hi):
        if n is None:
            return 0
        v = n["value"]
        if (lo is not None and not lo < v) or (hi is not None and not v < hi):
            problems.append(f"order violated at {v}")
        hl = _check(n.get("left"), lo, v)
        hr = _check(n.get("right"), v, hi)
        h = 1 + max(hl, hr)
        if n["height"] != h:
            problems.append(f"height of {v} is {n['height']}, expected {h}")
        if abs(hl - hr) > 1:
            problems.append(f"{v} unbalanced ({hl - hr:+d})")
        return h

    _check(node, None, None)
    return not problems, problems
