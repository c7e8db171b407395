"""
AVL Tree — animated engine.

Self-balancing binary search tree where every structural decision
(comparison, rotation, splice, successor promotion) is recorded as a
``Step`` holding a deep snapshot of the tree at that moment.

    ┌──────────┐   records    ┌────────────┐   renders
    │ AVLTree  │ ──steps───►  │ Playback / │ ──canvas / PNG / PDF──►
    └──────────┘              │ Visualizer │
         │                    └────────────┘
         │ snapshot dict
         ▼
    {value, id, height, markers, left, right}

This module is PURE LOGIC — no GUI code, no layout coordinates.

Snapshot node schema
────────────────────
    { "value"  : key,        # the stored key
      "id"     : int,        # stable identity (survives value overwrite)
      "height" : int,        # cached height at the moment of the copy
      "markers": [str],      # advisory annotations (pivot, current, …)
      "left"   : dict|None,
      "right"  : dict|None }
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


# Completed rotation step kinds; each single rotation emits exactly one.
ROTATION_KINDS = ("rotate_left", "rotate_right")


# ═════════════════════════════════════════════════════════════════
#  AVL NODE
# ═════════════════════════════════════════════════════════════════
class AVLNode:
    """
    A single live node of the AVL tree.

    Attributes:
        value  : The key; may be overwritten by successor promotion.
        id     (int)          : Identity assigned once at creation.
        left   (AVLNode|None) : Left child (exclusively owned).
        right  (AVLNode|None) : Right child (exclusively owned).
        height (int)          : Cached subtree height (leaf = 1).
    """
    __slots__ = ('value', 'id', 'left', 'right', 'height')

    def __init__(self, value, node_id):
        self.value  = value
        self.id     = node_id
        self.left   = None
        self.right  = None
        self.height = 1

    def __repr__(self):
        return f"AVLNode({self.value!r}, id={self.id}, h={self.height})"


# ═════════════════════════════════════════════════════════════════
#  STEP RECORD
# ═════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class Step:
    """
    One recorded unit of the animation trace.

    Attributes:
        kind   (str)       : Category — "placed", "rotate_left", "compare", …
        label  (str)       : Human-readable description shown in the UI.
        after  (dict|None) : Snapshot of the tree at this moment.
        before (dict|None) : Pre-change snapshot (completed rotations only).
        case   (str|None)  : Rotation case "LL" / "RR" / "LR" / "RL".
        extra  (dict|None) : {"operation": str, "value": key}.
        op_id  (int)       : 1-based index of the operation on this tree.
    """
    kind:   str
    label:  str
    after:  Optional[dict] = None
    before: Optional[dict] = None
    case:   Optional[str] = None
    extra:  Optional[dict] = field(default=None, compare=False)
    op_id:  int = 0

    @property
    def is_rotation(self) -> bool:
        return self.kind in ROTATION_KINDS


# ═════════════════════════════════════════════════════════════════
#  HEIGHT & BALANCE PRIMITIVES
# ═════════════════════════════════════════════════════════════════

def height(node):
    """Cached height of ``node``; 0 for an absent subtree."""
    return node.height if node is not None else 0


def balance_factor(node):
    """``height(left) - height(right)``; 0 for an absent subtree."""
    if node is None:
        return 0
    return height(node.left) - height(node.right)


def update_height(node):
    node.height = 1 + max(height(node.left), height(node.right))


# ═════════════════════════════════════════════════════════════════
#  ROTATIONS
#
#  Pure structural transforms.  The caller installs the returned
#  node as the new subtree root.
# ═════════════════════════════════════════════════════════════════

def rotate_right(old_root):
    """
    Right-rotate the subtree rooted at ``old_root``.

    Before:        After:
          y           x
         / \\         / \\
        x   γ       α   y
       / \\             / \\
      α   β           β   γ

    Returns:
        AVLNode: The new subtree root (the former left child).
    """
    new_root       = old_root.left
    old_root.left  = new_root.right
    new_root.right = old_root
    update_height(old_root)          # child first
    update_height(new_root)
    return new_root


def rotate_left(old_root):
    """Mirror image of :func:`rotate_right`."""
    new_root       = old_root.right
    old_root.right = new_root.left
    new_root.left  = old_root
    update_height(old_root)
    update_height(new_root)
    return new_root


def min_value_node(node):
    """Leftmost (minimum) node of the subtree rooted at ``node``."""
    while node.left is not None:
        node = node.left
    return node


# ═════════════════════════════════════════════════════════════════
#  SNAPSHOT & IDENTITY LOOKUP
# ═════════════════════════════════════════════════════════════════

def clone_tree(node):
    """
    Deep-copy a subtree into a fresh snapshot dict-tree.

    Accepts either a live ``AVLNode`` (markers start empty) or an
    existing snapshot dict (markers are copied).

    Args:
        node (AVLNode|dict|None): Subtree root.

    Returns:
        dict|None: Structurally independent snapshot.
    """
    if node is None:
        return None
    if isinstance(node, dict):
        return {"value":   node["value"],
                "id":      node["id"],
                "height":  node["height"],
                "markers": list(node.get("markers", ())),
                "left":    clone_tree(node.get("left")),
                "right":   clone_tree(node.get("right"))}
    return {"value":   node.value,
            "id":      node.id,
            "height":  node.height,
            "markers": [],
            "left":    clone_tree(node.left),
            "right":   clone_tree(node.right)}


def find_node_by_id(snapshot, node_id):
    """
    Locate the snapshot node whose ``id`` equals ``node_id``.

    Returns:
        dict|None: The matching snapshot node, or None.
    """
    stack = [snapshot] if snapshot is not None else []
    while stack:
        n = stack.pop()
        if n["id"] == node_id:
            return n
        for child in (n.get("left"), n.get("right")):
            if child is not None:
                stack.append(child)
    return None


def mark(snapshot, node, marker):
    """
    Attach ``marker`` to the copy of live ``node`` inside ``snapshot``.

    Nodes that are not part of the snapshot (e.g. a child that was
    just spliced out) are ignored.
    """
    if node is None:
        return
    target = find_node_by_id(snapshot, node.id)
    if target is not None and marker not in target["markers"]:
        target["markers"].append(marker)


# ═════════════════════════════════════════════════════════════════
#  AVL TREE — ANIMATED ENGINE
# ═════════════════════════════════════════════════════════════════
class AVLTree:
    """
    AVL tree with step-by-step recording.

    Every public operation resets ``self.steps`` to a fresh list,
    records the steps it produces into it and returns a copy of it.

    Attributes:
        root  (AVLNode|None) : Root of the live tree.
        steps (list[Step])   : Steps of the most recent operation.
    """

    def __init__(self):
        self.root  = None
        self.steps = []
        self._next_id    = 0        # node identity counter (per tree)
        self._op_counter = 0        # operation counter (per tree)
        self._extra      = None     # {"operation", "value"} of current op
        self._rotations  = 0
        self._inserted   = None
        self._duplicate  = None
        self._found      = False

    def __len__(self):
        return sum(1 for _ in self._iter_nodes())

    def __contains__(self, value):
        return self.search(value) is not None

    # ─────────────────────────────────────────────────────────────
    #  SNAPSHOT & RECORDING
    # ─────────────────────────────────────────────────────────────

    def snapshot(self):
        """Deep copy of the whole live tree (no markers)."""
        return clone_tree(self.root)

    def clear_steps(self):
        """Start a fresh step log.  Previously returned lists are kept intact."""
        self.steps = []

    def _begin(self, operation, value):
        self._op_counter += 1
        self.clear_steps()
        self._extra = {"operation": operation, "value": value}
        logger.debug("op #%d: %s %r", self._op_counter, operation, value)

    def _record(self, kind, label, marks=(), before=None, case=None):
        """
        Append one step whose ``after`` is a snapshot of the live tree.

        Args:
            kind   (str)  : Step category.
            label  (str)  : Description.
            marks  (list) : ``(live_node, marker)`` pairs to annotate.
            before (dict) : Optional pre-change snapshot.
            case   (str)  : Rotation case, if any.
        """
        after = self.snapshot()
        for node, marker in marks:
            mark(after, node, marker)
        self.steps.append(Step(kind=kind, label=label, after=after,
                               before=before, case=case,
                               extra=dict(self._extra or {}),
                               op_id=self._op_counter))

    def _new_node(self, value):
        node = AVLNode(value, self._next_id)
        self._next_id += 1
        return node

    def _link(self, parent, side, child):
        # Keep every snapshot a connected tree while recursion unwinds.
        if parent is None:
            self.root = child
        else:
            setattr(parent, side, child)

    # ─────────────────────────────────────────────────────────────
    #  REBALANCE
    # ─────────────────────────────────────────────────────────────

    def _balance(self, node, parent, side, value=None):
        """
        Restore the AVL property at ``node``.

        Args:
            node   (AVLNode)     : Subtree root whose child height may have changed.
            parent (AVLNode|None): Parent of ``node`` (None at the root).
            side   (str|None)    : "left" / "right" slot of ``node`` in ``parent``.
            value               : Inserted key; None during delete.

        Returns:
            AVLNode: The (possibly new) subtree root.
        """
        update_height(node)
        bf = balance_factor(node)

        if bf > 1:
            if value is not None:
                inner = value > node.left.value
            else:
                inner = balance_factor(node.left) < 0
            if inner:
                node.left = self._rotate(node.left, "left", node, "left", "LR")
                return self._rotate(node, "right", parent, side, "LR")
            return self._rotate(node, "right", parent, side, "LL")

        if bf < -1:
            if value is not None:
                inner = value < node.right.value
            else:
                inner = balance_factor(node.right) > 0
            if inner:
                node.right = self._rotate(node.right, "right", node, "right", "RL")
                return self._rotate(node, "left", parent, side, "RL")
            return self._rotate(node, "left", parent, side, "RR")

        return node

    def _rotate(self, pivot, direction, parent, side, case):
        """
        Perform one recorded single rotation.

        Emits a ``rotation_pending`` step (pivot, child and the moved
        subtree marked, no structural change yet) followed by the
        completed ``rotate_<direction>`` step.
        """
        if direction == "right":
            child, moved = pivot.left, pivot.left.right
        else:
            child, moved = pivot.right, pivot.right.left

        marks = [(pivot, "pivot"), (child, "child")]
        if moved is not None:
            marks.append((moved, "moved"))
        self._record("rotation_pending",
                     f"{case} case at {pivot.value} "
                     f"(balance {balance_factor(pivot):+d}): "
                     f"rotate {direction} around {pivot.value}",
                     marks, case=case)

        before = self.snapshot()
        new_root = rotate_right(pivot) if direction == "right" else rotate_left(pivot)
        self._link(parent, side, new_root)
        self._rotations += 1
        logger.debug("%s case: rotate %s at %r -> new subtree root %r",
                     case, direction, pivot.value, new_root.value)

        self._record(f"rotate_{direction}",
                     f"Rotated {direction} at {pivot.value}: "
                     f"{new_root.value} is the new subtree root",
                     [(new_root, "new_root"), (pivot, "pivot")],
                     before=before, case=case)
        return new_root

    # ─────────────────────────────────────────────────────────────
    #  INSERT
    # ─────────────────────────────────────────────────────────────

    def insert(self, value):
        """
        Insert ``value``; a duplicate is a no-op.

        Steps recorded:
            rotation_pending/rotate_* pairs, or a single "placed" step,
            or a single "duplicate" step.

        Returns:
            list[Step]: The steps of this operation.
        """
        self._begin("insert", value)
        self._rotations = 0
        self._inserted  = None
        self._duplicate = None

        self.root = self._insert(self.root, value, None, None)

        if self._duplicate is not None:
            self._record("duplicate",
                         f"{value} is already in the tree; insert ignored",
                         [(self._duplicate, "duplicate")])
        elif self._rotations == 0:
            self._record("placed", f"Placed {value}; tree is balanced",
                         [(self._inserted, "inserted")])
        return list(self.steps)

    def _insert(self, node, value, parent, side):
        if node is None:
            self._inserted = self._new_node(value)
            self._link(parent, side, self._inserted)
            return self._inserted

        if value < node.value:
            node.left = self._insert(node.left, value, node, "left")
        elif value > node.value:
            node.right = self._insert(node.right, value, node, "right")
        else:
            self._duplicate = node
            return node

        if self._duplicate is not None:
            return node
        return self._balance(node, parent, side, value)

    # ─────────────────────────────────────────────────────────────
    #  DELETE
    # ─────────────────────────────────────────────────────────────

    def delete(self, value):
        """
        Remove ``value`` if present; a missing value is a no-op.

        Returns:
            list[Step]: The steps of this operation.
        """
        self._begin("delete", value)
        self._rotations = 0
        self._found = False

        self.root = self._delete(self.root, value, None, None)

        if not self._found:
            self._record("not_found",
                         f"{value} is not in the tree; nothing to delete")
        return list(self.steps)

    def _delete(self, node, value, parent, side):
        if node is None:
            return None

        if value < node.value:
            node.left = self._delete(node.left, value, node, "left")
        elif value > node.value:
            node.right = self._delete(node.right, value, node, "right")
        else:
            self._found = True
            self._record("delete_found", f"Found {value}",
                         [(node, "deleting")])

            if node.left is None or node.right is None:
                replacement = node.left if node.left is not None else node.right
                self._link(parent, side, replacement)
                if replacement is None:
                    self._record("delete_removed", f"Removed leaf {value}")
                else:
                    self._record("delete_removed",
                                 f"Removed {value}; {replacement.value} "
                                 f"takes its place",
                                 [(replacement, "replacement")])
                return replacement

            successor = min_value_node(node.right)
            self._record("successor",
                         f"{value} has two children: replace it with its "
                         f"in-order successor {successor.value}",
                         [(node, "deleting"), (successor, "successor")])
            node.value = successor.value
            node.right = self._delete(node.right, successor.value, node, "right")

        return self._balance(node, parent, side)

    # ─────────────────────────────────────────────────────────────
    #  SEARCH
    # ─────────────────────────────────────────────────────────────

    def search(self, value):
        """Plain lookup.  Returns the live node or None; records nothing."""
        node = self.root
        while node is not None and value != node.value:
            node = node.left if value < node.value else node.right
        return node

    def search_with_trace(self, value):
        """
        Lookup that records one "compare" step per visited node,
        then a terminal "found" or "not_found" step.

        Returns:
            list[Step]: The steps of this operation.
        """
        self._begin("search", value)
        node = self.root
        while node is not None:
            if value == node.value:
                self._record("compare", f"{value} == {node.value}: match",
                             [(node, "current")])
                self._record("found", f"Found {value}", [(node, "found")])
                return list(self.steps)
            if value < node.value:
                self._record("compare", f"{value} < {node.value}: go left",
                             [(node, "current")])
                node = node.left
            else:
                self._record("compare", f"{value} > {node.value}: go right",
                             [(node, "current")])
                node = node.right
        self._record("not_found", f"{value} not found")
        return list(self.steps)

    # ─────────────────────────────────────────────────────────────
    #  TRAVERSAL
    # ─────────────────────────────────────────────────────────────

    def inorder_traversal(self):
        """
        In-order traversal of the live tree.

        Returns:
            list: All values in ascending order.
        """
        values = []
        stack, node = [], self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            values.append(node.value)
            node = node.right
        return values

    def _iter_nodes(self):
        stack = [self.root] if self.root is not None else []
        while stack:
            n = stack.pop()
            yield n
            if n.left is not None:
                stack.append(n.left)
            if n.right is not None:
                stack.append(n.right)


def build_tree(values: Any) -> AVLTree:
    """Convenience: a fresh tree with ``values`` inserted in order."""
    tree = AVLTree()
    for v in values:
        tree.insert(v)
    return tree
