"""
Playback timeline.

GUI-independent model behind the visualizer window: runs one core
operation, wraps its steps with a leading "start" frame and a
trailing "done" frame, and keeps the index of the frame on screen.
"""
import logging

from avl_tree import Step

logger = logging.getLogger(__name__)

OPERATIONS = ("insert", "delete", "search")


def parse_values(text):
    """Parse a string of comma/space separated numbers.

    Accepts integers and floats.  Invalid tokens are silently
    skipped.

    Args:
        text (str): Raw input text, e.g. "7, 3, 18, abc, 10.5"

    Returns:
        list[int | float]: Parsed numeric values.

    Examples:
        >>> parse_values("7,3,18,10,22")
        [7, 3, 18, 10, 22]
        >>> parse_values("1 2 3 abc 4")
        [1, 2, 3, 4]
    """
    result = []
    for token in text.replace(",", " ").split():
        try:
            result.append(int(token))          # try integer first
        except ValueError:
            try:
                value = float(token)            # fallback to float
            except ValueError:
                continue                        # skip non-numeric tokens
            if value == value:                  # NaN has no ordering
                result.append(value)
    return result


class Playback:
    """
    Frames of the most recent operation plus a cursor.

    Attributes:
        frames  (list[Step]) : start frame, core steps, done frame.
        index   (int)        : Frame currently displayed.
        history (list)       : ``(operation, value, step_count)`` per run.
    """

    def __init__(self):
        self.frames  = []
        self.index   = 0
        self.history = []

    def __len__(self):
        return len(self.frames)

    @property
    def current(self):
        """The frame on screen, or None before the first operation."""
        if not self.frames:
            return None
        return self.frames[self.index]

    @property
    def at_end(self):
        return not self.frames or self.index == len(self.frames) - 1

    def run(self, tree, operation, value):
        """
        Execute ``operation`` on ``tree`` and rebuild the frame list.

        Args:
            tree      (AVLTree) : Tree to operate on.
            operation (str)     : "insert", "delete" or "search".
            value               : Key.

        Returns:
            list[Step]: The core steps of the operation.
        """
        if operation not in OPERATIONS:
            raise ValueError(f"unknown operation {operation!r}")

        extra = {"operation": operation, "value": value}
        start = Step(kind="start", label=f"Before {operation} {value}",
                     after=tree.snapshot(), extra=extra)

        if operation == "insert":
            steps = tree.insert(value)
        elif operation == "delete":
            steps = tree.delete(value)
        else:
            steps = tree.search_with_trace(value)

        if operation == "search":
            done_label = f"After search {value}"
        elif operation == "insert":
            done_label = f"Balanced AVL tree after insert {value}"
        else:
            done_label = f"Balanced AVL tree after delete {value}"
        done = Step(kind="done", label=done_label,
                    after=tree.snapshot(), extra=extra)

        self.frames = [start] + list(steps) + [done]
        self.index = 0
        self.history.append((operation, value, len(steps)))
        logger.debug("%s %r: %d frames", operation, value, len(self.frames))
        return steps

    def clear(self):
        self.frames = []
        self.index = 0
        self.history = []

    # ── Navigation ──────────────────────────────────────────────

    def next(self):
        """Advance one frame.  Returns False if already at the end."""
        if self.at_end:
            return False
        self.index += 1
        return True

    def prev(self):
        """Go back one frame.  Returns False if already at the start."""
        if self.index == 0:
            return False
        self.index -= 1
        return True

    def reset(self):
        self.index = 0

    def go_end(self):
        self.index = max(0, len(self.frames) - 1)

    def seek(self, idx):
        """Jump to frame ``idx``, clamped to the valid range."""
        self.index = max(0, min(int(idx), len(self.frames) - 1)) if self.frames else 0
