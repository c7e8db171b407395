#!/usr/bin/env python3
"""
AVL Tree Visualizer — entry point.

    main.py  ──► VisualizerWindow (visualizer.py)
                   ├── AVLTree   (avl_tree.py)  step-recording engine
                   ├── Playback  (playback.py)  frame timeline
                   └── exporters (export.py)    PNG / GIF / PDF / MP4

Run:  python main.py   (or the ``avl-visualizer`` console script)
"""
import logging
import os
from tkinter import Tk

from settings import Settings, log_level
from visualizer import VisualizerWindow


def main() -> None:
    """
    Application entry point.

    Flow:
      1. Configure logging (AVL_VISUALIZER_LOG overrides the level)
      2. Create hidden root Tk window (never shown directly)
      3. Load user settings from disk
      4. Open the visualizer window and enter the mainloop
    """
    logging.basicConfig(
        level=log_level(os.environ.get("AVL_VISUALIZER_LOG", "INFO")),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root = Tk()
    root.withdraw()   # Root window stays hidden — we use a Toplevel

    settings = Settings()
    VisualizerWindow(root, settings)
    root.mainloop()


if __name__ == "__main__":
    main()
