"""
Themes and persisted user preferences.
"""
import json
import logging
import os

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════
#  THEME DEFINITIONS
#  Two built-in Catppuccin-inspired palettes.
#  Each key maps to a hex colour used throughout the UI and the
#  image renderer.  MARK_* keys colour snapshot markers.
# ═════════════════════════════════════════════════════════════════
THEMES = {
    # ── Dark theme (Catppuccin Mocha) ────────────────────────────
    "dark": {
        "BG": "#1e1e2e",           # Main window background
        "BG2": "#2a2a3d",          # Secondary panels / sidebars
        "FG": "#cdd6f4",           # Primary foreground text
        "ACCENT": "#89b4fa",       # Buttons, headings
        "GREEN_C": "#a6e3a1",      # Insert / play
        "RED_C": "#f38ba8",        # Delete / pause
        "YELLOW_C": "#f9e2af",     # Search
        "BTN_BG": "#45475a",       # Button face colour
        "CANVAS_BG": "#1e1e2e",    # Tree-drawing canvas
        "NODE_FILL": "#585b70",    # Plain node fill
        "NODE_TEXT": "#ffffff",    # Text inside nodes
        "HEIGHT_FG": "#a6adc8",    # Height label next to nodes
        "EDGE": "#585b70",         # Lines connecting nodes
        "STATS_BG": "#2a2a3d",
        "STATS_FG": "#bac2de",
        "CASE_BG": "#313244",      # Caption box fill
        "TIMELINE_BG": "#313244",
        "MARK_PIVOT": "#fab387",
        "MARK_CHILD": "#f9e2af",
        "MARK_MOVED": "#cba6f7",
        "MARK_NEW_ROOT": "#a6e3a1",
        "MARK_CURRENT": "#89dceb",
        "MARK_FOUND": "#a6e3a1",
        "MARK_DELETING": "#f38ba8",
        "MARK_SUCCESSOR": "#f5c2e7",
        "MARK_REPLACEMENT": "#94e2d5",
        "MARK_INSERTED": "#a6e3a1",
        "MARK_DUPLICATE": "#eba0ac",
    },
    # ── Light theme (Catppuccin Latte) ───────────────────────────
    "light": {
        "BG": "#eff1f5",
        "BG2": "#dce0e8",
        "FG": "#4c4f69",
        "ACCENT": "#1e66f5",
        "GREEN_C": "#40a02b",
        "RED_C": "#d20f39",
        "YELLOW_C": "#df8e1d",
        "BTN_BG": "#ccd0da",
        "CANVAS_BG": "#e6e9ef",
        "NODE_FILL": "#4c4f69",
        "NODE_TEXT": "#ffffff",
        "HEIGHT_FG": "#6c6f85",
        "EDGE": "#8c8fa1",
        "STATS_BG": "#dce0e8",
        "STATS_FG": "#5c5f77",
        "CASE_BG": "#bcc0cc",
        "TIMELINE_BG": "#bcc0cc",
        "MARK_PIVOT": "#fe640b",
        "MARK_CHILD": "#df8e1d",
        "MARK_MOVED": "#8839ef",
        "MARK_NEW_ROOT": "#40a02b",
        "MARK_CURRENT": "#04a5e5",
        "MARK_FOUND": "#40a02b",
        "MARK_DELETING": "#d20f39",
        "MARK_SUCCESSOR": "#ea76cb",
        "MARK_REPLACEMENT": "#179299",
        "MARK_INSERTED": "#40a02b",
        "MARK_DUPLICATE": "#e64553",
    },
}

# Highest priority first: a node carrying several markers is drawn
# with the colour of the first one listed here.
MARKER_PRIORITY = ("deleting", "found", "current", "pivot", "new_root",
                   "successor", "child", "moved", "replacement",
                   "inserted", "duplicate")


def log_level(name, default=logging.INFO):
    """Numeric logging level for ``name`` (e.g. "debug"); ``default`` if unknown."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


# ═════════════════════════════════════════════════════════════════
#  SETTINGS — persisted user preferences
#
#  Saved as JSON in the user's home directory so they survive
#  across sessions.
# ═════════════════════════════════════════════════════════════════
class Settings:
    """
    Persistent user preferences manager.

    Attributes:
        theme        (str) : Active theme name ("dark" / "light").
        anim_speed   (int) : Milliseconds per animation frame.
        custom_colors(dict): Key→hex overrides on top of the theme.

    File location:  ~/.avl_visualizer.json unless ``path`` is given.
    """
    DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".avl_visualizer.json")

    def __init__(self, path=None):
        self.path        = path or self.DEFAULT_PATH
        self.theme       = "dark"       # Default theme
        self.anim_speed  = 800          # Default ms per frame
        self.custom_colors = {}         # No overrides initially
        self._load()                    # Overwrite defaults from disk

    # ── Load from disk ──────────────────────────────────────────
    def _load(self):
        """Read settings JSON; keep defaults if missing or corrupt."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path) as f:
                d = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read settings from %s: %s", self.path, e)
            return
        if not isinstance(d, dict):
            logger.warning("could not read settings from %s: expected an object, got %s",
                           self.path, type(d).__name__)
            return
        try:
            anim_speed    = int(d.get("anim_speed", self.anim_speed))
            custom_colors = dict(d.get("custom_colors", {}))
        except (TypeError, ValueError) as e:
            logger.warning("could not read settings from %s: %s", self.path, e)
            return
        theme = d.get("theme", "dark")
        self.theme         = theme if isinstance(theme, str) and theme in THEMES else "dark"
        self.anim_speed    = anim_speed
        self.custom_colors = custom_colors

    # ── Save to disk ────────────────────────────────────────────
    def save(self):
        try:
            with open(self.path, "w") as f:
                json.dump({"theme": self.theme,
                           "anim_speed": self.anim_speed,
                           "custom_colors": self.custom_colors}, f, indent=2)
        except OSError as e:
            logger.warning("could not save settings to %s: %s", self.path, e)

    def toggle_theme(self):
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    # ── Colour lookup ───────────────────────────────────────────
    def get(self, key):
        """
        Resolve a colour key to its hex value.

        Priority: custom_colors[key]  →  THEMES[theme][key]  →  "#ffffff"

        Args:
            key (str): Colour key, e.g. "BG", "MARK_PIVOT".

        Returns:
            str: Hex colour string.
        """
        if key in self.custom_colors:
            return self.custom_colors[key]
        return THEMES.get(self.theme, THEMES["dark"]).get(key, "#ffffff")

    def marker_color(self, markers):
        """
        Outline colour for a node carrying ``markers``.

        Returns:
            str|None: Hex colour of the highest-priority marker, or
                      None if the node is unmarked.
        """
        for m in MARKER_PRIORITY:
            if m in markers:
                return self.get("MARK_" + m.upper())
        return None
