"""
Off-screen tree rendering with Pillow.

Used by the exporters (PNG, GIF, PDF, video).  The on-screen canvas
in ``visualizer`` follows the same layout and colour rules.
"""
from PIL import Image, ImageDraw, ImageFont

from snapshot import layout_tree, tree_height


# ═════════════════════════════════════════════════════════════════
#  TREE IMAGE RENDERER
#
#  Layout: title at top, tree in middle, caption box at bottom
#  (if caption provided).
# ═════════════════════════════════════════════════════════════════
class TreeImageRenderer:
    """
    Off-screen tree renderer using Pillow.

    Converts a snapshot dict-tree into an Image by:
        1. Computing layout positions (layout_tree)
        2. Drawing edges (parent → child lines)
        3. Drawing nodes (circles with value and height labels)
        4. Outlining marked nodes in their marker colour

    Args:
        settings (Settings): For colour lookups.
        width    (int)     : Image width in pixels.
        height   (int)     : Image height in pixels.
    """

    def __init__(self, settings, width=800, height=500):
        self.settings    = settings
        self.width       = width
        self.height      = height
        self.node_radius = 22           # Circle radius for nodes
        self.padding     = 50           # Horizontal margin
        self._fonts      = None

    # ── Font loading ────────────────────────────────────────────
    @staticmethod
    def _load_fonts():
        """
        Attempt to load monospace fonts for node labels.

        Tries platform-specific paths (Windows, Linux, macOS).
        Falls back to Pillow's built-in bitmap font if none found.

        Returns:
            tuple[ImageFont, ImageFont, ImageFont]:
                (normal_14pt, small_11pt, title_16pt)
        """
        candidates_mono = [
            "consola.ttf",                                         # Windows
            "Consolas.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", # Debian/Ubuntu
            "/usr/share/fonts/TTF/DejaVuSansMono.ttf",             # Arch
            "/System/Library/Fonts/Menlo.ttc",                     # macOS
        ]
        for p in candidates_mono:
            try:
                return (ImageFont.truetype(p, 14),
                        ImageFont.truetype(p, 11),
                        ImageFont.truetype(p, 16))
            except OSError:
                continue
        font = ImageFont.load_default()
        return font, font, font

    @property
    def fonts(self):
        if self._fonts is None:
            self._fonts = self._load_fonts()
        return self._fonts

    # ── Main render method ──────────────────────────────────────
    def render(self, tree_state, title="", caption=""):
        """
        Render a tree snapshot to a Pillow Image.

        Args:
            tree_state (dict|None) : Snapshot dict-tree.
            title      (str)       : Text drawn at the top of the image.
            caption    (str)       : Text drawn in a box at the bottom.

        Returns:
            Image: Rendered RGB image.
        """
        s = self.settings
        img  = Image.new("RGB", (self.width, self.height), s.get("CANVAS_BG"))
        draw = ImageDraw.Draw(img)
        font, font_s, font_t = self.fonts

        if title:
            draw.text((10, 8), title, fill=s.get("ACCENT"), font=font_t)

        if caption:
            y0 = self.height - 80
            draw.rectangle([5, y0, self.width - 5, self.height - 5],
                           fill=s.get("CASE_BG"))
            for i, ln in enumerate(caption.split('\n')[:3]):
                draw.text((10, y0 + 5 + i * 16), ln[:90],
                          fill=s.get("FG"), font=font_s)

        if tree_state is None:
            draw.text((self.width // 2 - 40, self.height // 2),
                      "Empty Tree", fill=s.get("FG"), font=font)
            return img

        positions = {}
        layout_tree(tree_state, 0, 0.0, 1.0, positions)
        th  = max(tree_height(tree_state), 1)
        pad = self.padding
        tree_h = (self.height - 120) if caption else (self.height - 60)

        def cx(x): return int(pad + x * (self.width - 2 * pad))
        def cy(y): return int(55 + y * (tree_h - 40) / th)

        def _draw(node, pp=None):
            if node is None:
                return
            pos = positions[node["id"]]
            x, y = cx(pos["x"]), cy(pos["y"])

            if pp:
                draw.line([pp, (x, y)], fill=s.get("EDGE"), width=2)

            # edges first so circles sit on top
            _draw(node.get("left"),  (x, y))
            _draw(node.get("right"), (x, y))

            r = self.node_radius
            hl = s.marker_color(node.get("markers", ()))
            draw.ellipse([x - r, y - r, x + r, y + r],
                         fill=s.get("NODE_FILL"),
                         outline=hl or "white", width=4 if hl else 1)

            txt = str(node["value"])
            bb  = draw.textbbox((0, 0), txt, font=font)
            tw, tth = bb[2] - bb[0], bb[3] - bb[1]
            draw.text((x - tw // 2, y - tth // 2), txt,
                      fill=s.get("NODE_TEXT"), font=font)
            draw.text((x + r + 2, y - r), f"h{node['height']}",
                      fill=s.get("HEIGHT_FG"), font=font_s)

        _draw(tree_state)
        return img

    def render_step(self, step, index=None, total=None):
        """Render one ``Step`` with a "Step i/n: kind" title and its label."""
        title = step.kind
        if index is not None:
            title = f"Step {index + 1}" + (f"/{total}" if total else "") + f": {step.kind}"
        caption = step.label
        if step.case:
            caption += f"\n{step.case} case"
        return self.render(step.after, title, caption)
