"""
Exporters for recorded frames: PNG, animated GIF, PDF walkthrough
and MP4 video.

Every exporter takes a list of ``Step`` frames (as produced by
``Playback``) and raises ``ExportError`` on failure.
"""
import logging
import os
import shutil
import tempfile
from datetime import datetime

import imageio
import numpy as np
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas as pdf_canvas

from avl_tree import ROTATION_KINDS
from render import TreeImageRenderer

# ─── OpenCV: preferred MP4 backend, imageio is used without it ───
try:
    import cv2
    HAS_CV2 = True
except ImportError:
    HAS_CV2 = False

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when an export cannot be produced."""


def summarize(steps):
    """
    Aggregate counts over a list of frames.

    Returns:
        dict: total, rotations, per-case counts, comparisons.
    """
    cases = {}
    for st in steps:
        if st.kind in ROTATION_KINDS:
            cases[st.case] = cases.get(st.case, 0) + 1
    return {
        "total":       len(steps),
        "rotations":   sum(1 for st in steps if st.kind in ROTATION_KINDS),
        "cases":       cases,
        "comparisons": sum(1 for st in steps if st.kind == "compare"),
    }


class PNGExporter:
    def __init__(self, settings):
        self.renderer = TreeImageRenderer(settings, 800, 500)

    def export(self, step, filename):
        """Write a single frame as PNG."""
        try:
            self.renderer.render_step(step).save(filename, "PNG")
        except OSError as e:
            raise ExportError(f"could not write {filename}: {e}") from e
        logger.info("wrote %s", filename)


class GIFExporter:
    """Animated GIF of all frames (Pillow)."""

    def __init__(self, settings):
        self.settings = settings
        self.renderer = TreeImageRenderer(settings, 800, 500)

    def export(self, steps, filename, frame_ms=None):
        if not steps:
            raise ExportError("nothing to export")
        frame_ms = frame_ms or self.settings.anim_speed
        frames = [self.renderer.render_step(st, i, len(steps))
                  for i, st in enumerate(steps)]
        try:
            frames[0].save(filename, format="GIF", save_all=True,
                           append_images=frames[1:], duration=frame_ms, loop=0)
        except OSError as e:
            raise ExportError(f"could not write {filename}: {e}") from e
        logger.info("wrote %d frames to %s", len(frames), filename)


# ═════════════════════════════════════════════════════════════════
#  PDF EXPORTER
#
#  Title page, one page per frame (tree image + label + case),
#  final summary page.
# ═════════════════════════════════════════════════════════════════
class PDFExporter:
    """
    Export the frame list as a landscape-A4 PDF document.

    Attributes:
        settings (Settings)          : For colour/theme lookups.
        renderer (TreeImageRenderer) : Renders tree snapshots to images.
    """

    def __init__(self, settings):
        self.settings  = settings
        self.renderer  = TreeImageRenderer(settings, 700, 400)

    def export(self, steps, filename):
        """
        Generate a PDF file from the frame list.

        Workflow:
            1. Create title page
            2. For each frame: render tree → save temp PNG → embed in PDF
            3. Append summary page with statistics
            4. Clean up temp directory

        Args:
            steps    (list[Step]) : Frames to export.
            filename (str)        : Output PDF file path.
        """
        if not steps:
            raise ExportError("nothing to export")

        pw, ph = landscape(A4)
        c = pdf_canvas.Canvas(filename, pagesize=landscape(A4))

        # ── Title page ──
        extra = steps[0].extra or {}
        c.setFont("Helvetica-Bold", 28)
        c.drawCentredString(pw / 2, ph - 100, "AVL Tree Walkthrough")
        c.setFont("Helvetica", 16)
        if extra:
            c.drawCentredString(pw / 2, ph - 140,
                f"{extra.get('operation', '').upper()} {extra.get('value', '')}")
        c.setFont("Helvetica", 12)
        c.drawCentredString(pw / 2, ph - 180,
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
        c.drawCentredString(pw / 2, ph - 200, f"Total Steps: {len(steps)}")
        c.showPage()

        tmp = tempfile.mkdtemp()     # Temp dir for PNG frames
        try:
            for i, st in enumerate(steps):
                img = self.renderer.render(st.after, f"Step {i + 1}: {st.kind}")
                ip = os.path.join(tmp, f"s{i:04d}.png")
                img.save(ip)

                c.setFont("Helvetica-Bold", 14)
                c.drawString(30, ph - 30, f"Step {i + 1} of {len(steps)}")
                c.drawImage(ip, 30, ph - 450, width=700, height=400,
                            preserveAspectRatio=True)
                c.setFont("Helvetica", 12)
                c.drawString(30, ph - 480, st.label)
                if st.case:
                    c.setFont("Helvetica-Bold", 11)
                    c.drawString(30, ph - 500, f"Rotation case: {st.case}")
                c.showPage()

            # ── Summary page ──
            summary = summarize(steps)
            c.setFont("Helvetica-Bold", 20)
            c.drawCentredString(pw / 2, ph - 100, "Summary")
            c.setFont("Helvetica", 12)
            y = ph - 150
            lines = [f"Total Steps: {summary['total']}",
                     f"Rotations: {summary['rotations']}",
                     f"Comparisons: {summary['comparisons']}"]
            lines += [f"  {case} rotations: {n}"
                      for case, n in sorted(summary["cases"].items())]
            for line in lines:
                c.drawString(100, y, line)
                y -= 22
            c.showPage()
            c.save()
        except OSError as e:
            raise ExportError(f"could not write {filename}: {e}") from e
        finally:
            shutil.rmtree(tmp, ignore_errors=True)
        logger.info("wrote %d pages to %s", len(steps) + 2, filename)


# ═════════════════════════════════════════════════════════════════
#  VIDEO EXPORTER
#
#  Two backends (tried in order):
#    1. OpenCV  (cv2.VideoWriter) — when installed
#    2. imageio (imageio.mimwrite)
# ═════════════════════════════════════════════════════════════════
class VideoExporter:
    """
    Export the frame list as an MP4 video; each frame is held for
    ``fps`` video frames (one second).
    """

    def __init__(self, settings):
        self.settings = settings
        self.renderer = TreeImageRenderer(settings, 1280, 720)

    def _images(self, steps):
        for i, st in enumerate(steps):
            yield np.array(self.renderer.render_step(st, i, len(steps)))

    def export(self, steps, filename, fps=2):
        if not steps:
            raise ExportError("nothing to export")
        if HAS_CV2:
            self.export_cv2(steps, filename, fps)
        else:
            self.export_imageio(steps, filename, fps)

    def export_cv2(self, steps, filename, fps=2):
        fourcc = cv2.VideoWriter_fourcc(*'mp4v')
        out    = cv2.VideoWriter(filename, fourcc, fps, (1280, 720))
        if not out.isOpened():
            raise ExportError(f"OpenCV could not open {filename}")
        try:
            for arr in self._images(steps):
                bgr = cv2.cvtColor(arr, cv2.COLOR_RGB2BGR)
                for _ in range(max(1, fps)):        # hold each step
                    out.write(bgr)
        finally:
            out.release()
        logger.info("wrote %s (opencv)", filename)

    def export_imageio(self, steps, filename, fps=2):
        frames = []
        for arr in self._images(steps):
            frames.extend([arr] * max(1, fps))
        try:
            imageio.mimwrite(filename, frames, fps=fps)
        except (OSError, ValueError, RuntimeError) as e:
            raise ExportError(f"imageio could not write {filename}: {e}") from e
        logger.info("wrote %s (imageio)", filename)
