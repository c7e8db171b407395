import pytest
from PIL import Image, ImageChops

from avl_tree import build_tree
from export import (ExportError, GIFExporter, PDFExporter, PNGExporter,
                    VideoExporter, summarize)
from playback import Playback
from render import TreeImageRenderer


@pytest.fixture
def frames():
    pb = Playback()
    pb.run(build_tree([30, 10]), "insert", 20)     # LR case
    return pb.frames


def test_summarize(frames):
    summary = summarize(frames)
    assert summary["total"] == 6
    assert summary["rotations"] == 2
    assert summary["cases"] == {"LR": 2}
    assert summary["comparisons"] == 0


def test_render_empty_and_non_empty(settings, perfect_tree):
    renderer = TreeImageRenderer(settings, 400, 300)
    blank = Image.new("RGB", (400, 300), settings.get("CANVAS_BG"))

    empty = renderer.render(None)
    assert empty.size == (400, 300)

    img = renderer.render(perfect_tree.snapshot(), title="t", caption="c")
    assert img.mode == "RGB"
    assert ImageChops.difference(img, blank).getbbox() is not None


def test_render_step_includes_markers(settings, frames):
    renderer = TreeImageRenderer(settings, 400, 300)
    plain = renderer.render(frames[0].after)
    marked = renderer.render(frames[1].after)
    assert ImageChops.difference(plain, marked).getbbox() is not None


def test_png_export(settings, frames, tmp_path):
    out = tmp_path / "frame.png"
    PNGExporter(settings).export(frames[2], str(out))
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.size == (800, 500)


def test_gif_export_has_one_frame_per_step(settings, frames, tmp_path):
    out = tmp_path / "walk.gif"
    GIFExporter(settings).export(frames, str(out), frame_ms=200)
    with Image.open(out) as img:
        assert img.format == "GIF"
        assert img.n_frames == len(frames)


def test_pdf_export(settings, frames, tmp_path):
    out = tmp_path / "walk.pdf"
    PDFExporter(settings).export(frames, str(out))
    data = out.read_bytes()
    assert data.startswith(b"%PDF")


@pytest.mark.parametrize("exporter", [GIFExporter, PDFExporter, VideoExporter])
def test_empty_export_raises(settings, tmp_path, exporter):
    with pytest.raises(ExportError):
        exporter(settings).export([], str(tmp_path / "out"))


def test_png_export_to_missing_directory_raises(settings, frames, tmp_path):
    with pytest.raises(ExportError):
        PNGExporter(settings).export(frames[0], str(tmp_path / "nope" / "x.png"))
