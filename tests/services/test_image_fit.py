from pathlib import Path

import pytest
from PIL import Image

from cardflow.core.errors import ImageProcessingError, SlotResolutionError
from cardflow.services.document import Bounds, DocumentContext, FrameLayer, PixelLayer, build_document
from cardflow.services.fitting import ImageFitter, cover_fit
from cardflow.services.paths import PathResolver
from cardflow.services.slots import SlotResolver

EXTENSIONS = ("jpg", "jpeg", "png")


def test_cover_fit_scale_and_translation():
    transform = cover_fit(Bounds(0, 0, 100, 50), Bounds(0, 0, 50, 50))
    assert transform.scale == 2.0
    assert (transform.dx, transform.dy) == (25, 0)


def test_cover_fit_tall_image():
    transform = cover_fit(Bounds(10, 10, 110, 60), Bounds(0, 0, 20, 80))
    assert transform.scale == 5.0


def test_cover_fit_rejects_zero_extent():
    with pytest.raises(ValueError):
        cover_fit(Bounds(0, 0, 100, 50), Bounds(5, 5, 5, 30))


@pytest.fixture()
def ctx(host, measurer, tmp_path):
    data = {
        "name": "board",
        "width": 200,
        "height": 200,
        "layers": [
            {"text": "caption", "position": [0, 150]},
            {"frame": "profile-frame-left", "bounds": [0, 0, 100, 50]},
        ],
    }
    document = build_document(data, measurer)
    return DocumentContext(host, document, source_path=str(tmp_path / "people.csv"))


@pytest.fixture()
def fitter():
    return ImageFitter(PathResolver("posix"), SlotResolver(), EXTENSIONS)


def test_place_covers_clips_and_centres(ctx, fitter, make_image):
    make_image("square.png", (50, 50))
    layer = fitter.place(ctx, "square.png", "profile-frame-left")

    frame = ctx.root.layers[2]
    assert isinstance(frame, FrameLayer)
    assert ctx.root.layers[1] is layer
    assert layer.scale == 2.0
    assert layer.bounds.width >= frame.bounds.width
    assert layer.bounds.height >= frame.bounds.height
    assert layer.bounds.center == frame.bounds.center
    assert layer.clip_target is frame
    assert layer.visible_bounds == frame.bounds


def test_place_resolves_relative_to_source(ctx, fitter, make_image):
    make_image("images/ada.jpg", (30, 60))
    layer = fitter.place(ctx, "images/ada.jpg", "profile-frame-left")
    assert Path(layer.source) == Path(ctx.source_path).parent / "images" / "ada.jpg"
    assert layer.scale == pytest.approx(100 / 30)


def test_place_missing_frame(ctx, fitter, make_image):
    make_image("square.png", (50, 50))
    with pytest.raises(SlotResolutionError):
        fitter.place(ctx, "square.png", "profile-frame-right")
    assert not any(isinstance(layer, PixelLayer) for layer in ctx.root.layers)


def test_place_rejects_extension(ctx, fitter, make_image):
    make_image("anim.gif", (50, 50))
    with pytest.raises(ImageProcessingError, match="extension"):
        fitter.place(ctx, "anim.gif", "profile-frame-left")


def test_place_missing_file(ctx, fitter):
    with pytest.raises(ImageProcessingError, match="file not found") as exc_info:
        fitter.place(ctx, "gone.png", "profile-frame-left")
    assert exc_info.value.path.endswith("gone.png")


def test_place_unreadable_image(ctx, fitter, tmp_path):
    (tmp_path / "broken.png").write_bytes(b"not an image")
    with pytest.raises(ImageProcessingError, match="Unable to open image"):
        fitter.place(ctx, "broken.png", "profile-frame-left")


def test_place_applies_cover_fit_translation(ctx, fitter, make_image):
    make_image("wide.png", (80, 20))
    layer = fitter.place(ctx, "wide.png", "profile-frame-left")

    # pasted centred on the 200x200 canvas, then moved by the cover-fit offset
    transform = cover_fit(Bounds(0, 0, 100, 50), Bounds(60, 90, 140, 110))
    assert transform.scale == 2.5
    assert (transform.dx, transform.dy) == (-50, -75)
    assert layer.bounds == Bounds(-50, 0, 150, 50)


def test_place_oversized_image(ctx, fitter, make_image, monkeypatch):
    make_image("huge.png", (200, 200))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(ImageProcessingError, match="Unable to open image"):
        fitter.place(ctx, "huge.png", "profile-frame-left")
    assert not any(isinstance(layer, PixelLayer) for layer in ctx.root.layers)
