import pytest
from PIL import Image

pytest.importorskip("rembg")

from skinsheet import background_remover  # noqa: E402
from skinsheet.background_remover import (  # noqa: E402
    RemoveBgBackgroundRemover,
    crop_to_alpha,
    is_cut_out,
)


def test_transparent_frame_passes_through(monkeypatch) -> None:
    def fail(_img):
        raise AssertionError("background cut should not run")

    monkeypatch.setattr(background_remover, "cut_background", fail)
    frame = Image.new("RGBA", (8, 8), (0, 0, 0, 0))
    frame.putpixel((3, 3), (255, 0, 0, 255))
    out = RemoveBgBackgroundRemover().remove(frame)
    assert out.size == (8, 8)
    assert out.getpixel((3, 3)) == (255, 0, 0, 255)


def test_opaque_frame_is_cut_and_cropped(monkeypatch) -> None:
    def cut(img):
        cut_out = Image.new("RGBA", img.size, (0, 0, 0, 0))
        cut_out.paste((0, 255, 0, 255), (2, 4, 6, 8))
        return cut_out

    monkeypatch.setattr(background_remover, "cut_background", cut)
    out = RemoveBgBackgroundRemover().remove(Image.new("RGB", (8, 8), (255, 255, 255)))
    assert out.mode == "RGBA"
    assert out.size == (4, 4)
    assert out.getpixel((0, 0)) == (0, 255, 0, 255)


def test_transparency_detection() -> None:
    assert not is_cut_out(Image.new("RGB", (2, 2)))
    assert not is_cut_out(Image.new("RGBA", (2, 2), (1, 1, 1, 255)))
    assert is_cut_out(Image.new("RGBA", (2, 2), (1, 1, 1, 0)))


def test_crop_keeps_fully_clear_frame() -> None:
    clear = Image.new("RGBA", (5, 3), (0, 0, 0, 0))
    assert crop_to_alpha(clear).size == (5, 3)
