from __future__ import annotations

from PIL import Image, ImageOps
from rembg import remove as cut_background

from .interfaces import BackgroundRemoverInterface


def crop_to_alpha(img: Image.Image) -> Image.Image:
    """Crop to the bounding box of non-transparent pixels; fully clear frames stay as they are."""

    rgba = img.convert("RGBA")
    box = rgba.getchannel("A").getbbox()
    return rgba.crop(box) if box else rgba


def is_cut_out(img: Image.Image) -> bool:
    if not img.has_transparency_data:
        return False
    low, _high = img.convert("RGBA").getchannel("A").getextrema()
    return low < 255


class RemoveBgBackgroundRemover(BackgroundRemoverInterface):
    """Cut an opaque studio background out of a pre-rendered frame.

    Frames that already carry transparency are returned untrimmed so their
    placement inside the render canvas survives.
    """

    def remove(self, img: Image.Image) -> Image.Image:
        frame = ImageOps.exif_transpose(img)
        if is_cut_out(frame):
            return frame.convert("RGBA")
        return crop_to_alpha(cut_background(frame))
