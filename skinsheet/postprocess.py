from __future__ import annotations

import numpy as np

from PIL import Image


def shift_rows(img: Image.Image, dy: int) -> Image.Image:
    """Translate ``img`` vertically by ``dy`` pixels, positive moving it up.

    Rows are counted from the bottom edge, so bottom row ``y`` ends up at row
    ``y + dy``. Vacated rows become fully transparent and rows pushed past an
    edge are dropped.
    """

    if dy == 0:
        return img
    src = np.asarray(img.convert("RGBA"), dtype=np.uint8)
    h = src.shape[0]
    dst = np.zeros_like(src)
    if abs(dy) < h:
        # Array row 0 is the top of the image, so moving up means a smaller index.
        if dy > 0:
            dst[: h - dy] = src[dy:]
        else:
            dst[-dy:] = src[: h + dy]
    return Image.fromarray(dst)
