from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import numpy as np

from PIL import Image


Color = tuple[int, int, int]
_BLOCK_ELEMENTS = 1 << 18


def palette_from_image(img: Image.Image) -> list[Color]:
    """De-duplicated RGB colours of ``img`` in first-seen (row-major) order."""

    rgb = np.asarray(img.convert("RGB"), dtype=np.uint8).reshape(-1, 3)
    if rgb.size == 0:
        return []
    _unique, first_index = np.unique(rgb, axis=0, return_index=True)
    ordered = rgb[np.sort(first_index)]
    return [tuple(int(c) for c in color) for color in ordered]


def load_palette(path: Path) -> list[Color]:
    with Image.open(path) as img:
        return palette_from_image(img)


def _pack(rgb: np.ndarray) -> np.ndarray:
    rgb = rgb.astype(np.uint32)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


class PaletteQuantizer:
    """Snap every pixel to the nearest palette colour, keeping its alpha.

    Distance is Euclidean over RGB. Ties go to the earliest palette entry.
    Results are cached per input colour so repeated frames only pay for
    colours they have not seen yet.
    """

    def __init__(self, palette: Sequence[Color] | Iterable[Color]) -> None:
        colors = [tuple(int(c) for c in color[:3]) for color in palette]
        self._palette = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
        self._palette_u8 = self._palette.astype(np.uint8)
        self._cache: dict[int, int] = {}

    @property
    def size(self) -> int:
        return int(self._palette.shape[0])

    def nearest_index(self, colors: np.ndarray) -> np.ndarray:
        colors = colors.astype(np.float64).reshape(-1, 3)
        result = np.empty(colors.shape[0], dtype=np.intp)
        # Bounded working set: at most _BLOCK_ELEMENTS colour/palette pairs at once.
        rows = max(1, _BLOCK_ELEMENTS // max(1, self.size))
        for start in range(0, colors.shape[0], rows):
            block = colors[start : start + rows]
            diff = block[:, None, :] - self._palette[None, :, :]
            dist = np.einsum("ijk,ijk->ij", diff, diff)
            # argmin returns the first minimum, which gives palette-order tie breaking.
            result[start : start + rows] = np.argmin(dist, axis=1)
        return result

    def quantize(self, img: Image.Image) -> Image.Image:
        if self.size == 0:
            return img
        rgba = np.array(img.convert("RGBA"), dtype=np.uint8)
        h, w = rgba.shape[:2]
        flat = rgba.reshape(-1, 4)
        packed = _pack(flat[:, :3])
        unique, inverse = np.unique(packed, return_inverse=True)

        missing = [int(value) for value in unique if int(value) not in self._cache]
        if missing:
            values = np.asarray(missing, dtype=np.uint32)
            colors = np.stack(
                [(values >> 16) & 0xFF, (values >> 8) & 0xFF, values & 0xFF], axis=1
            )
            for value, index in zip(missing, self.nearest_index(colors)):
                self._cache[value] = int(index)

        lookup = np.asarray([self._cache[int(value)] for value in unique], dtype=np.intp)
        flat[:, :3] = self._palette_u8[lookup[inverse.reshape(-1)]]
        return Image.fromarray(flat.reshape(h, w, 4))


def quantize(img: Image.Image, palette: Sequence[Color]) -> Image.Image:
    return PaletteQuantizer(palette).quantize(img)
