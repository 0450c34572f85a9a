from __future__ import annotations

from dataclasses import dataclass

from PIL import Image


FIT_MODES = {"none", "contain", "cover"}


@dataclass
class FrameFitter:
    pixel_size: int
    fit_mode: str = "contain"
    resample: int = Image.NEAREST

    def fit(self, img: Image.Image) -> Image.Image:
        img = img.convert("RGBA")
        if img.size == (self.pixel_size, self.pixel_size) or self.fit_mode == "none":
            return img
        if self.fit_mode == "contain":
            return self._contain(img)
        if self.fit_mode == "cover":
            return self._cover(img)
        raise ValueError(f"Unsupported fit_mode: {self.fit_mode}")

    def _scaled(self, img: Image.Image, scale: float) -> Image.Image:
        new_w = max(1, int(round(img.width * scale)))
        new_h = max(1, int(round(img.height * scale)))
        return img.resize((new_w, new_h), self.resample)

    def _contain(self, img: Image.Image) -> Image.Image:
        size = self.pixel_size
        resized = self._scaled(img, min(size / img.width, size / img.height))
        canvas = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        # Bottom-centred so feet stay on the cell's baseline.
        offset = ((size - resized.width) // 2, size - resized.height)
        canvas.paste(resized, offset, resized)
        return canvas

    def _cover(self, img: Image.Image) -> Image.Image:
        size = self.pixel_size
        resized = self._scaled(img, max(size / img.width, size / img.height))
        left = max(0, (resized.width - size) // 2)
        top = max(0, (resized.height - size) // 2)
        return resized.crop((left, top, left + size, top + size))
