from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence
import io

from PIL import Image

from .errors import InvalidGeometry
from .interfaces import ImageStoreInterface
from .layout import CellRect


@dataclass
class StoredSheet:
    path: Path
    pixel_size: int = 0
    cells: list[tuple[str, CellRect]] = field(default_factory=list)


class FileImageStore(ImageStoreInterface):
    """Copies sheets under ``base_dir`` and slices them into named cells."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def put_image(self, dest_path: Path, data: bytes) -> StoredSheet:
        path = self.base_dir / dest_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return StoredSheet(path=path)

    def configure_grid(
        self, handle: StoredSheet, pixel_size: int, cells: Sequence[tuple[str, CellRect]]
    ) -> None:
        handle.pixel_size = pixel_size
        handle.cells = list(cells)

    def slice_named(self, handle: StoredSheet) -> dict[str, Image.Image]:
        with Image.open(handle.path) as img:
            sheet = img.convert("RGBA")
        return slice_cells(sheet, handle.cells)


def slice_cells(sheet: Image.Image, cells: Sequence[tuple[str, CellRect]]) -> dict[str, Image.Image]:
    sliced: dict[str, Image.Image] = {}
    for name, rect in cells:
        if not rect.fits(sheet.width, sheet.height):
            raise InvalidGeometry(
                f"cell {name} at ({rect.x}, {rect.y}) {rect.width}x{rect.height} is outside "
                f"the {sheet.width}x{sheet.height} sheet"
            )
        sliced[name] = sheet.crop(rect.to_box(sheet.height))
    return sliced


def encode_png(img: Image.Image) -> bytes:
    out = io.BytesIO()
    img.save(out, format="PNG", optimize=True, compress_level=6)
    return out.getvalue()

