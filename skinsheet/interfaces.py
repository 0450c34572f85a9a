from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, Sequence

from PIL import Image

from .layout import CellRect


class BackgroundRemoverInterface(Protocol):
    def remove(self, img: Image.Image) -> Image.Image:
        ...


class RendererInterface(Protocol):
    def activate(self, subject: str) -> None:
        ...

    def sample_and_capture(
        self,
        subject: str,
        clip: str,
        time_seconds: float,
        orientation: tuple[float, float],
    ) -> Image.Image | None:
        ...

    def primary_texture(self, subject: str) -> Image.Image | None:
        ...


class ImageStoreInterface(Protocol):
    def put_image(self, dest_path: Path, data: bytes) -> Any:
        ...

    def configure_grid(
        self, handle: Any, pixel_size: int, cells: Sequence[tuple[str, CellRect]]
    ) -> None:
        ...

    def slice_named(self, handle: Any) -> dict[str, Image.Image]:
        ...
