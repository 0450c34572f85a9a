from __future__ import annotations

import logging

from PIL import Image

from .errors import RenderCaptureFailure
from .interfaces import RendererInterface


class CaptureSession:
    """Exclusive claim on the renderer's scene and camera for one export run.

    Variants, animations, directions and frames are captured strictly one at a
    time through this object. Use it as a context manager; a renderer can only
    be held by one open session.
    """

    _claimed: set[int] = set()

    def __init__(self, renderer: RendererInterface, pixel_size: int) -> None:
        self._renderer = renderer
        self._pixel_size = pixel_size
        self._open = False
        self._subject: str | None = None

    def __enter__(self) -> "CaptureSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def pixel_size(self) -> int:
        return self._pixel_size

    @property
    def subject(self) -> str | None:
        return self._subject

    def open(self) -> None:
        key = id(self._renderer)
        if key in CaptureSession._claimed:
            raise RuntimeError("Renderer is already held by another capture session")
        CaptureSession._claimed.add(key)
        self._open = True

    def close(self) -> None:
        if not self._open:
            return
        CaptureSession._claimed.discard(id(self._renderer))
        self._open = False
        self._subject = None

    def activate(self, subject: str) -> None:
        self._require_open()
        self._renderer.activate(subject)
        self._subject = subject

    def primary_texture(self) -> Image.Image | None:
        self._require_open()
        if self._subject is None:
            return None
        return self._renderer.primary_texture(self._subject)

    def capture(
        self, clip: str, time_seconds: float, orientation: tuple[float, float]
    ) -> Image.Image:
        self._require_open()
        if self._subject is None:
            raise RuntimeError("No subject activated")
        try:
            frame = self._renderer.sample_and_capture(
                self._subject, clip, time_seconds, orientation
            )
        except (OSError, ValueError) as exc:
            raise RenderCaptureFailure(
                f"{self._subject}/{clip} @ {time_seconds:.3f}s: {exc}"
            ) from exc
        if frame is None:
            raise RenderCaptureFailure(
                f"{self._subject}/{clip} @ {time_seconds:.3f}s: renderer returned no image"
            )
        expected = (self._pixel_size, self._pixel_size)
        if frame.size != expected:
            raise RenderCaptureFailure(
                f"{self._subject}/{clip} @ {time_seconds:.3f}s: got {frame.size[0]}x{frame.size[1]}, "
                f"expected {expected[0]}x{expected[1]}"
            )
        logging.debug("Captured %s/%s at %.3fs", self._subject, clip, time_seconds)
        return frame.convert("RGBA")

    def _require_open(self) -> None:
        if not self._open:
            raise RuntimeError("Capture session is not open")
