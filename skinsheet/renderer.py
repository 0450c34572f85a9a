from __future__ import annotations

from pathlib import Path
import logging

from PIL import Image, UnidentifiedImageError

from .frame_fitter import FrameFitter
from .interfaces import BackgroundRemoverInterface, RendererInterface


class FrameDirectoryRenderer(RendererInterface):
    """Serve captures from frames rendered ahead of time by an external tool.

    Layout: ``{root}/{subject}/{clip}/{yaw}/{frame:04d}.png`` where ``yaw`` is
    the direction's Y angle in whole degrees and ``frame`` is
    ``round(time_seconds * frame_rate)``. A subject's primary texture, if any,
    lives at ``{root}/{subject}/texture.png``.
    """

    def __init__(
        self,
        root: Path,
        frame_rate: float,
        fitter: FrameFitter | None = None,
        background_remover: BackgroundRemoverInterface | None = None,
    ) -> None:
        self.root = root
        self.frame_rate = frame_rate
        self._fitter = fitter
        self._background_remover = background_remover

    def activate(self, subject: str) -> None:
        folder = self.root / subject
        if not folder.is_dir():
            logging.warning("No rendered frames for %s under %s", subject, folder)

    def frame_path(
        self, subject: str, clip: str, time_seconds: float, orientation: tuple[float, float]
    ) -> Path:
        frame = int(round(time_seconds * self.frame_rate))
        yaw = int(round(orientation[1])) % 360
        return self.root / subject / clip / str(yaw) / f"{frame:04d}.png"

    def sample_and_capture(
        self,
        subject: str,
        clip: str,
        time_seconds: float,
        orientation: tuple[float, float],
    ) -> Image.Image | None:
        path = self.frame_path(subject, clip, time_seconds, orientation)
        if not path.is_file():
            logging.warning("Missing rendered frame: %s", path)
            return None
        try:
            with Image.open(path) as img:
                frame = img.convert("RGBA") if self._background_remover is None else img.copy()
        except UnidentifiedImageError:
            logging.warning("Unreadable rendered frame: %s", path)
            return None
        if self._background_remover is not None:
            frame = self._background_remover.remove(frame)
        if self._fitter is not None:
            frame = self._fitter.fit(frame)
        return frame

    def primary_texture(self, subject: str) -> Image.Image | None:
        path = self.root / subject / "texture.png"
        if not path.is_file():
            return None
        with Image.open(path) as img:
            return img.convert("RGBA")
