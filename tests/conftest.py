"""Shared fakes for the export and import tests."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from skinsheet.directions import Direction, DirectionConfig, to_angle
from skinsheet.models import AnimationDefinition, ExportParams


def make_frame(pixel_size: int, index: int) -> Image.Image:
    """Solid frame coloured by capture index, with a white top row to catch flips."""
    arr = np.zeros((pixel_size, pixel_size, 4), dtype=np.uint8)
    arr[:, :, 0] = index & 0xFF
    arr[:, :, 1] = (index >> 8) & 0xFF
    arr[:, :, 2] = 200
    arr[:, :, 3] = 255
    arr[0, :, :] = [255, 255, 255, 255]
    return Image.fromarray(arr)


class FakeRenderer:
    """Renderer double that hands out numbered frames and records every call."""

    def __init__(self, pixel_size: int, failing=(), textures=None) -> None:
        self.pixel_size = pixel_size
        self.failing = set(failing)
        self.textures = textures or {}
        self.activated: list[str] = []
        self.calls: list[tuple[str, str, float, tuple[float, float]]] = []
        self.captured: dict[str, list[Image.Image]] = {}

    def activate(self, subject: str) -> None:
        self.activated.append(subject)

    def sample_and_capture(self, subject, clip, time_seconds, orientation):
        self.calls.append((subject, clip, time_seconds, orientation))
        if subject in self.failing:
            return None
        frames = self.captured.setdefault(subject, [])
        frame = make_frame(self.pixel_size, len(frames) + 1)
        frames.append(frame)
        return frame

    def primary_texture(self, subject):
        return self.textures.get(subject)


def directions(*labels: str) -> list[DirectionConfig]:
    return [DirectionConfig(direction=Direction(label), angle=to_angle(Direction(label))) for label in labels]


@pytest.fixture
def walk() -> AnimationDefinition:
    return AnimationDefinition(
        name="Walk",
        clip_length=1.0,
        clip_frame_rate=30,
        fps=12,
        frames_per_direction=5,
        directions=directions("N", "E", "S"),
    )


@pytest.fixture
def idle() -> AnimationDefinition:
    return AnimationDefinition(
        name="Idle",
        clip_length=2.0,
        clip_frame_rate=10,
        fps=6,
        frame_indices=[0, 7],
        directions=directions("S", "W"),
    )


@pytest.fixture
def params(tmp_path: Path) -> ExportParams:
    return ExportParams(
        pixel_size=8,
        y_offset=0,
        max_frames_width=0,
        combine_animations=False,
        limit_colors=False,
        export_root=tmp_path / "exports",
    )
