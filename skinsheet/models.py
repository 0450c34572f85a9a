from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from .directions import DirectionConfig, default_direction_configs


@dataclass(frozen=True)
class AnimationEntry:
    name: str
    directions: tuple[str, ...]
    frames_per_direction: int
    fps: int
    sheet_file: str
    row_start: int = 0
    rows_per_direction: int = 1

    @property
    def direction_count(self) -> int:
        return len(self.directions)

    @property
    def total_rows(self) -> int:
        return self.direction_count * self.rows_per_direction


@dataclass(frozen=True)
class Manifest:
    part_name: str
    pixel_size: int
    sort_order: int = 0
    sheet_width: int = 0
    max_frames_width: int = 0
    combined_sheet_name: str = ""
    group_name: str = ""
    animations: tuple[AnimationEntry, ...] = ()

    @property
    def is_combined(self) -> bool:
        return bool(self.combined_sheet_name)

    def sheet_files(self) -> list[str]:
        seen: list[str] = []
        for entry in self.animations:
            if entry.sheet_file not in seen:
                seen.append(entry.sheet_file)
        return seen

    def entries_for_sheet(self, sheet_file: str) -> list[AnimationEntry]:
        return [entry for entry in self.animations if entry.sheet_file == sheet_file]


@dataclass
class AnimationDefinition:
    name: str
    clip_length: float
    clip_frame_rate: float
    fps: int = 30
    frames_per_direction: int = 8
    frame_indices: list[int] = field(default_factory=list)
    every_nth: int | None = None
    directions: list[DirectionConfig] = field(default_factory=default_direction_configs)
    clip: str | None = None

    @property
    def clip_name(self) -> str:
        return self.clip or self.name

    @property
    def total_source_frames(self) -> int:
        return int(round(self.clip_length * self.clip_frame_rate))

    def direction_labels(self) -> list[str]:
        return [config.label for config in self.directions]

    def frame_time(self, frame_index: int) -> float:
        return frame_index / self.total_source_frames * self.clip_length


@dataclass
class ExportGroup:
    name: str
    sort_order: int
    variants: list[str] = field(default_factory=list)


@dataclass
class ExportBatch:
    animations: list[AnimationDefinition]
    groups: list[ExportGroup]


@dataclass(frozen=True)
class ExportParams:
    pixel_size: int = 512
    y_offset: int = 11
    max_frames_width: int = 0
    combine_animations: bool = False
    limit_colors: bool = True
    palette_path: Path | None = None
    export_root: Path = Path("SpriteExports")
    flatten_folders: bool = False


@dataclass
class DirectionFrames:
    direction: str
    frames: list[Image.Image] = field(default_factory=list)


@dataclass
class AnimationFrames:
    name: str
    fps: int
    directions: list[str]
    direction_frames: list[DirectionFrames] = field(default_factory=list)

    @property
    def frame_count(self) -> int:
        return len(self.direction_frames[0].frames) if self.direction_frames else 0

    @property
    def direction_count(self) -> int:
        return len(self.direction_frames)

    def get_frame(self, direction_index: int, frame_index: int) -> Image.Image | None:
        if direction_index < 0 or direction_index >= len(self.direction_frames):
            return None
        frames = self.direction_frames[direction_index].frames
        if frame_index < 0 or frame_index >= len(frames):
            return None
        return frames[frame_index]


@dataclass
class PartDefinition:
    part_name: str
    sort_order: int
    animations: list[AnimationFrames] = field(default_factory=list)
    source: Path | None = None

    def get_animation(self, name: str) -> AnimationFrames | None:
        for animation in self.animations:
            if animation.name == name:
                return animation
        return None

    def has_animation(self, name: str) -> bool:
        return self.get_animation(name) is not None
