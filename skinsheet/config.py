from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from .models import ExportParams


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    # Unquoted values may carry a trailing " # comment".
    return value.split(" #", 1)[0].rstrip()


def read_env_file(path: Path) -> dict[str, str]:
    """Parse KEY=value lines, allowing an ``export`` prefix and quoted values."""

    values: dict[str, str] = {}
    if not path.is_file():
        return values
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key:
            values[key] = _unquote(value)
    return values


def load_env_file(path: Path) -> None:
    """Fill unset environment variables from ``path``; real env always wins."""

    for key, value in read_env_file(path).items():
        os.environ.setdefault(key, value)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


@dataclass(frozen=True)
class ExportConfig:
    pixel_size: int
    max_frames_width: int
    combine_animations: bool
    y_offset: int
    limit_colors: bool
    palette_path: Path | None
    export_root: Path
    flatten_folders: bool
    frame_rate: float
    remove_background: bool

    @classmethod
    def from_env(cls) -> "ExportConfig":
        load_env_file(Path(".env"))
        pixel_size = _env_int("SKINSHEET_PIXEL_SIZE", 512)
        if pixel_size <= 0:
            raise RuntimeError("SKINSHEET_PIXEL_SIZE must be positive")
        max_frames_width = _env_int("SKINSHEET_MAX_FRAMES_WIDTH", 0)
        if max_frames_width < 0:
            raise RuntimeError("SKINSHEET_MAX_FRAMES_WIDTH must be 0 or positive")
        frame_rate_raw = os.getenv("SKINSHEET_FRAME_RATE", "30").strip() or "30"
        try:
            frame_rate = float(frame_rate_raw)
        except ValueError as exc:
            raise RuntimeError("SKINSHEET_FRAME_RATE must be a number") from exc
        if frame_rate <= 0:
            raise RuntimeError("SKINSHEET_FRAME_RATE must be positive")
        palette_raw = os.getenv("SKINSHEET_PALETTE", "").strip()
        return cls(
            pixel_size=pixel_size,
            max_frames_width=max_frames_width,
            combine_animations=_env_bool("SKINSHEET_COMBINE", False),
            y_offset=_env_int("SKINSHEET_Y_OFFSET", 11),
            limit_colors=_env_bool("SKINSHEET_LIMIT_COLORS", True),
            palette_path=Path(palette_raw) if palette_raw else None,
            export_root=Path(os.getenv("SKINSHEET_EXPORT_ROOT", "SpriteExports")),
            flatten_folders=_env_bool("SKINSHEET_FLATTEN", False),
            frame_rate=frame_rate,
            remove_background=_env_bool("SKINSHEET_REMOVE_BG", False),
        )

    def to_params(self) -> ExportParams:
        return ExportParams(
            pixel_size=self.pixel_size,
            y_offset=self.y_offset,
            max_frames_width=self.max_frames_width,
            combine_animations=self.combine_animations,
            limit_colors=self.limit_colors,
            palette_path=self.palette_path,
            export_root=self.export_root,
            flatten_folders=self.flatten_folders,
        )


@dataclass(frozen=True)
class ImportConfig:
    output_dir: Path
    compose: bool

    @classmethod
    def from_env(cls) -> "ImportConfig":
        load_env_file(Path(".env"))
        return cls(
            output_dir=Path(os.getenv("SKINSHEET_IMPORT_OUTPUT", "Sprites/Character")),
            compose=_env_bool("SKINSHEET_COMPOSE", True),
        )
