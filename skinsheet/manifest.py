"""Manifest (de)serialisation and geometry checks.

The JSON field names are the on-disk contract shared with existing exports:
``exportPrefix``, ``pixelSize``, ``sortOrder``, ``sheetWidth``,
``maxFramesWidth``, ``combinedSpritesheet`` and ``animations[]`` holding
``name``, ``directions``, ``framesPerDirection``, ``fps``, ``spritesheet``,
``rowStart``, ``rowsPerDirection``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
import json

from .errors import InvalidGeometry, MalformedManifest
from .layout import (
    AnimationBlock,
    SheetLayout,
    effective_columns,
    rows_per_direction,
)
from .models import AnimationEntry, Manifest


MANIFEST_NAME = "manifest.json"
MANIFEST_GLOB = "*manifest.json"


def manifest_to_dict(manifest: Manifest) -> dict[str, Any]:
    data: dict[str, Any] = {
        "groupName": manifest.group_name,
        "exportPrefix": manifest.part_name,
        "pixelSize": manifest.pixel_size,
        "sortOrder": manifest.sort_order,
        "sheetWidth": manifest.sheet_width,
        "maxFramesWidth": manifest.max_frames_width,
        "combinedSpritesheet": manifest.combined_sheet_name,
        "animations": [
            {
                "name": entry.name,
                "directions": list(entry.directions),
                "framesPerDirection": entry.frames_per_direction,
                "fps": entry.fps,
                "spritesheet": entry.sheet_file,
                "rowStart": entry.row_start,
                "rowsPerDirection": entry.rows_per_direction,
            }
            for entry in manifest.animations
        ],
    }
    return data


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data or data[key] is None:
        raise MalformedManifest(f"{where}: missing required field '{key}'")
    return data[key]


def _as_int(value: Any, key: str, where: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedManifest(f"{where}: '{key}' must be an integer")
    if value < minimum:
        raise MalformedManifest(f"{where}: '{key}' must be >= {minimum}")
    return value


def _as_str(value: Any, key: str, where: str) -> str:
    if not isinstance(value, str):
        raise MalformedManifest(f"{where}: '{key}' must be a string")
    return value


def _as_file_name(value: Any, key: str, where: str) -> str:
    name = _as_str(value, key, where)
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise MalformedManifest(f"{where}: '{key}' must be a plain file name, got {name!r}")
    return name


def _entry_from_dict(data: Any, index: int) -> AnimationEntry:
    where = f"animations[{index}]"
    if not isinstance(data, dict):
        raise MalformedManifest(f"{where}: expected an object")
    name = _as_str(_require(data, "name", where), "name", where)
    if not name:
        raise MalformedManifest(f"{where}: 'name' must not be empty")
    where = f"animation '{name}'"
    directions = _require(data, "directions", where)
    if not isinstance(directions, list) or not directions:
        raise MalformedManifest(f"{where}: 'directions' must be a non-empty list")
    labels = tuple(_as_str(label, "directions", where) for label in directions)
    return AnimationEntry(
        name=name,
        directions=labels,
        frames_per_direction=_as_int(
            _require(data, "framesPerDirection", where), "framesPerDirection", where, 1
        ),
        fps=_as_int(_require(data, "fps", where), "fps", where, 1),
        sheet_file=_as_file_name(
            _require(data, "spritesheet", where), "spritesheet", where
        ),
        row_start=_as_int(_require(data, "rowStart", where), "rowStart", where, 0),
        rows_per_direction=_as_int(
            _require(data, "rowsPerDirection", where), "rowsPerDirection", where, 1
        ),
    )


def manifest_from_dict(data: Any) -> Manifest:
    if not isinstance(data, dict):
        raise MalformedManifest("manifest root must be an object")
    where = "manifest"
    animations = _require(data, "animations", where)
    if not isinstance(animations, list):
        raise MalformedManifest("manifest: 'animations' must be a list")
    combined = data.get("combinedSpritesheet") or ""
    manifest = Manifest(
        part_name=_as_file_name(
            _require(data, "exportPrefix", where), "exportPrefix", where
        ),
        pixel_size=_as_int(_require(data, "pixelSize", where), "pixelSize", where, 1),
        sort_order=_as_int(_require(data, "sortOrder", where), "sortOrder", where, -(2**31)),
        sheet_width=_as_int(_require(data, "sheetWidth", where), "sheetWidth", where, 0),
        max_frames_width=_as_int(
            _require(data, "maxFramesWidth", where), "maxFramesWidth", where, 0
        ),
        combined_sheet_name=(
            _as_file_name(combined, "combinedSpritesheet", where) if combined else ""
        ),
        group_name=_as_str(data.get("groupName") or "", "groupName", where),
        animations=tuple(_entry_from_dict(item, i) for i, item in enumerate(animations)),
    )
    validate_manifest(manifest)
    return manifest


def validate_manifest(manifest: Manifest) -> None:
    """Check the row accounting and naming invariants.

    Raises InvalidGeometry when the stored geometry cannot be addressed
    consistently, MalformedManifest for naming problems.
    """

    names = [entry.name for entry in manifest.animations]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise MalformedManifest(f"duplicate animation names: {', '.join(duplicates)}")

    for entry in manifest.animations:
        expected = rows_per_direction(entry.frames_per_direction, manifest.max_frames_width)
        if entry.rows_per_direction != expected:
            raise InvalidGeometry(
                f"animation '{entry.name}': rowsPerDirection {entry.rows_per_direction} "
                f"does not match {expected} for maxFramesWidth {manifest.max_frames_width}"
            )
        if manifest.is_combined and entry.sheet_file != manifest.combined_sheet_name:
            raise InvalidGeometry(
                f"animation '{entry.name}': spritesheet '{entry.sheet_file}' differs from "
                f"combined sheet '{manifest.combined_sheet_name}'"
            )

    for sheet_file in manifest.sheet_files():
        next_row = 0
        for entry in manifest.entries_for_sheet(sheet_file):
            if entry.row_start != next_row:
                raise InvalidGeometry(
                    f"animation '{entry.name}': rowStart {entry.row_start} expected {next_row} "
                    f"in sheet '{sheet_file}'"
                )
            next_row = entry.row_start + entry.total_rows

    if manifest.is_combined:
        widest = max(
            (
                effective_columns(entry.frames_per_direction, manifest.max_frames_width)
                for entry in manifest.animations
            ),
            default=0,
        )
        if manifest.sheet_width < widest:
            raise InvalidGeometry(
                f"sheetWidth {manifest.sheet_width} is narrower than the widest animation ({widest})"
            )


def sheet_layouts(manifest: Manifest) -> dict[str, SheetLayout]:
    """Rebuild the grid of every physical sheet from stored manifest values."""

    layouts: dict[str, SheetLayout] = {}
    for sheet_file in manifest.sheet_files():
        entries = manifest.entries_for_sheet(sheet_file)
        if manifest.is_combined:
            columns = manifest.sheet_width
        else:
            columns = max(
                effective_columns(entry.frames_per_direction, manifest.max_frames_width)
                for entry in entries
            )
        layouts[sheet_file] = SheetLayout(
            pixel_size=manifest.pixel_size,
            max_frames_width=manifest.max_frames_width,
            columns=columns,
            blocks=tuple(
                AnimationBlock(
                    name=entry.name,
                    direction_count=entry.direction_count,
                    frames_per_direction=entry.frames_per_direction,
                    rows_per_direction=entry.rows_per_direction,
                    row_start=entry.row_start,
                )
                for entry in entries
            ),
        )
    return layouts


def dumps_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest_to_dict(manifest), indent=2, ensure_ascii=False) + "\n"


def loads_manifest(text: str, path: Path | None = None) -> Manifest:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedManifest(f"invalid JSON: {exc}", path) from exc
    try:
        return manifest_from_dict(data)
    except MalformedManifest as exc:
        if exc.path is None:
            exc.path = path
        raise


def save_manifest(manifest: Manifest, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_manifest(manifest), encoding="utf-8")
    return path


def load_manifest(path: Path) -> Manifest:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedManifest("manifest is not valid UTF-8", path) from exc
    return loads_manifest(text, path)


def find_manifests(root: Path) -> list[Path]:
    return sorted(path for path in root.rglob(MANIFEST_GLOB) if path.is_file())
