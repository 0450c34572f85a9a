"""Batch definition files.

A batch file is JSON::

    {
      "animations": [
        {"name": "Walk", "clipLength": 1.0, "clipFrameRate": 30, "fps": 12,
         "framesPerDirection": 8, "frameIndices": [], "everyNthFrame": null,
         "clip": "walk_cycle",
         "directions": [{"direction": "N", "angle": 0, "xAngle": 0}, ...]}
      ],
      "groups": [{"name": "Torso", "sortOrder": 3, "variants": ["Torso_Leather"]}]
    }

``directions`` may be omitted for the standard eight, or given as a list of
labels. ``sortOrder`` may be omitted for the standard layer names.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
import json

from .directions import DirectionConfig, default_direction_configs, parse_direction, to_angle
from .errors import ParseError
from .models import AnimationDefinition, ExportBatch, ExportGroup


STANDARD_GROUP_ORDER = (
    "Body",
    "Legs",
    "Arms",
    "Torso",
    "Weapon",
    "Shield",
    "Head",
    "Hair",
    "Helmet",
)


def _parse_int(value: Any, label: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ParseError(f"{label} must be an integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{label} must be an integer") from exc
    if parsed != value and not isinstance(value, str):
        raise ParseError(f"{label} must be an integer")
    if minimum is not None and parsed < minimum:
        raise ParseError(f"{label} must be {minimum} or greater")
    return parsed


def _parse_float(value: Any, label: str) -> float:
    if isinstance(value, bool):
        raise ParseError(f"{label} must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{label} must be a number") from exc
    if parsed <= 0:
        raise ParseError(f"{label} must be positive")
    return parsed


def _parse_directions(value: Any, label: str) -> list[DirectionConfig]:
    if value is None:
        return default_direction_configs()
    if not isinstance(value, list) or not value:
        raise ParseError(f"{label} must be a non-empty list")
    configs: list[DirectionConfig] = []
    for index, item in enumerate(value):
        try:
            if isinstance(item, str):
                direction = parse_direction(item)
                configs.append(DirectionConfig(direction=direction, angle=to_angle(direction)))
                continue
            if not isinstance(item, dict) or "direction" not in item:
                raise ParseError(f"{label}[{index}] must be a label or an object with 'direction'")
            direction = parse_direction(str(item["direction"]))
            angle = item.get("angle")
            configs.append(
                DirectionConfig(
                    direction=direction,
                    angle=to_angle(direction) if angle is None else float(angle),
                    x_angle=float(item.get("xAngle", 0.0)),
                )
            )
        except (TypeError, ValueError) as exc:
            if isinstance(exc, ParseError):
                raise
            raise ParseError(f"{label}[{index}]: {exc}") from exc
    return configs


def parse_animation(data: Any, index: int) -> AnimationDefinition:
    label = f"animations[{index}]"
    if not isinstance(data, dict):
        raise ParseError(f"{label} must be an object")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ParseError(f"{label}.name is required")
    label = f"animation '{name}'"
    frame_indices = data.get("frameIndices") or []
    if not isinstance(frame_indices, list):
        raise ParseError(f"{label}.frameIndices must be a list")
    every_nth = data.get("everyNthFrame")
    clip = data.get("clip")
    return AnimationDefinition(
        name=name,
        clip_length=_parse_float(data.get("clipLength"), f"{label}.clipLength"),
        clip_frame_rate=_parse_float(data.get("clipFrameRate"), f"{label}.clipFrameRate"),
        fps=_parse_int(data.get("fps", 30), f"{label}.fps", minimum=1),
        frames_per_direction=_parse_int(
            data.get("framesPerDirection", 8), f"{label}.framesPerDirection", minimum=1
        ),
        frame_indices=[
            _parse_int(value, f"{label}.frameIndices", minimum=0) for value in frame_indices
        ],
        every_nth=(
            None if every_nth is None else _parse_int(every_nth, f"{label}.everyNthFrame", minimum=1)
        ),
        directions=_parse_directions(data.get("directions"), f"{label}.directions"),
        clip=clip if isinstance(clip, str) and clip else None,
    )


def parse_group(data: Any, index: int) -> ExportGroup:
    label = f"groups[{index}]"
    if not isinstance(data, dict):
        raise ParseError(f"{label} must be an object")
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ParseError(f"{label}.name is required")
    variants = data.get("variants") or []
    if not isinstance(variants, list) or not all(isinstance(v, str) and v for v in variants):
        raise ParseError(f"group '{name}'.variants must be a list of names")
    if "sortOrder" in data:
        sort_order = _parse_int(data["sortOrder"], f"group '{name}'.sortOrder")
    elif name in STANDARD_GROUP_ORDER:
        sort_order = STANDARD_GROUP_ORDER.index(name)
    else:
        sort_order = len(STANDARD_GROUP_ORDER) + index
    return ExportGroup(name=name, sort_order=sort_order, variants=list(variants))


def parse_batch(data: Any) -> ExportBatch:
    if not isinstance(data, dict):
        raise ParseError("batch must be an object")
    animations = data.get("animations")
    groups = data.get("groups")
    if not isinstance(animations, list) or not animations:
        raise ParseError("batch.animations must be a non-empty list")
    if not isinstance(groups, list):
        raise ParseError("batch.groups must be a list")
    parsed = [parse_animation(item, i) for i, item in enumerate(animations)]
    names = [animation.name for animation in parsed]
    if len(set(names)) != len(names):
        raise ParseError("animation names must be unique")
    return ExportBatch(
        animations=parsed,
        groups=[parse_group(item, i) for i, item in enumerate(groups)],
    )


def load_batch(path: Path) -> ExportBatch:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ParseError(f"{path}: invalid JSON: {exc}") from exc
    return parse_batch(data)
