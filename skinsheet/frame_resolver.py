from __future__ import annotations

import logging
from typing import Sequence

from .errors import InvalidInput
from .models import AnimationDefinition


def source_frame_count(clip_length: float, frame_rate: float) -> int:
    return int(round(clip_length * frame_rate))


def resolve_frames(
    explicit_frames: Sequence[int] | None,
    every_nth: int | None,
    frames_per_direction: int,
    total_source_frames: int,
) -> list[int]:
    """Pick the source-timeline frame indices to capture.

    An explicit list always wins, then an every-Nth step, then
    ``frames_per_direction`` evenly spaced samples. Range checking of explicit
    indices is left to the caller (see ``validate_frame_indices``).
    """

    if explicit_frames:
        return list(explicit_frames)

    if every_nth is not None:
        if every_nth < 1:
            raise InvalidInput("every_nth must be 1 or greater")
        if total_source_frames <= 0:
            raise InvalidInput("total_source_frames must be positive")
        return list(range(0, total_source_frames, every_nth))

    if frames_per_direction <= 0:
        raise InvalidInput("frames_per_direction must be positive")
    if total_source_frames <= 0:
        raise InvalidInput("total_source_frames must be positive")
    return [
        int(round(i * total_source_frames / frames_per_direction))
        for i in range(frames_per_direction)
    ]


def validate_frame_indices(frames: Sequence[int], total_source_frames: int) -> None:
    if not frames:
        raise InvalidInput("no frames to export")
    bad = [index for index in frames if index < 0 or index >= total_source_frames]
    if bad:
        raise InvalidInput(
            f"frame indices {bad} outside 0..{total_source_frames - 1}"
        )


def resolve_for_definition(definition: AnimationDefinition) -> list[int]:
    total = definition.total_source_frames
    frames = resolve_frames(
        definition.frame_indices,
        definition.every_nth,
        definition.frames_per_direction,
        total,
    )
    validate_frame_indices(frames, total)
    logging.info("[%s] Exporting %s frames: %s", definition.name, len(frames), frames)
    return frames
