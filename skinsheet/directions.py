from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math


class Direction(str, Enum):
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


STANDARD_ORDER: tuple[Direction, ...] = (
    Direction.N,
    Direction.NE,
    Direction.E,
    Direction.SE,
    Direction.S,
    Direction.SW,
    Direction.W,
    Direction.NW,
)

# Index into STANDARD_ORDER for each 45 degree sector, counter-clockwise from +X.
_SECTOR_TO_INDEX = (2, 1, 0, 7, 6, 5, 4, 3)


@dataclass(frozen=True)
class DirectionConfig:
    direction: Direction
    angle: float
    x_angle: float = 0.0

    @property
    def label(self) -> str:
        return self.direction.value

    @property
    def orientation(self) -> tuple[float, float]:
        return (self.x_angle, self.angle)


def to_angle(direction: Direction) -> float:
    return STANDARD_ORDER.index(direction) * 45.0


def parse_direction(value: str) -> Direction:
    try:
        return Direction(value.strip().upper())
    except ValueError as exc:
        raise ValueError(f"Unknown direction: {value}") from exc


def default_direction_configs() -> list[DirectionConfig]:
    return [DirectionConfig(direction=d, angle=to_angle(d)) for d in STANDARD_ORDER]


def direction_from_vector(x: float, y: float) -> int | None:
    """Bucket a 2D facing vector into an index of STANDARD_ORDER.

    Returns None for (near) zero vectors so callers keep their current facing.
    """

    if x * x + y * y < 0.01:
        return None
    angle = (math.degrees(math.atan2(y, x)) + 360.0) % 360.0
    sector = round(angle / 45.0) % 8
    return _SECTOR_TO_INDEX[sector]
