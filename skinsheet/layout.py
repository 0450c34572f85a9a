"""Grid addressing shared by the sheet assembler and the disassembler.

Cells are addressed by (col, row) where row 0 is the first row of the logical
grid. Rectangles use a bottom-left origin, so logical row 0 lands at the top of
the physical image: ``y = (total_rows - 1 - row) * pixel_size``. Both sides of
the pipeline must go through ``SheetLayout.rect`` to stay in agreement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .errors import InvalidGeometry, InvalidInput


@dataclass(frozen=True)
class CellRect:
    x: int
    y: int
    width: int
    height: int

    def to_box(self, image_height: int) -> tuple[int, int, int, int]:
        """Convert to a PIL crop/paste box for an image of the given height."""

        top = image_height - self.y - self.height
        return (self.x, top, self.x + self.width, top + self.height)

    def fits(self, image_width: int, image_height: int) -> bool:
        return (
            self.x >= 0
            and self.y >= 0
            and self.x + self.width <= image_width
            and self.y + self.height <= image_height
        )


def _check_frames(frames_per_direction: int, max_frames_width: int) -> None:
    if frames_per_direction <= 0:
        raise InvalidInput("frames_per_direction must be positive")
    if max_frames_width < 0:
        raise InvalidInput("max_frames_width must be 0 or positive")


def effective_columns(frames_per_direction: int, max_frames_width: int) -> int:
    _check_frames(frames_per_direction, max_frames_width)
    if max_frames_width > 0:
        return min(frames_per_direction, max_frames_width)
    return frames_per_direction


def rows_per_direction(frames_per_direction: int, max_frames_width: int) -> int:
    _check_frames(frames_per_direction, max_frames_width)
    if max_frames_width > 0:
        return -(-frames_per_direction // max_frames_width)
    return 1


def cell_address(
    direction: int,
    frame: int,
    max_frames_width: int,
    rows_per_dir: int,
    row_start: int = 0,
) -> tuple[int, int]:
    if max_frames_width > 0:
        col = frame % max_frames_width
        row_within_dir = frame // max_frames_width
    else:
        col = frame
        row_within_dir = 0
    row = row_start + direction * rows_per_dir + row_within_dir
    return col, row


def cell_rect(col: int, row: int, pixel_size: int, total_rows: int) -> CellRect:
    return CellRect(
        x=col * pixel_size,
        y=(total_rows - 1 - row) * pixel_size,
        width=pixel_size,
        height=pixel_size,
    )


def cell_name(animation: str, direction: int, frame: int) -> str:
    return f"{animation}_{direction}_{frame}"


@dataclass(frozen=True)
class AnimationBlock:
    name: str
    direction_count: int
    frames_per_direction: int
    rows_per_direction: int
    row_start: int = 0

    @property
    def row_count(self) -> int:
        return self.direction_count * self.rows_per_direction

    @property
    def row_end(self) -> int:
        return self.row_start + self.row_count


@dataclass(frozen=True)
class SheetLayout:
    pixel_size: int
    max_frames_width: int
    columns: int
    blocks: tuple[AnimationBlock, ...]

    @property
    def total_rows(self) -> int:
        return sum(block.row_count for block in self.blocks)

    @property
    def width_px(self) -> int:
        return self.columns * self.pixel_size

    @property
    def height_px(self) -> int:
        return self.total_rows * self.pixel_size

    @property
    def size(self) -> tuple[int, int]:
        return (self.width_px, self.height_px)

    def block(self, name: str) -> AnimationBlock:
        for block in self.blocks:
            if block.name == name:
                return block
        raise KeyError(name)

    def rect(self, block: AnimationBlock, direction: int, frame: int) -> CellRect:
        if direction < 0 or direction >= block.direction_count:
            raise InvalidGeometry(
                f"{block.name}: direction {direction} outside 0..{block.direction_count - 1}"
            )
        if frame < 0 or frame >= block.frames_per_direction:
            raise InvalidGeometry(
                f"{block.name}: frame {frame} outside 0..{block.frames_per_direction - 1}"
            )
        col, row = cell_address(
            direction, frame, self.max_frames_width, block.rows_per_direction, block.row_start
        )
        if col >= self.columns or row >= self.total_rows:
            raise InvalidGeometry(
                f"{block.name}: cell ({col}, {row}) outside {self.columns}x{self.total_rows} grid"
            )
        return cell_rect(col, row, self.pixel_size, self.total_rows)

    def cells(self, block: AnimationBlock) -> Iterator[tuple[int, int, CellRect]]:
        """Yield (direction, frame, rect) in paint order: direction-major."""

        for direction in range(block.direction_count):
            for frame in range(block.frames_per_direction):
                yield direction, frame, self.rect(block, direction, frame)

    def named_cells(self) -> list[tuple[str, CellRect]]:
        return [
            (cell_name(block.name, direction, frame), rect)
            for block in self.blocks
            for direction, frame, rect in self.cells(block)
        ]


def plan_sheet(
    animations: Sequence[tuple[str, int, int]],
    pixel_size: int,
    max_frames_width: int,
) -> SheetLayout:
    """Stack animations top to bottom in declaration order.

    ``animations`` holds (name, direction_count, frames_per_direction). With a
    single animation this is the per-animation sheet; with several it is the
    combined sheet, where narrower animations leave transparent cells.
    """

    if pixel_size <= 0:
        raise InvalidInput("pixel_size must be positive")
    if not animations:
        raise InvalidInput("a sheet needs at least one animation")

    blocks: list[AnimationBlock] = []
    columns = 0
    row_start = 0
    for name, direction_count, frames_per_direction in animations:
        if direction_count <= 0:
            raise InvalidInput(f"{name}: at least one direction is required")
        rows = rows_per_direction(frames_per_direction, max_frames_width)
        columns = max(columns, effective_columns(frames_per_direction, max_frames_width))
        block = AnimationBlock(
            name=name,
            direction_count=direction_count,
            frames_per_direction=frames_per_direction,
            rows_per_direction=rows,
            row_start=row_start,
        )
        blocks.append(block)
        row_start = block.row_end

    return SheetLayout(
        pixel_size=pixel_size,
        max_frames_width=max_frames_width,
        columns=columns,
        blocks=tuple(blocks),
    )
