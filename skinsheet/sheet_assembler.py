from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging

from PIL import Image

from .capture import CaptureSession
from .frame_resolver import resolve_for_definition
from .image_store import encode_png
from .layout import AnimationBlock, SheetLayout, plan_sheet
from .manifest import MANIFEST_NAME, save_manifest
from .models import AnimationDefinition, AnimationEntry, ExportParams, Manifest
from .palette import PaletteQuantizer
from .postprocess import shift_rows


@dataclass(frozen=True)
class PlannedAnimation:
    definition: AnimationDefinition
    frames: list[int]

    @property
    def layout_key(self) -> tuple[str, int, int]:
        return (self.definition.name, len(self.definition.directions), len(self.frames))


@dataclass(frozen=True)
class VariantOutput:
    folder: Path
    manifest_path: Path
    sheet_paths: list[Path]
    manifest: Manifest


class SheetAssembler:
    """Captures one variant's animations and packs them into sheets."""

    def __init__(
        self,
        session: CaptureSession,
        params: ExportParams,
        quantizer: PaletteQuantizer | None = None,
    ) -> None:
        self._session = session
        self._params = params
        self._quantizer = quantizer

    def output_folder(self, group_name: str, variant: str) -> Path:
        if self._params.flatten_folders:
            return self._params.export_root
        return self._params.export_root / group_name / variant

    def _file_prefix(self, group_name: str, variant: str) -> str:
        return f"{group_name}_{variant}_" if self._params.flatten_folders else ""

    def export_variant(
        self,
        group_name: str,
        variant: str,
        sort_order: int,
        animations: list[AnimationDefinition],
    ) -> VariantOutput:
        planned = [PlannedAnimation(d, resolve_for_definition(d)) for d in animations]
        folder = self.output_folder(group_name, variant)
        prefix = self._file_prefix(group_name, variant)

        if self._session.subject != variant:
            self._session.activate(variant)

        # Sheets are painted fully in memory first so a capture failure leaves no files.
        sheets: list[tuple[str, Image.Image]] = []
        entries: list[AnimationEntry] = []
        sheet_width = 0
        combined_name = ""
        if self._params.combine_animations:
            combined_name = f"{group_name}_{variant}.png" if prefix else f"{variant}.png"
            layout = self._plan(planned)
            sheet_width = layout.columns
            logging.info(
                "Combined sheet: %sx%s tiles, %sx%spx, %s animations",
                layout.columns,
                layout.total_rows,
                layout.width_px,
                layout.height_px,
                len(planned),
            )
            sheets.append((combined_name, self.paint(layout, planned)))
            entries.extend(
                self._entry(item, block, combined_name)
                for item, block in zip(planned, layout.blocks)
            )
        else:
            for item in planned:
                file_name = f"{prefix}{item.definition.name}.png"
                layout = self._plan([item])
                sheets.append((file_name, self.paint(layout, [item])))
                entries.append(self._entry(item, layout.blocks[0], file_name))

        manifest = Manifest(
            part_name=variant,
            pixel_size=self._params.pixel_size,
            sort_order=sort_order,
            sheet_width=sheet_width,
            max_frames_width=self._params.max_frames_width,
            combined_sheet_name=combined_name,
            group_name=group_name,
            animations=tuple(entries),
        )

        folder.mkdir(parents=True, exist_ok=True)
        sheet_paths: list[Path] = []
        for file_name, sheet in sheets:
            path = folder / file_name
            path.write_bytes(encode_png(sheet))
            sheet_paths.append(path)
        manifest_name = f"{prefix}{MANIFEST_NAME}"
        manifest_path = save_manifest(manifest, folder / manifest_name)
        logging.info("Exported %s/%s -> %s", group_name, variant, manifest_path)
        return VariantOutput(
            folder=folder, manifest_path=manifest_path, sheet_paths=sheet_paths, manifest=manifest
        )

    def _plan(self, planned: list[PlannedAnimation]) -> SheetLayout:
        return plan_sheet(
            [item.layout_key for item in planned],
            self._params.pixel_size,
            self._params.max_frames_width,
        )

    def paint(self, layout: SheetLayout, planned: list[PlannedAnimation]) -> Image.Image:
        sheet = Image.new("RGBA", layout.size, (0, 0, 0, 0))
        for item, block in zip(planned, layout.blocks):
            self._paint_animation(sheet, layout, block, item)
        return sheet

    def _paint_animation(
        self,
        sheet: Image.Image,
        layout: SheetLayout,
        block: AnimationBlock,
        item: PlannedAnimation,
    ) -> None:
        definition = item.definition
        logging.info(
            "Painting %s at row %s: %s frames, %s dirs, %s rows/dir",
            definition.name,
            block.row_start,
            block.frames_per_direction,
            block.direction_count,
            block.rows_per_direction,
        )
        for direction, frame, rect in layout.cells(block):
            config = definition.directions[direction]
            time = definition.frame_time(item.frames[frame])
            captured = self._session.capture(definition.clip_name, time, config.orientation)
            if self._quantizer is not None:
                captured = self._quantizer.quantize(captured)
            captured = shift_rows(captured, self._params.y_offset)
            sheet.paste(captured, rect.to_box(sheet.height))

    @staticmethod
    def _entry(item: PlannedAnimation, block: AnimationBlock, sheet_file: str) -> AnimationEntry:
        return AnimationEntry(
            name=item.definition.name,
            directions=tuple(item.definition.direction_labels()),
            frames_per_direction=block.frames_per_direction,
            fps=item.definition.fps,
            sheet_file=sheet_file,
            row_start=block.row_start,
            rows_per_direction=block.rows_per_direction,
        )
