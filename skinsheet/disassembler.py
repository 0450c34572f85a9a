from __future__ import annotations

from pathlib import Path
import logging

from PIL import Image

from .errors import MissingAsset
from .interfaces import ImageStoreInterface
from .layout import SheetLayout, cell_name
from .manifest import load_manifest, sheet_layouts
from .models import AnimationEntry, AnimationFrames, DirectionFrames, Manifest, PartDefinition
from .summary import RunSummary


class SheetDisassembler:
    """Rebuilds per-animation, per-direction frame lists from a manifest."""

    def __init__(self, store: ImageStoreInterface, textures_dir: Path = Path("Textures")) -> None:
        self._store = store
        self._textures_dir = textures_dir

    def import_manifest(
        self, manifest_path: Path, summary: RunSummary | None = None
    ) -> PartDefinition:
        manifest = load_manifest(manifest_path)
        return self.disassemble(manifest, manifest_path.parent, summary, source=manifest_path)

    def disassemble(
        self,
        manifest: Manifest,
        sheet_dir: Path,
        summary: RunSummary | None = None,
        source: Path | None = None,
    ) -> PartDefinition:
        if summary is None:
            summary = RunSummary(label=manifest.part_name)
        logging.info("Importing: %s (sortOrder: %s)", manifest.part_name, manifest.sort_order)
        part = PartDefinition(
            part_name=manifest.part_name, sort_order=manifest.sort_order, source=source
        )

        sliced: dict[str, dict[str, Image.Image]] = {}
        for sheet_file, layout in sheet_layouts(manifest).items():
            try:
                sliced[sheet_file] = self._slice_sheet(manifest, sheet_dir, sheet_file, layout)
            except MissingAsset as exc:
                for entry in manifest.entries_for_sheet(sheet_file):
                    summary.skip(f"{manifest.part_name}/{entry.name}", str(exc))

        for entry in manifest.animations:
            cells = sliced.get(entry.sheet_file)
            if cells is not None:
                part.animations.append(self._collect(entry, cells))
        return part

    def _slice_sheet(
        self, manifest: Manifest, sheet_dir: Path, sheet_file: str, layout: SheetLayout
    ) -> dict[str, Image.Image]:
        path = sheet_dir / sheet_file
        if not path.is_file():
            raise MissingAsset(path, f"Spritesheet not found: {path}")
        handle = self._store.put_image(
            self._textures_dir / manifest.part_name / sheet_file, path.read_bytes()
        )
        self._store.configure_grid(handle, manifest.pixel_size, layout.named_cells())
        return self._store.slice_named(handle)

    @staticmethod
    def _collect(entry: AnimationEntry, cells: dict[str, Image.Image]) -> AnimationFrames:
        animation = AnimationFrames(
            name=entry.name, fps=entry.fps, directions=list(entry.directions)
        )
        for d, label in enumerate(entry.directions):
            animation.direction_frames.append(
                DirectionFrames(
                    direction=label,
                    frames=[
                        cells[cell_name(entry.name, d, f)]
                        for f in range(entry.frames_per_direction)
                    ],
                )
            )
        return animation
