from __future__ import annotations

import logging

from .capture import CaptureSession
from .errors import SkinsheetError
from .interfaces import RendererInterface
from .models import ExportBatch, ExportParams
from .palette import PaletteQuantizer, load_palette, palette_from_image
from .sheet_assembler import SheetAssembler
from .summary import RunSummary


class BatchExporter:
    def __init__(self, renderer: RendererInterface, params: ExportParams) -> None:
        self._renderer = renderer
        self._params = params
        self._shared_quantizer: PaletteQuantizer | None = None
        if params.limit_colors and params.palette_path is not None:
            palette = load_palette(params.palette_path)
            logging.info("Loaded %s palette colours from %s", len(palette), params.palette_path)
            self._shared_quantizer = PaletteQuantizer(palette)

    def export(self, batch: ExportBatch) -> RunSummary:
        summary = RunSummary(label="export")
        if not batch.animations:
            logging.warning("Batch has no animations, nothing to export")
            return summary
        groups = sorted(batch.groups, key=lambda group: group.sort_order)
        with CaptureSession(self._renderer, self._params.pixel_size) as session:
            for group in groups:
                for variant in group.variants:
                    unit = f"{group.name}/{variant}"
                    try:
                        session.activate(variant)
                        assembler = SheetAssembler(
                            session, self._params, self._quantizer_for(session)
                        )
                        assembler.export_variant(
                            group.name, variant, group.sort_order, batch.animations
                        )
                    except SkinsheetError as exc:
                        summary.fail(unit, str(exc))
                        continue
                    except OSError as exc:
                        summary.fail(unit, f"I/O error: {exc}")
                        continue
                    summary.succeed(unit)
        logging.info(summary.report())
        return summary

    def _quantizer_for(self, session: CaptureSession) -> PaletteQuantizer | None:
        if not self._params.limit_colors:
            return None
        if self._shared_quantizer is not None:
            return self._shared_quantizer
        texture = session.primary_texture()
        if texture is None:
            logging.info("No primary texture for %s, colours left as rendered", session.subject)
            return None
        return PaletteQuantizer(palette_from_image(texture))
