from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import logging

from PIL import Image

from .character import LayeredCharacter
from .disassembler import SheetDisassembler
from .errors import MalformedManifest
from .interfaces import ImageStoreInterface
from .manifest import find_manifests
from .models import PartDefinition
from .summary import RunSummary


@dataclass
class ImportResult:
    parts: list[PartDefinition] = field(default_factory=list)
    character: LayeredCharacter | None = None
    summary: RunSummary = field(default_factory=lambda: RunSummary(label="import"))


class BatchImporter:
    def __init__(self, store: ImageStoreInterface) -> None:
        self._disassembler = SheetDisassembler(store)

    def import_folder(self, root: Path, compose: bool = True) -> ImportResult:
        result = ImportResult()
        if not root.is_dir():
            logging.warning("Invalid import path: %s", root)
            return result

        manifests = find_manifests(root)
        logging.info("Found %s manifest files", len(manifests))
        for manifest_path in manifests:
            unit = str(manifest_path.relative_to(root))
            try:
                part = self._disassembler.import_manifest(manifest_path, result.summary)
            except MalformedManifest as exc:
                result.summary.fail(unit, str(exc))
                continue
            except OSError as exc:
                result.summary.fail(unit, f"unreadable: {exc}")
                continue
            except Image.DecompressionBombError as exc:
                result.summary.fail(unit, f"sheet too large to open: {exc}")
                continue
            result.parts.append(part)
            result.summary.succeed(unit)

        if compose and result.parts:
            result.character = LayeredCharacter(list(result.parts))
            logging.info("Composed character from parts: %s", result.character.part_names)
        logging.info("Import complete! Imported %s part definitions.", len(result.parts))
        return result
