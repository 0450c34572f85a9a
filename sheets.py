import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from skinsheet.batch import load_batch
from skinsheet.config import ExportConfig, ImportConfig
from skinsheet.errors import ParseError
from skinsheet.exporter import BatchExporter
from skinsheet.frame_fitter import FIT_MODES, FrameFitter
from skinsheet.image_store import FileImageStore
from skinsheet.importer import BatchImporter
from skinsheet.models import PartDefinition
from skinsheet.renderer import FrameDirectoryRenderer


def write_frames(part: PartDefinition, out_dir: Path) -> None:
    for animation in part.animations:
        for d, direction in enumerate(animation.direction_frames):
            folder = out_dir / part.part_name / animation.name / f"{d}_{direction.direction}"
            folder.mkdir(parents=True, exist_ok=True)
            for f, frame in enumerate(direction.frames):
                frame.save(folder / f"{f:03d}.png", format="PNG")


def run_export(args: argparse.Namespace) -> int:
    config = ExportConfig.from_env()
    params = config.to_params()
    if args.out is not None:
        params = replace(params, export_root=args.out)
    if args.pixel_size is not None:
        params = replace(params, pixel_size=args.pixel_size)
    if args.max_frames_width is not None:
        params = replace(params, max_frames_width=args.max_frames_width)
    if args.combine:
        params = replace(params, combine_animations=True)
    if args.y_offset is not None:
        params = replace(params, y_offset=args.y_offset)
    if args.palette is not None:
        params = replace(params, palette_path=args.palette, limit_colors=True)
    if args.no_limit_colors:
        params = replace(params, limit_colors=False)
    if args.flatten:
        params = replace(params, flatten_folders=True)

    try:
        batch = load_batch(args.batch)
    except (OSError, ParseError) as exc:
        logging.error("Invalid batch file: %s", exc)
        return 2

    background_remover = None
    if args.remove_bg or config.remove_background:
        from skinsheet.background_remover import RemoveBgBackgroundRemover

        background_remover = RemoveBgBackgroundRemover()
    renderer = FrameDirectoryRenderer(
        args.frames,
        frame_rate=args.frame_rate or config.frame_rate,
        fitter=FrameFitter(params.pixel_size, fit_mode=args.fit),
        background_remover=background_remover,
    )
    try:
        exporter = BatchExporter(renderer, params)
    except OSError as exc:
        logging.error("Unable to read palette: %s", exc)
        return 2
    summary = exporter.export(batch)
    print(summary.report())
    return 0 if summary.ok else 1


def run_import(args: argparse.Namespace) -> int:
    config = ImportConfig.from_env()
    out_dir = args.out or config.output_dir
    compose = config.compose and not args.no_compose
    result = BatchImporter(FileImageStore(out_dir)).import_folder(args.root, compose=compose)
    if args.write_frames:
        for part in result.parts:
            write_frames(part, out_dir / "Frames")
    if result.character is not None:
        print("Layer order: " + ", ".join(result.character.part_names))
    print(result.summary.report())
    return 0 if result.summary.ok else 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export directional spritesheets and import them back as frame sets."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Pack rendered frames into sheets + manifests")
    export.add_argument("batch", type=Path, help="Batch definition JSON")
    export.add_argument(
        "--frames", type=Path, default=Path("Renders"), help="Root of pre-rendered frames"
    )
    export.add_argument("--out", type=Path, help="Export root folder")
    export.add_argument("--pixel-size", type=int, help="Cell size in pixels")
    export.add_argument("--max-frames-width", type=int, help="Wrap rows after N frames (0 = off)")
    export.add_argument("--combine", action="store_true", help="One sheet per variant")
    export.add_argument("--y-offset", type=int, help="Shift captured frames up by N pixels")
    export.add_argument("--palette", type=Path, help="Reference palette image")
    export.add_argument("--no-limit-colors", action="store_true", help="Skip quantisation")
    export.add_argument("--flatten", action="store_true", help="Write all files into one folder")
    export.add_argument("--frame-rate", type=float, help="Frame rate of the rendered frames")
    export.add_argument("--fit", choices=sorted(FIT_MODES), default="contain")
    export.add_argument("--remove-bg", action="store_true", help="Cut opaque backgrounds")

    imp = sub.add_parser("import", help="Slice exported sheets back into frames")
    imp.add_argument("root", type=Path, help="Folder searched recursively for manifests")
    imp.add_argument("--out", type=Path, help="Output folder for copied sheets")
    imp.add_argument("--write-frames", action="store_true", help="Write every sliced frame")
    imp.add_argument("--no-compose", action="store_true", help="Skip the layered character")

    args = parser.parse_args(argv)
    if args.command == "export":
        if args.pixel_size is not None and args.pixel_size <= 0:
            parser.error("--pixel-size must be a positive integer")
        if args.max_frames_width is not None and args.max_frames_width < 0:
            parser.error("--max-frames-width must be 0 or positive")
        if args.frame_rate is not None and args.frame_rate <= 0:
            parser.error("--frame-rate must be positive")
    return args


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)
    try:
        if args.command == "export":
            return run_export(args)
        return run_import(args)
    except RuntimeError as exc:
        logging.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
