"""Tests for batch export orchestration."""

from dataclasses import replace

import numpy as np
from PIL import Image

from conftest import FakeRenderer
from skinsheet.exporter import BatchExporter
from skinsheet.manifest import load_manifest
from skinsheet.models import ExportBatch, ExportGroup


def solid(color, size=(2, 2)) -> Image.Image:
    return Image.new("RGBA", size, color)


def test_failed_variant_does_not_stop_batch(params, walk) -> None:
    renderer = FakeRenderer(params.pixel_size, failing={"Hair_B"})
    batch = ExportBatch(
        animations=[walk],
        groups=[
            ExportGroup("Hair", 7, ["Hair_A", "Hair_B", "Hair_C"]),
            ExportGroup("Body", 0, ["Body_A"]),
        ],
    )
    summary = BatchExporter(renderer, params).export(batch)

    assert summary.counts() == (3, 0, 1)
    assert summary.failed[0][0] == "Hair/Hair_B"
    assert summary.succeeded == ["Body/Body_A", "Hair/Hair_A", "Hair/Hair_C"]
    root = params.export_root
    assert not (root / "Hair" / "Hair_B").exists()
    assert load_manifest(root / "Hair" / "Hair_C" / "manifest.json").sort_order == 7


def test_variants_are_captured_one_after_another(params, walk) -> None:
    renderer = FakeRenderer(params.pixel_size)
    batch = ExportBatch(animations=[walk], groups=[ExportGroup("Body", 0, ["A", "B"])])
    BatchExporter(renderer, params).export(batch)
    subjects = [call[0] for call in renderer.calls]
    per_variant = len(walk.directions) * walk.frames_per_direction
    assert subjects == ["A"] * per_variant + ["B"] * per_variant


def test_capture_times_and_orientations(params, walk) -> None:
    renderer = FakeRenderer(params.pixel_size)
    batch = ExportBatch(animations=[walk], groups=[ExportGroup("Body", 0, ["A"])])
    BatchExporter(renderer, params).export(batch)
    times = [round(call[2], 6) for call in renderer.calls[:5]]
    assert times == [0.0, 0.2, 0.4, 0.6, 0.8]
    yaws = [call[3][1] for call in renderer.calls[::5]]
    assert yaws == [0.0, 90.0, 180.0]
    assert {call[1] for call in renderer.calls} == {"Walk"}


def test_invalid_definition_fails_each_variant(params, walk) -> None:
    walk.frame_indices = [0, 99]
    renderer = FakeRenderer(params.pixel_size)
    batch = ExportBatch(animations=[walk], groups=[ExportGroup("Body", 0, ["A"])])
    summary = BatchExporter(renderer, params).export(batch)
    assert summary.counts() == (0, 0, 1)
    assert renderer.calls == []


def test_primary_texture_palette(params, walk) -> None:
    params = replace(params, limit_colors=True)
    renderer = FakeRenderer(
        params.pixel_size, textures={"A": solid((0, 0, 0, 255)), "B": None}
    )
    batch = ExportBatch(animations=[walk], groups=[ExportGroup("Body", 0, ["A", "B"])])
    BatchExporter(renderer, params).export(batch)

    with Image.open(params.export_root / "Body" / "A" / "Walk.png") as sheet:
        quantized = np.asarray(sheet.convert("RGBA"))
    assert not quantized[:, :, :3].any()
    assert (quantized[:, :, 3] == 255).all()

    with Image.open(params.export_root / "Body" / "B" / "Walk.png") as sheet:
        untouched = np.asarray(sheet.convert("RGBA"))
    assert untouched[:, :, 2].max() == 255


def test_reference_palette_is_shared(tmp_path, params, walk) -> None:
    palette = tmp_path / "palette.png"
    solid((255, 0, 0, 255)).save(palette)
    params = replace(params, limit_colors=True, palette_path=palette)
    renderer = FakeRenderer(params.pixel_size, textures={"A": solid((0, 0, 0, 255))})
    batch = ExportBatch(animations=[walk], groups=[ExportGroup("Body", 0, ["A"])])
    BatchExporter(renderer, params).export(batch)
    with Image.open(params.export_root / "Body" / "A" / "Walk.png") as sheet:
        arr = np.asarray(sheet.convert("RGBA"))
    assert (arr[:, :, 0] == 255).all()
    assert not arr[:, :, 1:3].any()


def test_y_offset_moves_frames_up(params, walk) -> None:
    params = replace(params, y_offset=1)
    renderer = FakeRenderer(params.pixel_size)
    batch = ExportBatch(animations=[walk], groups=[ExportGroup("Body", 0, ["A"])])
    BatchExporter(renderer, params).export(batch)
    with Image.open(params.export_root / "Body" / "A" / "Walk.png") as sheet:
        cell = np.asarray(sheet.convert("RGBA").crop((0, 0, 8, 8)))
    original = np.asarray(renderer.captured["A"][0])
    assert np.array_equal(cell[:7], original[1:])
    assert not cell[7].any()


def test_flattened_output_names(params, walk, idle) -> None:
    params = replace(params, flatten_folders=True, combine_animations=True)
    renderer = FakeRenderer(params.pixel_size)
    batch = ExportBatch(animations=[walk, idle], groups=[ExportGroup("Torso", 3, ["Leather"])])
    BatchExporter(renderer, params).export(batch)
    root = params.export_root
    assert (root / "Torso_Leather.png").is_file()
    manifest = load_manifest(root / "Torso_Leather_manifest.json")
    assert manifest.combined_sheet_name == "Torso_Leather.png"
    assert manifest.group_name == "Torso"
    assert {entry.sheet_file for entry in manifest.animations} == {"Torso_Leather.png"}
