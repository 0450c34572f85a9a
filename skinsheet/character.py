from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image

from .models import PartDefinition


@dataclass
class LayeredCharacter:
    """Parts stacked by sort order, lowest first (drawn behind)."""

    parts: list[PartDefinition] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.parts = sorted(self.parts, key=lambda part: part.sort_order)

    @property
    def part_names(self) -> list[str]:
        return [part.part_name for part in self.parts]

    def get_part(self, index: int) -> PartDefinition | None:
        if index < 0 or index >= len(self.parts):
            return None
        return self.parts[index]

    def set_part(self, index: int, part: PartDefinition) -> None:
        if index < 0 or index >= len(self.parts):
            return
        self.parts[index] = part
        self.parts.sort(key=lambda item: item.sort_order)

    def animation_info(self, name: str) -> tuple[int, int] | None:
        """(fps, frame count) from the first part that carries ``name``."""

        for part in self.parts:
            animation = part.get_animation(name)
            if animation is not None:
                return animation.fps, animation.frame_count
        return None

    def frames_at(self, animation: str, direction: int, frame: int) -> list[Image.Image]:
        layers: list[Image.Image] = []
        for part in self.parts:
            anim = part.get_animation(animation)
            if anim is None:
                continue
            image = anim.get_frame(direction, frame)
            if image is not None:
                layers.append(image)
        return layers

    def compose(self, animation: str, direction: int, frame: int) -> Image.Image | None:
        layers = self.frames_at(animation, direction, frame)
        if not layers:
            return None
        canvas = Image.new("RGBA", layers[0].size, (0, 0, 0, 0))
        for layer in layers:
            if layer.size != canvas.size:
                continue
            canvas = Image.alpha_composite(canvas, layer.convert("RGBA"))
        return canvas
