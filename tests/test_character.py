from PIL import Image

from skinsheet.character import LayeredCharacter
from skinsheet.models import AnimationFrames, DirectionFrames, PartDefinition


def part(name, sort_order, color, frames=2, animation="Walk"):
    images = [Image.new("RGBA", (2, 2), color) for _ in range(frames)]
    anim = AnimationFrames(
        name=animation,
        fps=8,
        directions=["S"],
        direction_frames=[DirectionFrames(direction="S", frames=images)],
    )
    return PartDefinition(part_name=name, sort_order=sort_order, animations=[anim])


def test_parts_sorted_by_sort_order() -> None:
    character = LayeredCharacter([part("Hair", 7, "red"), part("Body", 0, "blue")])
    assert character.part_names == ["Body", "Hair"]
    assert character.get_part(5) is None


def test_set_part_keeps_order() -> None:
    character = LayeredCharacter([part("Body", 0, "blue"), part("Hair", 7, "red")])
    character.set_part(0, part("Helmet", 8, "green"))
    assert character.part_names == ["Hair", "Helmet"]


def test_animation_info_and_compose() -> None:
    top = part("Hair", 7, (255, 0, 0, 0))
    top.animations[0].direction_frames[0].frames[1].putpixel((0, 0), (255, 0, 0, 255))
    character = LayeredCharacter([top, part("Body", 0, (0, 0, 255, 255))])
    assert character.animation_info("Walk") == (8, 2)
    assert character.animation_info("Run") is None

    composed = character.compose("Walk", 0, 1)
    assert composed.getpixel((0, 0)) == (255, 0, 0, 255)
    assert composed.getpixel((1, 1)) == (0, 0, 255, 255)
    assert character.compose("Walk", 0, 9) is None


def test_parts_without_animation_are_left_out() -> None:
    character = LayeredCharacter([part("Body", 0, "blue"), part("Cape", 2, "red", animation="Idle")])
    assert len(character.frames_at("Walk", 0, 0)) == 1
