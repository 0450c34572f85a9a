import pytest
from PIL import Image

from conftest import FakeRenderer
from skinsheet.capture import CaptureSession
from skinsheet.errors import RenderCaptureFailure


class OddRenderer(FakeRenderer):
    def __init__(self, result=None, error=None) -> None:
        super().__init__(8)
        self.result = result
        self.error = error

    def sample_and_capture(self, subject, clip, time_seconds, orientation):
        if self.error is not None:
            raise self.error
        return self.result


def test_capture_requires_open_session() -> None:
    session = CaptureSession(FakeRenderer(8), 8)
    with pytest.raises(RuntimeError, match="not open"):
        session.activate("A")


def test_capture_requires_subject() -> None:
    with CaptureSession(FakeRenderer(8), 8) as session:
        with pytest.raises(RuntimeError, match="No subject"):
            session.capture("Walk", 0.0, (0.0, 0.0))


def test_renderer_is_held_exclusively() -> None:
    renderer = FakeRenderer(8)
    with CaptureSession(renderer, 8):
        with pytest.raises(RuntimeError, match="already held"):
            CaptureSession(renderer, 8).open()
    with CaptureSession(renderer, 8) as session:
        session.activate("A")
        assert session.subject == "A"
    assert session.subject is None


def test_missing_frame_is_capture_failure() -> None:
    with CaptureSession(OddRenderer(result=None), 8) as session:
        session.activate("A")
        with pytest.raises(RenderCaptureFailure, match="no image"):
            session.capture("Walk", 0.5, (0.0, 90.0))


def test_wrong_size_is_capture_failure() -> None:
    frame = Image.new("RGBA", (4, 8))
    with CaptureSession(OddRenderer(result=frame), 8) as session:
        session.activate("A")
        with pytest.raises(RenderCaptureFailure, match="expected 8x8"):
            session.capture("Walk", 0.0, (0.0, 0.0))


def test_renderer_errors_are_wrapped() -> None:
    with CaptureSession(OddRenderer(error=OSError("disk gone")), 8) as session:
        session.activate("A")
        with pytest.raises(RenderCaptureFailure, match="disk gone"):
            session.capture("Walk", 0.0, (0.0, 0.0))


def test_capture_converts_to_rgba() -> None:
    frame = Image.new("RGB", (8, 8), (1, 2, 3))
    with CaptureSession(OddRenderer(result=frame), 8) as session:
        session.activate("A")
        captured = session.capture("Walk", 0.0, (0.0, 0.0))
    assert captured.mode == "RGBA"
    assert captured.getpixel((0, 0)) == (1, 2, 3, 255)
