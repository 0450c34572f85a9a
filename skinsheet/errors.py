from __future__ import annotations

from pathlib import Path


class SkinsheetError(Exception):
    pass


class ParseError(ValueError):
    pass


class InvalidInput(SkinsheetError, ValueError):
    pass


class MalformedManifest(SkinsheetError):
    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        base = super().__str__()
        if self.path is not None:
            return f"{self.path}: {base}"
        return base


class InvalidGeometry(MalformedManifest):
    pass


class MissingAsset(SkinsheetError):
    def __init__(self, path: Path, message: str | None = None) -> None:
        super().__init__(message or f"Asset not found: {path}")
        self.path = path


class RenderCaptureFailure(SkinsheetError):
    pass
