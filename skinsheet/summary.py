from __future__ import annotations

from dataclasses import dataclass, field
import logging


@dataclass
class RunSummary:
    label: str
    succeeded: list[str] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    def succeed(self, unit: str) -> None:
        self.succeeded.append(unit)

    def skip(self, unit: str, reason: str) -> None:
        logging.warning("Skipped %s: %s", unit, reason)
        self.skipped.append((unit, reason))

    def fail(self, unit: str, reason: str) -> None:
        logging.error("Failed %s: %s", unit, reason)
        self.failed.append((unit, reason))

    def counts(self) -> tuple[int, int, int]:
        return len(self.succeeded), len(self.skipped), len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def report(self) -> str:
        succeeded, skipped, failed = self.counts()
        lines = [f"{self.label}: {succeeded} succeeded, {skipped} skipped, {failed} failed"]
        for unit, reason in self.skipped:
            lines.append(f"  skipped {unit}: {reason}")
        for unit, reason in self.failed:
            lines.append(f"  failed {unit}: {reason}")
        return "\n".join(lines)
