"""Batch report - what a run wrote and which units failed."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import GherkinSyncError


@dataclass(frozen=True)
class UnitError:
    """
    A unit (feature, scenario or file) that could not be produced.

    Attributes:
        unit: Feature/scenario name, or the file when nothing was parsed
        kind: Error class name ("ParseError", "TemplateMismatch", ...)
        message: Human-readable description
        location: file:line or "Feature / Scenario", when known
    """
    unit: str
    kind: str
    message: str
    location: str | None = None

    @classmethod
    def from_exception(cls, unit: str, error: Exception) -> UnitError:
        location = error.location() if isinstance(error, GherkinSyncError) else None
        return cls(unit=unit, kind=type(error).__name__, message=str(error), location=location)

    def to_dict(self) -> dict:
        result = {"unit": self.unit, "kind": self.kind, "message": self.message}
        if self.location:
            result["location"] = self.location
        return result


@dataclass
class BatchReport:
    """Files written and per-unit errors for one run."""
    written: list[Path] = field(default_factory=list)
    errors: list[UnitError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def exit_code(self) -> int:
        """0 when every unit succeeded, 1 otherwise."""
        return 0 if self.succeeded else 1

    def summary(self) -> str:
        """Succeeded vs failed units, with enough detail to find each failure."""
        lines = [f"{len(self.written)} file(s) written, {len(self.errors)} unit(s) failed"]

        for path in self.written:
            lines.append(f"  + {path}")

        for error in self.errors:
            where = f" [{error.location}]" if error.location else ""
            lines.append(f"  ! {error.unit}: {error.kind}{where}: {error.message}")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded,
            "written": [str(path) for path in self.written],
            "errors": [error.to_dict() for error in self.errors],
        }
