"""Intermediate model shared by both synchronization directions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from .errors import GherkinSyncError

# Positional placeholder for literal arguments: "entered {0} into".
# Literal braces are doubled: "{{" and "}}".
PLACEHOLDER_PATTERN = re.compile(r"\{\{|\}\}|\{(\d+)\}")

# Outline marker naming an example column: "entered <number> into"
MARKER_PATTERN = re.compile(r"<([^<>]+)>")


class Keyword(str, Enum):
    """Step keywords as written in specification text."""
    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"
    AND = "And"
    BUT = "But"

    @property
    def is_conjunction(self) -> bool:
        """And/But take their semantic kind from the previous step."""
        return self in (Keyword.AND, Keyword.BUT)


def escape_template(text: str) -> str:
    """Step text as a template with no placeholders."""
    return text.replace("{", "{{").replace("}", "}}")


def resolve_kinds(keywords: Iterable[Keyword]) -> list[Keyword | None]:
    """
    Compute the semantic kind of each keyword in a scenario.

    Given/When/Then are their own kind; And/But inherit the kind of the
    immediately preceding step. A conjunction with no predecessor gets None
    so callers can report it with their own error type.
    """
    kinds: list[Keyword | None] = []
    current: Keyword | None = None

    for keyword in keywords:
        if not keyword.is_conjunction:
            current = keyword
        kinds.append(current)

    return kinds


@dataclass(frozen=True)
class Step:
    """One line of behavior: display keyword, semantic kind and text template."""
    keyword: Keyword
    kind: Keyword
    template: str
    arguments: tuple[Any, ...] = ()
    line_number: int = 0

    def placeholders(self) -> list[int]:
        """Positional placeholder indexes in order of appearance."""
        return [int(index) for index in PLACEHOLDER_PATTERN.findall(self.template) if index]

    def markers(self) -> list[str]:
        """Outline column markers in order of first appearance."""
        seen: list[str] = []
        for name in MARKER_PATTERN.findall(self.template):
            if name not in seen:
                seen.append(name)
        return seen

    def render(self) -> str:
        """Substitute literal arguments into the template and undouble braces."""
        def replace(match: re.Match) -> str:
            if match.group(1) is None:
                return match.group(0)[0]
            return str(self.arguments[int(match.group(1))])

        return PLACEHOLDER_PATTERN.sub(replace, self.template)

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword.value,
            "kind": self.kind.value,
            "template": self.template,
            "arguments": list(self.arguments),
        }


@dataclass(frozen=True)
class ExampleTable:
    """Data rows of a scenario outline."""
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    def __post_init__(self):
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"Duplicate example columns: {list(self.columns)}")
        for row in self.rows:
            if len(row) != len(self.columns):
                raise ValueError(
                    f"Example row {list(row)} has {len(row)} value(s), "
                    f"expected {len(self.columns)}"
                )

    def column_values(self, column: str) -> list[str]:
        """All values of one column, in row order."""
        index = self.columns.index(column)
        return [row[index] for row in self.rows]

    def to_dict(self) -> dict:
        return {
            "columns": list(self.columns),
            "rows": [list(row) for row in self.rows],
        }


@dataclass(frozen=True)
class Scenario:
    """A concrete example (or outline) made of ordered steps."""
    name: str
    steps: tuple[Step, ...]
    examples: ExampleTable | None = None
    line_number: int = 0

    @property
    def is_outline(self) -> bool:
        return self.examples is not None

    def unknown_markers(self) -> list[str]:
        """Outline markers that do not name an example column."""
        if self.examples is None:
            return []
        columns = set(self.examples.columns)
        return [
            marker
            for step in self.steps
            for marker in step.markers()
            if marker not in columns
        ]

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "outline": self.is_outline,
            "steps": [step.to_dict() for step in self.steps],
        }
        if self.examples is not None:
            result["examples"] = self.examples.to_dict()
        return result


@dataclass(frozen=True)
class Feature:
    """Top-level grouping of scenarios plus a free-text narrative."""
    name: str
    narrative: str = ""
    scenarios: tuple[Scenario, ...] = ()
    source: str | None = None
    line_number: int = 0

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Feature name must not be empty")

    @property
    def narrative_lines(self) -> list[str]:
        """Non-blank narrative lines, already dedented."""
        return [line.rstrip() for line in self.narrative.splitlines() if line.strip()]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "narrative": self.narrative,
            "scenarios": [scenario.to_dict() for scenario in self.scenarios],
            "source": self.source,
        }


@dataclass
class IntrospectionResult:
    """Features found in a module plus per-feature problems."""
    features: list[Feature] = field(default_factory=list)
    errors: list[GherkinSyncError] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "features": [feature.to_dict() for feature in self.features],
            "errors": [str(error) for error in self.errors],
            "files": self.files,
        }
