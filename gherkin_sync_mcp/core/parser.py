"""
Specification Parser - read specification text into features.

Line-oriented and stateful. The first malformed line aborts the whole text
with a ParseError; no partial features are returned.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import ParseError
from .model import ExampleTable, Feature, Keyword, Scenario, Step, escape_template

FEATURE = "Feature:"
SCENARIO = "Scenario:"
SCENARIO_OUTLINE = "Scenario Outline:"
EXAMPLES = "Examples:"
COMMENT = "#"

_CELL_SPLIT = re.compile(r"(?<!\\)\|")


class _State(Enum):
    START = "start"
    NARRATIVE = "narrative"
    SCENARIO = "scenario"
    EXAMPLES_HEADER = "examples_header"
    EXAMPLES_ROWS = "examples_rows"
    EXAMPLES_DONE = "examples_done"


@dataclass
class _ScenarioDraft:
    name: str
    outline: bool
    line_number: int
    steps: list[Step] = field(default_factory=list)
    columns: tuple[str, ...] | None = None
    rows: list[tuple[str, ...]] = field(default_factory=list)


@dataclass
class _FeatureDraft:
    name: str
    line_number: int
    narrative: list[str] = field(default_factory=list)
    scenarios: list[Scenario] = field(default_factory=list)


class SpecParser:
    """Parse one specification text; use a fresh instance per text."""

    def __init__(self, source: str | None = None):
        self.source = source
        self._features: list[Feature] = []
        self._feature: _FeatureDraft | None = None
        self._scenario: _ScenarioDraft | None = None
        self._state = _State.START

    def parse(self, text: str) -> list[Feature]:
        lines = text.splitlines()

        for number, raw in enumerate(lines, start=1):
            self._parse_line(number, raw)

        self._close_feature()

        if not self._features:
            raise ParseError(max(len(lines), 1), FEATURE, "end of input", self.source)

        return self._features

    # =========================================================================
    # Line dispatch
    # =========================================================================

    def _parse_line(self, number: int, raw: str) -> None:
        stripped = raw.strip()

        if not stripped:
            if self._state == _State.EXAMPLES_ROWS:
                self._state = _State.EXAMPLES_DONE
            return

        if stripped.startswith(FEATURE):
            self._open_feature(number, stripped[len(FEATURE):].strip())
        elif stripped.startswith(SCENARIO_OUTLINE):
            self._open_scenario(number, stripped[len(SCENARIO_OUTLINE):].strip(), outline=True)
        elif stripped.startswith(SCENARIO):
            self._open_scenario(number, stripped[len(SCENARIO):].strip(), outline=False)
        elif self._state == _State.NARRATIVE:
            # narrative is free text, "#" included
            self._feature.narrative.append(raw.rstrip())
        elif stripped.startswith(COMMENT):
            return
        elif self._state == _State.START:
            raise ParseError(number, FEATURE, stripped, self.source)
        elif stripped.startswith(EXAMPLES):
            self._open_examples(number, stripped)
        elif stripped.startswith("|"):
            self._add_table_row(number, stripped)
        else:
            keyword = _match_keyword(stripped)
            if keyword is None:
                raise ParseError(number, "a Given/When/Then/And/But step", stripped, self.source)
            self._add_step(number, keyword, stripped[len(keyword.value):].strip(), stripped)

    # =========================================================================
    # Features and scenarios
    # =========================================================================

    def _open_feature(self, number: int, name: str) -> None:
        if not name:
            raise ParseError(number, "a feature name after 'Feature:'", FEATURE, self.source)

        self._close_feature()
        self._feature = _FeatureDraft(name=name, line_number=number)
        self._state = _State.NARRATIVE

    def _close_feature(self) -> None:
        if self._feature is None:
            return

        self._close_scenario()
        draft = self._feature
        narrative = textwrap.dedent("\n".join(draft.narrative))

        self._features.append(Feature(
            name=draft.name,
            narrative=narrative,
            scenarios=tuple(draft.scenarios),
            source=self.source,
            line_number=draft.line_number
        ))
        self._feature = None

    def _open_scenario(self, number: int, name: str, outline: bool) -> None:
        if self._feature is None:
            raise ParseError(number, FEATURE, SCENARIO_OUTLINE if outline else SCENARIO, self.source)

        self._close_scenario()
        self._scenario = _ScenarioDraft(name=name, outline=outline, line_number=number)
        self._state = _State.SCENARIO

    def _close_scenario(self) -> None:
        draft = self._scenario
        if draft is None:
            return

        if not draft.steps:
            raise ParseError(draft.line_number, "at least one step", draft.name, self.source)

        examples = None
        if draft.outline:
            if draft.columns is None:
                raise ParseError(draft.line_number, f"an '{EXAMPLES}' block", draft.name, self.source)
            examples = ExampleTable(columns=draft.columns, rows=tuple(draft.rows))

            for step in draft.steps:
                for marker in step.markers():
                    if marker not in draft.columns:
                        raise ParseError(
                            step.line_number,
                            f"an example column named {marker!r}",
                            step.template,
                            self.source
                        )

        self._feature.scenarios.append(Scenario(
            name=draft.name,
            steps=tuple(draft.steps),
            examples=examples,
            line_number=draft.line_number
        ))
        self._scenario = None

    # =========================================================================
    # Steps
    # =========================================================================

    def _add_step(self, number: int, keyword: Keyword, text: str, line: str) -> None:
        if self._state != _State.SCENARIO:
            raise ParseError(number, self._expected_in_examples(), line, self.source)
        if not text:
            raise ParseError(number, f"step text after '{keyword.value}'", line, self.source)

        steps = self._scenario.steps
        if keyword.is_conjunction:
            if not steps:
                raise ParseError(number, "a Given/When/Then step before And/But", line, self.source)
            kind = steps[-1].kind
        else:
            kind = keyword

        steps.append(Step(keyword=keyword, kind=kind, template=escape_template(text), line_number=number))

    # =========================================================================
    # Examples
    # =========================================================================

    def _open_examples(self, number: int, line: str) -> None:
        draft = self._scenario
        if self._state != _State.SCENARIO or draft is None:
            raise ParseError(number, self._expected_in_examples(), line, self.source)
        if not draft.outline:
            raise ParseError(number, f"'{SCENARIO_OUTLINE}' before '{EXAMPLES}'", line, self.source)

        self._state = _State.EXAMPLES_HEADER

    def _add_table_row(self, number: int, line: str) -> None:
        if self._state not in (_State.EXAMPLES_HEADER, _State.EXAMPLES_ROWS):
            raise ParseError(number, f"'{EXAMPLES}' before a table row", line, self.source)

        cells = _split_cells(line)
        if cells is None:
            raise ParseError(number, "a table row ending with '|'", line, self.source)

        draft = self._scenario
        if self._state == _State.EXAMPLES_HEADER:
            duplicates = sorted({cell for cell in cells if cells.count(cell) > 1})
            if duplicates:
                raise ParseError(number, "unique column names", line, self.source)
            if not all(cells):
                raise ParseError(number, "non-empty column names", line, self.source)
            draft.columns = tuple(cells)
            self._state = _State.EXAMPLES_ROWS
            return

        if len(cells) != len(draft.columns):
            raise ParseError(number, f"{len(draft.columns)} cell(s)", line, self.source)
        draft.rows.append(tuple(cells))

    def _expected_in_examples(self) -> str:
        if self._state == _State.EXAMPLES_HEADER:
            return "an examples header row"
        if self._state == _State.EXAMPLES_ROWS:
            return "an examples row or a blank line"
        return f"'{SCENARIO}' or '{SCENARIO_OUTLINE}'"


def _match_keyword(line: str) -> Keyword | None:
    """Case-sensitive keyword token followed by whitespace or end of line."""
    for keyword in Keyword:
        token = keyword.value
        if line.startswith(token) and (len(line) == len(token) or line[len(token)].isspace()):
            return keyword
    return None


def _split_cells(line: str) -> list[str] | None:
    if len(line) < 2 or not line.endswith("|") or line.endswith("\\|"):
        return None
    inner = line[1:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SPLIT.split(inner)]


def parse_spec(text: str, source: str | None = None) -> list[Feature]:
    """Parse specification text into one or more features."""
    return SpecParser(source).parse(text)


def parse_file(path: str | Path) -> list[Feature]:
    """Parse a specification file; ParseError locations carry the path."""
    path = Path(path)
    return parse_spec(path.read_text(encoding="utf-8"), source=str(path))
