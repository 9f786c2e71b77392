"""Specification Writer - serialize features to specification text."""

from __future__ import annotations

from ..constants import NARRATIVE_INDENT, STEP_INDENT
from .errors import TemplateMismatch
from .model import ExampleTable, Feature, Scenario, Step


def write_feature(feature: Feature) -> str:
    """Render one feature; raises TemplateMismatch on unfillable steps."""
    lines = [f"Feature: {feature.name}"]

    for line in feature.narrative_lines:
        lines.append(f"{NARRATIVE_INDENT}{line}")

    for scenario in feature.scenarios:
        lines.append("")
        lines.extend(_write_scenario(feature, scenario))

    return "\n".join(lines) + "\n"


def write_features(features: list[Feature]) -> list[str]:
    """Render each feature to its own text unit."""
    return [write_feature(feature) for feature in features]


def _write_scenario(feature: Feature, scenario: Scenario) -> list[str]:
    if scenario.is_outline:
        lines = [f"Scenario Outline: {scenario.name}"]
    else:
        lines = [f"Scenario: {scenario.name}"]

    for step in scenario.steps:
        text = _render_step(feature, scenario, step)
        lines.append(f"{STEP_INDENT}{step.keyword.value} {text}")

    if scenario.examples is not None:
        lines.append("Examples:")
        lines.extend(f"{STEP_INDENT}{row}" for row in format_table(scenario.examples))

    return lines


def _render_step(feature: Feature, scenario: Scenario, step: Step) -> str:
    """Outline steps keep their markers; literal steps get their arguments."""
    if scenario.is_outline:
        if step.arguments or step.placeholders():
            raise TemplateMismatch(
                feature.name, scenario.name, step.template,
                "outline steps take values from the examples table, not literal arguments"
            )
        columns = scenario.examples.columns
        unknown = [marker for marker in step.markers() if marker not in columns]
        if unknown:
            raise TemplateMismatch(
                feature.name, scenario.name, step.template,
                f"no example column for {', '.join(f'<{name}>' for name in unknown)}"
            )
        return step.render().strip()

    indexes = set(step.placeholders())
    available = set(range(len(step.arguments)))

    missing = sorted(indexes - available)
    if missing:
        raise TemplateMismatch(
            feature.name, scenario.name, step.template,
            f"placeholder(s) {missing} but only {len(step.arguments)} argument(s)"
        )

    unused = sorted(available - indexes)
    if unused:
        raise TemplateMismatch(
            feature.name, scenario.name, step.template,
            f"argument(s) at position {unused} not referenced by the template"
        )

    return step.render().strip()


def format_table(table: ExampleTable) -> list[str]:
    """Pipe-delimited rows, each cell padded to its column's widest entry."""
    header = [_escape_cell(column) for column in table.columns]
    rows = [[_escape_cell(value) for value in row] for row in table.rows]

    widths = [
        max(len(cells[index]) for cells in [header, *rows])
        for index in range(len(header))
    ]

    return [
        "| " + " | ".join(cell.ljust(width) for cell, width in zip(cells, widths)) + " |"
        for cells in [header, *rows]
    ]


def _escape_cell(value: str) -> str:
    return str(value).replace("|", "\\|")
