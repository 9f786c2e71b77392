"""
Template Generator - render features into Python stub modules.

Two shapes over the same features:
- method per scenario: one module per feature, one tagged method per scenario
- class per scenario: a feature base module plus one module per scenario,
  each scenario class holding one tagged handler per step
"""

from __future__ import annotations

from pathlib import Path

from ...constants import STEP_TAGS, STUB_EXTENSION, STUB_INDENT, TAGS_MODULE
from ..errors import GenerationError
from ..model import Feature, Scenario, Step
from ..resolver import IdentifierStyle, Resolver
from .base import (
    ClassShape,
    FeatureNames,
    GeneratedStubs,
    ScenarioNames,
    StubGeneratorBase,
    StubUnit,
)
from .extractors.parameters import ParameterInfo, format_example, infer_parameters, py_string

# Keyword -> tag function used in generated code
_TAG_FOR_KEYWORD = {display: tag for tag, display in STEP_TAGS.items()}

CLASS_SCOPE = "classes"


class StubGenerator(StubGeneratorBase):
    """Generate tagged, not-implemented stubs from features."""

    def __init__(
        self,
        resolver: Resolver | None = None,
        shape: ClassShape = ClassShape.METHOD_PER_SCENARIO,
        namespace: str = ""
    ):
        """
        Create generator.

        Args:
            resolver: Shared resolver for the run (creates one if None)
            shape: Layout of scenarios in generated source
            namespace: Package prefix used when scenario modules import
                their feature base class (class shape only)

        Raises:
            ValueError: If namespace is not a dotted Python name
        """
        if namespace and not all(part.isidentifier() for part in namespace.split(".")):
            raise ValueError(f"Namespace must be a dotted Python name (got {namespace!r})")

        self.resolver = resolver or Resolver()
        self.shape = ClassShape(shape)
        self.namespace = namespace

    # =========================================================================
    # Naming
    # =========================================================================

    def assign_names(self, feature: Feature, output_dir: Path) -> FeatureNames:
        """
        Claim the class names and module paths of a feature.

        Must run in input order so collision suffixes are deterministic.

        Raises:
            GenerationError: If the feature name has no usable characters
        """
        base = self.resolver.identifier(feature.name, IdentifierStyle.PASCAL)
        if not base:
            raise GenerationError(feature.name, None, "feature name yields an empty identifier")

        identifier = self.resolver.claim(base, CLASS_SCOPE)
        path = self.resolver.claim_path(
            output_dir,
            self.resolver.identifier(feature.name, IdentifierStyle.SNAKE),
            STUB_EXTENSION
        )
        names = FeatureNames(identifier=identifier, path=path)

        for scenario in feature.scenarios:
            names.scenarios.append(self._assign_scenario_names(feature, scenario, names, output_dir))

        return names

    def _assign_scenario_names(
        self,
        feature: Feature,
        scenario: Scenario,
        feature_names: FeatureNames,
        output_dir: Path
    ) -> ScenarioNames:
        base = self.resolver.identifier(scenario.name, IdentifierStyle.PASCAL)
        if not base:
            return ScenarioNames(error=GenerationError(
                feature.name, scenario.name, "scenario name yields an empty identifier"
            ))

        if self.shape == ClassShape.METHOD_PER_SCENARIO:
            return ScenarioNames(identifier=self.resolver.claim(base, _member_scope(feature_names.identifier)))

        identifier = self.resolver.claim(base, CLASS_SCOPE)
        path = self.resolver.claim_path(
            output_dir,
            self.resolver.identifier(scenario.name, IdentifierStyle.SNAKE),
            STUB_EXTENSION
        )
        return ScenarioNames(identifier=identifier, path=path)

    # =========================================================================
    # Rendering
    # =========================================================================

    def generate_for_feature(self, feature: Feature, names: FeatureNames) -> GeneratedStubs:
        """Render a feature's units; failures are collected, not raised."""
        if self.shape == ClassShape.METHOD_PER_SCENARIO:
            return self._generate_method_shape(feature, names)
        return self._generate_class_shape(feature, names)

    def _generate_method_shape(self, feature: Feature, names: FeatureNames) -> GeneratedStubs:
        result = GeneratedStubs(feature=feature.name)
        body: list[str] = []
        used_tags = {"feature"}

        try:
            for scenario, scenario_names in zip(feature.scenarios, names.scenarios):
                if scenario_names.error is not None:
                    raise scenario_names.error
                body.append("")
                body.extend(self._scenario_method(feature, scenario, names, scenario_names, used_tags))
        except GenerationError as e:
            # the feature is a single unit in this shape
            result.errors.append(e)
            return result

        lines = _module_header(f"Stubs for feature: {feature.name}", used_tags)
        lines.extend(_feature_class(feature, names.identifier, body))

        result.units.append(StubUnit(
            name=feature.name,
            class_name=names.identifier,
            path=names.path,
            lines=lines
        ))
        return result

    def _generate_class_shape(self, feature: Feature, names: FeatureNames) -> GeneratedStubs:
        result = GeneratedStubs(feature=feature.name)

        lines = _module_header(f"Stubs for feature: {feature.name}", {"feature"})
        lines.extend(_feature_class(feature, names.identifier, []))
        result.units.append(StubUnit(
            name=feature.name,
            class_name=names.identifier,
            path=names.path,
            lines=lines
        ))

        for position, (scenario, scenario_names) in enumerate(zip(feature.scenarios, names.scenarios), start=1):
            try:
                if scenario_names.error is not None:
                    raise scenario_names.error
                result.units.append(self._scenario_module(feature, scenario, names, scenario_names, position))
            except GenerationError as e:
                result.errors.append(e)

        return result

    # =========================================================================
    # Method per scenario
    # =========================================================================

    def _scenario_method(
        self,
        feature: Feature,
        scenario: Scenario,
        feature_names: FeatureNames,
        scenario_names: ScenarioNames,
        used_tags: set[str]
    ) -> list[str]:
        """Tagged scenario method with one placeholder call per step."""
        indent = STUB_INDENT
        identifier = scenario_names.identifier
        lines = [f"{indent}@scenario({py_string(scenario.name)})"]
        used_tags.add("scenario")

        signature = "self"
        if scenario.is_outline:
            # parameter scope belongs to this feature class only
            scope = f"{_member_scope(feature_names.identifier)}.{identifier}:params"
            parameters = self._outline_parameters(feature, scenario, scope)
            lines.extend(f"{indent}@{row}" for row in self._example_rows(scenario, parameters))
            used_tags.add("example")
            signature = ", ".join(["self", *(parameter.signature for parameter in parameters)])

        lines.append(f"{indent}def {identifier}({signature}):")
        for step in scenario.steps:
            tag = _TAG_FOR_KEYWORD[step.keyword.value]
            used_tags.add(tag)
            lines.append(f"{indent * 2}{tag}({_step_arguments(step)})")
        lines.append(f"{indent * 2}raise NotImplementedError")

        return lines

    # =========================================================================
    # Class per scenario
    # =========================================================================

    def _scenario_module(
        self,
        feature: Feature,
        scenario: Scenario,
        feature_names: FeatureNames,
        scenario_names: ScenarioNames,
        position: int
    ) -> StubUnit:
        """
        One module per scenario; ``order`` keeps declaration order across
        files, which are otherwise read back in path order.
        """
        indent = STUB_INDENT
        identifier = scenario_names.identifier
        used_tags = {"scenario"}
        class_lines: list[str] = []

        parameters: dict[str, ParameterInfo] = {}
        if scenario.is_outline:
            inferred = self._outline_parameters(feature, scenario, f"{_member_scope(identifier)}:params")
            parameters = {parameter.column: parameter for parameter in inferred}
            class_lines.extend(f"@{row}" for row in self._example_rows(scenario, inferred))
            used_tags.add("example")

        class_lines.append(f"@scenario({py_string(scenario.name)}, order={position})")
        class_lines.append(f"class {identifier}({feature_names.identifier}):")

        scope = _member_scope(identifier)
        for step in scenario.steps:
            tag = _TAG_FOR_KEYWORD[step.keyword.value]
            used_tags.add(tag)

            method = self.resolver.claim(
                self.resolver.identifier(step.template, IdentifierStyle.SNAKE) or "step",
                scope
            )
            signature = ", ".join([
                "self",
                *(parameters[marker].signature for marker in step.markers() if marker in parameters)
            ])

            class_lines.append("")
            class_lines.append(f"{indent}@{tag}({_step_arguments(step)})")
            class_lines.append(f"{indent}def {method}({signature}):")
            class_lines.append(f"{indent * 2}raise NotImplementedError")

        if not scenario.steps:
            class_lines.append(f"{indent}pass")

        lines = _module_header(f"Stubs for scenario: {scenario.name}", used_tags)
        lines.append(f"from {self._module_path(feature_names)} import {feature_names.identifier}")
        lines.append("")
        lines.append("")
        lines.extend(class_lines)

        return StubUnit(
            name=scenario.name,
            class_name=identifier,
            path=scenario_names.path,
            lines=lines,
            scenario=scenario.name
        )

    def _module_path(self, feature_names: FeatureNames) -> str:
        stem = feature_names.path.stem
        return f"{self.namespace}.{stem}" if self.namespace else stem

    # =========================================================================
    # Outlines
    # =========================================================================

    def _outline_parameters(self, feature: Feature, scenario: Scenario, scope: str) -> list[ParameterInfo]:
        table = scenario.examples
        if not table.rows:
            raise GenerationError(
                feature.name, scenario.name,
                "examples table has no rows, cannot infer parameter types"
            )
        unknown = scenario.unknown_markers()
        if unknown:
            raise GenerationError(
                feature.name, scenario.name,
                f"steps reference unknown example column(s) {unknown}"
            )
        return infer_parameters(table, self.resolver, scope)

    def _example_rows(self, scenario: Scenario, parameters: list[ParameterInfo]) -> list[str]:
        table = scenario.examples
        return [format_example(table, row, parameters) for row in table.rows]


# =============================================================================
# Source helpers
# =============================================================================

def _member_scope(class_identifier: str) -> str:
    return f"members:{class_identifier}"


def _module_header(title: str, used_tags: set[str]) -> list[str]:
    docstring = title.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    return [
        f'"""{docstring}"""',
        "",
        f"from {TAGS_MODULE} import {', '.join(sorted(used_tags))}",
        "",
    ]


def _feature_class(feature: Feature, identifier: str, body: list[str]) -> list[str]:
    arguments = py_string(feature.name)
    if feature.narrative_lines:
        arguments += f", narrative={py_string(chr(10).join(feature.narrative_lines))}"

    lines = ["", f"@feature({arguments})", f"class {identifier}:"]
    if body:
        lines.extend(body)
    else:
        lines.append(f"{STUB_INDENT}pass")
    return lines


def _step_arguments(step: Step) -> str:
    """Template plus any literal arguments, as call arguments."""
    arguments = [py_string(step.template)]
    arguments.extend(repr(argument) for argument in step.arguments)
    return ", ".join(arguments)


def generate_stubs(
    features: list[Feature],
    output_dir: str | Path = ".",
    shape: ClassShape = ClassShape.METHOD_PER_SCENARIO,
    namespace: str = "",
    resolver: Resolver | None = None
) -> list[GeneratedStubs]:
    """Generate stubs for features sequentially (no files are written)."""
    generator = StubGenerator(resolver=resolver, shape=shape, namespace=namespace)
    output_dir = Path(output_dir)
    results = []

    for feature in features:
        try:
            names = generator.assign_names(feature, output_dir)
        except GenerationError as e:
            results.append(GeneratedStubs(feature=feature.name, errors=[e]))
            continue
        results.append(generator.generate_for_feature(feature, names))

    return results
