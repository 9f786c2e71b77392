"""Tag Reader - walk module syntax trees and build features from their tags."""

from __future__ import annotations

import ast
import inspect
from dataclasses import dataclass
from typing import Any

from ...constants import EXAMPLE_TAG, FEATURE_TAG, SCENARIO_TAG, STEP_TAGS, TAGS_MODULE
from ..errors import IntrospectionError
from ..model import ExampleTable, Feature, IntrospectionResult, Keyword, Scenario, Step, resolve_kinds
from .loader import LoadedModule

KNOWN_TAGS = frozenset({FEATURE_TAG, SCENARIO_TAG, EXAMPLE_TAG, *STEP_TAGS})

ScenarioNode = ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef


@dataclass
class _FeatureDecl:
    """A @feature class and where it was found."""
    module: LoadedModule
    node: ast.ClassDef
    tag: ast.Call | None


def read_features(modules: list[LoadedModule]) -> IntrospectionResult:
    """
    Build features from already loaded modules.

    Features keep source order (file order, then line order). A feature
    whose tags cannot form a valid feature is reported in ``errors`` and
    does not stop the others.
    """
    result = IntrospectionResult(files=[str(module.path) for module in modules])
    aliases = {id(module): _collect_aliases(module.tree) for module in modules}

    declarations: list[_FeatureDecl] = []
    for module in modules:
        for node in module.tree.body:
            if isinstance(node, ast.ClassDef):
                tag = _find_tag(node.decorator_list, FEATURE_TAG, aliases[id(module)])
                if tag is not None:
                    declarations.append(_FeatureDecl(module=module, node=node, tag=tag))

    derived = _derived_scenarios(modules, declarations, aliases)

    for decl in declarations:
        try:
            feature = _build_feature(decl, derived.get(id(decl.node), []), aliases)
        except IntrospectionError as e:
            result.errors.append(e)
            continue
        result.features.append(feature)

    return result


# =============================================================================
# Tag recognition
# =============================================================================

def _collect_aliases(tree: ast.Module) -> dict[str, str]:
    """Local name -> tag name, including ``from ...tags import given as g``."""
    aliases = {name: name for name in KNOWN_TAGS}

    for node in ast.walk(tree):
        if not isinstance(node, ast.ImportFrom) or not node.module:
            continue
        if node.module != TAGS_MODULE and node.module.split(".")[-1] != "tags":
            continue
        for alias in node.names:
            if alias.name in KNOWN_TAGS and alias.asname:
                aliases[alias.asname] = alias.name

    return aliases


def _tag_name(node: ast.expr, aliases: dict[str, str]) -> str | None:
    """Tag name of a call such as ``given(...)`` or ``tags.given(...)``."""
    if not isinstance(node, ast.Call):
        return None

    func = node.func
    if isinstance(func, ast.Name):
        return aliases.get(func.id)
    if isinstance(func, ast.Attribute) and func.attr in KNOWN_TAGS:
        return func.attr
    return None


def _find_tag(decorators: list[ast.expr], tag: str, aliases: dict[str, str]) -> ast.Call | None:
    for decorator in decorators:
        if _tag_name(decorator, aliases) == tag:
            return decorator
    return None


def _find_step_tag(decorators: list[ast.expr], aliases: dict[str, str]) -> tuple[str, ast.Call] | None:
    for decorator in decorators:
        name = _tag_name(decorator, aliases)
        if name in STEP_TAGS:
            return name, decorator
    return None


# =============================================================================
# Features and scenarios
# =============================================================================

def _derived_scenarios(
    modules: list[LoadedModule],
    declarations: list[_FeatureDecl],
    aliases: dict[int, dict[str, str]]
) -> dict[int, list[tuple[ast.ClassDef, LoadedModule]]]:
    """Module-level @scenario classes grouped by the feature class they derive from."""
    by_name: dict[str, list[_FeatureDecl]] = {}
    for decl in declarations:
        by_name.setdefault(decl.node.name, []).append(decl)

    derived: dict[int, list[tuple[ast.ClassDef, LoadedModule]]] = {}

    for module in modules:
        for node in module.tree.body:
            if not isinstance(node, ast.ClassDef):
                continue
            if _find_tag(node.decorator_list, SCENARIO_TAG, aliases[id(module)]) is None:
                continue

            for base in node.bases:
                candidates = by_name.get(_base_name(base), [])
                # same-module definition wins over an imported one
                same_module = [decl for decl in candidates if decl.module is module]
                chosen = (same_module or candidates or [None])[0]
                if chosen is not None:
                    derived.setdefault(id(chosen.node), []).append((node, module))
                    break

    return derived


def _base_name(node: ast.expr) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return ""


def _build_feature(
    decl: _FeatureDecl,
    derived: list[tuple[ast.ClassDef, LoadedModule]],
    aliases: dict[int, dict[str, str]]
) -> Feature:
    node = decl.node
    names = aliases[id(decl.module)]
    location = f"{decl.module.path}:{node.lineno}"

    name = _name_argument(decl.tag, node)
    narrative = _string_argument(decl.tag, 1, "narrative")
    if narrative is None:
        narrative = ast.get_docstring(node) or ""

    scenario_nodes: list[tuple[ScenarioNode, ast.Call, dict[str, str]]] = []
    for item in node.body:
        if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            tag = _find_tag(item.decorator_list, SCENARIO_TAG, names)
            if tag is not None:
                scenario_nodes.append((item, tag, names))

    ordered = []
    for index, (item, module) in enumerate(derived):
        module_names = aliases[id(module)]
        tag = _find_tag(item.decorator_list, SCENARIO_TAG, module_names)
        order = _int_argument(tag, 1, "order")
        ordered.append(((order is None, order or 0, index), (item, tag, module_names)))
    scenario_nodes.extend(entry for _, entry in sorted(ordered, key=lambda pair: pair[0]))

    scenarios = tuple(
        _build_scenario(name, scenario_node, tag, tag_names, location)
        for scenario_node, tag, tag_names in scenario_nodes
    )

    return Feature(
        name=name,
        narrative=inspect.cleandoc(narrative) if narrative else "",
        scenarios=scenarios,
        source=str(decl.module.path),
        line_number=node.lineno
    )


def _build_scenario(
    feature_name: str,
    node: ScenarioNode,
    tag: ast.Call,
    aliases: dict[str, str],
    location: str
) -> Scenario:
    name = _name_argument(tag, node)

    if isinstance(node, ast.ClassDef):
        raw_steps = _steps_from_handlers(feature_name, name, node, aliases, location)
    else:
        raw_steps = _steps_from_calls(feature_name, name, node, aliases, location)

    if not raw_steps:
        raise IntrospectionError(feature_name, name, "scenario declares no steps", location)

    keywords = [keyword for keyword, _, _, _ in raw_steps]
    kinds = resolve_kinds(keywords)
    if kinds[0] is None:
        raise IntrospectionError(
            feature_name, name,
            f"first step uses '{keywords[0].value}' without a preceding Given/When/Then",
            location
        )

    steps = tuple(
        Step(keyword=keyword, kind=kind, template=template, arguments=arguments, line_number=line)
        for (keyword, template, arguments, line), kind in zip(raw_steps, kinds)
    )

    return Scenario(
        name=name,
        steps=steps,
        examples=_build_examples(feature_name, name, node, aliases, location),
        line_number=node.lineno
    )


# =============================================================================
# Steps
# =============================================================================

_RawStep = tuple[Keyword, str, tuple[Any, ...], int]


def _steps_from_calls(
    feature_name: str,
    scenario_name: str,
    node: ast.FunctionDef | ast.AsyncFunctionDef,
    aliases: dict[str, str],
    location: str
) -> list[_RawStep]:
    """One-method-per-scenario: step calls in the method body, in order."""
    steps = []

    for statement in node.body:
        if not isinstance(statement, ast.Expr):
            continue
        tag = _tag_name(statement.value, aliases)
        if tag in STEP_TAGS:
            steps.append(_read_step(feature_name, scenario_name, tag, statement.value, location))

    return steps


def _steps_from_handlers(
    feature_name: str,
    scenario_name: str,
    node: ast.ClassDef,
    aliases: dict[str, str],
    location: str
) -> list[_RawStep]:
    """One-class-per-scenario: tagged step-handler methods, in order."""
    steps = []

    for item in node.body:
        if not isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        found = _find_step_tag(item.decorator_list, aliases)
        if found is not None:
            tag, call = found
            steps.append(_read_step(feature_name, scenario_name, tag, call, location))

    return steps


def _read_step(
    feature_name: str,
    scenario_name: str,
    tag: str,
    call: ast.Call,
    location: str
) -> _RawStep:
    template = _string_argument(call, 0, "template")
    if template is None:
        raise IntrospectionError(
            feature_name, scenario_name,
            f"step at line {call.lineno} has no literal text template",
            location
        )

    arguments = tuple(_literal(argument) for argument in call.args[1:])
    return Keyword(STEP_TAGS[tag]), template, arguments, call.lineno


# =============================================================================
# Examples
# =============================================================================

def _build_examples(
    feature_name: str,
    scenario_name: str,
    node: ScenarioNode,
    aliases: dict[str, str],
    location: str
) -> ExampleTable | None:
    rows: list[dict[str, Any]] = []

    for decorator in node.decorator_list:
        if _tag_name(decorator, aliases) != EXAMPLE_TAG:
            continue
        rows.append(_read_example(feature_name, scenario_name, decorator, location))

    if not rows:
        return None

    columns: list[str] = []
    for row in rows:
        for column in row:
            if column not in columns:
                columns.append(column)

    table_rows = []
    for row in rows:
        missing = [column for column in columns if column not in row]
        if missing:
            raise IntrospectionError(
                feature_name, scenario_name,
                f"example row {row} is missing column(s) {missing}",
                location
            )
        table_rows.append(tuple(_cell(row[column]) for column in columns))

    return ExampleTable(columns=tuple(columns), rows=tuple(table_rows))


def _read_example(
    feature_name: str,
    scenario_name: str,
    call: ast.Call,
    location: str
) -> dict[str, Any]:
    row: dict[str, Any] = {}

    for argument in call.args:
        value = _literal(argument)
        if not isinstance(value, dict):
            raise IntrospectionError(
                feature_name, scenario_name,
                f"example at line {call.lineno} takes a mapping or keyword values",
                location
            )
        row.update({str(key): item for key, item in value.items()})

    for keyword in call.keywords:
        if keyword.arg is None:
            raise IntrospectionError(
                feature_name, scenario_name,
                f"example at line {call.lineno} cannot unpack '**' values",
                location
            )
        row[keyword.arg] = _literal(keyword.value)

    return row


# =============================================================================
# Literal helpers
# =============================================================================

def _literal(node: ast.expr) -> Any:
    """Literal value of an argument, or its source text when not a literal."""
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError):
        return ast.unparse(node)


def _argument(call: ast.Call | None, position: int, keyword: str) -> Any:
    """Literal positional or keyword argument of a tag call, None if absent."""
    if call is None:
        return None

    node = None
    if len(call.args) > position:
        node = call.args[position]
    for item in call.keywords:
        if item.arg == keyword:
            node = item.value

    if node is None:
        return None

    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError):
        return None


def _string_argument(call: ast.Call | None, position: int, keyword: str) -> str | None:
    value = _argument(call, position, keyword)
    return value if isinstance(value, str) else None


def _int_argument(call: ast.Call | None, position: int, keyword: str) -> int | None:
    value = _argument(call, position, keyword)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _name_argument(call: ast.Call | None, node: ScenarioNode) -> str:
    """Tag name argument, or the decorated definition's name when blank."""
    name = _string_argument(call, 0, "name")
    if name is None or not name.strip():
        return node.name
    return name


def _cell(value: Any) -> str:
    return value if isinstance(value, str) else str(value)

