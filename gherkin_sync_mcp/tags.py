"""
Declarative tags for behavioral test definitions.

These decorators only attach metadata; running the tagged code is the job
of whatever test engine consumes it. The introspector reads the same tags
statically from source, so they must be written as literal calls:

    @feature("Calculator", narrative="In order to avoid silly mistakes")
    class Calculator:

        @scenario("Add two numbers")
        def AddTwoNumbers(self):
            given("I have entered {0} into the calculator", 1)
            when("I press add")
            then("the result should be {0}", 3)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, TypeVar

T = TypeVar("T")

FEATURE_ATTR = "__gherkin_feature__"
SCENARIO_ATTR = "__gherkin_scenario__"
EXAMPLES_ATTR = "__gherkin_examples__"
STEP_ATTR = "__gherkin_step__"


@dataclass(frozen=True)
class FeatureTag:
    name: str
    narrative: str = ""


@dataclass(frozen=True)
class ScenarioTag:
    name: str
    order: int | None = None


@dataclass(frozen=True)
class StepTag:
    """A step keyword bound to its text template and literal arguments."""
    keyword: str
    template: str
    arguments: tuple[Any, ...] = field(default_factory=tuple)

    def __call__(self, target: T) -> T:
        setattr(target, STEP_ATTR, self)
        return target


def feature(name: str, narrative: str = "") -> Callable[[T], T]:
    """Mark a class as a feature."""
    def decorate(cls: T) -> T:
        setattr(cls, FEATURE_ATTR, FeatureTag(name=name, narrative=narrative))
        return cls
    return decorate


def scenario(name: str, order: int | None = None) -> Callable[[T], T]:
    """
    Mark a method or class as a scenario.

    ``order`` places a scenario class declared in its own module within
    its feature; without it such classes follow file order.
    """
    def decorate(target: T) -> T:
        setattr(target, SCENARIO_ATTR, ScenarioTag(name=name, order=order))
        return target
    return decorate


def example(row: Mapping[str, Any] | None = None, /, **columns: Any) -> Callable[[T], T]:
    """
    Attach one example row to a scenario outline.

    Columns are given as keywords, or as a mapping when a column name is
    not a valid identifier. Rows keep their source order.
    """
    values = dict(row or {})
    values.update(columns)

    def decorate(target: T) -> T:
        # decorators apply bottom-up, prepend to keep source order
        rows = list(getattr(target, EXAMPLES_ATTR, ()))
        setattr(target, EXAMPLES_ATTR, [values, *rows])
        return target
    return decorate


def given(template: str, *arguments: Any) -> StepTag:
    return StepTag("Given", template, arguments)


def when(template: str, *arguments: Any) -> StepTag:
    return StepTag("When", template, arguments)


def then(template: str, *arguments: Any) -> StepTag:
    return StepTag("Then", template, arguments)


def and_(template: str, *arguments: Any) -> StepTag:
    return StepTag("And", template, arguments)


def but(template: str, *arguments: Any) -> StepTag:
    return StepTag("But", template, arguments)
