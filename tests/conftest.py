"""Shared fixtures: the Calculator feature in text, model and source form."""

import textwrap

import pytest

from gherkin_sync_mcp.core.model import ExampleTable, Feature, Keyword, Scenario, Step


CALCULATOR_SPEC = (
    "Feature: Calculator\n"
    "  In order to avoid silly mistakes\n"
    "  As a math idiot\n"
    "  I want to be told the sum of two numbers\n"
    "\n"
    "Scenario: Add two numbers\n"
    "\t\t\tGiven I have entered 1 into the calculator\n"
    "\t\t\tAnd I have entered 2 into the calculator\n"
    "\t\t\tWhen I press add\n"
    "\t\t\tThen the result should be 3 on the screen\n"
)

OUTLINE_SPEC = (
    "Feature: Addition\n"
    "\n"
    "Scenario Outline: Add two numbers\n"
    "\t\t\tGiven I have entered <a> into the calculator\n"
    "\t\t\tAnd I have entered <b> into the calculator\n"
    "\t\t\tWhen I press add\n"
    "\t\t\tThen the result should be <sum> on the screen\n"
    "Examples:\n"
    "\t\t\t| a  | b  | sum |\n"
    "\t\t\t| 1  | 2  | 3   |\n"
    "\t\t\t| 10 | 20 | 30  |\n"
)

CALCULATOR_MODULE = textwrap.dedent('''
    from gherkin_sync_mcp.tags import and_, feature, given, scenario, then, when


    @feature("Calculator", narrative="""
        In order to avoid silly mistakes
        As a math idiot
        I want to be told the sum of two numbers
    """)
    class Calculator:

        @scenario("Add two numbers")
        def AddTwoNumbers(self):
            given("I have entered {0} into the calculator", 1)
            and_("I have entered {0} into the calculator", 2)
            when("I press add")
            then("the result should be {0} on the screen", 3)
            raise NotImplementedError
''')


@pytest.fixture
def calculator_feature():
    """Calculator feature built directly from the model."""
    return Feature(
        name="Calculator",
        narrative="In order to avoid silly mistakes\nAs a math idiot\nI want to be told the sum of two numbers",
        scenarios=(
            Scenario(
                name="Add two numbers",
                steps=(
                    Step(Keyword.GIVEN, Keyword.GIVEN, "I have entered {0} into the calculator", (1,)),
                    Step(Keyword.AND, Keyword.GIVEN, "I have entered {0} into the calculator", (2,)),
                    Step(Keyword.WHEN, Keyword.WHEN, "I press add"),
                    Step(Keyword.THEN, Keyword.THEN, "the result should be {0} on the screen", (3,)),
                ),
            ),
        ),
    )


@pytest.fixture
def outline_feature():
    """Addition outline with a two-row example table."""
    return Feature(
        name="Addition",
        scenarios=(
            Scenario(
                name="Add two numbers",
                steps=(
                    Step(Keyword.GIVEN, Keyword.GIVEN, "I have entered <a> into the calculator"),
                    Step(Keyword.AND, Keyword.GIVEN, "I have entered <b> into the calculator"),
                    Step(Keyword.WHEN, Keyword.WHEN, "I press add"),
                    Step(Keyword.THEN, Keyword.THEN, "the result should be <sum> on the screen"),
                ),
                examples=ExampleTable(
                    columns=("a", "b", "sum"),
                    rows=(("1", "2", "3"), ("10", "20", "30")),
                ),
            ),
        ),
    )


@pytest.fixture
def write_module(tmp_path):
    """Write dedented Python source into tmp_path and return its path."""
    def write(source: str, name: str = "steps.py"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path
    return write


@pytest.fixture
def calculator_spec():
    """Calculator specification text as the writer emits it."""
    return CALCULATOR_SPEC


@pytest.fixture
def outline_spec():
    """Addition outline specification text as the writer emits it."""
    return OUTLINE_SPEC


@pytest.fixture
def calculator_module(write_module):
    """Tagged Calculator test definitions written to a file."""
    return write_module(CALCULATOR_MODULE, "calculator_steps.py")
