"""Tests for reading tagged test definitions."""

import sys
import types

import pytest

from gherkin_sync_mcp.core.errors import IntrospectionError, ModuleLoadError
from gherkin_sync_mcp.core.introspector import introspect, introspect_module, resolve_sources
from gherkin_sync_mcp.core.model import Keyword
from gherkin_sync_mcp.core.writer import write_feature


# =============================================================================
# Method Per Scenario Tests
# =============================================================================

class TestMethodPerScenario:
    """Tests for scenarios declared as tagged methods."""

    def test_calculator(self, calculator_module, calculator_feature):
        """Tags read statically match the model built by hand."""
        features = introspect_module(calculator_module)

        assert len(features) == 1
        feature = features[0]
        assert feature.name == calculator_feature.name
        assert feature.narrative == calculator_feature.narrative

        def summary(steps):
            return [(step.keyword, step.kind, step.template, step.arguments) for step in steps]

        assert summary(feature.scenarios[0].steps) == summary(calculator_feature.scenarios[0].steps)

    def test_calculator_writes_expected_text(self, calculator_module, calculator_spec):
        feature = introspect_module(calculator_module)[0]

        assert write_feature(feature) == calculator_spec

    def test_narrative_from_docstring(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature, given, scenario

            @feature("Docs")
            class Docs:
                """
                Narrative from
                the docstring
                """

                @scenario("One")
                def one(self):
                    given("something")
        ''')

        feature = introspect_module(path)[0]

        assert feature.narrative == "Narrative from\nthe docstring"

    def test_feature_name_falls_back_to_class(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature

            @feature()
            class Checkout:
                pass
        ''')

        assert introspect_module(path)[0].name == "Checkout"

    def test_blank_names_fall_back_to_definitions(self, write_module):
        """A whitespace-only name does not abort the run or lose other features."""
        path = write_module('''
            from gherkin_sync_mcp.tags import feature, given, scenario

            @feature("   ")
            class Blank:

                @scenario("  ")
                def unnamed(self):
                    given("x")

            @feature("Good")
            class Good:
                pass
        ''')

        result = introspect(path)

        assert result.errors == []
        assert [feature.name for feature in result.features] == ["Blank", "Good"]
        assert result.features[0].scenarios[0].name == "unnamed"

    def test_feature_without_scenarios(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature

            @feature("Later")
            class Later:
                pass
        ''')

        assert introspect_module(path)[0].scenarios == ()

    def test_aliases_and_dotted_tags(self, write_module):
        """Renamed imports and module-qualified tags are recognized."""
        path = write_module('''
            from gherkin_sync_mcp import tags
            from gherkin_sync_mcp.tags import given as Given

            @tags.feature("Aliased")
            class Aliased:

                @tags.scenario("Alias")
                def alias(self):
                    Given("a")
                    tags.and_("b")
                    tags.then("c")
        ''')

        steps = introspect_module(path)[0].scenarios[0].steps

        assert [step.keyword for step in steps] == [Keyword.GIVEN, Keyword.AND, Keyword.THEN]
        assert steps[1].kind == Keyword.GIVEN

    def test_non_literal_argument_uses_source_text(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature, given, scenario

            @feature("Expr")
            class Expr:

                @scenario("Uses a name")
                def uses(self):
                    given("value {0}", LIMIT)
        ''')

        step = introspect_module(path)[0].scenarios[0].steps[0]

        assert step.arguments == ("LIMIT",)
        assert step.render() == "value LIMIT"

    def test_module_without_features(self, write_module):
        path = write_module("x = 1\n")

        result = introspect(path)

        assert result.features == []
        assert result.errors == []


# =============================================================================
# Class Per Scenario Tests
# =============================================================================

class TestClassPerScenario:
    """Tests for scenarios declared as tagged classes."""

    def test_nested_scenario_class(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import and_, feature, given, scenario, then, when

            @feature("Calculator")
            class Calculator:

                @scenario("Add two numbers")
                class AddTwoNumbers:

                    @given("I have entered 1 into the calculator")
                    def entered_first(self):
                        raise NotImplementedError

                    @and_("I have entered 2 into the calculator")
                    def entered_second(self):
                        raise NotImplementedError

                    @when("I press add")
                    def press_add(self):
                        raise NotImplementedError

                    @then("the result should be 3 on the screen")
                    def result(self):
                        raise NotImplementedError
        ''')

        scenario = introspect_module(path)[0].scenarios[0]

        assert scenario.name == "Add two numbers"
        assert [step.kind for step in scenario.steps] == [
            Keyword.GIVEN, Keyword.GIVEN, Keyword.WHEN, Keyword.THEN,
        ]

    def test_derived_scenario_in_other_file(self, write_module, tmp_path):
        """Scenario classes deriving from a feature class join that feature."""
        write_module('''
            from gherkin_sync_mcp.tags import feature

            @feature("Calculator")
            class Calculator:
                pass
        ''', "pkg/calculator.py")
        write_module('''
            from gherkin_sync_mcp.tags import given, scenario
            from calculator import Calculator

            @scenario("Clear")
            class Clear(Calculator):

                @given("the calculator is cleared")
                def cleared(self):
                    raise NotImplementedError
        ''', "pkg/clear.py")

        features = introspect_module(tmp_path / "pkg")

        assert len(features) == 1
        assert [scenario.name for scenario in features[0].scenarios] == ["Clear"]

    def test_order_overrides_file_order(self, write_module, tmp_path):
        """Scenario classes in separate files are placed by their order argument."""
        write_module('''
            from gherkin_sync_mcp.tags import feature

            @feature("Calculator")
            class Calculator:
                pass
        ''', "pkg/calculator.py")
        write_module('''
            from gherkin_sync_mcp.tags import given, scenario
            from calculator import Calculator

            @scenario("Add", order=2)
            class Add(Calculator):

                @given("x")
                def x(self):
                    raise NotImplementedError
        ''', "pkg/add.py")
        write_module('''
            from gherkin_sync_mcp.tags import given, scenario
            from calculator import Calculator

            @scenario("Subtract", order=1)
            class Subtract(Calculator):

                @given("y")
                def y(self):
                    raise NotImplementedError
        ''', "pkg/subtract.py")

        features = introspect_module(tmp_path / "pkg")

        assert [scenario.name for scenario in features[0].scenarios] == ["Subtract", "Add"]


# =============================================================================
# Example Tests
# =============================================================================

class TestExamples:
    """Tests for @example rows."""

    def test_rows_in_source_order(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import example, feature, given, scenario

            @feature("Outline")
            class Outline:

                @scenario("Add")
                @example(a=1, b="x")
                @example(a=10, b="y")
                def add(self, a: int, b: str):
                    given("<a> and <b>")
        ''')

        table = introspect_module(path)[0].scenarios[0].examples

        assert table.columns == ("a", "b")
        assert table.rows == (("1", "x"), ("10", "y"))

    def test_mapping_form(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import example, feature, given, scenario

            @feature("Outline")
            class Outline:

                @scenario("Divide")
                @example({"divide by": 2})
                def divide(self, divide_by: int):
                    given("divide by <divide by>")
        ''')

        table = introspect_module(path)[0].scenarios[0].examples

        assert table.columns == ("divide by",)
        assert table.rows == (("2",),)

    def test_missing_column_is_feature_error(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import example, feature, given, scenario

            @feature("Ragged")
            class Ragged:

                @scenario("Rows")
                @example(a=1, b=2)
                @example(a=3)
                def rows(self, a, b):
                    given("<a> <b>")
        ''')

        result = introspect(path)

        assert result.features == []
        assert isinstance(result.errors[0], IntrospectionError)
        assert "missing column" in str(result.errors[0])


# =============================================================================
# Error Tests
# =============================================================================

class TestIntrospectionErrors:
    """Tests for per-feature errors and load failures."""

    def test_leading_and_is_isolated(self, write_module):
        """A broken feature does not stop the next one."""
        path = write_module('''
            from gherkin_sync_mcp.tags import and_, feature, given, scenario

            @feature("Broken")
            class Broken:

                @scenario("Starts with And")
                def bad(self):
                    and_("nothing before me")

            @feature("Fine")
            class Fine:

                @scenario("Ok")
                def ok(self):
                    given("something")
        ''')

        result = introspect(path)

        assert [feature.name for feature in result.features] == ["Fine"]
        assert len(result.errors) == 1
        assert result.errors[0].feature == "Broken"

    def test_scenario_without_steps(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature, scenario

            @feature("Empty")
            class Empty:

                @scenario("Nothing")
                def nothing(self):
                    pass
        ''')

        with pytest.raises(IntrospectionError, match="no steps"):
            introspect_module(path)

    def test_non_literal_template(self, write_module):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature, given, scenario

            @feature("Dynamic")
            class Dynamic:

                @scenario("Template from a name")
                def dynamic(self):
                    given(TEMPLATE)
        ''')

        assert len(introspect(path).errors) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModuleLoadError):
            introspect(tmp_path / "missing.py")

    def test_unknown_dotted_name(self):
        with pytest.raises(ModuleLoadError):
            introspect("no_such_package_anywhere.steps")

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("text", encoding="utf-8")

        with pytest.raises(ModuleLoadError, match="only Python files"):
            introspect(path)

    def test_syntax_error(self, write_module):
        path = write_module("def broken(:\n")

        with pytest.raises(ModuleLoadError, match="syntax error"):
            introspect(path)


# =============================================================================
# Loader Tests
# =============================================================================

class TestResolveSources:
    """Tests for module reference resolution."""

    def test_directory_sorted(self, write_module, tmp_path):
        write_module("x = 1\n", "pkg/b.py")
        write_module("x = 1\n", "pkg/a.py")

        sources = resolve_sources(tmp_path / "pkg")

        assert [path.name for path in sources] == ["a.py", "b.py"]

    def test_loaded_module(self, calculator_module):
        module = types.ModuleType("calculator_steps")
        module.__file__ = str(calculator_module)

        assert resolve_sources(module) == [calculator_module]

    def test_dotted_name(self, write_module, tmp_path, monkeypatch):
        write_module("x = 1\n", "dotted_steps_pkg/__init__.py")
        write_module("x = 1\n", "dotted_steps_pkg/steps.py")
        monkeypatch.syspath_prepend(str(tmp_path))

        sources = resolve_sources("dotted_steps_pkg.steps")

        assert sources == [tmp_path / "dotted_steps_pkg" / "steps.py"]
        assert "dotted_steps_pkg.steps" not in sys.modules
