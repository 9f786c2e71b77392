"""Tests for the runtime tag decorators."""

from gherkin_sync_mcp import tags


class TestTags:
    """Tags attach metadata without changing behavior."""

    def test_feature_and_scenario(self):
        @tags.feature("Calculator", narrative="sums")
        class Calculator:

            @tags.scenario("Add")
            def add(self):
                return "ran"

        assert getattr(Calculator, tags.FEATURE_ATTR) == tags.FeatureTag("Calculator", "sums")
        assert getattr(Calculator.add, tags.SCENARIO_ATTR).name == "Add"
        assert Calculator().add() == "ran"

    def test_scenario_order(self):
        @tags.scenario("Add", order=2)
        class Add:
            pass

        assert getattr(Add, tags.SCENARIO_ATTR) == tags.ScenarioTag("Add", 2)

    def test_examples_keep_source_order(self):
        @tags.example(a=1)
        @tags.example({"b c": 2})
        def outline(a=None):
            pass

        assert getattr(outline, tags.EXAMPLES_ATTR) == [{"a": 1}, {"b c": 2}]

    def test_example_column_named_row(self):
        """Keyword columns never collide with the positional mapping."""
        @tags.example(row=3)
        def outline(row=None):
            pass

        assert getattr(outline, tags.EXAMPLES_ATTR) == [{"row": 3}]

    def test_step_call_and_decorator(self):
        step = tags.and_("entered {0}", 2)

        assert step == tags.StepTag("And", "entered {0}", (2,))

        @tags.then("the result")
        def handler(self):
            pass

        assert getattr(handler, tags.STEP_ATTR).keyword == "Then"
