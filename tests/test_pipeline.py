"""
Tests for the batch pipeline.

Covers both directions end to end on real files:
- code -> specification files
- specification files -> stub modules
- round trips, partial failures and deterministic output
"""

import pytest

from gherkin_sync_mcp.core.generators import ClassShape
from gherkin_sync_mcp.core.errors import ModuleLoadError
from gherkin_sync_mcp.core.pipeline import (
    discover_specs,
    generate_specs_from_module,
    generate_stubs_from_specs,
    write_atomic,
)


def _write_specs(directory, **specs):
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in specs.items():
        (directory / f"{name}.feature").write_text(text, encoding="utf-8")
    return directory


# =============================================================================
# Code -> Specification Tests
# =============================================================================

class TestGenerateSpecs:
    """Tests for writing specification files from tagged code."""

    @pytest.mark.asyncio
    async def test_calculator(self, calculator_module, calculator_spec, tmp_path):
        """The Calculator module produces exactly the expected text."""
        report = await generate_specs_from_module(calculator_module, tmp_path / "specs")

        assert report.succeeded
        assert report.exit_code == 0
        assert report.written == [tmp_path / "specs" / "calculator.feature"]
        assert report.written[0].read_text(encoding="utf-8") == calculator_spec

    @pytest.mark.asyncio
    async def test_partial_failure_isolated(self, write_module, tmp_path):
        """A feature with a bad template fails alone; both good features are written."""
        path = write_module('''
            from gherkin_sync_mcp.tags import feature, given, scenario

            @feature("Fine")
            class Fine:

                @scenario("Ok")
                def ok(self):
                    given("value {0}", 1)

            @feature("Broken")
            class Broken:

                @scenario("Too few arguments")
                def bad(self):
                    given("value {1}", 1)

            @feature("Also fine")
            class AlsoFine:

                @scenario("Ok too")
                def ok(self):
                    given("value {0}", 2)
        ''')

        report = await generate_specs_from_module(path, tmp_path / "specs")

        assert report.written == [tmp_path / "specs" / "fine.feature", tmp_path / "specs" / "also_fine.feature"]
        assert len(report.errors) == 1
        assert [error.kind for error in report.errors] == ["TemplateMismatch"]
        assert report.errors[0].unit == "Broken"
        assert report.exit_code == 1
        assert not (tmp_path / "specs" / "broken.feature").exists()

    @pytest.mark.asyncio
    async def test_introspection_errors_reported(self, write_module, tmp_path):
        path = write_module('''
            from gherkin_sync_mcp.tags import and_, feature, scenario

            @feature("Leading And")
            class LeadingAnd:

                @scenario("Bad")
                def bad(self):
                    and_("first")
        ''')

        report = await generate_specs_from_module(path, tmp_path / "specs")

        assert report.written == []
        assert report.errors[0].kind == "IntrospectionError"

    @pytest.mark.asyncio
    async def test_colliding_feature_names(self, write_module, tmp_path):
        path = write_module('''
            from gherkin_sync_mcp.tags import feature

            @feature("Calculator")
            class First:
                pass

            @feature("calculator")
            class Second:
                pass
        ''')

        report = await generate_specs_from_module(path, tmp_path / "specs")

        assert [written.name for written in report.written] == ["calculator.feature", "calculator_2.feature"]

    @pytest.mark.asyncio
    async def test_unloadable_module(self, tmp_path):
        with pytest.raises(ModuleLoadError):
            await generate_specs_from_module(tmp_path / "missing.py", tmp_path / "specs")


# =============================================================================
# Specification -> Code Tests
# =============================================================================

class TestGenerateStubs:
    """Tests for writing stub modules from specification files."""

    @pytest.mark.asyncio
    async def test_calculator(self, calculator_spec, tmp_path):
        specs = _write_specs(tmp_path / "specs", calculator=calculator_spec)

        report = await generate_stubs_from_specs(specs, tmp_path / "stubs")

        assert report.written == [tmp_path / "stubs" / "calculator.py"]
        code = report.written[0].read_text(encoding="utf-8")
        assert "def AddTwoNumbers(self):" in code

    @pytest.mark.asyncio
    async def test_partial_failure_isolated(self, calculator_spec, outline_spec, tmp_path):
        """One malformed file is reported; the two valid files are still generated."""
        specs = _write_specs(
            tmp_path / "specs",
            addition=outline_spec,
            broken="Feature: Broken\nScenario: S\n  And nothing before\n",
            calculator=calculator_spec,
        )

        report = await generate_stubs_from_specs(specs, tmp_path / "stubs")

        assert [path.name for path in report.written] == ["addition.py", "calculator.py"]
        assert len(report.errors) == 1
        assert report.errors[0].kind == "ParseError"
        assert report.errors[0].location.endswith("broken.feature:3")
        assert report.exit_code == 1

    @pytest.mark.asyncio
    async def test_class_shape(self, calculator_spec, tmp_path):
        specs = _write_specs(tmp_path / "specs", calculator=calculator_spec)

        report = await generate_stubs_from_specs(
            specs,
            tmp_path / "stubs",
            shape=ClassShape.CLASS_PER_SCENARIO
        )

        assert [path.name for path in report.written] == ["calculator.py", "add_two_numbers.py"]

    @pytest.mark.asyncio
    async def test_oversized_file_reported(self, calculator_spec, tmp_path):
        """Files over the size limit are reported without being parsed."""
        specs = _write_specs(tmp_path / "specs", calculator=calculator_spec, huge="Feature: Huge\n" + "#\n" * 1000)

        report = await generate_stubs_from_specs(specs, tmp_path / "stubs", max_spec_size=len(calculator_spec))

        assert [path.name for path in report.written] == ["calculator.py"]
        assert [error.kind for error in report.errors] == ["FileTooLarge"]
        assert report.errors[0].unit.endswith("huge.feature")

    @pytest.mark.asyncio
    async def test_same_outline_in_two_features(self, tmp_path):
        """Each feature's outline keeps its own parameter names."""
        outline = (
            "Scenario Outline: Divide\n"
            "  Given <number> / <divideby> = <result>\n"
            "Examples:\n"
            "  | number | divideby | result |\n"
            "  | 10     | 2        | 5      |\n"
        )
        specs = _write_specs(tmp_path / "specs", alpha=f"Feature: Alpha\n{outline}", beta=f"Feature: Beta\n{outline}")

        report = await generate_stubs_from_specs(specs, tmp_path / "stubs")

        assert [path.name for path in report.written] == ["alpha.py", "beta.py"]
        for path in report.written:
            code = path.read_text(encoding="utf-8")
            assert "def Divide(self, number: int, divideby: int, result: int):" in code
            assert "@example(number=10, divideby=2, result=5)" in code

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await generate_stubs_from_specs(tmp_path / "nowhere", tmp_path / "stubs")

    def test_discover_specs_sorted(self, tmp_path):
        specs = _write_specs(tmp_path / "specs", b="Feature: B\n", a="Feature: A\n")
        (specs / "notes.txt").write_text("ignored", encoding="utf-8")

        assert [path.name for path in discover_specs(specs)] == ["a.feature", "b.feature"]


# =============================================================================
# Round Trip Tests
# =============================================================================

class TestRoundTrip:
    """Specification -> stubs -> specification gives the same text."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shape", list(ClassShape))
    async def test_calculator(self, calculator_spec, tmp_path, shape):
        specs = _write_specs(tmp_path / "specs", calculator=calculator_spec)

        await generate_stubs_from_specs(specs, tmp_path / "stubs", shape=shape)
        report = await generate_specs_from_module(tmp_path / "stubs", tmp_path / "again")

        assert report.succeeded
        assert (tmp_path / "again" / "calculator.feature").read_text(encoding="utf-8") == calculator_spec

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shape", list(ClassShape))
    async def test_outline(self, outline_spec, tmp_path, shape):
        specs = _write_specs(tmp_path / "specs", addition=outline_spec)

        await generate_stubs_from_specs(specs, tmp_path / "stubs", shape=shape)
        report = await generate_specs_from_module(tmp_path / "stubs", tmp_path / "again")

        assert report.succeeded
        assert (tmp_path / "again" / "addition.feature").read_text(encoding="utf-8") == outline_spec

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shape", list(ClassShape))
    async def test_scenarios_keep_declaration_order(self, tmp_path, shape):
        """Scenarios not in alphabetical order come back in their original order."""
        text = (
            "Feature: Calculator\n"
            "\n"
            "Scenario: Subtract numbers\n"
            "\t\t\tGiven I have entered 3 into the calculator\n"
            "\t\t\tWhen I press subtract\n"
            "\n"
            "Scenario: Add numbers\n"
            "\t\t\tGiven I have entered 1 into the calculator\n"
            "\t\t\tWhen I press add\n"
        )
        specs = _write_specs(tmp_path / "specs", calculator=text)

        await generate_stubs_from_specs(specs, tmp_path / "stubs", shape=shape)
        report = await generate_specs_from_module(tmp_path / "stubs", tmp_path / "again")

        assert report.succeeded
        assert (tmp_path / "again" / "calculator.feature").read_text(encoding="utf-8") == text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shape", list(ClassShape))
    async def test_literal_braces(self, tmp_path, shape):
        text = (
            "Feature: Patterns\n"
            "\n"
            "Scenario: Type a pattern\n"
            "\t\t\tGiven the pattern {0} is typed\n"
            "\t\t\tThen {name} is shown\n"
        )
        specs = _write_specs(tmp_path / "specs", patterns=text)

        await generate_stubs_from_specs(specs, tmp_path / "stubs", shape=shape)
        report = await generate_specs_from_module(tmp_path / "stubs", tmp_path / "again")

        assert report.succeeded
        assert (tmp_path / "again" / "patterns.feature").read_text(encoding="utf-8") == text

    @pytest.mark.asyncio
    async def test_code_first(self, calculator_module, calculator_spec, tmp_path):
        """Code -> specification -> stubs -> specification is stable."""
        first = await generate_specs_from_module(calculator_module, tmp_path / "specs")
        await generate_stubs_from_specs(tmp_path / "specs", tmp_path / "stubs")
        second = await generate_specs_from_module(tmp_path / "stubs", tmp_path / "again")

        assert first.written[0].read_text(encoding="utf-8") == calculator_spec
        assert second.written[0].read_text(encoding="utf-8") == calculator_spec


# =============================================================================
# Determinism Tests
# =============================================================================

class TestDeterminism:
    """Two runs on the same input write the same bytes."""

    @pytest.mark.asyncio
    async def test_stub_runs_identical(self, calculator_spec, outline_spec, tmp_path):
        specs = _write_specs(tmp_path / "specs", calculator=calculator_spec, addition=outline_spec)

        first = await generate_stubs_from_specs(specs, tmp_path / "one")
        second = await generate_stubs_from_specs(specs, tmp_path / "two")

        assert [path.name for path in first.written] == [path.name for path in second.written]
        for one, two in zip(first.written, second.written):
            assert one.read_bytes() == two.read_bytes()


# =============================================================================
# Atomic Write Tests
# =============================================================================

class TestWriteAtomic:
    """Tests for whole-file writes."""

    def test_creates_parent_and_replaces(self, tmp_path):
        path = tmp_path / "nested" / "out.feature"

        write_atomic(path, "first\n")
        write_atomic(path, "second\n")

        assert path.read_text(encoding="utf-8") == "second\n"
        assert [item.name for item in path.parent.iterdir()] == ["out.feature"]
