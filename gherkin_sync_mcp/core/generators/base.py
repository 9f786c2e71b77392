"""
Base interface for stub generators.
Allows swapping the class shape used for generated test definitions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..errors import GenerationError
from ..model import Feature


class ClassShape(str, Enum):
    """How scenarios are laid out in generated source."""
    METHOD_PER_SCENARIO = "method_per_scenario"
    CLASS_PER_SCENARIO = "class_per_scenario"


@dataclass
class ScenarioNames:
    """Identifiers claimed for one scenario (or why none could be)."""
    identifier: str | None = None
    path: Path | None = None       # class shape only
    error: GenerationError | None = None


@dataclass
class FeatureNames:
    """Identifiers and output paths claimed for one feature."""
    identifier: str
    path: Path
    scenarios: list[ScenarioNames] = field(default_factory=list)


@dataclass
class StubUnit:
    """One generated source file."""
    name: str                          # feature or scenario name
    class_name: str                    # "Calculator", "AddTwoNumbers"
    path: Path
    lines: list[str]
    scenario: str | None = None

    def to_code(self) -> str:
        """Convert to Python source text."""
        return "\n".join(self.lines) + "\n"


@dataclass
class GeneratedStubs:
    """Everything generated for a feature, plus the units that failed."""
    feature: str
    units: list[StubUnit] = field(default_factory=list)
    errors: list[GenerationError] = field(default_factory=list)


class StubGeneratorBase(ABC):
    """Abstract base class for stub generators."""

    @abstractmethod
    def assign_names(self, feature: Feature, output_dir: Path) -> FeatureNames:
        """Claim identifiers and paths for a feature (call in input order)."""
        pass

    @abstractmethod
    def generate_for_feature(self, feature: Feature, names: FeatureNames) -> GeneratedStubs:
        """Render the stub units of a feature."""
        pass
