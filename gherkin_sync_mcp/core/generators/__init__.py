"""Stub generators - render features into tagged Python test definitions."""

from .base import (
    ClassShape,
    FeatureNames,
    GeneratedStubs,
    ScenarioNames,
    StubGeneratorBase,
    StubUnit,
)
from .template import StubGenerator, generate_stubs

__all__ = [
    "StubGeneratorBase",
    "StubGenerator",
    "ClassShape",
    "FeatureNames",
    "ScenarioNames",
    "StubUnit",
    "GeneratedStubs",
    "generate_stubs",
]
