"""Core domain logic for specification/test-definition synchronization."""


from .errors import (
    CollisionUnresolvable,
    GenerationError,
    GherkinSyncError,
    IntrospectionError,
    ModuleLoadError,
    ParseError,
    TemplateMismatch,
)
from .generators import ClassShape, GeneratedStubs, StubGenerator, StubUnit, generate_stubs
from .introspector import introspect, introspect_module
from .model import ExampleTable, Feature, IntrospectionResult, Keyword, Scenario, Step
from .parser import parse_file, parse_spec
from .pipeline import generate_specs_from_module, generate_stubs_from_specs
from .report import BatchReport, UnitError
from .resolver import IdentifierStyle, Resolver, to_identifier
from .writer import write_feature, write_features

__all__ = [
    # Model
    "Feature",
    "Scenario",
    "Step",
    "ExampleTable",
    "Keyword",
    "IntrospectionResult",
    # Errors
    "GherkinSyncError",
    "ParseError",
    "TemplateMismatch",
    "GenerationError",
    "IntrospectionError",
    "ModuleLoadError",
    "CollisionUnresolvable",
    # Introspector
    "introspect",
    "introspect_module",
    # Writer
    "write_feature",
    "write_features",
    # Parser
    "parse_spec",
    "parse_file",
    # Generators
    "StubGenerator",
    "ClassShape",
    "StubUnit",
    "GeneratedStubs",
    "generate_stubs",
    # Resolver
    "Resolver",
    "IdentifierStyle",
    "to_identifier",
    # Pipeline
    "generate_specs_from_module",
    "generate_stubs_from_specs",
    "BatchReport",
    "UnitError",
]
