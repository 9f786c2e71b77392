"""
Gherkin Sync MCP Server

Keeps Gherkin-style specifications and tagged Python test definitions in step.
Introspect, Write, Parse, Generate.
"""

__version__ = "0.1.0"

# Public API
from .core import (
    BatchReport,
    ClassShape,
    Feature,
    generate_specs_from_module,
    generate_stubs_from_specs,
    introspect_module,
    parse_spec,
    write_feature,
)

__all__ = [
    "__version__",
    # Model
    "Feature",
    # Introspector / writer
    "introspect_module",
    "write_feature",
    # Parser / generator
    "parse_spec",
    "ClassShape",
    # Pipeline
    "generate_specs_from_module",
    "generate_stubs_from_specs",
    "BatchReport",
]
