"""
Shared constants used across the project.
"""

from typing import Final

# Specification text layout
SPEC_EXTENSION: Final[str] = ".feature"
NARRATIVE_INDENT: Final[str] = "  "
STEP_INDENT: Final[str] = "\t\t\t"

# Generated stubs
STUB_EXTENSION: Final[str] = ".py"
STUB_INDENT: Final[str] = "    "
TAGS_MODULE: Final[str] = "gherkin_sync_mcp.tags"

# Names of the declarative tags, as written in test definitions
FEATURE_TAG: Final[str] = "feature"
SCENARIO_TAG: Final[str] = "scenario"
EXAMPLE_TAG: Final[str] = "example"
STEP_TAGS: Final[dict[str, str]] = {
    "given": "Given",
    "when": "When",
    "then": "Then",
    "and_": "And",
    "but": "But",
}

# File constraints
MAX_SPEC_SIZE: Final[int] = 1_000_000  # 1MB
ALLOWED_SPEC_EXTENSIONS: Final[frozenset[str]] = frozenset({SPEC_EXTENSION})
ALLOWED_MODULE_EXTENSIONS: Final[frozenset[str]] = frozenset({".py"})

# Identifier resolution
IDENTIFIER_ESCAPE: Final[str] = "_"
MAX_SUFFIX: Final[int] = 10_000

# Logging
LOG_LEVEL_ENV: Final[str] = "GHERKIN_SYNC_LOG_LEVEL"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
