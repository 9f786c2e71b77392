"""Registry for core MCP tool definitions and handlers."""

# Tool definitions and handlers
from .generate_specs import (
    TOOL_DEFINITION as GENERATE_SPECS_TOOL,
    handle as handle_generate_specs,
)

from .generate_stubs import (
    TOOL_DEFINITION as GENERATE_STUBS_TOOL,
    handle as handle_generate_stubs,
)

from .parse_spec import (
    TOOL_DEFINITION as PARSE_SPEC_TOOL,
    handle as handle_parse_spec,
)

from .inspect_module import (
    TOOL_DEFINITION as INSPECT_MODULE_TOOL,
    handle as handle_inspect_module,
)


# All Core tool definitions
TOOLS = [
    GENERATE_SPECS_TOOL,
    GENERATE_STUBS_TOOL,
    PARSE_SPEC_TOOL,
    INSPECT_MODULE_TOOL,
]

# Tool name to handler mapping
HANDLERS = {
    "generate_specs": handle_generate_specs,
    "generate_stubs": handle_generate_stubs,
    "parse_spec": handle_parse_spec,
    "inspect_module": handle_inspect_module,
}


__all__ = [
    # Tool definitions
    "TOOLS",
    "GENERATE_SPECS_TOOL",
    "GENERATE_STUBS_TOOL",
    "PARSE_SPEC_TOOL",
    "INSPECT_MODULE_TOOL",
    # Handlers
    "HANDLERS",
    "handle_generate_specs",
    "handle_generate_stubs",
    "handle_parse_spec",
    "handle_inspect_module",
]
