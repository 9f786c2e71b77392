"""MCP handler for generate_stubs (delegates to StubGenerationService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...core.generators import ClassShape
from ...services import ServiceResult, StubGenerationService

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="generate_stubs",
    description=(
        "Generate Python test-definition stubs from .feature files. "
        "Each scenario becomes a tagged method (method_per_scenario) or "
        "its own class module (class_per_scenario); outline rows become "
        "@example decorators."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "specs_dir": {
                "type": "string",
                "description": "Directory of .feature files (or a single file)"
            },
            "output_dir": {
                "type": "string",
                "description": "Directory where the stub modules are written"
            },
            "namespace_hint": {
                "type": "string",
                "description": "Package the stubs will live in, used for imports (optional)"
            },
            "shape": {
                "type": "string",
                "enum": [shape.value for shape in ClassShape],
                "description": "Stub layout (default: method_per_scenario)"
            }
        },
        "required": ["specs_dir", "output_dir"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """Write stub modules and return the batch summary."""
    service = StubGenerationService()

    result = await service.generate(
        specs_dir=arguments.get("specs_dir"),
        output_dir=arguments.get("output_dir"),
        namespace_hint=arguments.get("namespace_hint", ""),
        shape=arguments.get("shape", ClassShape.METHOD_PER_SCENARIO.value)
    )

    if not result.success:
        return _error_response(result)

    report = result.data
    return [TextContent(
        type="text",
        text=f"{report.summary()}\nExit code: {report.exit_code}"
    )]


# =============================================================================
# Helpers
# =============================================================================

def _error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]
