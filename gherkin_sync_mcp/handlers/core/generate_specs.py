"""MCP handler for generate_specs (delegates to SpecGenerationService)."""

from __future__ import annotations

from mcp.types import TextContent, Tool

from ...services import ServiceResult, SpecGenerationService

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="generate_specs",
    description=(
        "Generate Gherkin-style .feature files from tagged Python test "
        "definitions. Writes one file per feature; features that fail "
        "are reported without stopping the others."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "module_path": {
                "type": "string",
                "description": "Python file, package directory or dotted module name"
            },
            "output_dir": {
                "type": "string",
                "description": "Directory where the .feature files are written"
            }
        },
        "required": ["module_path", "output_dir"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """Write specification files and return the batch summary."""
    service = SpecGenerationService()

    result = await service.generate(
        module_path=arguments.get("module_path"),
        output_dir=arguments.get("output_dir")
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
