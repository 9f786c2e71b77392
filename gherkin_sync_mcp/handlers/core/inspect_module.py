"""MCP handler for the inspect_module tool (delegates to IntrospectionService)."""

from __future__ import annotations

import json

from mcp.types import TextContent, Tool

from ...services import IntrospectionService, ServiceResult

# =============================================================================
# Tool Definition
# =============================================================================

TOOL_DEFINITION = Tool(
    name="inspect_module",
    description=(
        "Inspect tagged test definitions without writing anything. "
        "Reads @feature classes, @scenario methods or classes, step calls "
        "and @example rows statically, and reports per-feature problems."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "module_path": {
                "type": "string",
                "description": "Python file, package directory or dotted module name"
            }
        },
        "required": ["module_path"]
    }
)


# =============================================================================
# Handler
# =============================================================================

async def handle(arguments: dict) -> list[TextContent]:
    """Introspect 'module_path' and return features and errors as JSON."""
    service = IntrospectionService()

    result = service.inspect(arguments.get("module_path"))

    if not result.success:
        return _error_response(result)

    introspection = result.data
    response = {
        "feature_count": len(introspection.features),
        "scenario_count": sum(len(feature.scenarios) for feature in introspection.features),
        **introspection.to_dict()
    }

    return [TextContent(type="text", text=json.dumps(response, indent=2, default=str))]


# =============================================================================
# Helpers
# =============================================================================

def _error_response(result: ServiceResult) -> list[TextContent]:
    """Create error response from failed ServiceResult."""
    return [TextContent(type="text", text=f"Error: {result.error.message}")]
