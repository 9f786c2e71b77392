"""Services package.

Exposes stateless service classes and shared result types used by the MCP handlers.
"""


# Base utilities
from .base import (
    ErrorCode,
    ServiceError,
    ServiceResult,
)

# Services
from .generation import SpecGenerationService, StubGenerationService
from .introspection import IntrospectionService
from .parsing import ParsingService

# Spec loading
from .spec_loader import (
    LoadedSpec,
    SpecLoader,
)

__all__ = [
    # Base
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    # Spec loading
    "SpecLoader",
    "LoadedSpec",
    # Services
    "ParsingService",
    "IntrospectionService",
    "SpecGenerationService",
    "StubGenerationService",
]


# =============================================================================
# Convenience factory functions
# =============================================================================

def create_parsing_service(spec_loader: SpecLoader | None = None) -> ParsingService:
    """Factory for ParsingService (optionally inject a SpecLoader)."""

    return ParsingService(spec_loader=spec_loader)


def create_introspection_service() -> IntrospectionService:
    """Factory for IntrospectionService."""

    return IntrospectionService()


def create_spec_generation_service() -> SpecGenerationService:
    """Factory for SpecGenerationService."""

    return SpecGenerationService()


def create_stub_generation_service(spec_loader: SpecLoader | None = None) -> StubGenerationService:
    """Factory for StubGenerationService (optionally inject a SpecLoader)."""

    return StubGenerationService(spec_loader=spec_loader)
