"""
Introspection Service - Business logic for reading tagged test definitions.

Wraps the introspector: a module that cannot be loaded is a failed
ServiceResult; per-feature problems stay inside the IntrospectionResult.
"""

from __future__ import annotations

from ..core.errors import ModuleLoadError
from ..core.introspector import ModuleReference, introspect
from ..core.model import IntrospectionResult
from .base import ErrorCode, ServiceResult


class IntrospectionService:
    """Find tagged features in a module, file or package."""

    def inspect(self, module_path: ModuleReference | None) -> ServiceResult[IntrospectionResult]:
        """
        Introspect a module reference.

        Args:
            module_path: File path, package directory, dotted module name
                or imported module

        Returns:
            ServiceResult containing the IntrospectionResult
        """
        if not module_path:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                "Please provide 'module_path'"
            )

        try:
            result = introspect(module_path)
        except ModuleLoadError as e:
            return ServiceResult.from_error(e)

        return ServiceResult.ok(result)
