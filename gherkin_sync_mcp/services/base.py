"""
Service Layer Base - Core utilities for service operations.

This module provides:
- ServiceResult: A generic result wrapper (success/failure)
- ServiceError: Structured error information
- ErrorCode: Standard error codes, one per core error type

Services return core models (features, batch reports) wrapped in
ServiceResult; only handlers turn them into MCP responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from ..core.errors import (
    CollisionUnresolvable,
    GenerationError,
    GherkinSyncError,
    IntrospectionError,
    ModuleLoadError,
    ParseError,
    TemplateMismatch,
)

# Generic type for result data
T = TypeVar("T")


class ErrorCode(str, Enum):
    """
    Standard error codes for service operations.
    
    Using string enum for easy serialization.
    """
    # Input validation
    VALIDATION_ERROR = "validation_error"
    MISSING_INPUT = "missing_input"

    # File operations
    FILE_NOT_FOUND = "file_not_found"
    PERMISSION_DENIED = "permission_denied"
    FILE_TOO_LARGE = "file_too_large"
    INVALID_EXTENSION = "invalid_extension"

    # Synchronization
    PARSE_ERROR = "parse_error"
    TEMPLATE_MISMATCH = "template_mismatch"
    GENERATION_ERROR = "generation_error"
    INTROSPECTION_ERROR = "introspection_error"
    MODULE_LOAD_ERROR = "module_load_error"
    COLLISION_UNRESOLVABLE = "collision_unresolvable"

    # General
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ServiceError:
    """
    Structured error information.
    
    Immutable (frozen) to prevent accidental modification.
    
    Attributes:
        code: Error code for programmatic handling
        message: Human-readable error message
        details: Optional additional context
    """
    code: ErrorCode
    message: str
    details: dict | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Generic result wrapper for service operations.
    
    This is a discriminated union: either success with data,
    or failure with error. Never both, never neither.
    
    Immutable (frozen) to prevent accidental modification.
    
    Usage:
        # Success
        result = ServiceResult.ok(report)
        
        # Failure  
        result = ServiceResult.fail(ErrorCode.FILE_NOT_FOUND, "File not found")
        
        # Handling
        if result.success:
            process(result.data)
        else:
            handle_error(result.error)
    """
    success: bool
    data: T | None = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.
        
        Args:
            data: The result data (must not be None for success)
            
        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data, error=None)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: dict | None = None
    ) -> ServiceResult[T]:
        """
        Create a failed result.
        
        Args:
            code: Error code for programmatic handling
            message: Human-readable error message
            details: Optional additional context
            
        Returns:
            ServiceResult with success=False and error set
        """
        return cls(
            success=False,
            data=None,
            error=ServiceError(code=code, message=message, details=details)
        )

    @classmethod
    def from_error(cls, error: GherkinSyncError) -> ServiceResult[T]:
        """
        Create a failed result from a core exception.

        The error code follows the exception type; location details are
        kept so callers can point at the offending text or declaration.
        """
        details = {"kind": type(error).__name__}
        location = error.location()
        if location:
            details["location"] = location
        if isinstance(error, ParseError):
            details.update({"line": error.line, "expected": error.expected, "actual": error.actual})

        return cls.fail(_ERROR_CODES.get(type(error), ErrorCode.INTERNAL_ERROR), str(error), details)

    def unwrap(self) -> T:
        """
        Get the data, raising if failed.
        
        Returns:
            The result data
            
        Raises:
            ValueError: If result is a failure
        """
        if not self.success or self.data is None:
            error_msg = self.error.message if self.error else "Unknown error"
            raise ValueError(f"Cannot unwrap failed result: {error_msg}")
        return self.data


_ERROR_CODES: dict[type[GherkinSyncError], ErrorCode] = {
    ParseError: ErrorCode.PARSE_ERROR,
    TemplateMismatch: ErrorCode.TEMPLATE_MISMATCH,
    GenerationError: ErrorCode.GENERATION_ERROR,
    IntrospectionError: ErrorCode.INTROSPECTION_ERROR,
    ModuleLoadError: ErrorCode.MODULE_LOAD_ERROR,
    CollisionUnresolvable: ErrorCode.COLLISION_UNRESOLVABLE,
}
