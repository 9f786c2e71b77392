"""
Generation Services - Business logic for both synchronization directions.

Orchestrates the batch pipeline:
1. Validate inputs
2. Run the pipeline (introspect -> write specs, or parse -> write stubs)
3. Wrap the BatchReport (or a fatal error) in a ServiceResult

A run with failed units is still a successful ServiceResult: the report
carries the per-unit errors and the exit code.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.errors import ModuleLoadError
from ..core.generators import ClassShape
from ..core.introspector import ModuleReference
from ..core.pipeline import generate_specs_from_module, generate_stubs_from_specs
from ..core.report import BatchReport
from ..core.resolver import Resolver
from .base import ErrorCode, ServiceResult
from .spec_loader import SpecLoader

logger = logging.getLogger(__name__)


class SpecGenerationService:
    """Write specification files from tagged test definitions."""

    def __init__(self, resolver_factory=Resolver):
        """
        Initialize the service.

        Args:
            resolver_factory: Builds a fresh Resolver for each run
        """
        self._resolver_factory = resolver_factory

    async def generate(
        self,
        module_path: ModuleReference | None,
        output_dir: str | None
    ) -> ServiceResult[BatchReport]:
        """
        Generate specification files for every feature in a module.

        Args:
            module_path: File path, package directory, dotted name or module
            output_dir: Directory for the .feature files

        Returns:
            ServiceResult containing the BatchReport; fails only when the
            module cannot be loaded or inputs are missing

        Example:
            service = SpecGenerationService()
            result = await service.generate("tests/steps.py", "specs")
            if result.success:
                print(result.data.summary())
        """
        missing = _missing_inputs(module_path=module_path, output_dir=output_dir)
        if missing:
            return missing

        try:
            report = await generate_specs_from_module(
                module_path,
                Path(output_dir),
                resolver=self._resolver_factory()
            )
        except ModuleLoadError as e:
            logger.error("Spec generation aborted: %s", e)
            return ServiceResult.from_error(e)

        return ServiceResult.ok(report)


class StubGenerationService:
    """Write test-definition stubs from specification files."""

    def __init__(
        self,
        spec_loader: SpecLoader | None = None,
        resolver_factory=Resolver
    ):
        """
        Initialize the service.

        Args:
            spec_loader: SpecLoader used to validate the input directory
            resolver_factory: Builds a fresh Resolver for each run
        """
        self._loader = spec_loader or SpecLoader()
        self._resolver_factory = resolver_factory

    async def generate(
        self,
        specs_dir: str | None,
        output_dir: str | None,
        namespace_hint: str = "",
        shape: str | ClassShape = ClassShape.METHOD_PER_SCENARIO
    ) -> ServiceResult[BatchReport]:
        """
        Generate stub modules for every specification file in a directory.

        Args:
            specs_dir: Directory of .feature files (or one .feature file)
            output_dir: Directory for the generated modules
            namespace_hint: Package the generated modules will live in
            shape: "method_per_scenario" or "class_per_scenario"

        Returns:
            ServiceResult containing the BatchReport
        """
        missing = _missing_inputs(specs_dir=specs_dir, output_dir=output_dir)
        if missing:
            return missing

        directory_result = self._loader.check_directory(specs_dir)
        if not directory_result.success:
            return ServiceResult.fail(
                directory_result.error.code,
                directory_result.error.message,
                directory_result.error.details
            )

        try:
            class_shape = ClassShape(shape)
        except ValueError:
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"Unknown shape {shape!r}",
                details={"allowed": [item.value for item in ClassShape]}
            )

        try:
            report = await generate_stubs_from_specs(
                directory_result.data,
                Path(output_dir),
                namespace_hint=namespace_hint or "",
                shape=class_shape,
                resolver=self._resolver_factory(),
                max_spec_size=self._loader.max_size
            )
        except ValueError as e:
            return ServiceResult.fail(ErrorCode.VALIDATION_ERROR, str(e))
        except FileNotFoundError as e:
            return ServiceResult.fail(ErrorCode.FILE_NOT_FOUND, str(e))

        return ServiceResult.ok(report)


def _missing_inputs(**inputs) -> ServiceResult[BatchReport] | None:
    """Fail on the first empty required input."""
    for name, value in inputs.items():
        if not value:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                f"Please provide '{name}'"
            )
    return None
