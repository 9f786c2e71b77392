"""
Parsing Service - Business logic for reading specification text.

Wraps the parser with input validation (SpecLoader) and maps ParseError
to a structured ServiceResult. Returns the core Feature model.
"""

from __future__ import annotations

from ..core.errors import ParseError
from ..core.model import Feature
from ..core.parser import parse_spec
from .base import ServiceResult
from .spec_loader import SpecLoader


class ParsingService:
    """Parse specification text into features."""

    def __init__(self, spec_loader: SpecLoader | None = None):
        """
        Initialize the parsing service.

        Args:
            spec_loader: SpecLoader instance (creates default if None)
        """
        self._loader = spec_loader or SpecLoader()

    def parse(
        self,
        text: str | None = None,
        file_path: str | None = None
    ) -> ServiceResult[list[Feature]]:
        """
        Parse specification text.

        Args:
            text: Direct specification text
            file_path: Path to a .feature file

        Returns:
            ServiceResult containing the parsed features

        Example:
            service = ParsingService()
            result = service.parse(text="Feature: Calculator\\n...")
            if result.success:
                print([feature.name for feature in result.data])
        """
        load_result = self._loader.load(text=text, file_path=file_path)

        if not load_result.success:
            return ServiceResult.fail(
                load_result.error.code,
                load_result.error.message,
                load_result.error.details
            )

        loaded = load_result.data

        try:
            features = parse_spec(loaded.content, source=loaded.source_path)
        except ParseError as e:
            return ServiceResult.from_error(e)

        return ServiceResult.ok(features)
