"""
Spec Loader Service - Handles loading specification text from various sources.

Centralizes input validation for specification files so every service
rejects the same inputs the same way:
- extension and existence checks
- size limits
- direct text input for callers that have no file
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..constants import ALLOWED_SPEC_EXTENSIONS, MAX_SPEC_SIZE
from .base import ErrorCode, ServiceResult


@dataclass(frozen=True)
class LoadedSpec:
    """
    Result of successfully loading specification text.

    Attributes:
        content: The specification text
        source_path: Original file path (None if loaded from string)
    """
    content: str
    source_path: str | None = None


class SpecLoader:
    """
    Loads specification text from files or direct input.

    This class is stateless - all configuration is passed to __init__
    and all state is passed to methods.
    """

    def __init__(
        self,
        max_size: int = MAX_SPEC_SIZE,
        allowed_extensions: frozenset[str] = ALLOWED_SPEC_EXTENSIONS
    ):
        """
        Initialize the spec loader.

        Args:
            max_size: Maximum allowed text size in characters
            allowed_extensions: Set of allowed file extensions
        """
        self._max_size = max_size
        self._allowed_extensions = allowed_extensions

    @property
    def max_size(self) -> int:
        return self._max_size

    def load(
        self,
        text: str | None = None,
        file_path: str | None = None
    ) -> ServiceResult[LoadedSpec]:
        """
        Load specification text from a file path or direct input.

        A file path wins over direct text when both are given.

        Args:
            text: Direct specification text (optional)
            file_path: Path to a specification file (optional)

        Returns:
            ServiceResult with LoadedSpec on success, error on failure
        """
        if file_path:
            return self._load_from_file(file_path)
        elif text is not None:
            return self._load_from_string(text)
        else:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                "Please provide either 'file_path' or 'text'"
            )

    def check_directory(self, directory: str | None) -> ServiceResult[Path]:
        """
        Validate a directory of specification files.

        A single specification file is accepted as well.
        """
        if not directory:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                "Please provide 'specs_dir'"
            )

        path = Path(directory)
        if not path.exists():
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                f"Directory not found: {directory}"
            )

        if path.is_file() and path.suffix not in self._allowed_extensions:
            return ServiceResult.fail(
                ErrorCode.INVALID_EXTENSION,
                f"Only specification files allowed (got {path.suffix})",
                details={
                    "extension": path.suffix,
                    "allowed": sorted(self._allowed_extensions)
                }
            )

        return ServiceResult.ok(path)

    def _load_from_file(self, file_path: str) -> ServiceResult[LoadedSpec]:
        path = Path(file_path)

        if path.suffix not in self._allowed_extensions:
            return ServiceResult.fail(
                ErrorCode.INVALID_EXTENSION,
                f"Only specification files allowed (got {path.suffix})",
                details={
                    "extension": path.suffix,
                    "allowed": sorted(self._allowed_extensions)
                }
            )

        if not path.exists():
            return ServiceResult.fail(
                ErrorCode.FILE_NOT_FOUND,
                f"File not found: {file_path}"
            )

        if not path.is_file():
            return ServiceResult.fail(
                ErrorCode.VALIDATION_ERROR,
                f"Path is not a file: {file_path}"
            )

        try:
            content = path.read_text(encoding="utf-8")
        except PermissionError:
            return ServiceResult.fail(
                ErrorCode.PERMISSION_DENIED,
                f"Permission denied: {file_path}"
            )
        except (OSError, UnicodeDecodeError) as e:
            return ServiceResult.fail(
                ErrorCode.INTERNAL_ERROR,
                f"Error reading file: {e}"
            )

        size_error = self._check_size(content, "File")
        if size_error:
            return size_error

        return ServiceResult.ok(LoadedSpec(content=content, source_path=file_path))

    def _load_from_string(self, text: str) -> ServiceResult[LoadedSpec]:
        size_error = self._check_size(text, "Text")
        if size_error:
            return size_error

        return ServiceResult.ok(LoadedSpec(content=text))

    def _check_size(self, content: str, label: str) -> ServiceResult[LoadedSpec] | None:
        if len(content) > self._max_size:
            return ServiceResult.fail(
                ErrorCode.FILE_TOO_LARGE,
                f"{label} too large: {len(content):,} characters (max: {self._max_size:,})",
                details={"size": len(content), "max_size": self._max_size}
            )
        return None
