"""Module Loader - resolve a module reference to parsed source files."""

from __future__ import annotations

import ast
import importlib.util
import inspect
import re
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from ...constants import ALLOWED_MODULE_EXTENSIONS
from ..errors import ModuleLoadError

_DOTTED_NAME = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")

ModuleReference = str | Path | ModuleType


@dataclass(frozen=True)
class LoadedModule:
    """Source of one Python file and its syntax tree."""
    path: Path
    source: str
    tree: ast.Module


def load_modules(reference: ModuleReference) -> list[LoadedModule]:
    """
    Load every source file a reference points at.

    Accepts a ``.py`` file, a package directory, a dotted module name or an
    already imported module. Nothing is executed: files are only read and
    parsed.

    Raises:
        ModuleLoadError: If the reference cannot be resolved, read or parsed
    """
    return [_load_file(path) for path in resolve_sources(reference)]


def resolve_sources(reference: ModuleReference) -> list[Path]:
    """Map a reference to the ordered list of source files it covers."""
    if isinstance(reference, ModuleType):
        return _sources_from_module(reference)

    path = Path(reference)
    if path.exists():
        return _sources_from_path(path, str(reference))

    text = str(reference)
    if _DOTTED_NAME.match(text) and path.suffix not in ALLOWED_MODULE_EXTENSIONS:
        return _sources_from_name(text)

    raise ModuleLoadError(text, "no such file, directory or module")


def _sources_from_path(path: Path, reference: str) -> list[Path]:
    if path.is_dir():
        files = sorted(
            candidate
            for candidate in path.rglob("*")
            if candidate.suffix in ALLOWED_MODULE_EXTENSIONS
            and candidate.is_file()
            and "__pycache__" not in candidate.parts
        )
        if not files:
            raise ModuleLoadError(reference, "directory contains no Python files")
        return files

    if path.suffix not in ALLOWED_MODULE_EXTENSIONS:
        raise ModuleLoadError(
            reference,
            f"only Python files allowed (got {path.suffix or 'no extension'})"
        )
    return [path]


def _sources_from_name(name: str) -> list[Path]:
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError) as e:
        raise ModuleLoadError(name, str(e)) from e

    if spec is None:
        raise ModuleLoadError(name, "module not found")

    if spec.submodule_search_locations:
        return _sources_from_path(Path(list(spec.submodule_search_locations)[0]), name)

    if not spec.origin or not spec.has_location:
        raise ModuleLoadError(name, "module has no source file")

    return _sources_from_path(Path(spec.origin), name)


def _sources_from_module(module: ModuleType) -> list[Path]:
    package_paths = getattr(module, "__path__", None)
    if package_paths:
        return _sources_from_path(Path(list(package_paths)[0]), module.__name__)

    try:
        source_file = inspect.getsourcefile(module)
    except TypeError as e:
        raise ModuleLoadError(module.__name__, str(e)) from e

    if source_file is None:
        raise ModuleLoadError(module.__name__, "module has no source file")

    return [Path(source_file)]


def _load_file(path: Path) -> LoadedModule:
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ModuleLoadError(str(path), f"cannot read file: {e}") from e

    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as e:
        raise ModuleLoadError(str(path), f"syntax error at line {e.lineno}: {e.msg}") from e

    return LoadedModule(path=path, source=source, tree=tree)
