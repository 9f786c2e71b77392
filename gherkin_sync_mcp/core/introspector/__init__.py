"""Introspector - read tagged test definitions into features."""

from __future__ import annotations

from ..model import Feature, IntrospectionResult
from .loader import LoadedModule, ModuleReference, load_modules, resolve_sources
from .reader import read_features


def introspect(reference: ModuleReference) -> IntrospectionResult:
    """
    Find every tagged feature in a module (or package).

    Raises:
        ModuleLoadError: If the reference cannot be loaded at all
    """
    return read_features(load_modules(reference))


def introspect_module(reference: ModuleReference) -> list[Feature]:
    """Like introspect(), but raise the first per-feature error instead of collecting it."""
    result = introspect(reference)
    if result.errors:
        raise result.errors[0]
    return result.features


__all__ = [
    "introspect",
    "introspect_module",
    "load_modules",
    "resolve_sources",
    "read_features",
    "LoadedModule",
    "ModuleReference",
]
