"""
Sync pipeline - the two batch entry operations.

Each feature is processed independently: names and paths are claimed in
input order first, then rendering and writing run concurrently in worker
threads. A failing feature is reported in the BatchReport and never stops
the others.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from ..constants import MAX_SPEC_SIZE, SPEC_EXTENSION
from .errors import CollisionUnresolvable, GenerationError, ParseError, TemplateMismatch
from .generators import ClassShape, FeatureNames, StubGenerator
from .introspector import ModuleReference, introspect
from .model import Feature
from .parser import parse_spec
from .report import BatchReport, UnitError
from .resolver import IdentifierStyle, Resolver
from .writer import write_feature

logger = logging.getLogger(__name__)

_UNNAMED_FEATURE = "feature"


# =============================================================================
# Direction A: code -> specification text
# =============================================================================

async def generate_specs_from_module(
    module_path: ModuleReference,
    output_dir: str | Path,
    resolver: Resolver | None = None
) -> BatchReport:
    """
    Write one specification file per tagged feature found in a module.

    Raises:
        ModuleLoadError: If the module cannot be loaded (nothing is written)
    """
    introspection = await asyncio.to_thread(introspect, module_path)

    output_dir = Path(output_dir)
    resolver = resolver or Resolver()
    report = BatchReport()

    for error in introspection.errors:
        report.errors.append(UnitError.from_exception(error.feature, error))
        logger.warning("Skipping feature %r: %s", error.feature, error)

    planned: list[tuple[Feature, Path]] = []
    for feature in introspection.features:
        try:
            path = resolver.claim_path(output_dir, _spec_stem(resolver, feature), SPEC_EXTENSION)
        except CollisionUnresolvable as e:
            report.errors.append(UnitError.from_exception(feature.name, e))
            continue
        planned.append((feature, path))

    outcomes = await asyncio.gather(*(
        asyncio.to_thread(_write_spec, feature, path)
        for feature, path in planned
    ))
    _collect(report, outcomes)

    logger.info(
        "Specs from %s: %d written, %d failed",
        module_path, len(report.written), len(report.errors)
    )
    return report


def _spec_stem(resolver: Resolver, feature: Feature) -> str:
    return resolver.identifier(feature.name, IdentifierStyle.SNAKE) or _UNNAMED_FEATURE


def _write_spec(feature: Feature, path: Path) -> list[Path | UnitError]:
    try:
        text = write_feature(feature)
        write_atomic(path, text)
    except (TemplateMismatch, OSError) as e:
        logger.warning("Cannot write feature %r: %s", feature.name, e)
        return [UnitError.from_exception(feature.name, e)]

    logger.info("Wrote %s", path)
    return [path]


# =============================================================================
# Direction B: specification text -> code
# =============================================================================

async def generate_stubs_from_specs(
    specs_dir: str | Path,
    output_dir: str | Path,
    namespace_hint: str = "",
    shape: ClassShape = ClassShape.METHOD_PER_SCENARIO,
    resolver: Resolver | None = None,
    max_spec_size: int = MAX_SPEC_SIZE
) -> BatchReport:
    """
    Write stub modules for every feature of every specification file.

    Files over ``max_spec_size`` characters are reported, not parsed.

    Raises:
        FileNotFoundError: If specs_dir does not exist
        ValueError: If namespace_hint is not a dotted Python name
    """
    spec_files = discover_specs(specs_dir)
    output_dir = Path(output_dir)
    generator = StubGenerator(resolver=resolver or Resolver(), shape=shape, namespace=namespace_hint)
    report = BatchReport()

    parsed = await asyncio.gather(*(
        asyncio.to_thread(_read_spec, path, max_spec_size)
        for path in spec_files
    ))

    planned: list[tuple[Feature, FeatureNames]] = []
    for path, outcome in zip(spec_files, parsed):
        if isinstance(outcome, UnitError):
            report.errors.append(outcome)
            continue

        for feature in outcome:
            try:
                planned.append((feature, generator.assign_names(feature, output_dir)))
            except (GenerationError, CollisionUnresolvable) as e:
                logger.warning("Cannot name feature %r from %s: %s", feature.name, path, e)
                report.errors.append(UnitError.from_exception(feature.name, e))

    outcomes = await asyncio.gather(*(
        asyncio.to_thread(_write_stubs, generator, feature, names)
        for feature, names in planned
    ))
    _collect(report, outcomes)

    logger.info(
        "Stubs from %s: %d written, %d failed",
        specs_dir, len(report.written), len(report.errors)
    )
    return report


def discover_specs(specs_dir: str | Path) -> list[Path]:
    """Specification files under a directory (or the file itself), sorted."""
    path = Path(specs_dir)

    if not path.exists():
        raise FileNotFoundError(f"Specification directory not found: {specs_dir}")
    if path.is_file():
        return [path]

    return sorted(candidate for candidate in path.rglob(f"*{SPEC_EXTENSION}") if candidate.is_file())


def _read_spec(path: Path, max_size: int) -> list[Feature] | UnitError:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        return UnitError(unit=str(path), kind=type(e).__name__, message=str(e), location=str(path))

    if len(text) > max_size:
        logger.warning("Skipping %s: %d characters (max: %d)", path, len(text), max_size)
        return UnitError(
            unit=str(path),
            kind="FileTooLarge",
            message=f"File too large: {len(text):,} characters (max: {max_size:,})",
            location=str(path)
        )

    try:
        return parse_spec(text, source=str(path))
    except ParseError as e:
        logger.warning("Cannot parse %s: %s", path, e)
        return UnitError.from_exception(str(path), e)


def _write_stubs(generator: StubGenerator, feature: Feature, names: FeatureNames) -> list[Path | UnitError]:
    try:
        generated = generator.generate_for_feature(feature, names)
    except CollisionUnresolvable as e:
        return [UnitError.from_exception(feature.name, e)]

    outcomes: list[Path | UnitError] = []

    for unit in generated.units:
        try:
            write_atomic(unit.path, unit.to_code())
        except OSError as e:
            logger.warning("Cannot write %s: %s", unit.path, e)
            outcomes.append(UnitError.from_exception(unit.name, e))
            continue
        logger.info("Wrote %s", unit.path)
        outcomes.append(unit.path)

    for error in generated.errors:
        logger.warning("Cannot generate stubs for %s", error)
        outcomes.append(UnitError.from_exception(error.scenario or error.feature, error))

    return outcomes


# =============================================================================
# Helpers
# =============================================================================

def _collect(report: BatchReport, outcomes: list[list[Path | UnitError]]) -> None:
    for unit_outcomes in outcomes:
        for outcome in unit_outcomes:
            if isinstance(outcome, UnitError):
                report.errors.append(outcome)
            else:
                report.written.append(outcome)


def write_atomic(path: Path, content: str) -> None:
    """Write the whole file or nothing: temp file in the same directory, then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
