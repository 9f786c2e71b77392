"""Error taxonomy shared by the introspector, parser, writer and generator."""

from __future__ import annotations


class GherkinSyncError(Exception):
    """Base class for all synchronization errors."""

    def location(self) -> str | None:
        """Human-readable location of the offending construct, if known."""
        return None


class ParseError(GherkinSyncError):
    """Malformed specification text."""

    def __init__(self, line: int, expected: str, actual: str, source: str | None = None):
        self.line = line
        self.expected = expected
        self.actual = actual
        self.source = source
        super().__init__(f"line {line}: expected {expected}, got {actual!r}")

    def location(self) -> str | None:
        if self.source:
            return f"{self.source}:{self.line}"
        return f"line {self.line}"


class TemplateMismatch(GherkinSyncError):
    """A step's placeholders disagree with the values available to fill them."""

    def __init__(self, feature: str, scenario: str, step: str, detail: str):
        self.feature = feature
        self.scenario = scenario
        self.step = step
        self.detail = detail
        super().__init__(f"{feature} / {scenario} / {step!r}: {detail}")

    def location(self) -> str | None:
        return f"{self.feature} / {self.scenario}"


class GenerationError(GherkinSyncError):
    """Stub generation cannot proceed for a feature or scenario."""

    def __init__(self, feature: str, scenario: str | None, detail: str):
        self.feature = feature
        self.scenario = scenario
        self.detail = detail
        where = feature if scenario is None else f"{feature} / {scenario}"
        super().__init__(f"{where}: {detail}")

    def location(self) -> str | None:
        if self.scenario is None:
            return self.feature
        return f"{self.feature} / {self.scenario}"


class IntrospectionError(GherkinSyncError):
    """Tagged test definitions that cannot be turned into a valid feature."""

    def __init__(self, feature: str, scenario: str | None, detail: str, source: str | None = None):
        self.feature = feature
        self.scenario = scenario
        self.detail = detail
        self.source = source
        where = feature if scenario is None else f"{feature} / {scenario}"
        super().__init__(f"{where}: {detail}")

    def location(self) -> str | None:
        return self.source


class ModuleLoadError(GherkinSyncError):
    """The module reference cannot be resolved or read."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot load {reference}: {reason}")

    def location(self) -> str | None:
        return self.reference


class CollisionUnresolvable(GherkinSyncError):
    """No free numeric suffix could be found for a name."""

    def __init__(self, name: str, scope: str):
        self.name = name
        self.scope = scope
        super().__init__(f"Cannot find a free name for {name!r} in {scope}")
