"""Resolver - turn free text into identifiers and non-colliding output paths."""

from __future__ import annotations

import keyword
import re
import threading
from enum import Enum
from pathlib import Path

from ..constants import IDENTIFIER_ESCAPE, MAX_SUFFIX
from .errors import CollisionUnresolvable

_DISALLOWED = re.compile(r"[^\w\s]")
_WORD_SPLIT = re.compile(r"[\s_]+")

PATH_SCOPE = "paths"


class IdentifierStyle(str, Enum):
    """How sanitized words are joined."""
    PASCAL = "pascal"   # "Add two numbers" -> "AddTwoNumbers"
    SNAKE = "snake"     # "Add two numbers" -> "add_two_numbers"


def to_identifier(text: str, style: IdentifierStyle = IdentifierStyle.PASCAL) -> str:
    """
    Sanitize free text into a Python identifier.

    Returns an empty string when nothing usable is left, callers decide
    whether that is an error.
    """
    cleaned = _DISALLOWED.sub("", text)
    words = [word for word in _WORD_SPLIT.split(cleaned) if word]

    if not words:
        return ""

    if style == IdentifierStyle.PASCAL:
        identifier = "".join(word[0].upper() + word[1:] for word in words)
    else:
        identifier = "_".join(word.lower() for word in words)

    if identifier[0].isdigit():
        identifier = IDENTIFIER_ESCAPE + identifier
    if keyword.iskeyword(identifier):
        identifier += "_"

    return identifier


class Resolver:
    """
    Hand out unique identifiers and paths for one run.

    Names are tracked per scope; a repeated name gets ``_2``, ``_3``, ...
    in the order it is first claimed. Thread-safe: this is the only state
    shared between concurrently processed features.
    """

    def __init__(self, max_suffix: int = MAX_SUFFIX):
        self._max_suffix = max_suffix
        self._used: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def identifier(self, text: str, style: IdentifierStyle = IdentifierStyle.PASCAL) -> str:
        """Sanitize without claiming."""
        return to_identifier(text, style)

    def reserve(self, scope: str, *names: str) -> None:
        """Mark names as taken without resolving them (e.g. ``self``)."""
        with self._lock:
            self._used.setdefault(scope, set()).update(names)

    def claim(self, name: str, scope: str = "identifiers") -> str:
        """Claim ``name`` in ``scope``, suffixing it if already taken."""
        with self._lock:
            return self._claim(name, scope, key=lambda candidate: candidate)

    def claim_path(self, directory: Path, stem: str, extension: str) -> Path:
        """
        Claim an output path under ``directory``.

        Paths are compared case-insensitively so two features never map
        to the same file on case-insensitive filesystems.
        """
        directory = Path(directory)

        with self._lock:
            def key(candidate: str) -> str:
                return str(directory / f"{candidate}{extension}").casefold()

            chosen = self._claim(stem, PATH_SCOPE, key=key)

        return directory / f"{chosen}{extension}"

    def _claim(self, name: str, scope: str, key) -> str:
        used = self._used.setdefault(scope, set())

        if key(name) not in used:
            used.add(key(name))
            return name

        for suffix in range(2, self._max_suffix + 1):
            candidate = f"{name}_{suffix}"
            if key(candidate) not in used:
                used.add(key(candidate))
                return candidate

        raise CollisionUnresolvable(name, scope)
