"""Ordered, read-only table of syntax tree providers.

Priority order and extension hints come from ``languages.json`` beside this
module (or the file named by ``TREECHUNK_LANGUAGES_PATH``). Broad markup
grammars are kept at the end of the table because they accept almost any
input and would otherwise pre-empt a more specific grammar.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional, Protocol, Sequence, Tuple

from tree_sitter_language_pack import get_parser

logger = logging.getLogger(__name__)

LANGUAGES_ENV_VAR = "TREECHUNK_LANGUAGES_PATH"
DEFAULT_LANGUAGES_PATH = Path(__file__).with_name("languages.json")

ERROR_AT_ROOT = "root"
ERROR_AT_FIRST_CHILD = "first_child"
ERROR_AT_BOTH = "both"
ERROR_POSITIONS = (ERROR_AT_ROOT, ERROR_AT_FIRST_CHILD, ERROR_AT_BOTH)


class ParseError(RuntimeError):
    """A provider could not produce a tree for the given contents."""


class ParserTimeout(ParseError):
    """A provider gave up because the parse exceeded its deadline."""


class SyntaxNode(Protocol):
    type: str
    start_byte: int
    end_byte: int

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...


class SyntaxTreeProvider(Protocol):
    def parse(self, contents: bytes, timeout_s: Optional[float] = None) -> SyntaxNode:
        """Parse `contents`; raise ParserTimeout if `timeout_s` (when set) elapses first."""
        ...


class TreeSitterProvider:
    """Provider backed by a grammar from tree_sitter_language_pack.

    The deadline is enforced by tree-sitter itself (`Parser.timeout_micros`),
    so a runaway parse is cancelled inside the native parser and the caller
    regains control once the budget is spent.
    """

    def __init__(self, grammar: str) -> None:
        self.grammar = grammar

    def parse(self, contents: bytes, timeout_s: Optional[float] = None) -> SyntaxNode:
        # Parsers are not shared between threads; one per attempt.
        try:
            parser = get_parser(self.grammar)
        except Exception as e:
            raise ParseError(f"grammar {self.grammar!r} unavailable: {e}") from e
        if timeout_s:
            parser.timeout_micros = max(1, int(timeout_s * 1_000_000))
        try:
            tree = parser.parse(contents)
        except ValueError as e:
            # With a language assigned, a failed parse means the deadline cancelled it.
            if timeout_s:
                raise ParserTimeout(f"grammar {self.grammar!r} exceeded {timeout_s}s") from e
            raise ParseError(f"grammar {self.grammar!r} failed to parse: {e}") from e
        except Exception as e:
            raise ParseError(f"grammar {self.grammar!r} failed to parse: {e}") from e
        if tree is None:
            if timeout_s:
                raise ParserTimeout(f"grammar {self.grammar!r} exceeded {timeout_s}s")
            raise ParseError(f"grammar {self.grammar!r} returned no tree")
        if tree.root_node is None:
            raise ParseError(f"grammar {self.grammar!r} returned no tree")
        return tree.root_node

    def __repr__(self) -> str:
        return f"TreeSitterProvider({self.grammar!r})"


@dataclass(frozen=True)
class LanguageEntry:
    name: str
    provider: SyntaxTreeProvider
    extensions: frozenset[str] = frozenset()
    error_position: str = ERROR_AT_BOTH


@dataclass(frozen=True)
class LanguageRegistry:
    entries: Tuple[LanguageEntry, ...]

    def __post_init__(self) -> None:
        seen = set()
        for entry in self.entries:
            if entry.name in seen:
                raise ValueError(f"Duplicate language entry: {entry.name}")
            if entry.error_position not in ERROR_POSITIONS:
                raise ValueError(
                    f"Language {entry.name}: error_position must be one of {ERROR_POSITIONS}, "
                    f"got {entry.error_position!r}"
                )
            seen.add(entry.name)

    def __iter__(self) -> Iterator[LanguageEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def names(self) -> Tuple[str, ...]:
        return tuple(e.name for e in self.entries)

    def entry_for_extension(self, extension: Optional[str]) -> Optional[LanguageEntry]:
        """First entry (in priority order) claiming the extension, if any."""
        key = normalize_extension(extension)
        if not key:
            return None
        for entry in self.entries:
            if key in entry.extensions:
                return entry
        return None

    def prioritized(self, extension: Optional[str]) -> Tuple[LanguageEntry, ...]:
        """Entries in priority order with the extension's entry moved to the front."""
        hinted = self.entry_for_extension(extension)
        if hinted is None:
            return self.entries
        return (hinted,) + tuple(e for e in self.entries if e is not hinted)


def normalize_extension(extension: Optional[str]) -> str:
    return (extension or "").strip().lstrip(".").lower()


def load_registry(path: Path | str | None = None) -> LanguageRegistry:
    """Load the ordered language table from JSON and build tree-sitter providers."""
    if path is None:
        path = (os.environ.get(LANGUAGES_ENV_VAR) or "").strip() or DEFAULT_LANGUAGES_PATH
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    entries = []
    for raw in data.get("languages", []):
        name = str(raw["name"])
        entries.append(LanguageEntry(
            name=name,
            provider=TreeSitterProvider(str(raw.get("grammar", name))),
            extensions=frozenset(normalize_extension(e) for e in raw.get("extensions", [])),
            error_position=str(raw.get("error_position", ERROR_AT_BOTH)),
        ))
    logger.debug("Loaded %d languages from %s", len(entries), cfg_path)
    return LanguageRegistry(tuple(entries))


@lru_cache(maxsize=None)
def default_registry() -> LanguageRegistry:
    """Process-wide registry, built on first use and never mutated."""
    return load_registry()


__all__ = [
    "ParseError",
    "ParserTimeout",
    "SyntaxNode",
    "SyntaxTreeProvider",
    "TreeSitterProvider",
    "LanguageEntry",
    "LanguageRegistry",
    "normalize_extension",
    "load_registry",
    "default_registry",
    "ERROR_AT_ROOT",
    "ERROR_AT_FIRST_CHILD",
    "ERROR_AT_BOTH",
]
