# Shared test fixtures utilities.
# Provides a plain in-memory double of the syntax-node interface, providers
# built on it, and deterministic text generators so test modules can share
# data without duplication.

from __future__ import annotations

import random
import time
from typing import List, Optional, Sequence

from treechunk.language_registry import ParseError, ParserTimeout


class FakeNode:
    """Minimal object exposing the attributes the chunker reads from a tree node."""

    def __init__(self, start_byte: int, end_byte: int, children: Sequence["FakeNode"] = (),
                 type: str = "node") -> None:
        self.start_byte = start_byte
        self.end_byte = end_byte
        self.children = list(children)
        self.type = type

    @property
    def is_error(self) -> bool:
        return self.type == "ERROR"

    def __repr__(self) -> str:
        return f"FakeNode({self.type}, {self.start_byte}, {self.end_byte}, {len(self.children)} children)"


def siblings(lengths: Sequence[int], start: int = 0, gap: int = 0) -> List[FakeNode]:
    """Leaf nodes with the given byte lengths laid out left to right, `gap` bytes apart."""
    out = []
    cursor = start
    for n in lengths:
        out.append(FakeNode(cursor, cursor + n))
        cursor += n + gap
    return out


def parent_of(children: Sequence[FakeNode], type: str = "module") -> FakeNode:
    start = children[0].start_byte if children else 0
    end = children[-1].end_byte if children else 0
    return FakeNode(start, end, children, type=type)


def line_nodes(contents: bytes, type: str = "module") -> FakeNode:
    """Root whose children are the non-empty lines of `contents` (newline excluded)."""
    children = []
    offset = 0
    for line in contents.split(b"\n"):
        if line:
            children.append(FakeNode(offset, offset + len(line), type="line"))
        offset += len(line) + 1
    return FakeNode(0, len(contents), children, type=type)


class StaticProvider:
    """Returns a fixed tree (or raises) and records how often it was called."""

    def __init__(self, root: Optional[FakeNode] = None, error: Optional[Exception] = None) -> None:
        self.root = root
        self.error = error
        self.calls = 0

    def parse(self, contents: bytes, timeout_s: Optional[float] = None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.root


class LineProvider:
    """Parses any text into a root whose children are its lines."""

    def __init__(self) -> None:
        self.calls = 0

    def parse(self, contents: bytes, timeout_s: Optional[float] = None):
        self.calls += 1
        return line_nodes(contents)


class FailingProvider(StaticProvider):
    def __init__(self) -> None:
        super().__init__(error=ParseError("nope"))


class HangingProvider:
    """Never finishes on its own; gives up only when the deadline passes."""

    def __init__(self) -> None:
        self.calls = 0
        self.timeouts: List[Optional[float]] = []

    def parse(self, contents: bytes, timeout_s: Optional[float] = None):
        self.calls += 1
        self.timeouts.append(timeout_s)
        if not timeout_s:
            raise AssertionError("parse without a deadline would never return")
        time.sleep(timeout_s)
        raise ParserTimeout(f"gave up after {timeout_s}s")


def rand_lines(n_lines: int, width: int = 30, seed: int = 42) -> bytes:
    """Deterministic ASCII lines of varying length, each newline terminated."""
    rnd = random.Random(seed)
    alphabet = b"abcdefghijklmnopqrstuvwxyz 0123456789_()=+"
    out = bytearray()
    for _ in range(n_lines):
        k = rnd.randint(1, width)
        out += bytes(rnd.choice(alphabet) for _ in range(k))
        out += b"\n"
    return bytes(out)


def numbered_lines(n_lines: int) -> bytes:
    return b"".join(b"line %d\n" % i for i in range(n_lines))


__all__ = [
    "FakeNode",
    "siblings",
    "parent_of",
    "line_nodes",
    "StaticProvider",
    "LineProvider",
    "FailingProvider",
    "HangingProvider",
    "rand_lines",
    "numbered_lines",
]
