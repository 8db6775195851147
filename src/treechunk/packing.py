"""
Greedy packing of syntax-tree siblings into byte ranges, plus the passes
that repair and tidy those ranges:

  chunk_node      recursive greedy packing under max_chars
  split_oversized optional hard split of atoms still over max_chars
  coalesce        close gaps so ranges tile the document
  merge_small     fold single-line chunks into their successor

All offsets are byte offsets into the document; nothing here decodes text.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .LineMapper import LineMapper
from .language_registry import SyntaxNode

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

# Subtrees deeper than this are emitted whole instead of recursing further.
MAX_TREE_DEPTH = 200
# Cut nudge window for split_oversized, as a fraction of max_chars.
NEWLINE_WINDOW_RATIO = 0.25


def chunk_node(node: SyntaxNode, max_chars: int, _depth: int = 0) -> List[Span]:
    """
    Pack the children of `node` into ranges no longer than `max_chars`.

    Logic:
      - A child longer than max_chars flushes the current span and is chunked
        recursively on its own.
      - A child that would push the span past max_chars flushes it and starts
        a new span.
      - Otherwise the span grows to min(start)..max(end).
      - A childless node, a node past MAX_TREE_DEPTH, or a node with
        inconsistent child ranges is returned whole as one range.
    """
    children = list(node.children)
    if not children:
        return [(node.start_byte, node.end_byte)]
    if _depth >= MAX_TREE_DEPTH:
        logger.debug("Depth cap %d reached at %s; emitting subtree whole", MAX_TREE_DEPTH, node.type)
        return [(node.start_byte, node.end_byte)]
    problem = _malformed_reason(node, children)
    if problem:
        logger.warning(
            "Malformed %s node at %d:%d (%s); treating it as an atomic leaf",
            node.type, node.start_byte, node.end_byte, problem,
        )
        return [(node.start_byte, node.end_byte)]

    ranges: List[Span] = []
    cur: Optional[Span] = None

    for child in children:
        start, end = child.start_byte, child.end_byte
        if end - start > max_chars:
            if cur is not None:
                ranges.append(cur)
                cur = None
            ranges.extend(chunk_node(child, max_chars, _depth + 1))
            continue

        if cur is None:
            cur = (start, end)
            continue

        merged = (min(cur[0], start), max(cur[1], end))
        if merged[1] - merged[0] > max_chars:
            ranges.append(cur)
            cur = (start, end)
        else:
            cur = merged

    if cur is not None:
        ranges.append(cur)
    return [(s, e) for s, e in ranges if e > s]


def _malformed_reason(node: SyntaxNode, children: Sequence[SyntaxNode]) -> Optional[str]:
    """Describe the first range inconsistency among `children`, or None if they are sane."""
    if node.end_byte < node.start_byte:
        return "inverted node range"
    prev_end = node.start_byte
    for i, child in enumerate(children):
        if child.end_byte < child.start_byte:
            return f"child {i} has an inverted range"
        if child.start_byte < node.start_byte or child.end_byte > node.end_byte:
            return f"child {i} lies outside its parent"
        if child.start_byte < prev_end:
            return f"child {i} overlaps or precedes its left sibling"
        prev_end = child.end_byte
    return None


def coalesce(ranges: Sequence[Span], start: int, end: int) -> List[Span]:
    """
    Make ranges contiguous over [start, end): every range is extended to the
    start of its successor, the first begins at `start` and the last ends at
    `end`. Bytes a provider left out of the child list (trivia) are thereby
    kept with the preceding chunk.
    """
    if end <= start:
        return []
    if not ranges:
        return [(start, end)]

    cuts = [s for s, _ in ranges[1:]] + [end]
    out: List[Span] = []
    prev = start
    for cut in cuts:
        cut = min(max(cut, prev), end)
        if cut > prev:
            out.append((prev, cut))
            prev = cut
    return out


def split_oversized(contents: bytes, ranges: Sequence[Span], max_chars: int,
                    mapper: Optional[LineMapper] = None) -> List[Span]:
    """
    Hard-split ranges longer than max_chars. Each cut is nudged to the
    newline nearest the size boundary within a window; without a newline the
    cut falls on the nearest preceding UTF-8 character boundary.
    """
    mapper = mapper or LineMapper(contents)
    window = max(1, int(max_chars * NEWLINE_WINDOW_RATIO))
    out: List[Span] = []
    for s, e in ranges:
        if e - s <= max_chars:
            out.append((s, e))
            continue
        cur = s
        while e - cur > max_chars:
            target = cur + max_chars
            split = mapper.find_nearest_newline(target, max(cur + 1, target - window), target)
            if split is None or split <= cur:
                split = _char_boundary(contents, target, cur)
            out.append((cur, split))
            cur = split
        out.append((cur, e))
    return out


def _char_boundary(contents: bytes, index: int, floor: int) -> int:
    """Step back from `index` past UTF-8 continuation bytes, never below floor + 1."""
    i = index
    while i > floor + 1 and (contents[i] & 0xC0) == 0x80:
        i -= 1
    return i


def merge_small(contents: bytes, ranges: Sequence[Span]) -> List[Span]:
    """
    Merge chunks whose content sits on a single line into the following
    chunk. A trailing single-line chunk has no successor and joins its
    predecessor instead. Zero-length ranges are dropped; a lone chunk is
    always kept.
    """
    out: List[Span] = []
    pending: Optional[Span] = None
    for s, e in ranges:
        if e <= s:
            continue
        if pending is not None:
            s = pending[0]
            pending = None
        if is_single_line(contents, s, e):
            pending = (s, e)
            continue
        out.append((s, e))

    if pending is not None:
        if out:
            out[-1] = (out[-1][0], pending[1])
        else:
            out.append(pending)
    return out


def is_single_line(contents: bytes, start: int, end: int) -> bool:
    """True when the range holds at most one line of non-blank content."""
    return b"\n" not in contents[start:end].strip()


__all__ = [
    "Span",
    "MAX_TREE_DEPTH",
    "chunk_node",
    "coalesce",
    "split_oversized",
    "merge_small",
    "is_single_line",
]
