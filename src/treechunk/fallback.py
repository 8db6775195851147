"""Line-window chunking for documents no grammar could parse."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .LineMapper import LineMapper
from .config import DEFAULT_FALLBACK_OVERLAP_LINES, DEFAULT_FALLBACK_WINDOW_LINES

logger = logging.getLogger(__name__)


def naive_chunk(
        contents: bytes,
        window_lines: int = DEFAULT_FALLBACK_WINDOW_LINES,
        overlap_lines: int = DEFAULT_FALLBACK_OVERLAP_LINES,
        mapper: Optional[LineMapper] = None,
) -> List[Tuple[int, int]]:
    """
    Fixed-size sliding windows over lines:
      - take lines [start, min(start + window_lines, total)) as one chunk,
      - advance start by (window_lines - overlap_lines),
      - stop after the window that reaches the last line.

    Consecutive windows share exactly `overlap_lines` lines, so chunk texts
    overlap and do not concatenate back to the document.

    Returns:
        Byte ranges aligned to line starts; empty for empty contents.
    """
    if window_lines <= 0:
        raise ValueError("window_lines must be positive")
    if not 0 <= overlap_lines < window_lines:
        raise ValueError("overlap_lines must be in [0, window_lines)")

    mapper = mapper or LineMapper(contents)
    total = mapper.line_count
    step = window_lines - overlap_lines

    ranges: List[Tuple[int, int]] = []
    start = 0
    while start < total:
        end = min(start + window_lines, total)
        ranges.append((mapper.line_start(start), mapper.line_start(end)))
        if end >= total:
            break
        start += step

    logger.debug("Fallback produced %d windows over %d lines", len(ranges), total)
    return ranges

