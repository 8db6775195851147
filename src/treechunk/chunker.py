# Syntax-aware chunking entry points.
# - Parse RAW BYTES; all offsets are byte offsets. Decode only after slicing.
# - Syntax path: select grammar -> pack tree siblings -> coalesce gaps -> merge single-line chunks.
#   Chunk texts concatenate back to the document exactly.
# - Fallback path (no grammar parses): overlapping line windows; no coalescing or merging.
# - Nothing here raises for bad input text; the worst case is the fallback path.

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .Chunk import STRATEGY_FALLBACK, STRATEGY_SYNTAX, Chunk
from .Document import Document
from .LineMapper import LineMapper
from .config import ChunkingConfig
from .fallback import naive_chunk
from .language_registry import LanguageRegistry, default_registry
from .language_selector import select
from .packing import chunk_node, coalesce, merge_small, split_oversized

logger = logging.getLogger(__name__)

FALLBACK_LANGUAGE = "text"


def chunk(document_text: str, file_extension: Optional[str] = None,
          config: Optional[ChunkingConfig] = None,
          registry: Optional[LanguageRegistry] = None) -> List[Chunk]:
    """Chunk an in-memory source text; the extension only reorders grammar priority."""
    return chunk_document(Document.from_text(document_text, extension=file_extension), config, registry)


def chunk_file(path: str, config: Optional[ChunkingConfig] = None,
               registry: Optional[LanguageRegistry] = None) -> List[Chunk]:
    """Read a file as bytes and chunk it, tagging chunks with `path`."""
    return chunk_document(Document.from_path(path), config, registry)


def chunk_document(document: Document, config: Optional[ChunkingConfig] = None,
                   registry: Optional[LanguageRegistry] = None) -> List[Chunk]:
    """
    Chunk one document.

    Returns:
        Chunks in document order. Empty documents yield no chunks.
    """
    config = config or ChunkingConfig()
    if not document.contents:
        return []
    registry = default_registry() if registry is None else registry
    mapper = LineMapper(document.contents)

    try:
        syntax = _chunk_syntax(document, config, registry, mapper)
    except Exception:
        logger.exception("Syntax chunking failed for %s; using line windows", document.path or "<text>")
        syntax = None

    if syntax is not None:
        language, spans = syntax
        return [_make_chunk(document, mapper, s, e, language, STRATEGY_SYNTAX) for s, e in spans]

    spans = naive_chunk(document.contents, config.fallback_window_lines, config.fallback_overlap_lines, mapper)
    logger.debug("No grammar parsed %s; %d fallback chunks", document.path or "<text>", len(spans))
    return [_make_chunk(document, mapper, s, e, FALLBACK_LANGUAGE, STRATEGY_FALLBACK) for s, e in spans]


def _chunk_syntax(document: Document, config: ChunkingConfig, registry: LanguageRegistry,
                  mapper: LineMapper) -> Optional[Tuple[str, List[Tuple[int, int]]]]:
    """Return (language, contiguous spans) or None when no grammar is accepted."""
    selection = select(document, registry, timeout_s=config.parse_timeout_s)
    if selection is None:
        return None
    root, language = selection

    spans = chunk_node(root, config.max_chunk_chars)
    if config.split_oversized_leaves:
        spans = split_oversized(document.contents, spans, config.max_chunk_chars, mapper)
    spans = coalesce(spans, 0, len(document.contents))
    spans = merge_small(document.contents, spans)
    logger.debug("%s parsed as %s: %d chunks", document.path or "<text>", language, len(spans))
    return language, spans


def _make_chunk(document: Document, mapper: LineMapper, start: int, end: int,
                language: str, strategy: str) -> Chunk:
    return Chunk(
        chunk=document.slice_text(start, end),
        language=language,
        start_rc=mapper.byte_to_point(start),
        end_rc=mapper.byte_to_point(end),
        start_bytes=start,
        end_bytes=end,
        strategy=strategy,
        path=document.path,
    )


__all__ = ["FALLBACK_LANGUAGE", "chunk", "chunk_file", "chunk_document"]
