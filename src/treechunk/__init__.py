"""
Syntax-aware source chunking.

Splits a file into contiguous chunks near a byte budget, cutting at
statement, function, class or block boundaries found by tree-sitter, and
falls back to overlapping line windows when no grammar accepts the text.
"""

from .Chunk import Chunk
from .Document import Document
from .chunker import chunk, chunk_document, chunk_file
from .config import ChunkingConfig
from .language_registry import LanguageRegistry, ParseError, ParserTimeout, default_registry, load_registry
from .language_selector import select

__all__ = [
    "Chunk",
    "ChunkingConfig",
    "Document",
    "LanguageRegistry",
    "ParseError",
    "ParserTimeout",
    "chunk",
    "chunk_document",
    "chunk_file",
    "default_registry",
    "load_registry",
    "select",
]
