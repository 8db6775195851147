#!/usr/bin/env python3
"""
cli.py: bulk chunking entry point

- Input: one or more file paths
- Chunks each file independently (one document per worker thread)
- Unreadable files are logged and reported, never fatal
- Prints a concise JSON summary to stdout
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

from .Chunk import Chunk
from .chunker import chunk_file
from .config import ChunkingConfig
from .language_registry import LanguageRegistry, default_registry

logger = logging.getLogger("treechunk")

FileResult = Tuple[str, Optional[List[Chunk]], Optional[str]]


def chunk_paths(paths: Sequence[str], config: Optional[ChunkingConfig] = None,
                registry: Optional[LanguageRegistry] = None, max_workers: int = 8) -> List[FileResult]:
    """Chunk files concurrently.

    Returns:
        (path, chunks, error) per input path, in input order. `chunks` is None
        and `error` set when the file could not be read.
    """
    if not paths:
        return []
    config = config or ChunkingConfig()
    registry = default_registry() if registry is None else registry

    def work(path: str) -> FileResult:
        try:
            return path, chunk_file(path, config, registry), None
        except OSError as e:
            logger.error("Failed reading %s: %s", path, e)
            return path, None, str(e)

    results: Dict[str, FileResult] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(paths)))) as executor:
        futures = {executor.submit(work, p): p for p in paths}
        for future in as_completed(futures):
            path, chunks, error = future.result()
            results[path] = (path, chunks, error)
            if chunks is not None:
                logger.debug("File %s produced %d chunks", path, len(chunks))
    return [results[p] for p in paths]


def _summarize(results: Sequence[FileResult], include_chunks: bool) -> Dict[str, object]:
    files = []
    total = 0
    failed = 0
    for path, chunks, error in results:
        if chunks is None:
            failed += 1
            files.append({"path": path, "error": error})
            continue
        total += len(chunks)
        entry: Dict[str, object] = {
            "path": path,
            "language": chunks[0].language if chunks else None,
            "strategy": chunks[0].strategy if chunks else None,
            "chunks": len(chunks),
        }
        if include_chunks:
            entry["items"] = [c.to_dict() for c in chunks]
        files.append(entry)
    return {"files": files, "processed_files": len(results) - failed, "failed_files": failed, "total_chunks": total}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split source files into syntax-aware chunks.")
    parser.add_argument("paths", nargs="+", help="Files to chunk")
    parser.add_argument("--max-chars", type=int, help="Target maximum chunk size in bytes")
    parser.add_argument("--window-lines", type=int, help="Fallback window size in lines")
    parser.add_argument("--overlap-lines", type=int, help="Fallback overlap in lines")
    parser.add_argument("--timeout", type=float, help="Per-grammar parse timeout in seconds (0 disables)")
    parser.add_argument("--split-leaves", action="store_true", default=None,
                        help="Hard-split atomic nodes larger than --max-chars")
    parser.add_argument("--workers", type=int, default=8, help="Worker threads (default: 8)")
    parser.add_argument("--chunks", action="store_true", help="Include every chunk in the output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint.

    - Resolves config from TREECHUNK_* env, then command line flags
    - Chunks all paths in parallel
    - Prints JSON summary; exit status 1 if any file failed
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = ChunkingConfig.from_env(
            max_chunk_chars=args.max_chars,
            fallback_window_lines=args.window_lines,
            fallback_overlap_lines=args.overlap_lines,
            parse_timeout_s=args.timeout,
            split_oversized_leaves=args.split_leaves,
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    registry = default_registry()
    logger.info("Chunking %d files with %d languages (max_chars=%d)",
                len(args.paths), len(registry), config.max_chunk_chars)
    results = chunk_paths(args.paths, config, registry, max_workers=args.workers)
    summary = _summarize(results, include_chunks=args.chunks)
    print(json.dumps(summary, ensure_ascii=False))
    return 1 if summary["failed_files"] else 0


if __name__ == "__main__":
    sys.exit(main())
