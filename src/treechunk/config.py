"""Chunking configuration: defaults, validation and environment overrides."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional

DEFAULT_MAX_CHUNK_CHARS = 1500
DEFAULT_FALLBACK_WINDOW_LINES = 40
DEFAULT_FALLBACK_OVERLAP_LINES = 15
DEFAULT_PARSE_TIMEOUT_S = 5.0

ENV_PREFIX = "TREECHUNK_"


@dataclass(frozen=True)
class ChunkingConfig:
    max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS
    fallback_window_lines: int = DEFAULT_FALLBACK_WINDOW_LINES
    fallback_overlap_lines: int = DEFAULT_FALLBACK_OVERLAP_LINES
    parse_timeout_s: Optional[float] = DEFAULT_PARSE_TIMEOUT_S  # None or 0 disables the bound
    split_oversized_leaves: bool = False

    def __post_init__(self) -> None:
        if self.max_chunk_chars <= 0:
            raise ValueError("max_chunk_chars must be positive")
        if self.fallback_window_lines <= 0:
            raise ValueError("fallback_window_lines must be positive")
        if not 0 <= self.fallback_overlap_lines < self.fallback_window_lines:
            raise ValueError("fallback_overlap_lines must be in [0, fallback_window_lines)")
        if self.parse_timeout_s is not None and self.parse_timeout_s < 0:
            raise ValueError("parse_timeout_s must be non-negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "ChunkingConfig":
        """Build a config from TREECHUNK_* environment variables; explicit overrides win."""
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for f in fields(cls):
            name = ENV_PREFIX + f.name.upper()
            raw = (env.get(name) or "").strip()
            if not raw:
                continue
            values[f.name] = _PARSERS[f.name](name, raw)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


_PARSERS: Dict[str, Callable[[str, str], Any]] = {
    "max_chunk_chars": _parse_int,
    "fallback_window_lines": _parse_int,
    "fallback_overlap_lines": _parse_int,
    "parse_timeout_s": _parse_float,
    "split_oversized_leaves": _parse_bool,
}
