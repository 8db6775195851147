import hashlib
from dataclasses import dataclass

STRATEGY_SYNTAX = "syntax"
STRATEGY_FALLBACK = "fallback"


@dataclass(frozen=True)
class Chunk:
    chunk: str
    language: str
    start_rc: tuple[int, int]
    end_rc: tuple[int, int]
    start_bytes: int
    end_bytes: int
    strategy: str = STRATEGY_SYNTAX
    path: str = ""

    def id(self):
        id = f"{self.path}::{self.start_bytes}::{self.end_bytes}"
        return hashlib.sha256(id.encode()).hexdigest()

    @property
    def size(self) -> int:
        """Length of the chunk in bytes."""
        return self.end_bytes - self.start_bytes

    def to_dict(self) -> dict:
        return {
            "id": self.id(),
            "path": self.path,
            "language": self.language,
            "strategy": self.strategy,
            "start_bytes": self.start_bytes,
            "end_bytes": self.end_bytes,
            "start_rc": list(self.start_rc),
            "end_rc": list(self.end_rc),
            "chunk": self.chunk,
        }
