from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .language_registry import normalize_extension


@dataclass(frozen=True)
class Document:
    """Raw bytes of one file plus the extension hint used to reorder grammars."""
    contents: bytes
    extension: Optional[str] = None
    path: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "extension", normalize_extension(self.extension) or None)

    @classmethod
    def from_text(cls, text: str, extension: Optional[str] = None, path: str = "") -> "Document":
        return cls(contents=text.encode("utf-8"), extension=extension, path=path)

    @classmethod
    def from_path(cls, path: str) -> "Document":
        p = Path(path)
        return cls(contents=p.read_bytes(), extension=p.suffix, path=str(path))

    @property
    def size(self) -> int:
        return len(self.contents)

    def slice_text(self, start: int, end: int) -> str:
        """Decode only after slicing so byte offsets stay authoritative."""
        return self.contents[start:end].decode("utf-8", errors="replace")
