from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .errors import ResourceFileError


class FileSystem(Protocol):
    def resolve(self, path: str) -> Path:
        ...

    def read_text(self, path: str) -> str:
        ...

    def mtime(self, path: str) -> int:
        ...

    def exists(self, path: str) -> bool:
        ...


class LocalFileSystem:
    """Reads and stats module files relative to an install root."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        return self.root / path

    def read_text(self, path: str) -> str:
        p = self.resolve(path)
        try:
            return p.read_text(encoding="utf-8")
        except OSError as exc:
            raise ResourceFileError(str(p), exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise ResourceFileError(str(p), "not valid UTF-8") from exc

    def mtime(self, path: str) -> int:
        p = self.resolve(path)
        try:
            return int(p.stat().st_mtime)
        except OSError as exc:
            raise ResourceFileError(str(p), exc.strerror or str(exc)) from exc

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()
