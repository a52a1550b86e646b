"""
Message blob timestamps.

The translation subsystem keeps one blob of localised messages per
(module, language); this only exposes when each blob last changed.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

log = logging.getLogger("resourceloader.messages")


class MessageBlobStore(Protocol):
    def get_mtime(self, module: str, language: str) -> Optional[int]:
        ...


class InMemoryMessageBlobStore:
    def __init__(self, timestamps: Optional[Dict[Tuple[str, str], int]] = None):
        self._timestamps: Dict[Tuple[str, str], int] = dict(timestamps or {})
        self.lookups = 0

    def set_mtime(self, module: str, language: str, ts: int) -> None:
        self._timestamps[(module, language)] = int(ts)

    def get_mtime(self, module: str, language: str) -> Optional[int]:
        self.lookups += 1
        return self._timestamps.get((module, language))


class JsonFileMessageBlobStore:
    """
    File format:
      {"<module>": {"<language>": <unix timestamp>}}

    A missing or malformed file reads as "no blobs".
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Dict[str, int]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Cannot read message timestamps %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Message timestamp file %s must be a mapping, got %s", self.path, type(data).__name__)
            return {}
        return data

    def get_mtime(self, module: str, language: str) -> Optional[int]:
        by_lang = self._load().get(module)
        if not isinstance(by_lang, dict):
            return None
        v = by_lang.get(language)
        try:
            return int(v) if v is not None else None
        except (TypeError, ValueError):
            log.warning("Invalid message timestamp module=%s lang=%s: %r", module, language, v)
            return None
