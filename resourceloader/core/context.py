from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol


class ContextLike(Protocol):
    language: str
    skin: str
    debug: bool

    @property
    def fingerprint(self) -> str:
        ...


def make_fingerprint(*, language: str, skin: str, debug: bool, extra: Optional[Dict[str, Any]] = None) -> str:
    payload = {
        "language": language,
        "skin": skin,
        "debug": bool(debug),
        "extra": extra or {},
    }
    raw = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


@dataclass(frozen=True)
class ResourceLoaderContext:
    """
    Request context a module resolves against.

    `extra` carries any further request state that should split the
    modified-time cache (it is folded into the fingerprint).
    """

    language: str = "en"
    skin: str = "default"
    debug: bool = False
    extra: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def fingerprint(self) -> str:
        return make_fingerprint(language=self.language, skin=self.skin, debug=self.debug, extra=self.extra)
