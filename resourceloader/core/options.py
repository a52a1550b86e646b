from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .paths import AttributedPath, PathEntry, PathList, PlainPath, VariantMap, prefix_path_list

log = logging.getLogger("resourceloader.options")

PLAIN_LIST_KEYS = {
    "scripts": "scripts",
    "debugScripts": "debug_scripts",
    "loaderScripts": "loader_scripts",
    "styles": "styles",
}

VARIANT_KEYS = {
    "languageScripts": "language_scripts",
    "skinScripts": "skin_scripts",
    "skinStyles": "skin_styles",
}

STRING_LIST_KEYS = {
    "dependencies": "dependencies",
    "messages": "messages",
}


def parse_path_list(raw: Any) -> PathList:
    """
    Accepts:
      - "a.js"
      - ["a.js", "b.js"]
      - {"a.css": {"media": "print"}, "b.css": None}
      - ["a.css", {"b.css": {"media": "print"}}]
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return [PlainPath(path=raw)]
    if isinstance(raw, Mapping):
        out: PathList = []
        for k, v in raw.items():
            out.extend(_parse_keyed_entry(k, v))
        return out
    if isinstance(raw, (list, tuple)):
        out = []
        for item in raw:
            if isinstance(item, str):
                out.append(PlainPath(path=item))
            elif isinstance(item, Mapping):
                for k, v in item.items():
                    out.extend(_parse_keyed_entry(k, v))
            else:
                log.warning("Ignoring path entry of unsupported type %s", type(item).__name__)
        return out
    # tolerate scalars like numbers
    return [PlainPath(path=str(raw))]


def _parse_keyed_entry(key: Any, value: Any) -> List[PathEntry]:
    if isinstance(value, Mapping):
        return [AttributedPath(path=str(key), attributes=dict(value))]
    return [PlainPath(path=str(key))]


def parse_variant_map(raw: Any, option: str) -> Dict[str, PathList]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        log.warning("Option %r must map discriminators to path lists, got %s", option, type(raw).__name__)
        return {}
    return {str(k): parse_path_list(v) for k, v in raw.items()}


def parse_string_list(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return [x for x in raw if isinstance(x, str)]
    return []


@dataclass
class ModuleOptions:
    scripts: PathList = field(default_factory=list)
    debug_scripts: PathList = field(default_factory=list)
    loader_scripts: PathList = field(default_factory=list)
    styles: PathList = field(default_factory=list)

    language_scripts: VariantMap = field(default_factory=dict)
    skin_scripts: VariantMap = field(default_factory=dict)
    skin_styles: VariantMap = field(default_factory=dict)

    dependencies: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    group: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any, base_path: Optional[str] = None) -> "ModuleOptions":
        """
        Build fully-prefixed options from a configuration mapping.

        Unknown keys are ignored; malformed shapes are coerced. No I/O.
        """
        opts = cls()
        if not isinstance(payload, Mapping):
            if payload is not None:
                log.warning("Module options must be a mapping, got %s", type(payload).__name__)
            return opts

        for key, value in payload.items():
            if key in PLAIN_LIST_KEYS:
                setattr(opts, PLAIN_LIST_KEYS[key], prefix_path_list(parse_path_list(value), base_path))
            elif key in VARIANT_KEYS:
                variants = parse_variant_map(value, key)
                setattr(
                    opts,
                    VARIANT_KEYS[key],
                    {k: prefix_path_list(v, base_path) for k, v in variants.items()},
                )
            elif key in STRING_LIST_KEYS:
                setattr(opts, STRING_LIST_KEYS[key], parse_string_list(value))
            elif key == "group":
                opts.group = None if value is None else str(value)
            else:
                log.debug("Ignoring unrecognised module option %r", key)

        return opts
