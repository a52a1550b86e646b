"""
File path lists and the stateless helpers that operate on them.

A configured path is either a bare path (PlainPath) or a path carrying an
attribute map (AttributedPath, e.g. {"media": "print"} for styles). The
variant is chosen once when options are parsed; nothing downstream inspects
raw configuration shapes again.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

# Fallback discriminator for skin-keyed variant maps.
DEFAULT_KEY = "default"

# Default collation bucket for styles without a media attribute.
DEFAULT_MEDIA = "all"


@dataclass(frozen=True)
class PlainPath:
    path: str


@dataclass(frozen=True)
class AttributedPath:
    path: str
    attributes: Dict[str, Any] = field(default_factory=dict, hash=False)


PathEntry = Union[PlainPath, AttributedPath]
PathList = List[PathEntry]
VariantMap = Dict[str, PathList]

T = TypeVar("T")


def prefix_path_list(entries: Iterable[PathEntry], prefix: Optional[str]) -> PathList:
    """Prefix each path with `prefix`; attribute maps are left untouched."""
    p = prefix or ""
    out: PathList = []
    for e in entries:
        if isinstance(e, AttributedPath):
            out.append(AttributedPath(path=p + e.path, attributes=dict(e.attributes)))
        else:
            out.append(PlainPath(path=p + e.path))
    return out


def collate_by_option(entries: Sequence[PathEntry], option: str, default: str) -> Dict[str, List[str]]:
    """
    Group paths into buckets named by each entry's `option` attribute.

    Plain paths (and attributed paths lacking the attribute) land in
    `default`. Buckets appear in first-seen order; paths keep input order.
    """
    collated: Dict[str, List[str]] = {}
    for e in entries:
        bucket = default
        if isinstance(e, AttributedPath):
            v = e.attributes.get(option)
            if v is not None:
                bucket = str(v)
        collated.setdefault(bucket, []).append(e.path)
    return collated


def try_for_key(variants: Mapping[str, List[T]], key: Optional[str], fallback: Optional[str] = None) -> List[T]:
    """
    Select the list stored under `key`, else under `fallback`, else [].

    Resolves exactly one variant dimension; callers compose language and
    skin lookups independently.
    """
    if key is not None:
        v = variants.get(key)
        if isinstance(v, list):
            return list(v)
    if fallback is not None:
        v = variants.get(fallback)
        if isinstance(v, list):
            return list(v)
    return []


def unique(items: Iterable[T]) -> List[T]:
    """Deduplicate by first occurrence."""
    seen = set()
    out: List[T] = []
    for x in items:
        if x in seen:
            continue
        seen.add(x)
        out.append(x)
    return out


def paths_of(entries: Iterable[PathEntry]) -> List[str]:
    return [e.path for e in entries]
