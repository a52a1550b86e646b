"""
Minimal CSS url() handling used by file modules.

remap() rewrites relative url() references so they resolve against the
public location of the stylesheet; get_local_file_references() walks the
other way, mapping public URLs back to files under the install root.
"""
from __future__ import annotations

import posixpath
import re
from typing import Callable, List, Tuple
from urllib.parse import urlsplit, urlunsplit

URL_PATTERN = re.compile(r"""url\(\s*(?P<quote>['"]?)(?P<file>[^'"\)]+?)(?P=quote)\s*\)""")

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")


def _split_suffix(ref: str) -> Tuple[str, str]:
    # keep ?query / #fragment out of path arithmetic
    for i, ch in enumerate(ref):
        if ch in "?#":
            return ref[:i], ref[i:]
    return ref, ""


def is_remote_or_absolute(ref: str) -> bool:
    return ref.startswith(("/", "#")) or bool(_SCHEME.match(ref))


def remap(source: str, local_dir: str, remote_dir: str, absolute: bool = True) -> str:
    """Rewrite relative url() references in `source` to live under `remote_dir`."""
    if not absolute:
        return source

    # scheme and host stay as given; only the path is normalized
    base = urlsplit(remote_dir.rstrip("/"))

    def _sub(m: "re.Match[str]") -> str:
        ref = m.group("file").strip()
        if not ref or is_remote_or_absolute(ref):
            return m.group(0)
        path, suffix = _split_suffix(ref)
        joined = urlunsplit(
            (base.scheme, base.netloc, posixpath.normpath(f"{base.path}/{path}"), "", "")
        )
        q = m.group("quote")
        return f"url({q}{joined}{suffix}{q})"

    return URL_PATTERN.sub(_sub, source)


def get_local_file_references(source: str, script_path: str, exists: Callable[[str], bool]) -> List[str]:
    """
    Local files referenced from `source`, as install-root relative paths.

    Only URLs under `script_path` that point at an existing file count.
    """
    prefix = script_path.rstrip("/") + "/"
    out: List[str] = []
    for m in URL_PATTERN.finditer(source):
        ref, _ = _split_suffix(m.group("file").strip())
        if ref.startswith("//") or not ref.startswith(prefix):
            continue
        local = posixpath.normpath(ref[len(prefix):])
        if local in (".", "") or local.startswith(("..", "/")):
            continue
        if local not in out and exists(local):
            out.append(local)
    return out
