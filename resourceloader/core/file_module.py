from __future__ import annotations

import logging
import posixpath
import time
from typing import Any, Callable, Dict, List, Optional

from resourceloader.observability.metrics import inc_dependency_write, inc_mtime_lookup
from resourceloader.stores.dependencies import DependencyStore, InMemoryDependencyStore
from resourceloader.stores.messages import MessageBlobStore

from . import cssmin
from .context import ContextLike
from .files import FileSystem, LocalFileSystem
from .options import ModuleOptions
from .paths import DEFAULT_KEY, DEFAULT_MEDIA, PathList, collate_by_option, paths_of, try_for_key, unique
from .settings import LoaderSettings

log = logging.getLogger("resourceloader.module")

RemapFn = Callable[[str, str, str, bool], str]
ExtractFn = Callable[[str], List[str]]


class FileModule:
    """
    Module built from local script and style files.

    Content is resolved per context (language, skin, debug). Freshness is
    the newest mtime over every file relevant to the context, memoized per
    context fingerprint for the lifetime of the instance.
    """

    def __init__(
        self,
        name: str,
        options: Optional[ModuleOptions] = None,
        *,
        settings: Optional[LoaderSettings] = None,
        files: Optional[FileSystem] = None,
        dependency_store: Optional[DependencyStore] = None,
        message_store: Optional[MessageBlobStore] = None,
        remap: Optional[RemapFn] = None,
        extract_references: Optional[ExtractFn] = None,
    ):
        self.name = name
        self.options = options or ModuleOptions()
        self.settings = settings or LoaderSettings()
        self.files: FileSystem = files or LocalFileSystem(self.settings.install_root)
        self.dependency_store: DependencyStore = dependency_store or InMemoryDependencyStore()
        self.message_store = message_store
        self._remap: RemapFn = remap or cssmin.remap
        self._extract_references: ExtractFn = extract_references or self._default_extract_references

        # fingerprint -> unix timestamp; append-only
        self._modified_time: Dict[str, int] = {}

    @classmethod
    def from_payload(cls, name: str, payload: Any, base_path: Optional[str] = None, **kwargs: Any) -> "FileModule":
        return cls(name, ModuleOptions.from_payload(payload, base_path), **kwargs)

    # --- content ---

    def get_script(self, context: ContextLike) -> str:
        o = self.options
        script = (
            self._read_script_files(paths_of(o.scripts)) + "\n"
            + self._read_script_files(paths_of(try_for_key(o.language_scripts, context.language))) + "\n"
            + self._read_script_files(paths_of(try_for_key(o.skin_scripts, context.skin, DEFAULT_KEY))) + "\n"
        )
        if context.debug:
            script += "\n" + self._read_script_files(paths_of(o.debug_scripts))
        return script

    def get_loader_script(self) -> Optional[str]:
        """None when no loader scripts are configured (distinct from "")."""
        if not self.options.loader_scripts:
            return None
        return self._read_script_files(paths_of(self.options.loader_scripts))

    def get_styles(self, context: ContextLike) -> Dict[str, str]:
        # Merge general and skin styles, keeping media type collation
        styles = self._read_style_files(self.options.styles)
        skin_styles = self._read_style_files(try_for_key(self.options.skin_styles, context.skin, DEFAULT_KEY))
        for media, style in skin_styles.items():
            if media in styles:
                styles[media] += style
            else:
                styles[media] = style

        # TODO: move dependency tracking out of this accessor once callers can
        # trigger it explicitly; get_styles() should not write to the store.
        self._track_file_dependencies(context.skin, styles)
        return styles

    def get_messages(self) -> List[str]:
        return list(self.options.messages)

    def get_group(self) -> Optional[str]:
        return self.options.group

    def get_dependencies(self) -> List[str]:
        return list(self.options.dependencies)

    # --- freshness ---

    def get_file_dependencies(self, skin: str) -> List[str]:
        return self.dependency_store.get(self.name, skin) or []

    def get_msg_blob_mtime(self, language: str) -> int:
        if not self.options.messages or self.message_store is None:
            return 0
        return int(self.message_store.get_mtime(self.name, language) or 0)

    def get_modified_time(self, context: ContextLike) -> int:
        """
        Newest mtime over every file relevant to `context`, including stored
        style dependencies and the module's message blob.

        Raises ResourceFileError if any relevant file cannot be stat'ed.
        """
        key = context.fingerprint
        cached = self._modified_time.get(key)
        if cached is not None:
            inc_mtime_lookup("hit")
            log.debug("modified_time cache=hit module=%s ts=%s", self.name, cached)
            return cached
        inc_mtime_lookup("miss")

        t0 = time.perf_counter()
        files = self.relevant_files(context)
        files_mtime = max((self.files.mtime(p) for p in files), default=0)
        ts = max(files_mtime, self.get_msg_blob_mtime(context.language))
        self._modified_time[key] = ts

        log.debug(
            "modified_time cache=miss module=%s files=%s ts=%s stat_ms=%s",
            self.name,
            len(files),
            ts,
            int(round((time.perf_counter() - t0) * 1000)),
        )
        return ts

    def relevant_files(self, context: ContextLike) -> List[str]:
        o = self.options
        styles: List[str] = []
        for style_files in collate_by_option(o.styles, "media", DEFAULT_MEDIA).values():
            styles.extend(style_files)
        skin_entries = try_for_key(o.skin_styles, context.skin, DEFAULT_KEY)
        for style_files in collate_by_option(skin_entries, "media", DEFAULT_MEDIA).values():
            styles.extend(style_files)

        return (
            paths_of(o.scripts)
            + styles
            + (paths_of(o.debug_scripts) if context.debug else [])
            + paths_of(try_for_key(o.language_scripts, context.language))
            + paths_of(try_for_key(o.skin_scripts, context.skin, DEFAULT_KEY))
            + paths_of(o.loader_scripts)
            + self.get_file_dependencies(context.skin)
        )

    # --- internals ---

    def _read_script_files(self, scripts: List[str]) -> str:
        if not scripts:
            return ""
        return "\n".join(self.files.read_text(p) for p in unique(scripts))

    def _read_style_file(self, path: str) -> str:
        local_dir = posixpath.dirname(path)
        return self._remap(self.files.read_text(path), local_dir, self.settings.public_dir(local_dir), True)

    def _read_style_files(self, entries: PathList) -> Dict[str, str]:
        if not entries:
            return {}
        out: Dict[str, str] = {}
        for media, files in collate_by_option(entries, "media", DEFAULT_MEDIA).items():
            out[media] = "\n".join(self._read_style_file(p) for p in unique(files))
        return out

    def _default_extract_references(self, style: str) -> List[str]:
        return cssmin.get_local_file_references(style, self.settings.script_path, self.files.exists)

    def _track_file_dependencies(self, skin: str, styles: Dict[str, str]) -> None:
        files: List[str] = []
        for style in styles.values():
            files.extend(self._extract_references(style))
        files = unique(files)

        if files == self.dependency_store.get(self.name, skin):
            inc_dependency_write("unchanged")
            return

        try:
            ok = self.dependency_store.put(self.name, skin, files)
        except Exception as e:
            log.warning("dependency write failed module=%s skin=%s: %s", self.name, skin, e)
            ok = False

        inc_dependency_write("written" if ok else "failed")
        log.debug("dependencies module=%s skin=%s files=%s written=%s", self.name, skin, len(files), ok)
