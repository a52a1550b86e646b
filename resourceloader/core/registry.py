"""
Named module registry.

Definition file format (JSON or YAML):
    jquery.ui:
      basePath: resources/
      scripts: [jquery/jquery.ui.core.js]
      skinStyles:
        default: jquery/themes/default.css
    site.print:
      styles: {site/print.css: {media: print}}

`basePath` is a registry-level key; everything else is passed to
ModuleOptions.from_payload().
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from resourceloader.stores.dependencies import DependencyStore, InMemoryDependencyStore, JsonFileDependencyStore
from resourceloader.stores.messages import JsonFileMessageBlobStore, MessageBlobStore

from .errors import DuplicateModuleError, ModuleDefinitionError, ModuleNotFoundInRegistry
from .file_module import FileModule
from .files import FileSystem, LocalFileSystem
from .options import ModuleOptions
from .settings import LoaderSettings

_log = logging.getLogger("resourceloader.registry")


class ModuleRegistry:
    """
    Builds FileModule objects sharing one set of settings and stores.

    Modules are constructed lazily on first get() and then reused, so their
    modified-time memo survives across lookups.
    """

    def __init__(
        self,
        settings: Optional[LoaderSettings] = None,
        *,
        files: Optional[FileSystem] = None,
        dependency_store: Optional[DependencyStore] = None,
        message_store: Optional[MessageBlobStore] = None,
    ):
        self.settings = settings or LoaderSettings()
        self.files = files or LocalFileSystem(self.settings.install_root)
        self.dependency_store = dependency_store or self._default_dependency_store()
        self.message_store = message_store or self._default_message_store()
        self._options: Dict[str, ModuleOptions] = {}
        self._modules: Dict[str, FileModule] = {}

    def _default_dependency_store(self) -> DependencyStore:
        if self.settings.dependency_store_path is not None:
            return JsonFileDependencyStore(self.settings.dependency_store_path)
        return InMemoryDependencyStore()

    def _default_message_store(self) -> Optional[MessageBlobStore]:
        if self.settings.message_store_path is not None:
            return JsonFileMessageBlobStore(self.settings.message_store_path)
        return None

    def register(self, name: str, payload: Any, base_path: Optional[str] = None) -> None:
        if not name:
            raise ModuleDefinitionError("Module name must be a non-empty string")
        if name in self._options:
            raise DuplicateModuleError(f"Duplicate module name: {name}")
        self._options[name] = ModuleOptions.from_payload(payload, base_path)

    def register_many(self, definitions: Mapping[str, Any]) -> None:
        for name, definition in definitions.items():
            if not isinstance(definition, Mapping):
                raise ModuleDefinitionError(f"Definition of {name!r} must be a mapping, got {type(definition).__name__}")
            payload = dict(definition)
            base_path = payload.pop("basePath", None)
            self.register(str(name), payload, base_path=base_path)

    def names(self) -> List[str]:
        return sorted(self._options.keys())

    def get(self, name: str) -> FileModule:
        module = self._modules.get(name)
        if module is not None:
            return module
        opts = self._options.get(name)
        if opts is None:
            raise ModuleNotFoundInRegistry(name)
        module = FileModule(
            name,
            opts,
            settings=self.settings,
            files=self.files,
            dependency_store=self.dependency_store,
            message_store=self.message_store,
        )
        self._modules[name] = module
        return module

    def load_file(self, path: Path) -> int:
        definitions = load_module_definitions(path)
        self.register_many(definitions)
        _log.info("Registered %d modules from %s", len(definitions), path)
        return len(definitions)


def load_module_definitions(path: Path) -> Dict[str, Any]:
    """Read a JSON (or, failing that, YAML) mapping of module name -> options."""
    p = Path(path)
    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModuleDefinitionError(f"Cannot read module definitions {p}: {exc}") from exc

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ModuleDefinitionError(f"Failed to parse {p} as JSON or YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ModuleDefinitionError(f"Module definitions in {p} must be a mapping, got {type(data).__name__}")
    return data
