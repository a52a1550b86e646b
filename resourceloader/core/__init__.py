from .context import ResourceLoaderContext
from .errors import (
    DuplicateModuleError,
    ModuleDefinitionError,
    ModuleNotFoundInRegistry,
    ResourceFileError,
    ResourceLoaderError,
)
from .file_module import FileModule
from .files import LocalFileSystem
from .options import ModuleOptions
from .paths import DEFAULT_KEY, AttributedPath, PlainPath, collate_by_option, try_for_key
from .registry import ModuleRegistry, load_module_definitions
from .settings import LoaderSettings

__all__ = [
    "AttributedPath",
    "DEFAULT_KEY",
    "DuplicateModuleError",
    "FileModule",
    "LoaderSettings",
    "LocalFileSystem",
    "ModuleDefinitionError",
    "ModuleNotFoundInRegistry",
    "ModuleOptions",
    "ModuleRegistry",
    "PlainPath",
    "ResourceFileError",
    "ResourceLoaderContext",
    "ResourceLoaderError",
    "collate_by_option",
    "load_module_definitions",
    "try_for_key",
]
