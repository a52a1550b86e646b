from __future__ import annotations


class ResourceLoaderError(Exception):
    pass


class ResourceFileError(ResourceLoaderError):
    """A module file could not be read or stat'ed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot access module file {path!r}: {reason}")
        self.path = path
        self.reason = reason


class ModuleDefinitionError(ResourceLoaderError):
    pass


class ModuleNotFoundInRegistry(ResourceLoaderError, KeyError):
    pass


class DuplicateModuleError(ResourceLoaderError, ValueError):
    pass
