from .core import FileModule, LoaderSettings, ModuleRegistry, ResourceLoaderContext

__all__ = ["FileModule", "LoaderSettings", "ModuleRegistry", "ResourceLoaderContext"]
