import os
from pathlib import Path

import pytest

from resourceloader.core.context import ResourceLoaderContext
from resourceloader.core.file_module import FileModule
from resourceloader.core.files import LocalFileSystem
from resourceloader.core.settings import LoaderSettings
from resourceloader.observability.metrics import reset_metrics
from resourceloader.stores.dependencies import InMemoryDependencyStore


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def install_root(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture()
def write_file(install_root: Path):
    def _write(rel: str, text: str = "", mtime: int | None = None) -> Path:
        p = install_root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        if mtime is not None:
            os.utime(p, (mtime, mtime))
        return p

    return _write


@pytest.fixture()
def settings(install_root: Path) -> LoaderSettings:
    return LoaderSettings(install_root=install_root, script_path="/w")


@pytest.fixture()
def deps_store() -> InMemoryDependencyStore:
    return InMemoryDependencyStore()


class CountingFileSystem(LocalFileSystem):
    """LocalFileSystem that records every read and stat."""

    def __init__(self, root: Path):
        super().__init__(root)
        self.reads: list[str] = []
        self.stats: list[str] = []

    def read_text(self, path: str) -> str:
        self.reads.append(path)
        return super().read_text(path)

    def mtime(self, path: str) -> int:
        self.stats.append(path)
        return super().mtime(path)


@pytest.fixture()
def counting_fs(install_root: Path) -> CountingFileSystem:
    return CountingFileSystem(install_root)


@pytest.fixture()
def make_module(settings, deps_store, counting_fs):
    def _make(payload, name: str = "test.module", base_path=None, **kwargs) -> FileModule:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("files", counting_fs)
        kwargs.setdefault("dependency_store", deps_store)
        return FileModule.from_payload(name, payload, base_path, **kwargs)

    return _make


@pytest.fixture()
def ctx():
    def _ctx(language: str = "en", skin: str = "vector", debug: bool = False) -> ResourceLoaderContext:
        return ResourceLoaderContext(language=language, skin=skin, debug=debug)

    return _ctx
