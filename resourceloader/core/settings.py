"""
Loader-wide settings.

These used to be process globals (installation root, public script path).
They are now an explicit object handed to every module and store.

Environment variables (all optional):
    RESOURCELOADER_INSTALL_ROOT: directory module paths are relative to (default: cwd)
    RESOURCELOADER_SCRIPT_PATH: public URL prefix of the install root (default: "")
    RESOURCELOADER_DEPS_PATH: JSON file backing the dependency-record store
    RESOURCELOADER_MESSAGES_PATH: JSON file backing message blob timestamps
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


def _env_path(name: str) -> Optional[Path]:
    v = (os.getenv(name) or "").strip()
    return Path(v) if v else None


class LoaderSettings(BaseModel):
    install_root: Path = Field(default_factory=Path.cwd)
    script_path: str = ""

    dependency_store_path: Optional[Path] = None
    message_store_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "LoaderSettings":
        root = _env_path("RESOURCELOADER_INSTALL_ROOT") or Path.cwd()
        script_path = (os.getenv("RESOURCELOADER_SCRIPT_PATH") or "").strip().rstrip("/")
        return cls(
            install_root=root,
            script_path=script_path,
            dependency_store_path=_env_path("RESOURCELOADER_DEPS_PATH"),
            message_store_path=_env_path("RESOURCELOADER_MESSAGES_PATH"),
        )

    def public_dir(self, local_dir: str) -> str:
        return f"{self.script_path}/{local_dir}"
