"""
Dependency-record stores.

A record maps (module name, skin) to the list of files discovered by
inspecting the module's generated styles. Writes replace the record for
that exact key; the last writer wins.
"""
from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Protocol

try:
    import fcntl as _fcntl
    _HAS_FCNTL = True
except ImportError:
    _HAS_FCNTL = False
    logging.getLogger("resourceloader.locking").warning(
        "fcntl not available (non-POSIX). File locking is disabled. "
        "Do not share a dependency file between processes on this platform."
    )

log = logging.getLogger("resourceloader.deps")


class DependencyStore(Protocol):
    def get(self, module: str, skin: str) -> Optional[List[str]]:
        ...

    def put(self, module: str, skin: str, files: List[str]) -> bool:
        ...


class InMemoryDependencyStore:
    def __init__(self, records: Optional[Dict[tuple, List[str]]] = None):
        self._lock = threading.Lock()
        self._records: Dict[tuple, List[str]] = dict(records or {})
        self.writes = 0

    def get(self, module: str, skin: str) -> Optional[List[str]]:
        with self._lock:
            v = self._records.get((module, skin))
            return list(v) if v is not None else None

    def put(self, module: str, skin: str, files: List[str]) -> bool:
        with self._lock:
            self._records[(module, skin)] = list(files)
            self.writes += 1
        return True


@contextmanager
def _locked_file(path: Path, mode: str) -> Generator:
    """Open a file and apply an exclusive flock (POSIX only). No-op on Windows."""
    with open(path, mode, encoding="utf-8") as fh:
        if _HAS_FCNTL:
            _fcntl.flock(fh, _fcntl.LOCK_EX)
        try:
            yield fh
        finally:
            if _HAS_FCNTL:
                _fcntl.flock(fh, _fcntl.LOCK_UN)


def _parse_document(text: str) -> Dict[str, Any]:
    if not text.strip():
        return {"kind": "module_deps", "records": {}}
    obj = json.loads(text)
    if not isinstance(obj, dict) or not isinstance(obj.get("records"), dict):
        return {"kind": "module_deps", "records": {}}
    return obj


class JsonFileDependencyStore:
    """
    Layout:
      {"kind": "module_deps", "records": {<module>: {<skin>: [files...]}}}

    Each put is a read-modify-write under one exclusive lock.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.writes = 0

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"kind": "module_deps", "records": {}}
        try:
            with _locked_file(self.path, "r") as fh:
                return _parse_document(fh.read())
        except (OSError, ValueError) as exc:
            log.warning("Cannot read dependency file %s: %s", self.path, exc)
            return {"kind": "module_deps", "records": {}}

    def get(self, module: str, skin: str) -> Optional[List[str]]:
        records = self._load().get("records", {})
        by_skin = records.get(module)
        if not isinstance(by_skin, dict):
            return None
        files = by_skin.get(skin)
        if not isinstance(files, list):
            return None
        return [str(f) for f in files]

    def put(self, module: str, skin: str, files: List[str]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with _locked_file(self.path, "a+") as fh:
                fh.seek(0)
                try:
                    obj = _parse_document(fh.read())
                except ValueError:
                    log.warning("Dependency file %s is corrupt; rewriting", self.path)
                    obj = {"kind": "module_deps", "records": {}}
                by_skin = obj["records"].setdefault(module, {})
                if not isinstance(by_skin, dict):
                    by_skin = obj["records"][module] = {}
                by_skin[skin] = list(files)
                fh.seek(0)
                fh.truncate()
                fh.write(json.dumps(obj, indent=2, sort_keys=True))
                # flush while the lock is still held
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as exc:
            log.warning("Failed to persist dependencies module=%s skin=%s: %s", module, skin, exc)
            return False
        self.writes += 1
        return True


class SqliteDependencyStore:
    """module_deps(md_module, md_skin, md_deps) with one row per key."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self.writes = 0
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS module_deps (
                    md_module TEXT NOT NULL,
                    md_skin TEXT NOT NULL,
                    md_deps TEXT NOT NULL,
                    PRIMARY KEY (md_module, md_skin)
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def get(self, module: str, skin: str) -> Optional[List[str]]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT md_deps FROM module_deps WHERE md_module = ? AND md_skin = ? LIMIT 1",
                (module, skin),
            )
            row = cur.fetchone()
        finally:
            conn.close()
        if not row or row[0] is None:
            return None
        try:
            files = json.loads(row[0])
        except ValueError:
            log.warning("Corrupt dependency row module=%s skin=%s", module, skin)
            return None
        return [str(f) for f in files] if isinstance(files, list) else None

    def put(self, module: str, skin: str, files: List[str]) -> bool:
        try:
            conn = self._connect()
            try:
                conn.execute(
                    "INSERT INTO module_deps(md_module, md_skin, md_deps) VALUES(?, ?, ?) "
                    "ON CONFLICT(md_module, md_skin) DO UPDATE SET md_deps=excluded.md_deps",
                    (module, skin, json.dumps(list(files))),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            log.warning("Failed to persist dependencies module=%s skin=%s: %s", module, skin, exc)
            return False
        self.writes += 1
        return True
