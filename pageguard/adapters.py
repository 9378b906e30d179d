"""Settings store interfaces."""

from __future__ import annotations

import contextlib
import copy
import fcntl
import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .codec import snapshot_from_document, snapshot_to_document
from .exceptions import ConfigurationError, StorageConflict, StorageError
from .policies import ProtectionRule
from .snapshot import SettingsSnapshot

logger = logging.getLogger(__name__)

_PATH_LOCKS: dict[Path, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _path_lock(path: Path) -> threading.Lock:
    key = path.resolve()
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(key, threading.Lock())


class SettingsStore:
    """Durable mapping of node id to protection rule, plus global config.

    ``load`` and ``save`` move whole snapshots; ``save`` refuses a snapshot
    whose version no longer matches the stored one. ``put_rule`` replaces or
    drops a single node's rule while holding the store lock, so edits to
    different nodes never overwrite each other and edits to the same node
    are last-write-wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def read_document(self) -> Mapping[str, Any]:
        raise NotImplementedError

    def write_document(self, document: Mapping[str, Any]) -> None:
        raise NotImplementedError

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def _write(self, snapshot: SettingsSnapshot) -> SettingsSnapshot:
        current = snapshot_from_document(self.read_document()).version
        if current != snapshot.version:
            raise StorageConflict(
                f"Settings version mismatch: expected {snapshot.version}, current {current}"
            )
        stored = replace(snapshot, version=snapshot.version + 1)
        self.write_document(snapshot_to_document(stored))
        logger.debug("Saved settings snapshot version %d", stored.version)
        return stored

    def load(self) -> SettingsSnapshot:
        with self.locked():
            document = self.read_document()
        return snapshot_from_document(document)

    def save(self, snapshot: SettingsSnapshot) -> SettingsSnapshot:
        with self.locked():
            return self._write(snapshot)

    def put_rule(self, node_id: int, rule: ProtectionRule | None) -> SettingsSnapshot:
        with self.locked():
            current = snapshot_from_document(self.read_document())
            return self._write(current.with_rule(node_id, rule))


class MemorySettingsStore(SettingsStore):
    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._document: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def read_document(self) -> Mapping[str, Any]:
        return copy.deepcopy(self._document)

    def write_document(self, document: Mapping[str, Any]) -> None:
        self._document = copy.deepcopy(dict(document))


@dataclass
class JsonFileSettingsStore(SettingsStore):
    """Settings document kept in a JSON file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so concurrent readers see either the old or the new document.
    Read-modify-write cycles hold an exclusive ``flock`` on a sibling
    ``.<name>.lock`` file, shared by every store and process using the path.
    """

    path: Path
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(f".{self.path.name}.lock")

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        with _path_lock(self.path):
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                handle = open(self.lock_path, "a", encoding=self.encoding)
            except OSError as exc:
                raise StorageError(f"Cannot open lock file {self.lock_path}") from exc
            with handle:
                fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

    def read_document(self) -> Mapping[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding=self.encoding)
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}") from exc
        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Settings file {self.path} is not valid JSON") from exc

    def write_document(self, document: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding) as handle:
                json.dump(document, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write {self.path}") from exc


__all__ = ["SettingsStore", "MemorySettingsStore", "JsonFileSettingsStore"]
