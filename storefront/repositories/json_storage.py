"""
JSON-file persistence adapter.

One file per entity type, holding a JSON array. Every read loads the
whole file and every write rewrites it; there is no locking.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Generic, Iterable, Protocol, Type, TypeVar

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a data file cannot be written."""


class Record(Protocol):
    id: str

    @classmethod
    def from_dict(cls, data): ...

    def to_dict(self) -> dict: ...


T = TypeVar("T", bound=Record)


class FileRepository(Generic[T]):
    """Read-all / write-all access to a JSON array of ``entity_type`` records."""

    def __init__(self, path: str | os.PathLike, entity_type: Type[T]) -> None:
        self.path = Path(path)
        self.entity_type = entity_type

    def read_all(self) -> list[T]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError):
            logger.exception("Failed to read %s; treating it as empty", self.path)
            return []
        if not isinstance(raw, list):
            logger.error("Expected a JSON array in %s, got %s", self.path, type(raw).__name__)
            return []
        records: list[T] = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                logger.warning("Skipping non-object entry %d in %s", index, self.path)
                continue
            try:
                records.append(self.entity_type.from_dict(item))
            except (TypeError, ValueError, OverflowError):
                logger.exception("Skipping unreadable entry %d in %s", index, self.path)
        return records

    def save_all(self, items: Iterable[T]) -> None:
        payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False, indent=2)
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            logger.exception("Failed to write %s", self.path)
            raise StorageError(f"Gagal menyimpan {self.path.name}") from exc
