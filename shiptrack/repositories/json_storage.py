"""
JSON file persistence for the shipment collection.

The whole collection lives in one pretty-printed JSON array. Writes go to a
temporary file next to the target and are moved into place with
``os.replace`` so a reader only ever sees the old or the new file.
"""

from __future__ import annotations

from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Any, Iterator
import json
import logging
import os
import tempfile
import threading

from shiptrack.core.errors import CorruptStoreError, StoreError, StoreIOError

logger = logging.getLogger(__name__)

Collection = list[dict[str, Any]]


class ShipmentStore:
    """Owns the backing file; ``transaction`` serializes read-modify-write cycles."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def _ensure_dir(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create data directory %s: %s", self.path.parent, exc)
            raise StoreIOError(f"Cannot create data directory {self.path.parent}") from exc

    def load(self) -> Collection:
        """Return the stored collection; a missing file is an empty collection."""
        self._ensure_dir()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No data file at %s; starting empty", self.path)
            return []
        except UnicodeDecodeError as exc:
            logger.error("Data file %s is not UTF-8: %s", self.path, exc)
            raise CorruptStoreError(f"Data file {self.path} is not UTF-8") from exc
        except OSError as exc:
            logger.error("Cannot read %s: %s", self.path, exc)
            raise StoreIOError(f"Cannot read {self.path}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Data file %s is not valid JSON: %s", self.path, exc)
            raise CorruptStoreError(f"Data file {self.path} is not valid JSON") from exc
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            logger.error("Data file %s does not hold a list of records", self.path)
            raise CorruptStoreError(f"Data file {self.path} does not hold a list of records")
        logger.debug("Loaded %d shipments from %s", len(data), self.path)
        return data

    def save(self, collection: Collection) -> None:
        """Replace the stored collection atomically."""
        self._ensure_dir()
        try:
            payload = json.dumps(collection, ensure_ascii=False, indent=2, allow_nan=False)
        except (TypeError, ValueError) as exc:
            logger.error("Refusing to write %s: %s", self.path, exc)
            raise StoreError(f"Collection for {self.path} is not valid JSON") from exc
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Cannot write %s: %s", self.path, exc)
            if tmp_name:
                with suppress(FileNotFoundError):
                    os.unlink(tmp_name)
            raise StoreIOError(f"Cannot write {self.path}") from exc
        logger.debug("Saved %d shipments to %s", len(collection), self.path)

    @contextmanager
    def transaction(self) -> Iterator[Collection]:
        """Hold the store lock for a whole load -> modify -> save cycle.

        The caller mutates the yielded collection and calls ``save`` itself;
        nothing is written when the block raises.
        """
        with self._lock:
            yield self.load()
