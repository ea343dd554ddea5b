# kriedko/modules/feedback/storage/file_store.py

import json
import logging
import os
from pathlib import Path
from typing import List, Union

from kriedko.core.exceptions import StorageError
from kriedko.modules.feedback.storage.base import Record, SubmissionStore

logger = logging.getLogger(__name__)


class FileSubmissionStore(SubmissionStore):
    """
    Flat-file JSON array store.

    Every write goes to ``<file>.tmp`` and is renamed over the data file, so
    a crash mid-write leaves the previous contents intact.
    """

    backend_name = "file"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.tmp_path = self.path.with_name(self.path.name + ".tmp")

    def _ensure_file(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write([])
        except OSError as e:
            raise StorageError(f"Cannot prepare data file {self.path}: {e}", self.backend_name) from e

    def _write(self, records: List[Record]) -> None:
        try:
            with open(self.tmp_path, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(self.tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {self.path}: {e}", self.backend_name) from e

    def load(self) -> List[Record]:
        self._ensure_file()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}", self.backend_name) from e

        try:
            data = json.loads(raw or "[]")
        except json.JSONDecodeError:
            logger.warning(f"Data file {self.path} is not valid JSON, treating as empty")
            return []

        if not isinstance(data, list):
            logger.warning(f"Data file {self.path} does not hold a JSON array, treating as empty")
            return []
        return data

    def append(self, record: Record) -> None:
        records = self.load()
        records.append(record)
        self._write(records)

    def append_many(self, records: List[Record]) -> None:
        existing = self.load()
        existing.extend(records)
        self._write(existing)

    def remove(self, submission_id: str) -> bool:
        records = self.load()
        remaining = [r for r in records if not (isinstance(r, dict) and r.get("id") == submission_id)]
        self._write(remaining)
        return len(remaining) != len(records)

    def clear(self) -> None:
        self._ensure_file()
        self._write([])

    def replace_all(self, records) -> None:
        # One rename, so readers never see the intermediate empty file
        self._ensure_file()
        self._write(list(records))

    def current_version(self) -> str:
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return "missing"
        except OSError as e:
            raise StorageError(f"Failed to stat {self.path}: {e}", self.backend_name) from e
        # Best effort: with coarse mtime, a recycled inode and an equal size
        # can repeat an earlier version, and the stream then misses that write
        return f"{stat.st_mtime_ns}:{stat.st_ino}:{stat.st_size}"
