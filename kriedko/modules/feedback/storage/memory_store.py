# kriedko/modules/feedback/storage/memory_store.py

import copy
import itertools
import logging
import threading
from typing import List

from kriedko.modules.feedback.storage.base import Record, SubmissionStore

logger = logging.getLogger(__name__)


class InMemorySubmissionStore(SubmissionStore):
    """Process-local store for development and tests"""

    backend_name = "memory"

    def __init__(self):
        self._records: List[Record] = []
        self._version = itertools.count(1)
        self._current = 0
        self._lock = threading.Lock()

    def _bump(self) -> None:
        self._current = next(self._version)

    def load(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._records)

    def append(self, record: Record) -> None:
        with self._lock:
            self._records.append(copy.deepcopy(record))
            self._bump()

    def remove(self, submission_id: str) -> bool:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.get("id") != submission_id]
            removed = len(self._records) != before
            self._bump()
            return removed

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._bump()

    def append_many(self, records: List[Record]) -> None:
        with self._lock:
            self._records.extend(copy.deepcopy(records))
            self._bump()

    def current_version(self) -> str:
        return str(self._current)
