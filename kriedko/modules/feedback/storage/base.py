# kriedko/modules/feedback/storage/base.py

"""
Persistence interface for feedback submissions.

Records are plain JSON-ready dicts in their wire shape (camelCase keys).
Stores never validate or reshape them: imported data is kept verbatim so
an export/import round trip is exact.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List

Record = Dict[str, Any]


class SubmissionStore(ABC):
    """
    Backend-agnostic submission store.

    Every mutating call must change the value returned by current_version()
    so the live stream can detect it with a cheap equality check. Backend
    specific failures are raised as StorageError.
    """

    backend_name: str = "abstract"

    @abstractmethod
    def load(self) -> List[Record]:
        """All records in backend-native order."""

    @abstractmethod
    def append(self, record: Record) -> None:
        """Persist one record; durable once this returns."""

    @abstractmethod
    def remove(self, submission_id: str) -> bool:
        """Delete one record. Returns False if the id is unknown."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every record."""

    @abstractmethod
    def current_version(self) -> str:
        """Opaque change marker."""

    def replace_all(self, records: Iterable[Record]) -> None:
        """
        Clear then bulk insert.

        Not atomic: a concurrent reader may briefly see an empty store.
        """
        self.clear()
        records = list(records)
        if records:
            self.append_many(records)

    def append_many(self, records: List[Record]) -> None:
        """Persist several records as one write where the backend allows it."""
        for record in records:
            self.append(record)

    def count(self) -> int:
        return len(self.load())

    def close(self) -> None:
        """Release backend resources."""


def created_at_millis(record: Record) -> float:
    """Epoch millis of a record's createdAt, 0 when missing or unparseable."""
    value = record.get("createdAt")
    if not isinstance(value, str) or not value:
        return 0.0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    return parsed.timestamp() * 1000


def sort_newest_first(records: Iterable[Record]) -> List[Record]:
    """Order records by createdAt descending, the dashboard's display order."""
    return sorted(records, key=created_at_millis, reverse=True)
