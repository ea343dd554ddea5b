# kriedko/modules/feedback/storage/cached_store.py

import copy
import logging
from typing import List, Optional

from kriedko.core.exceptions import StorageError
from kriedko.modules.feedback.storage.base import Record, SubmissionStore

logger = logging.getLogger(__name__)


class CachedSubmissionStore(SubmissionStore):
    """
    Read-through cache in front of an authoritative store.

    Precedence: the authoritative store always wins when it answers. The
    last snapshot it returned is only served when it raises StorageError,
    so the dashboard keeps showing data during a remote outage. Writes are
    never cached; they go straight through and fail loudly.
    """

    def __init__(self, authoritative: SubmissionStore):
        self.authoritative = authoritative
        self.backend_name = authoritative.backend_name
        self._snapshot: Optional[List[Record]] = None

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def load(self) -> List[Record]:
        try:
            records = self.authoritative.load()
        except StorageError as e:
            if self._snapshot is None:
                raise
            logger.warning(
                f"Serving cached submissions ({len(self._snapshot)} records), "
                f"{self.backend_name} store unavailable: {e}"
            )
            return copy.deepcopy(self._snapshot)

        self._snapshot = copy.deepcopy(records)
        return records

    def append(self, record: Record) -> None:
        self.authoritative.append(record)

    def remove(self, submission_id: str) -> bool:
        return self.authoritative.remove(submission_id)

    def clear(self) -> None:
        self.authoritative.clear()

    def append_many(self, records: List[Record]) -> None:
        self.authoritative.append_many(records)

    def replace_all(self, records) -> None:
        self.authoritative.replace_all(records)

    def count(self) -> int:
        return self.authoritative.count()

    def current_version(self) -> str:
        return self.authoritative.current_version()

    def close(self) -> None:
        self.authoritative.close()
