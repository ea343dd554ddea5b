# kriedko/modules/feedback/storage/kv_store.py

import json
import logging
from typing import List

import redis
from redis import Redis

from kriedko.core.exceptions import StorageError
from kriedko.core.redis_config import close_redis_client
from kriedko.modules.feedback.storage.base import Record, SubmissionStore, created_at_millis

logger = logging.getLogger(__name__)


class RedisSubmissionStore(SubmissionStore):
    """
    Key-value store on Redis.

    Layout under ``prefix``:
        {prefix}:sub:{id}   JSON record
        {prefix}:index      sorted set of ids scored by createdAt millis
        {prefix}:version    integer counter, INCR on every mutation
    """

    backend_name = "kv"

    def __init__(self, client: Redis, prefix: str = "kriedko"):
        self.client = client
        self.prefix = prefix
        self.index_key = f"{prefix}:index"
        self.version_key = f"{prefix}:version"

    def _record_key(self, submission_id: str) -> str:
        return f"{self.prefix}:sub:{submission_id}"

    def _bump_version(self) -> None:
        self.client.incr(self.version_key)

    def _index_and_bump(self, submission_id: str, score: float) -> None:
        """Index update after the record itself is stored; best effort."""
        try:
            self.client.zadd(self.index_key, {submission_id: score})
            self._bump_version()
        except redis.RedisError as e:
            logger.error(
                f"Stored record {submission_id} but failed to update index/version: {e}"
            )

    def load(self) -> List[Record]:
        try:
            ids = self.client.zrevrange(self.index_key, 0, -1)
            if not ids:
                return []
            raw_records = self.client.mget([self._record_key(i) for i in ids])
        except redis.RedisError as e:
            raise StorageError(f"Failed to load submissions: {e}", self.backend_name) from e

        records = []
        for submission_id, raw in zip(ids, raw_records):
            if raw is None:
                continue
            try:
                records.append(json.loads(raw))
            except json.JSONDecodeError:
                logger.warning(f"Skipping unreadable record {submission_id}")
        return records

    def append(self, record: Record) -> None:
        submission_id = str(record.get("id"))
        try:
            self.client.set(self._record_key(submission_id), json.dumps(record))
        except (redis.RedisError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to store submission {submission_id}: {e}", self.backend_name) from e
        self._index_and_bump(submission_id, created_at_millis(record))

    def remove(self, submission_id: str) -> bool:
        try:
            deleted = self.client.delete(self._record_key(submission_id))
            self.client.zrem(self.index_key, submission_id)
            self._bump_version()
        except redis.RedisError as e:
            raise StorageError(f"Failed to remove submission {submission_id}: {e}", self.backend_name) from e
        return bool(deleted)

    def clear(self) -> None:
        try:
            ids = self.client.zrange(self.index_key, 0, -1)
            if ids:
                self.client.delete(*[self._record_key(i) for i in ids])
            self.client.delete(self.index_key)
            self._bump_version()
        except redis.RedisError as e:
            raise StorageError(f"Failed to clear submissions: {e}", self.backend_name) from e

    def append_many(self, records: List[Record]) -> None:
        try:
            pipe = self.client.pipeline(transaction=False)
            for record in records:
                submission_id = str(record.get("id"))
                pipe.set(self._record_key(submission_id), json.dumps(record))
                pipe.zadd(self.index_key, {submission_id: created_at_millis(record)})
            pipe.incr(self.version_key)
            pipe.execute()
        except (redis.RedisError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to import submissions: {e}", self.backend_name) from e

    def count(self) -> int:
        try:
            return int(self.client.zcard(self.index_key))
        except redis.RedisError as e:
            raise StorageError(f"Failed to count submissions: {e}", self.backend_name) from e

    def current_version(self) -> str:
        try:
            value = self.client.get(self.version_key)
        except redis.RedisError as e:
            raise StorageError(f"Failed to read store version: {e}", self.backend_name) from e
        return str(value or 0)

    def close(self) -> None:
        close_redis_client(self.client)
