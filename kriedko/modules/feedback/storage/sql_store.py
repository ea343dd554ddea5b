# kriedko/modules/feedback/storage/sql_store.py

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from sqlalchemy import desc
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from kriedko.core.database import Base, build_session_factory
from kriedko.core.exceptions import StorageError
from kriedko.modules.feedback.models.feedback_models import FeedbackSubmission, StoreVersion
from kriedko.modules.feedback.storage.base import Record, SubmissionStore

logger = logging.getLogger(__name__)

VERSION_ROW_ID = 1


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _float_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def record_to_row(record: Record) -> FeedbackSubmission:
    """Map a wire record onto the relational columns, keeping it verbatim in payload."""
    sentiment = record.get("sentiment")
    meal_preference = record.get("mealPreference")
    return FeedbackSubmission(
        id=str(record.get("id")),
        created_at=_text(record.get("createdAt")),
        meal_preference=meal_preference if isinstance(meal_preference, str) else None,
        taste=_int_or_none(record.get("taste")),
        service=_int_or_none(record.get("service")),
        wait_time=_int_or_none(record.get("wait")),
        overall=_int_or_none(record.get("overall")),
        favourite_item=_text(record.get("favouriteItem")),
        improvements=_text(record.get("improvements")),
        experience_index=_float_or_none(record.get("experienceIndex")),
        sentiment=sentiment if isinstance(sentiment, dict) else None,
        payload=record,
    )


class SqlSubmissionStore(SubmissionStore):
    """
    Relational store on SQLAlchemy.

    The version lives in a one-row counter table updated in the same
    transaction as the mutation it marks.
    """

    backend_name = "sql"

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None):
        self.engine = engine
        self.session_factory = session_factory or build_session_factory(engine)
        try:
            Base.metadata.create_all(
                bind=engine,
                tables=[FeedbackSubmission.__table__, StoreVersion.__table__],
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to prepare feedback tables: {e}", self.backend_name) from e

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Failed to {operation}: {e}", self.backend_name) from e
        finally:
            db.close()

    def _bump_version(self, db: Session) -> None:
        row = db.get(StoreVersion, VERSION_ROW_ID)
        if row is None:
            db.add(StoreVersion(id=VERSION_ROW_ID, version=1))
        else:
            row.version = (row.version or 0) + 1

    def load(self) -> List[Record]:
        with self._session("load submissions") as db:
            rows = (
                db.query(FeedbackSubmission)
                .order_by(desc(FeedbackSubmission.created_at))
                .all()
            )
            return [dict(row.payload) for row in rows]

    def append(self, record: Record) -> None:
        with self._session("store submission") as db:
            db.add(record_to_row(record))
            self._bump_version(db)

    def remove(self, submission_id: str) -> bool:
        with self._session("remove submission") as db:
            deleted = (
                db.query(FeedbackSubmission)
                .filter(FeedbackSubmission.id == submission_id)
                .delete(synchronize_session=False)
            )
            self._bump_version(db)
        return deleted > 0

    def clear(self) -> None:
        with self._session("clear submissions") as db:
            db.query(FeedbackSubmission).delete(synchronize_session=False)
            self._bump_version(db)

    def append_many(self, records: List[Record]) -> None:
        with self._session("store submissions") as db:
            db.add_all([record_to_row(record) for record in records])
            self._bump_version(db)

    def replace_all(self, records) -> None:
        # Delete and insert share one transaction; a failed insert keeps the old rows
        with self._session("import submissions") as db:
            db.query(FeedbackSubmission).delete(synchronize_session=False)
            db.flush()
            db.add_all([record_to_row(record) for record in records])
            self._bump_version(db)

    def count(self) -> int:
        with self._session("count submissions") as db:
            return db.query(FeedbackSubmission).count()

    def current_version(self) -> str:
        with self._session("read store version") as db:
            row = db.get(StoreVersion, VERSION_ROW_ID)
            return str(row.version if row else 0)

    def close(self) -> None:
        self.engine.dispose()
