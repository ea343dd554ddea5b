# kriedko/modules/feedback/services/admin_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from kriedko.core.exceptions import ValidationError
from kriedko.modules.feedback.models.feedback_models import SentimentLabel
from kriedko.modules.feedback.schemas.feedback_schemas import (
    EXPORT_FORMAT_VERSION,
    ExportDocument,
)
from kriedko.modules.feedback.services.feedback_service import format_timestamp
from kriedko.modules.feedback.storage.base import Record, SubmissionStore, sort_newest_first

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("favouriteItem", "improvements", "mealPreference")


def matches_search(
    record: Record, query: Optional[str] = None, sentiment: Optional[SentimentLabel] = None
) -> bool:
    """Case-insensitive substring search plus an optional sentiment label filter."""
    if query:
        needle = query.lower()
        haystacks = (record.get(field) for field in SEARCH_FIELDS)
        if not any(isinstance(h, str) and needle in h.lower() for h in haystacks):
            return False

    if sentiment is not None:
        stored = record.get("sentiment")
        if not isinstance(stored, dict) or stored.get("label") != sentiment.value:
            return False

    return True


def extract_feedbacks(body: Any) -> List[Record]:
    """
    Pull the record list out of an import body.

    Only the collection shape is checked (a ``feedbacks`` list of objects
    with unique ids); records are otherwise trusted and kept verbatim.
    Everything is checked before the store is touched.
    """
    if not isinstance(body, dict):
        raise ValidationError("Invalid payload")

    feedbacks = body.get("feedbacks")
    if not isinstance(feedbacks, list):
        raise ValidationError("Invalid payload")

    seen = set()
    for position, record in enumerate(feedbacks):
        if not isinstance(record, dict):
            raise ValidationError(f"Invalid payload: feedbacks[{position}] is not an object")
        submission_id = record.get("id")
        if not isinstance(submission_id, str) or not submission_id:
            raise ValidationError(f"Invalid payload: feedbacks[{position}] has no id")
        if submission_id in seen:
            raise ValidationError(f"Invalid payload: duplicate id {submission_id}")
        seen.add(submission_id)

    return feedbacks


class AdminService:
    """Dashboard operations over the submission store"""

    def __init__(self, store: SubmissionStore):
        self.store = store

    def list_submissions(
        self, query: Optional[str] = None, sentiment: Optional[SentimentLabel] = None
    ) -> List[Record]:
        records = sort_newest_first(self.store.load())
        if not query and sentiment is None:
            return records
        return [r for r in records if matches_search(r, query, sentiment)]

    def delete_submission(self, submission_id: str) -> bool:
        removed = self.store.remove(submission_id)
        if removed:
            logger.info(f"Deleted feedback {submission_id}")
        else:
            logger.info(f"Delete requested for unknown feedback {submission_id}")
        return removed

    def delete_all(self) -> None:
        self.store.clear()
        logger.warning("Cleared all feedback submissions")

    def import_submissions(self, body: Any) -> int:
        """Bulk replace the store contents with an export document's records."""
        feedbacks = extract_feedbacks(body)
        self.store.replace_all(feedbacks)
        logger.info(f"Imported {len(feedbacks)} feedback submissions")
        return len(feedbacks)

    def export_document(self) -> Dict[str, Any]:
        document = ExportDocument(
            version=EXPORT_FORMAT_VERSION,
            exported_at=format_timestamp(datetime.now(timezone.utc)),
            feedbacks=sort_newest_first(self.store.load()),
        )
        return document.model_dump(by_alias=True)
