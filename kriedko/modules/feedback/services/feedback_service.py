# kriedko/modules/feedback/services/feedback_service.py

import json
import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from kriedko.core.exceptions import ValidationError
from kriedko.modules.feedback.models.feedback_models import RATING_FIELDS
from kriedko.modules.feedback.schemas.feedback_schemas import (
    Aggregate,
    FeedbackCreate,
    Submission,
    round_half_up,
)
from kriedko.modules.feedback.services import sentiment_service
from kriedko.modules.feedback.services.aggregation_service import compute_aggregates
from kriedko.modules.feedback.storage.base import SubmissionStore

logger = logging.getLogger(__name__)

ID_SUFFIX_LENGTH = 5
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_submission_id(now: datetime) -> str:
    """``{epochMillis}_{5 random base36 chars}``"""
    millis = (now - EPOCH) // timedelta(milliseconds=1)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{millis}_{suffix}"


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def experience_index(ratings: List[Optional[int]]) -> Optional[float]:
    """Mean of the ratings that are present, 2 decimals; None if none are."""
    present = [r for r in ratings if r is not None]
    if not present:
        return None
    return round_half_up(sum(present) / len(present), 2)


def _parse_json_int(text: str) -> Any:
    try:
        return int(text)
    except ValueError:
        # Past the int digit limit; float() turns it into an infinity
        return float(text)


def parse_payload(raw: bytes) -> Dict[str, Any]:
    """Decode a request body into a JSON object or raise ValidationError."""
    if not raw or not raw.strip():
        return {}
    try:
        body = json.loads(raw, parse_int=_parse_json_int)
    except ValueError as e:
        raise ValidationError(f"Invalid payload: {e.__class__.__name__}") from e
    if not isinstance(body, dict):
        raise ValidationError("Invalid payload: expected a JSON object")
    return body


class FeedbackService:
    """Ingestion: normalize, score and persist public form submissions"""

    def __init__(
        self,
        store: SubmissionStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.clock = clock

    def build_submission(self, payload: Dict[str, Any]) -> Submission:
        """Turn a raw payload into a complete, scored Submission."""
        try:
            data = FeedbackCreate.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError("Invalid payload") from e

        now = self.clock()
        ratings = [getattr(data, field) for field in RATING_FIELDS]

        return Submission(
            id=generate_submission_id(now),
            created_at=format_timestamp(now),
            meal_preference=data.meal_preference,
            taste=data.taste,
            service=data.service,
            wait=data.wait,
            overall=data.overall,
            favourite_item=data.favourite_item,
            improvements=data.improvements,
            experience_index=experience_index(ratings),
            sentiment=sentiment_service.score(data.favourite_item, data.improvements),
        )

    def submit(self, payload: Dict[str, Any]) -> Submission:
        """
        Normalize and persist one submission.

        The record is fully built before the single append, so a rejected
        payload never reaches the store. StorageError propagates: a record
        is only acknowledged once it is durable.
        """
        submission = self.build_submission(payload)
        self.store.append(submission.to_record())
        logger.info(
            f"Stored feedback {submission.id} "
            f"(sentiment={submission.sentiment.label.value}, "
            f"experience_index={submission.experience_index})"
        )
        return submission

    def current_aggregates(self) -> Aggregate:
        return compute_aggregates(self.store.load())
