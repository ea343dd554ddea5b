# kriedko/modules/feedback/schemas/feedback_schemas.py

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from kriedko.modules.feedback.models.feedback_models import SentimentLabel


MAX_TEXT_LENGTH = 2000
MIN_RATING = 1
MAX_RATING = 5

EXPORT_FORMAT_VERSION = "1.0"


def normalize_rating(value: Any) -> Optional[int]:
    """
    Coerce a raw rating into an integer in [1, 5].

    Anything that does not read as a finite number becomes None; numbers are
    rounded half away from zero and clamped, never rejected.
    """
    if value is None:
        return None
    if isinstance(value, (bool, int, float)):
        try:
            number = float(value)
        except OverflowError:
            # An integer beyond float range reads as an infinity
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None

    # Clamp before rounding; both bounds are integers so the result is the same
    number = max(float(MIN_RATING), min(float(MAX_RATING), number))
    return int(Decimal(repr(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_text(value: Any) -> str:
    """Missing text becomes an empty string; long text is truncated."""
    if value is None:
        return ""
    return str(value)[:MAX_TEXT_LENGTH]


def round_half_up(value: float, places: int) -> float:
    """Round like a decimal display would (2.345 -> 2.35), not banker's rounding."""
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return float(value)


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and in export files"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SentimentResult(BaseModel):
    """Lexicon sentiment stored with each submission"""

    score: float = Field(..., ge=-1.0, le=1.0)
    label: SentimentLabel


class FeedbackCreate(CamelModel):
    """Raw public form payload, normalized field by field"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    meal_preference: Optional[str] = None
    taste: Optional[int] = None
    service: Optional[int] = None
    wait: Optional[int] = None
    overall: Optional[int] = None
    favourite_item: str = ""
    improvements: str = ""

    @field_validator("taste", "service", "wait", "overall", mode="before")
    @classmethod
    def validate_rating(cls, v):
        return normalize_rating(v)

    @field_validator("favourite_item", "improvements", mode="before")
    @classmethod
    def validate_text(cls, v):
        return normalize_text(v)

    @field_validator("meal_preference", mode="before")
    @classmethod
    def validate_meal_preference(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class Submission(CamelModel):
    """One stored customer feedback record"""

    id: str
    created_at: str
    meal_preference: Optional[str] = None
    taste: Optional[int] = None
    service: Optional[int] = None
    wait: Optional[int] = None
    overall: Optional[int] = None
    favourite_item: str = ""
    improvements: str = ""
    experience_index: Optional[float] = None
    sentiment: SentimentResult

    def to_record(self) -> Dict[str, Any]:
        """Wire/storage representation (camelCase, JSON-ready)."""
        return self.model_dump(by_alias=True, mode="json")


class FeedbackAck(BaseModel):
    ok: bool = True
    id: str


class AggregateAverages(CamelModel):
    taste: float = 0
    service: float = 0
    wait: float = 0
    overall: float = 0
    experience_index: float = 0


class AggregateSentiment(CamelModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0
    average_score: float = 0


class Aggregate(CamelModel):
    """Summary statistics over a set of submissions, never persisted"""

    count: int = 0
    averages: AggregateAverages = Field(default_factory=AggregateAverages)
    sentiment: AggregateSentiment = Field(default_factory=AggregateSentiment)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ExportDocument(CamelModel):
    """Admin export/import file"""

    version: str = EXPORT_FORMAT_VERSION
    exported_at: str
    feedbacks: List[Dict[str, Any]]


class StoreStatus(BaseModel):
    backend: str
    count: int


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""
