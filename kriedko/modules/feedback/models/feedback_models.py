# kriedko/modules/feedback/models/feedback_models.py

from sqlalchemy import Column, Integer, String, Text, Float, JSON, Index
import enum

from kriedko.core.database import Base


class SentimentLabel(str, enum.Enum):
    """Lexicon sentiment labels"""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


RATING_FIELDS = ("taste", "service", "wait", "overall")


class FeedbackSubmission(Base):
    """Relational row for one customer feedback record"""

    __tablename__ = "feedback_submissions"

    id = Column(String(64), primary_key=True)
    created_at = Column(String(40), nullable=False)

    meal_preference = Column(String(50), nullable=True)
    taste = Column(Integer, nullable=True)
    service = Column(Integer, nullable=True)
    wait_time = Column(Integer, nullable=True)
    overall = Column(Integer, nullable=True)

    favourite_item = Column(Text, nullable=False, default="")
    improvements = Column(Text, nullable=False, default="")

    experience_index = Column(Float, nullable=True)
    sentiment = Column(JSON, nullable=True)

    # Verbatim record as stored; load() returns this so round trips are exact
    payload = Column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_feedback_submissions_created", "created_at"),
    )

    def __repr__(self):
        return f"<FeedbackSubmission(id={self.id}, created_at={self.created_at})>"


class StoreVersion(Base):
    """Single-row change counter bumped by every store mutation"""

    __tablename__ = "feedback_store_versions"

    id = Column(Integer, primary_key=True)
    version = Column(Integer, nullable=False, default=0)
