# kriedko/modules/feedback/services/aggregation_service.py

import logging
from typing import Any, Dict, Iterable, Mapping, Union

from kriedko.modules.feedback.models.feedback_models import RATING_FIELDS, SentimentLabel
from kriedko.modules.feedback.schemas.feedback_schemas import (
    Aggregate,
    AggregateAverages,
    AggregateSentiment,
    Submission,
    round_half_up,
)

logger = logging.getLogger(__name__)

SubmissionLike = Union[Submission, Mapping[str, Any]]

_LABELS = {label.value for label in SentimentLabel}


def _as_record(submission: SubmissionLike) -> Mapping[str, Any]:
    if isinstance(submission, Submission):
        return submission.to_record()
    return submission


def _numeric(value: Any) -> float:
    # Imported records are stored verbatim, so tolerate anything here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def compute_aggregates(submissions: Iterable[SubmissionLike]) -> Aggregate:
    """
    Reduce submissions into dashboard summary statistics.

    Missing ratings count as 0 in the per-field sums. The experience index
    average is (sum of all four rating sums) / 4 / count rather than the
    mean of each record's own experienceIndex; the two differ when ratings
    are missing and the former is what dashboards have always shown.
    """
    records = [_as_record(s) for s in submissions]
    count = len(records)

    if count == 0:
        return Aggregate()

    sums: Dict[str, float] = {field: 0.0 for field in RATING_FIELDS}
    label_counts: Dict[str, int] = {label: 0 for label in _LABELS}
    score_sum = 0.0

    for record in records:
        for field in RATING_FIELDS:
            sums[field] += _numeric(record.get(field))

        sentiment = record.get("sentiment")
        if isinstance(sentiment, Mapping):
            score_sum += _numeric(sentiment.get("score"))
            label = sentiment.get("label")
            if label in label_counts:
                label_counts[label] += 1

    averages = AggregateAverages(
        taste=round_half_up(sums["taste"] / count, 2),
        service=round_half_up(sums["service"] / count, 2),
        wait=round_half_up(sums["wait"] / count, 2),
        overall=round_half_up(sums["overall"] / count, 2),
        experience_index=round_half_up(sum(sums.values()) / 4 / count, 2),
    )

    sentiment_summary = AggregateSentiment(
        positive=label_counts[SentimentLabel.POSITIVE.value],
        neutral=label_counts[SentimentLabel.NEUTRAL.value],
        negative=label_counts[SentimentLabel.NEGATIVE.value],
        average_score=round_half_up(score_sum / count, 3),
    )

    return Aggregate(count=count, averages=averages, sentiment=sentiment_summary)
