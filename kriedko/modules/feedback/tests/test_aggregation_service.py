# kriedko/modules/feedback/tests/test_aggregation_service.py

import pytest

from kriedko.modules.feedback.schemas.feedback_schemas import Aggregate, round_half_up
from kriedko.modules.feedback.services.aggregation_service import compute_aggregates


class TestComputeAggregates:
    """Test cases for dashboard aggregate statistics"""

    def test_empty_input_is_zero_aggregate(self):
        result = compute_aggregates([])

        assert result == Aggregate()
        assert result.to_payload() == {
            "count": 0,
            "averages": {
                "taste": 0,
                "service": 0,
                "wait": 0,
                "overall": 0,
                "experienceIndex": 0,
            },
            "sentiment": {"positive": 0, "neutral": 0, "negative": 0, "averageScore": 0},
        }

    def test_single_perfect_submission(self, record_factory):
        record = record_factory(
            "1_aaaaa",
            "2024-05-01T00:00:00.000Z",
            {"taste": 5, "service": 5, "wait": 5, "overall": 5, "experienceIndex": 5.0},
            label="positive",
            score=0.4,
        )

        result = compute_aggregates([record])

        assert result.count == 1
        assert result.averages.taste == 5.0
        assert result.averages.experience_index == 5.0
        assert result.sentiment.positive == 1
        assert result.sentiment.average_score == pytest.approx(0.4)

    def test_averages_treat_missing_ratings_as_zero(self, sample_records):
        result = compute_aggregates(sample_records)

        assert result.count == 3
        assert result.averages.taste == 3.67
        assert result.averages.service == 2.0
        assert result.averages.wait == 2.0
        assert result.averages.overall == 3.67

    def test_experience_index_average_uses_rating_sums(self, sample_records):
        """Sum of all four rating sums / 4 / count, not the mean of stored indexes"""
        result = compute_aggregates(sample_records)

        per_record_mean = sum(r["experienceIndex"] for r in sample_records) / len(sample_records)

        assert result.averages.experience_index == 2.83
        assert per_record_mean == pytest.approx(3.5)
        assert result.averages.experience_index != round(per_record_mean, 2)

    def test_sentiment_counts(self, sample_records):
        result = compute_aggregates(sample_records)

        assert result.sentiment.positive == 1
        assert result.sentiment.negative == 1
        assert result.sentiment.neutral == 1
        assert result.sentiment.average_score == pytest.approx(0.0)

    def test_average_score_rounds_to_three_places(self, record_factory):
        records = [
            record_factory(f"{i}_x", "2024-05-01T00:00:00.000Z", score=s)
            for i, s in enumerate([0.1, 0.2, 0.2])
        ]

        assert compute_aggregates(records).sentiment.average_score == 0.167

    def test_rounding_is_half_up(self, record_factory):
        # 17 / 8 = 2.125 exactly; banker's rounding would give 2.12
        records = [
            record_factory(f"{i}_x", "2024-05-01T00:00:00.000Z", {"taste": 3 if i == 0 else 2})
            for i in range(8)
        ]

        assert compute_aggregates(records).averages.taste == 2.13

    def test_record_without_sentiment_counts_no_label(self, record_factory):
        bare = {"id": "1_a", "createdAt": "2024-05-01T00:00:00.000Z", "taste": 4}
        scored = record_factory("2_b", "2024-05-01T00:00:00.000Z", label="positive", score=0.2)

        result = compute_aggregates([bare, scored])

        assert result.count == 2
        assert result.sentiment.positive == 1
        assert result.sentiment.neutral == 0
        assert result.sentiment.negative == 0
        assert result.sentiment.average_score == pytest.approx(0.1)

    def test_loose_imported_values_are_tolerated(self):
        loose = {"id": "1_a", "taste": "5", "service": True, "sentiment": "positive"}

        result = compute_aggregates([loose])

        assert result.count == 1
        assert result.averages.taste == 0
        assert result.averages.service == 0
        assert result.sentiment.positive == 0

    def test_accepts_submission_models(self, feedback_service, sample_payload):
        submission = feedback_service.build_submission(sample_payload)

        from_model = compute_aggregates([submission])
        from_record = compute_aggregates([submission.to_record()])

        assert from_model == from_record
        assert from_model.averages.taste == 5.0


@pytest.mark.parametrize(
    "value,places,expected",
    [
        (2.345, 2, 2.35),
        (2.125, 2, 2.13),
        (0.0005, 3, 0.001),
        (-2.345, 2, -2.35),
        (3.0, 2, 3.0),
    ],
)
def test_round_half_up(value, places, expected):
    assert round_half_up(value, places) == expected
