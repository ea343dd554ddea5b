# kriedko/modules/feedback/tests/test_sentiment_service.py

import pytest

from kriedko.modules.feedback.models.feedback_models import SentimentLabel
from kriedko.modules.feedback.services import sentiment_service
from kriedko.modules.feedback.services.sentiment_service import (
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    label_for,
    score,
    tokenize,
)


class TestLexiconScoring:
    """Test cases for the lexicon sentiment scorer"""

    def test_positive_text(self):
        result = score("amazing delicious food")

        assert result.label == SentimentLabel.POSITIVE
        assert result.score == pytest.approx(0.2)

    def test_negative_text(self):
        result = score("terrible cold rude")

        assert result.label == SentimentLabel.NEGATIVE
        assert result.score == pytest.approx(-0.3)

    def test_empty_text_is_neutral_zero(self):
        result = score("")

        assert result.label == SentimentLabel.NEUTRAL
        assert result.score == 0

    def test_no_texts_and_none_are_neutral(self):
        assert score().score == 0
        assert score(None, None).label == SentimentLabel.NEUTRAL

    def test_single_positive_word_stays_neutral(self):
        """One hit is 0.1, inside the neutral band"""
        result = score("good")

        assert result.score == pytest.approx(0.1)
        assert result.label == SentimentLabel.NEUTRAL

    def test_texts_are_combined(self):
        result = score("Loved the biryani", "nothing, it was perfect")

        assert result.score == pytest.approx(0.2)
        assert result.label == SentimentLabel.POSITIVE

    def test_mixed_text_cancels_out(self):
        result = score("great food but slow service")

        assert result.score == 0
        assert result.label == SentimentLabel.NEUTRAL

    def test_score_is_clamped(self):
        positive = score(" ".join(["great"] * 25))
        negative = score(" ".join(["awful"] * 25))

        assert positive.score == 1.0
        assert negative.score == -1.0

    def test_punctuation_and_case_are_ignored(self):
        assert score("AMAZING!!! Delicious...").score == pytest.approx(0.2)

    def test_digits_split_words(self):
        assert tokenize("great2go") == ["great", "go"]

    def test_deterministic(self):
        text = "Tasty paneer but the room was noisy and crowded"

        assert score(text) == score(text)


class TestThresholds:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.16, SentimentLabel.POSITIVE),
            (0.15, SentimentLabel.NEUTRAL),
            (0.0, SentimentLabel.NEUTRAL),
            (-0.15, SentimentLabel.NEUTRAL),
            (-0.16, SentimentLabel.NEGATIVE),
        ],
    )
    def test_label_for(self, value, expected):
        assert label_for(value) == expected


def test_lexicons_are_disjoint():
    assert not (POSITIVE_WORDS & NEGATIVE_WORDS)


def test_module_exposes_score():
    assert sentiment_service.score("best") == score("best")
