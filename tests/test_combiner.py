"""Unit tests for the score combiner."""

import pytest

from padcompat.classification.combiner import (
    DEFAULT_LEVEL,
    ScoreCombiner,
    combine_opinions,
)
from padcompat.classification.extractors import (
    METHOD_ENGINE,
    METHOD_EXECUTABLE,
    METHOD_GENRE_TAGS,
    METHOD_PLATFORM,
    METHOD_RELEASE_DATE,
)
from padcompat.core.models import DetectionOpinion, SupportLevel


def opinion(level: SupportLevel, confidence: float, method: str = "Metadata Analysis") -> DetectionOpinion:
    return DetectionOpinion(level, confidence, method)


class TestScoreCombiner:
    """Tests for confidence-weighted voting."""

    def test_no_opinions(self) -> None:
        """Test an empty opinion list defaults to PARTIAL."""
        verdict = ScoreCombiner().combine([])

        assert verdict.level == DEFAULT_LEVEL == SupportLevel.PARTIAL
        assert verdict.winner is None
        assert verdict.reason == "no signal"

    def test_zero_confidence_ignored(self) -> None:
        """Test opinions without confidence do not vote."""
        verdict = ScoreCombiner().combine([
            opinion(SupportLevel.UNKNOWN, 0.0, METHOD_ENGINE),
            opinion(SupportLevel.FULL, 0.0),
        ])

        assert verdict.level == SupportLevel.PARTIAL
        assert verdict.scores == {}
        assert verdict.has_file_evidence is False

    def test_scores_are_summed(self) -> None:
        """Test confidences are summed per level."""
        verdict = ScoreCombiner().combine([
            opinion(SupportLevel.FULL, 0.7),
            opinion(SupportLevel.NONE, 0.5),
            opinion(SupportLevel.FULL, 0.8),
        ])

        assert verdict.scores[SupportLevel.FULL] == pytest.approx(1.5)
        assert verdict.scores[SupportLevel.NONE] == pytest.approx(0.5)
        assert verdict.level == SupportLevel.FULL
        assert verdict.reason == "highest score"

    def test_tie_keeps_first_seen(self) -> None:
        """Test ties go to the level encountered first."""
        verdict = ScoreCombiner().combine([
            opinion(SupportLevel.NONE, 0.6),
            opinion(SupportLevel.FULL, 0.6),
        ])

        assert verdict.level == SupportLevel.NONE

    def test_low_confidence_falls_back(self) -> None:
        """Test a weak winner without file evidence becomes PARTIAL."""
        verdict = ScoreCombiner().combine([opinion(SupportLevel.NONE, 0.35)])

        assert verdict.winner == SupportLevel.NONE
        assert verdict.level == SupportLevel.PARTIAL
        assert verdict.reason == "low confidence"

    def test_file_evidence_trusted(self) -> None:
        """Test engine evidence lets a weak winner stand."""
        verdict = ScoreCombiner().combine([opinion(SupportLevel.FULL, 0.3, METHOD_ENGINE)])

        assert verdict.has_file_evidence is True
        assert verdict.level == SupportLevel.FULL
        assert verdict.reason == "file evidence"

    def test_file_evidence_below_threshold(self) -> None:
        """Test file evidence below 0.3 still falls back."""
        verdict = ScoreCombiner().combine([opinion(SupportLevel.FULL, 0.25, METHOD_EXECUTABLE)])

        assert verdict.has_file_evidence is True
        assert verdict.level == SupportLevel.PARTIAL

    def test_file_evidence_supports_any_winner(self) -> None:
        """Test file evidence applies even when another extractor wins."""
        verdict = ScoreCombiner().combine([
            opinion(SupportLevel.PARTIAL, 0.1, METHOD_EXECUTABLE),
            opinion(SupportLevel.NONE, 0.35),
        ])

        assert verdict.level == SupportLevel.NONE
        assert verdict.reason == "file evidence"

    def test_custom_thresholds(self) -> None:
        """Test thresholds can be injected."""
        combiner = ScoreCombiner(low_confidence_threshold=0.2)

        assert combiner.combine([opinion(SupportLevel.NONE, 0.35)]).level == SupportLevel.NONE

    def test_strategy_scenario(self) -> None:
        """Test a 2005 PC strategy game resolves to PARTIAL."""
        verdict = ScoreCombiner().combine([
            opinion(SupportLevel.NONE, 0.28, METHOD_GENRE_TAGS),
            opinion(SupportLevel.PARTIAL, 0.4, METHOD_RELEASE_DATE),
            opinion(SupportLevel.PARTIAL, 0.6, METHOD_PLATFORM),
        ])

        assert verdict.scores[SupportLevel.NONE] == pytest.approx(0.28)
        assert verdict.scores[SupportLevel.PARTIAL] == pytest.approx(1.0)
        assert verdict.has_file_evidence is False
        assert verdict.level == SupportLevel.PARTIAL


class TestCombineOpinions:
    """Tests for the combine_opinions helper."""

    def test_returns_level(self) -> None:
        """Test the helper returns only the level."""
        level = combine_opinions([opinion(SupportLevel.FULL, 0.9)])
        assert level == SupportLevel.FULL
