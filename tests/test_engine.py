"""Unit tests for the compatibility classifier."""

import logging

from padcompat.classification.combiner import ScoreCombiner
from padcompat.classification.engine import (
    ClassificationDecision,
    CompatibilityClassifier,
    create_default_classifier,
)
from padcompat.classification.extractors import SignalExtractor
from padcompat.core.models import CatalogEntry, DetectionOpinion, SupportLevel


class BrokenCombiner(ScoreCombiner):
    """Combiner that always fails."""

    def combine(self, opinions):
        raise RuntimeError("combiner exploded")


class TestClassificationDecision:
    """Tests for ClassificationDecision dataclass."""

    def test_explanation_lists_signals(self) -> None:
        """Test the explanation names contributing extractors."""
        decision = ClassificationDecision(
            entry_id="e1",
            game_name="Rocket Rally",
            support_level=SupportLevel.FULL,
            opinions=[
                DetectionOpinion(SupportLevel.FULL, 0.8, "Platform Analysis"),
                DetectionOpinion(SupportLevel.UNKNOWN, 0.0, "Publisher Analysis"),
            ],
            reason="highest score",
        )

        assert "Platform Analysis: Full (0.80)" in decision.explanation
        assert "Publisher Analysis" not in decision.explanation
        assert "1 signals" in decision.explanation

    def test_explanation_without_signals(self) -> None:
        """Test the explanation for an entry with no evidence."""
        decision = ClassificationDecision(
            entry_id="e1",
            game_name="Quiet Meadow",
            support_level=SupportLevel.PARTIAL,
        )

        assert "No detection signal" in decision.explanation


class TestCompatibilityClassifier:
    """Tests for CompatibilityClassifier."""

    def test_strategy_scenario(self, strategy_entry) -> None:
        """Test a 2005 PC strategy game is classified PARTIAL."""
        decision = CompatibilityClassifier().analyze(strategy_entry)

        assert decision.support_level == SupportLevel.PARTIAL
        assert round(decision.scores[SupportLevel.PARTIAL], 2) == 1.0
        assert round(decision.scores[SupportLevel.NONE], 2) == 0.28
        assert len(decision.opinions) == 7

    def test_sample_entries(self, sample_entries) -> None:
        """Test the sample catalog classifies as expected."""
        classifier = create_default_classifier()

        levels = [classifier.classify(e) for e in sample_entries]

        assert levels == [SupportLevel.FULL, SupportLevel.NONE, SupportLevel.PARTIAL]

    def test_empty_entry(self) -> None:
        """Test an entry without metadata still gets a level."""
        level = CompatibilityClassifier().classify(CatalogEntry(id="x", name=""))
        assert level == SupportLevel.PARTIAL

    def test_classify_never_raises(self) -> None:
        """Test classify on an object that is not a catalog entry."""
        level = CompatibilityClassifier().classify(object())
        assert isinstance(level, SupportLevel)

    def test_extractor_failure_is_absorbed(self, make_entry) -> None:
        """Test a failing extractor does not stop classification."""

        def broken(entry):
            raise OSError("disk gone")

        classifier = CompatibilityClassifier(
            extractors=[
                SignalExtractor("Broken Analysis", broken),
                SignalExtractor(
                    "Fixed Analysis",
                    lambda entry: DetectionOpinion(SupportLevel.FULL, 0.9, "Fixed Analysis"),
                ),
            ]
        )

        decision = classifier.analyze(make_entry())

        assert decision.support_level == SupportLevel.FULL
        assert decision.opinions[0].level == SupportLevel.UNKNOWN

    def test_combiner_failure_defaults_to_partial(self, make_entry) -> None:
        """Test a combiner failure yields PARTIAL."""
        classifier = CompatibilityClassifier(combiner=BrokenCombiner())

        decision = classifier.analyze(make_entry())

        assert decision.support_level == SupportLevel.PARTIAL
        assert decision.reason == "combiner error"

    def test_injected_logger(self, make_entry, caplog) -> None:
        """Test verdicts are reported to the injected logger."""
        logger = logging.getLogger("padcompat.test.classifier")
        classifier = CompatibilityClassifier(logger=logger)

        with caplog.at_level(logging.DEBUG, logger="padcompat.test.classifier"):
            classifier.classify(make_entry("Rocket Rally"))

        assert any("Classified Rocket Rally" in r.message for r in caplog.records)

    def test_classify_batch(self, sample_entries) -> None:
        """Test batch classification returns one decision per entry."""
        decisions = CompatibilityClassifier().classify_batch(sample_entries)

        assert [d.entry_id for d in decisions] == [e.id for e in sample_entries]
