"""Compatibility Classifier - public entry point for controller detection.

This module runs every signal extractor against a catalog entry and
feeds the resulting opinions to the score combiner.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from padcompat.classification.combiner import DEFAULT_LEVEL, ScoreCombiner
from padcompat.classification.extractors import SIGNAL_EXTRACTORS, SignalExtractor
from padcompat.core.logging_config import log_detection
from padcompat.core.models import CatalogEntry, DetectionOpinion, SupportLevel


@dataclass
class ClassificationDecision:
    """A classification verdict with the evidence behind it.

    Attributes:
        entry_id: ID of the classified catalog entry
        game_name: Name of the classified game
        support_level: Final support level
        opinions: Opinions produced by every extractor
        scores: Summed confidence per support level
        reason: Rule of the combiner that decided the verdict
        timestamp: When the classification was made
    """

    entry_id: str
    game_name: str
    support_level: SupportLevel
    opinions: list[DetectionOpinion] = field(default_factory=list)
    scores: dict[SupportLevel, float] = field(default_factory=dict)
    reason: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def explanation(self) -> str:
        """Human-readable explanation of the verdict."""
        signals = [
            f"{o.method}: {o.level.value} ({o.confidence:.2f})"
            for o in self.opinions
            if o.confidence > 0
        ]
        if not signals:
            return f"No detection signal; defaulting to {self.support_level.value}"

        return (
            f"Verdict {self.support_level.value} ({self.reason}) "
            f"from {len(signals)} signals: {'; '.join(signals)}"
        )


class CompatibilityClassifier:
    """Classify the controller support of catalog entries.

    Every extractor always runs; their order only affects tie-breaks in
    the combiner.

    Example:
        classifier = CompatibilityClassifier()
        level = classifier.classify(entry)
        decision = classifier.analyze(entry)
        print(decision.explanation)
    """

    def __init__(
        self,
        extractors: list[SignalExtractor] | None = None,
        combiner: ScoreCombiner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            extractors: Extractors to run (defaults to SIGNAL_EXTRACTORS)
            combiner: Score combiner (defaults to standard thresholds)
            logger: Logger to report to
        """
        self.extractors = list(extractors) if extractors is not None else list(SIGNAL_EXTRACTORS)
        self.combiner = combiner or ScoreCombiner()
        self.logger = logger or logging.getLogger("padcompat.classification.engine")

    def analyze(self, entry: CatalogEntry) -> ClassificationDecision:
        """Classify an entry and keep the supporting evidence.

        Args:
            entry: Catalog entry to classify.

        Returns:
            ClassificationDecision for the entry.
        """
        name = getattr(entry, "name", "") or ""
        entry_id = getattr(entry, "id", "") or ""

        opinions = [extractor.extract(entry) for extractor in self.extractors]

        try:
            verdict = self.combiner.combine(opinions)
        except Exception as e:
            self.logger.warning(f"Failed to combine opinions for {name}: {e}")
            return ClassificationDecision(
                entry_id=entry_id,
                game_name=name,
                support_level=DEFAULT_LEVEL,
                opinions=opinions,
                reason="combiner error",
            )

        decision = ClassificationDecision(
            entry_id=entry_id,
            game_name=name,
            support_level=verdict.level,
            opinions=opinions,
            scores=dict(verdict.scores),
            reason=verdict.reason,
        )

        self.logger.debug(f"Classified {name}: {decision.explanation}")
        log_detection(
            name,
            decision.support_level.value,
            {level.value: score for level, score in decision.scores.items()},
        )

        return decision

    def classify(self, entry: CatalogEntry) -> SupportLevel:
        """Classify an entry.

        Args:
            entry: Catalog entry to classify.

        Returns:
            The detected SupportLevel. Never raises; PARTIAL in the worst case.
        """
        try:
            return self.analyze(entry).support_level
        except Exception as e:
            self.logger.warning(f"Classification failed for {getattr(entry, 'name', '?')}: {e}")
            return DEFAULT_LEVEL

    def classify_batch(self, entries: list[CatalogEntry]) -> list[ClassificationDecision]:
        """Classify multiple entries."""
        return [self.analyze(e) for e in entries]


def create_default_classifier(logger: logging.Logger | None = None) -> CompatibilityClassifier:
    """Create a classifier with the standard extractors and thresholds.

    Args:
        logger: Optional logger to inject.

    Returns:
        Configured CompatibilityClassifier.
    """
    return CompatibilityClassifier(logger=logger)
