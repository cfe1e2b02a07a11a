"""Score Combiner - merges extractor opinions into a single verdict."""

import logging
from dataclasses import dataclass, field

from padcompat.core.models import DetectionOpinion, SupportLevel

logger = logging.getLogger("padcompat.classification.combiner")

# Labels marking file-based evidence
FILE_EVIDENCE_MARKERS = ("Engine", "Executable")

# Winning score needed for file-based evidence to be trusted as-is
FILE_EVIDENCE_THRESHOLD = 0.3

# Below this winning score the verdict falls back to PARTIAL
LOW_CONFIDENCE_THRESHOLD = 0.4

DEFAULT_LEVEL = SupportLevel.PARTIAL


@dataclass
class CombinedVerdict:
    """Result of combining detection opinions.

    Attributes:
        level: Final support level
        scores: Summed confidence per support level, in first-seen order
        winner: Level with the highest summed confidence (None if no signal)
        winning_score: Summed confidence of the winner
        has_file_evidence: Whether engine or executable analysis contributed
        reason: Short description of the rule that decided the verdict
    """

    level: SupportLevel
    scores: dict[SupportLevel, float] = field(default_factory=dict)
    winner: SupportLevel | None = None
    winning_score: float = 0.0
    has_file_evidence: bool = False
    reason: str = ""


class ScoreCombiner:
    """Combine detection opinions using confidence-weighted voting.

    Example:
        combiner = ScoreCombiner()
        verdict = combiner.combine(opinions)
        print(verdict.level, verdict.scores)
    """

    def __init__(
        self,
        file_evidence_threshold: float = FILE_EVIDENCE_THRESHOLD,
        low_confidence_threshold: float = LOW_CONFIDENCE_THRESHOLD,
    ) -> None:
        self.file_evidence_threshold = file_evidence_threshold
        self.low_confidence_threshold = low_confidence_threshold

    def combine(self, opinions: list[DetectionOpinion]) -> CombinedVerdict:
        """Combine opinions into a verdict.

        Args:
            opinions: Opinions from the signal extractors.

        Returns:
            CombinedVerdict with the final level and supporting scores.
        """
        contributing = [o for o in opinions if o.confidence > 0]

        scores: dict[SupportLevel, float] = {}
        for opinion in contributing:
            scores[opinion.level] = scores.get(opinion.level, 0.0) + opinion.confidence

        if not scores:
            return CombinedVerdict(level=DEFAULT_LEVEL, reason="no signal")

        # max() keeps the first encountered level on ties
        winner, winning_score = max(scores.items(), key=lambda item: item[1])

        has_file_evidence = any(
            marker in o.method for o in contributing for marker in FILE_EVIDENCE_MARKERS
        )

        # File evidence is checked before the low-confidence fallback
        if has_file_evidence and winning_score >= self.file_evidence_threshold:
            level = winner
            reason = "file evidence"
        elif winning_score < self.low_confidence_threshold:
            level = DEFAULT_LEVEL
            reason = "low confidence"
        else:
            level = winner
            reason = "highest score"

        logger.debug(
            f"Combined {len(contributing)} opinions: "
            f"{winner.value}={winning_score:.2f} -> {level.value} ({reason})"
        )

        return CombinedVerdict(
            level=level,
            scores=scores,
            winner=winner,
            winning_score=winning_score,
            has_file_evidence=has_file_evidence,
            reason=reason,
        )


def combine_opinions(opinions: list[DetectionOpinion]) -> SupportLevel:
    """Combine opinions with default thresholds and return the verdict level."""
    return ScoreCombiner().combine(opinions).level
