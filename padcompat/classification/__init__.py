"""Classification engine for detecting controller support."""

from .combiner import CombinedVerdict, ScoreCombiner, combine_opinions
from .engine import (
    ClassificationDecision,
    CompatibilityClassifier,
    create_default_classifier,
)
from .extractors import SIGNAL_EXTRACTORS, SignalExtractor

__all__ = [
    # Signal Extractors
    "SignalExtractor",
    "SIGNAL_EXTRACTORS",
    # Score Combiner
    "ScoreCombiner",
    "CombinedVerdict",
    "combine_opinions",
    # Classifier
    "CompatibilityClassifier",
    "ClassificationDecision",
    "create_default_classifier",
]
