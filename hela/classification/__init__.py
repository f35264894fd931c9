"""Classification pipeline module."""

from hela.classification.models import (
    VALID_CATEGORIES,
    ClassificationResult,
    ItemRecord,
    Tier,
    TierFailure,
)
from hela.classification.pipeline import Classifier, next_tier
from hela.classification.prompts import ClassificationPromptTemplate
from hela.classification.synthesizer import synthesize

__all__ = [
    "VALID_CATEGORIES",
    "ClassificationPromptTemplate",
    "ClassificationResult",
    "Classifier",
    "ItemRecord",
    "Tier",
    "TierFailure",
    "next_tier",
    "synthesize",
]
