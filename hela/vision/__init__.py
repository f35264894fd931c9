"""Vision analysis module."""

from hela.vision.analyzer import CompositeVisionAnalyzer, VisionService
from hela.vision.models import DetectedObject, VisionSummary

__all__ = [
    "CompositeVisionAnalyzer",
    "DetectedObject",
    "VisionService",
    "VisionSummary",
]
