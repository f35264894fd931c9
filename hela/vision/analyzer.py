"""Vision service interface and a composite analyzer.

The composite runs object detection, text recognition and color extraction
concurrently and joins them into one VisionSummary. The classifier never
sees a partial summary.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from hela.exceptions import VisionError
from hela.logging_config import get_logger
from hela.vision.models import DetectedObject, VisionSummary

logger = get_logger(__name__)

ObjectDetector = Callable[[bytes], Awaitable[list[DetectedObject]]]
TextRecognizer = Callable[[bytes], Awaitable[str]]
ColorExtractor = Callable[[bytes], Awaitable[list[str]]]


class VisionService(ABC):
    """Abstract base class for vision services."""

    @abstractmethod
    async def analyze(self, image_bytes: bytes) -> VisionSummary:
        """Analyze an image.

        Args:
            image_bytes: Encoded image data.

        Returns:
            VisionSummary with objects, OCR text and colors.
        """
        ...


class CompositeVisionAnalyzer(VisionService):
    """Joins three independent extractors into a VisionSummary.

    A failing extractor contributes its empty value instead of failing
    the whole analysis.
    """

    def __init__(
        self,
        detector: ObjectDetector,
        recognizer: TextRecognizer,
        color_extractor: ColorExtractor,
        min_confidence: float = 0.10,
        max_objects: int = 10,
        max_colors: int = 5,
    ) -> None:
        """Initialize the analyzer.

        Args:
            detector: Async object detector.
            recognizer: Async OCR function.
            color_extractor: Async dominant color extractor.
            min_confidence: Objects below this confidence are dropped.
            max_objects: Maximum number of objects kept.
            max_colors: Maximum number of colors kept.
        """
        self._detector = detector
        self._recognizer = recognizer
        self._color_extractor = color_extractor
        self._min_confidence = min_confidence
        self._max_objects = max_objects
        self._max_colors = max_colors

    async def analyze(self, image_bytes: bytes) -> VisionSummary:
        """Run all extractors concurrently and join their results.

        Raises:
            VisionError: If no image data was given.
        """
        if not image_bytes:
            raise VisionError("Cannot analyze an empty image")

        objects, text, colors = await asyncio.gather(
            self._run("objects", self._detector, image_bytes, []),
            self._run("text", self._recognizer, image_bytes, ""),
            self._run("colors", self._color_extractor, image_bytes, []),
        )

        kept = sorted(
            (o for o in objects if o.confidence >= self._min_confidence),
            key=lambda o: o.confidence,
            reverse=True,
        )[: self._max_objects]

        summary = VisionSummary(
            objects=kept,
            ocr_text=text.strip(),
            colors=list(colors)[: self._max_colors],
        )
        logger.debug(
            "Vision analysis complete",
            extra={
                "objects": len(summary.objects),
                "ocr_chars": len(summary.ocr_text),
                "colors": len(summary.colors),
            },
        )
        return summary

    async def _run(
        self,
        name: str,
        extractor: Callable[[bytes], Awaitable[Any]],
        image_bytes: bytes,
        empty: Any,
    ) -> Any:
        """Run one extractor, degrading to ``empty`` on failure."""
        try:
            return await extractor(image_bytes)
        except Exception as e:
            logger.warning(f"Vision extractor '{name}' failed: {e}")
            return empty
