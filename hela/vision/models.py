"""Vision analysis data models."""

from pydantic import BaseModel, ConfigDict, Field


class DetectedObject(BaseModel):
    """A label reported by the object detector.

    Attributes:
        label: Detector label, e.g. ``"flower_pot"``.
        confidence: Detector confidence in [0, 1].
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Detected label")
    confidence: float = Field(ge=0.0, le=1.0, description="Detector confidence")


class VisionSummary(BaseModel):
    """Immutable output of perceptual analysis for one image.

    Attributes:
        objects: Detected labels, in detector order (highest confidence first).
        ocr_text: Recognized text fragments joined in detector order.
        colors: Up to five coarse color names, most frequent first.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    objects: list[DetectedObject] = Field(
        default_factory=list,
        description="Detected objects",
    )
    ocr_text: str = Field(
        default="",
        alias="ocrText",
        description="Recognized text",
    )
    colors: list[str] = Field(
        default_factory=list,
        max_length=5,
        description="Dominant color names",
    )

    @property
    def labels(self) -> list[str]:
        """Detected labels in detector order."""
        return [obj.label for obj in self.objects]

    @property
    def is_empty(self) -> bool:
        """True when the analyzer found nothing at all."""
        return not self.objects and not self.ocr_text.strip() and not self.colors
