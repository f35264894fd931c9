"""Deterministic record synthesis, the terminal classification tier.

Everything here is a pure function of the VisionSummary, so the same
summary always yields the same record. The synthesizer cannot fail: even an
empty summary produces a valid ItemRecord.
"""

import string

from hela.classification.models import ItemRecord
from hela.classification.tag_rules import (
    clean_label,
    context_tags,
    function_tags,
    is_generic_label,
    material_tags,
    object_type_tags,
)
from hela.vision.models import VisionSummary

# Scanned in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("receipt", ("receipt", "price", "total")),
    (
        "grocery",
        (
            "food",
            "fruit",
            "vegetable",
            "grocery",
            "produce",
            "snack",
            "beverage",
            "drink",
            "bread",
            "meat",
            "dairy",
            "cereal",
        ),
    ),
    ("bags", ("bag", "purse", "backpack", "tote", "luggage", "wallet")),
    (
        "fashion",
        (
            "clothing",
            "apparel",
            "fashion",
            "shirt",
            "dress",
            "jacket",
            "jeans",
            "shoe",
            "sneaker",
            "footwear",
        ),
    ),
    (
        "electronics",
        (
            "electronic",
            "phone",
            "computer",
            "laptop",
            "keyboard",
            "camera",
            "television",
            "headphone",
            "tablet",
            "cable",
        ),
    ),
    ("nails", ("nail", "manicure", "pedicure")),
    (
        "recipe",
        ("recipe", "ingredient", "tablespoon", "teaspoon", "tbsp", "tsp", "preheat"),
    ),
)
DEFAULT_CATEGORY = "general"

FALLBACK_TITLE = "Captured Item"
FALLBACK_SUMMARY = "A captured item saved to your inventory."

FILLER_TAGS: tuple[str, ...] = ("photo", "tracked")
COLOR_FILLER_TAG = "visual"
EXTRA_FILLER_TAGS: tuple[str, ...] = ("inventory", "snapshot", "personal")

MIN_SYNTH_TAGS = 5
MAX_SYNTH_TAGS = 12
MAX_COLOR_TAGS = 3
MAX_OCR_TAGS = 3
OCR_TAG_MIN_LEN = 4
OCR_TAG_MAX_LEN = 19

_STRIP_PUNCTUATION = str.maketrans("", "", string.punctuation.replace("-", ""))


def ocr_tokens(text: str) -> list[str]:
    """Lowercased, punctuation-free OCR tokens in reading order."""
    tokens: list[str] = []
    for raw in text.split():
        token = raw.translate(_STRIP_PUNCTUATION).strip("-").lower()
        if token:
            tokens.append(token)
    return tokens


def infer_category(vision: VisionSummary) -> str:
    """Pick a category by scanning labels and OCR tokens for keywords."""
    haystack = " ".join(
        [label.lower() for label in vision.labels] + ocr_tokens(vision.ocr_text)
    )
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def usable_labels(vision: VisionSummary) -> list[str]:
    """Cleaned, non-generic labels in confidence order."""
    ranked = sorted(vision.objects, key=lambda obj: obj.confidence, reverse=True)
    labels: list[str] = []
    for obj in ranked:
        if is_generic_label(obj.label):
            continue
        cleaned = clean_label(obj.label)
        if cleaned:
            labels.append(cleaned)
    return labels


def _title_case(text: str) -> str:
    return " ".join(word.capitalize() for word in text.split())


def _join_words(words: list[str]) -> str:
    if len(words) <= 1:
        return "".join(words)
    return f"{', '.join(words[:-1])} and {words[-1]}"


def build_title(vision: VisionSummary) -> str:
    """Title from the best label, prefixed with the dominant color."""
    labels = usable_labels(vision)
    colors = [_title_case(c) for c in vision.colors if c.strip()]

    if labels:
        title = _title_case(labels[0])
        return f"{colors[0]} {title}" if colors else title
    if len(colors) >= 2:
        return f"{colors[0]} and {colors[1]} Flowers"
    if colors:
        return f"{colors[0]} Flowers"
    return FALLBACK_TITLE


def build_summary(vision: VisionSummary) -> str:
    """One-sentence description naming objects and colors."""
    labels = [label.lower() for label in usable_labels(vision)[:3]]
    colors = [c.strip().lower() for c in vision.colors if c.strip()]

    if not labels and not colors:
        return FALLBACK_SUMMARY
    if not labels:
        return f"This image features {_join_words(colors[:3])} colors."
    if not colors:
        return f"This image features {_join_words(labels)}."
    return (
        f"This image features {_join_words(labels)} "
        f"with vibrant {_join_words(colors[:2])} colors."
    )


def build_tags(vision: VisionSummary) -> list[str]:
    """Colors, rule-derived tags, object types and OCR tokens, padded and capped."""
    tags: list[str] = []

    def add(candidates: list[str]) -> None:
        for tag in candidates:
            if tag and tag not in tags:
                tags.append(tag)

    colors = [c.strip().lower() for c in vision.colors if c.strip()]
    add(colors[:MAX_COLOR_TAGS])
    add(material_tags(vision.objects))
    add(function_tags(vision.objects))
    add(context_tags(vision.objects))
    add(object_type_tags(vision.objects))

    ocr = [
        t
        for t in ocr_tokens(vision.ocr_text)
        if OCR_TAG_MIN_LEN <= len(t) <= OCR_TAG_MAX_LEN
    ]
    add(list(dict.fromkeys(ocr))[:MAX_OCR_TAGS])

    fillers = list(FILLER_TAGS)
    if colors:
        fillers.append(COLOR_FILLER_TAG)
    fillers.extend(EXTRA_FILLER_TAGS)
    for filler in fillers:
        if len(tags) >= MIN_SYNTH_TAGS:
            break
        add([filler])

    return tags[:MAX_SYNTH_TAGS]


def build_attributes(vision: VisionSummary) -> dict[str, str]:
    """Fixed attribute shape reported by the deterministic tier."""
    return {
        "color": vision.colors[0] if vision.colors else "mixed",
        "material": "unknown",
        "confidence": "high",
    }


def synthesize(vision: VisionSummary) -> ItemRecord:
    """Build an ItemRecord from a VisionSummary without any model.

    Args:
        vision: Analyzer output.

    Returns:
        A record that always passes validation.
    """
    return ItemRecord(
        title=build_title(vision),
        summary=build_summary(vision),
        category=infer_category(vision),
        tags=build_tags(vision),
        attributes=build_attributes(vision),
    )
