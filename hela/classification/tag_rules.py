"""Rule-based tag derivation from detector labels.

Each family maps keywords to a tag. A keyword matches when it is a substring
of the lowercase, space-joined label string, so compound labels such as
``flower_pot`` still trigger ``flower`` rules.
"""

from hela.vision.models import DetectedObject

MATERIAL_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("fabric", "textile", "cloth"), "fabric"),
    (("metal", "steel", "aluminum"), "metal"),
    (("wood", "wooden"), "wood"),
    (("plastic", "polymer"), "plastic"),
    (("paper", "cardboard"), "paper"),
    (("glass",), "glass"),
    (("ceramic", "porcelain"), "ceramic"),
    (("leather",), "leather"),
)

FUNCTION_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("clothing", "apparel", "footwear"), "wearable"),
    (("food", "beverage", "drink"), "consumable"),
    (("book", "document", "text"), "readable"),
    (("tool", "equipment", "instrument"), "functional"),
    (("toy", "game"), "entertainment"),
    (("decoration", "plant", "flower"), "decorative"),
    (("electronic", "device", "computer"), "electronic"),
    (("container", "bottle", "box"), "storage"),
)

CONTEXT_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("kitchen", "cooking", "food"), "kitchen"),
    (("bathroom", "hygiene", "personal care"), "bathroom"),
    (("outdoor", "nature", "garden"), "outdoor"),
    (("indoor", "room", "furniture"), "indoor"),
    (("office", "desk", "workspace"), "workspace"),
    (("portable", "travel", "handheld"), "portable"),
    (("gift", "present"), "gift"),
)

GENERIC_LABEL_WORDS: tuple[str, ...] = ("item", "thing", "object")

MAX_OBJECT_TAGS = 4


def clean_label(label: str) -> str:
    """Normalize a detector label for display.

    Underscores become spaces and anything after the first comma is dropped.
    """
    return label.replace("_", " ").split(",", 1)[0].strip()


def is_generic_label(label: str) -> bool:
    """True for labels too vague to be useful (``item``, ``thing``, ``object``)."""
    lowered = label.lower()
    return any(word in lowered for word in GENERIC_LABEL_WORDS)


def joined_labels(objects: list[DetectedObject]) -> str:
    """Lowercase, space-joined label string used for keyword matching."""
    return " ".join(obj.label.lower() for obj in objects)


def _apply_rules(
    text: str,
    rules: tuple[tuple[tuple[str, ...], str], ...],
) -> list[str]:
    tags: list[str] = []
    for keywords, tag in rules:
        if tag not in tags and any(keyword in text for keyword in keywords):
            tags.append(tag)
    return tags


def material_tags(objects: list[DetectedObject]) -> list[str]:
    """Material tags (fabric, metal, wood, ...)."""
    return _apply_rules(joined_labels(objects), MATERIAL_RULES)


def function_tags(objects: list[DetectedObject]) -> list[str]:
    """Function tags (wearable, consumable, decorative, ...)."""
    return _apply_rules(joined_labels(objects), FUNCTION_RULES)


def context_tags(objects: list[DetectedObject]) -> list[str]:
    """Context tags (kitchen, outdoor, workspace, ...)."""
    return _apply_rules(joined_labels(objects), CONTEXT_RULES)


def object_type_tags(
    objects: list[DetectedObject],
    limit: int = MAX_OBJECT_TAGS,
) -> list[str]:
    """Tags from the highest-confidence specific labels.

    Generic labels and labels of two characters or fewer are skipped.
    """
    ranked = sorted(objects, key=lambda obj: obj.confidence, reverse=True)
    tags: list[str] = []
    for obj in ranked:
        if len(tags) >= limit:
            break
        if is_generic_label(obj.label):
            continue
        tag = clean_label(obj.label).lower()
        if len(tag) <= 2 or tag in tags:
            continue
        tags.append(tag)
    return tags


def derive_tags(objects: list[DetectedObject]) -> list[str]:
    """Ordered union of all four rule families, without duplicates."""
    tags: list[str] = []
    for family in (material_tags, function_tags, context_tags, object_type_tags):
        for tag in family(objects):
            if tag not in tags:
                tags.append(tag)
    return tags
