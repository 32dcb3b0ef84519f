"""Canonical vocabulary for garments, outfit slots and occasions.

This module centralises the labels used across the recommendation core:
layering categories, the outfit slots they fill, garment type families,
occasion templates and vibe vocabulary. Helper functions keep normalisation
consistent between the data models, the scorer and the planners.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a vocabulary key."""

    return value.strip().lower().replace("_", " ").replace("-", " ")


LAYERING_CATEGORIES = ["base", "mid", "outer", "bottom", "shoes", "accessory"]

# Construction order for outfit slots.
SLOT_ORDER: Tuple[str, ...] = ("base", "bottom", "mid", "outer", "shoes", "accessory")

TYPE_FAMILIES: Dict[str, List[str]] = {
    "base": ["shirt", "t shirt", "tee", "top", "blouse", "polo", "tank", "tank top", "dress", "bodysuit", "button down"],
    "mid": ["sweater", "cardigan", "hoodie", "vest", "sweatshirt", "pullover"],
    "outer": ["jacket", "coat", "blazer", "parka", "trench", "puffer", "raincoat"],
    "bottom": ["pants", "jeans", "trousers", "chinos", "skirt", "shorts", "leggings", "joggers"],
    "shoes": ["shoes", "shoe", "sneakers", "boots", "loafers", "heels", "sandals", "flats", "oxfords"],
    "accessory": ["bag", "belt", "hat", "scarf", "jewelry", "jewellery", "watch", "sunglasses", "tie"],
}

# "dress shoes" is shoes and "dress pants" a bottom, so structural families match first.
_SUBSTRING_PRIORITY = ("shoes", "bottom", "outer", "mid", "accessory", "base")

TIMELESS_TYPES = [
    "shirt",
    "blouse",
    "button down",
    "t shirt",
    "sweater",
    "pants",
    "jeans",
    "trousers",
    "skirt",
    "jacket",
    "blazer",
    "cardigan",
    "coat",
    "dress",
]

SOLID_PATTERNS = {"", "solid", "plain", "none", "textured", "heathered"}

# Occasion templates: (required slots, optional slots).
OCCASION_SLOTS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "casual": (("base", "bottom", "shoes"), ("outer",)),
    "work": (("base", "bottom", "shoes"), ("mid", "outer")),
    "formal": (("base", "bottom", "shoes"), ("outer", "accessory")),
    "date": (("base", "bottom", "shoes"), ("outer", "accessory")),
    "party": (("base", "bottom", "shoes"), ("accessory",)),
    "sport": (("base", "bottom", "shoes"), ()),
    "summer": (("base", "bottom", "shoes"), ("accessory",)),
}

OCCASION_VIBES: Dict[str, FrozenSet[str]] = {
    "casual": frozenset({"casual", "relaxed", "street", "streetwear", "sporty", "classic", "minimal"}),
    "work": frozenset({"business", "smart casual", "professional", "classic", "minimal"}),
    "formal": frozenset({"formal", "elegant", "business", "classic"}),
    "date": frozenset({"romantic", "elegant", "chic", "party", "casual"}),
    "party": frozenset({"party", "chic", "edgy", "glam", "elegant"}),
    "sport": frozenset({"sporty", "athletic", "active", "casual"}),
    "summer": frozenset({"casual", "beach", "relaxed", "boho"}),
}

KNOWN_VIBES: FrozenSet[str] = frozenset().union(*OCCASION_VIBES.values()) | frozenset(OCCASION_SLOTS)

VERSATILE_VIBES = {"casual", "classic"}


def normalize_label(value: Optional[str]) -> str:
    """Return the normalised form of an optional label (empty string for ``None``)."""

    if value is None:
        return ""
    return _normalize_key(str(value))


def type_family(garment_type: Optional[str]) -> Optional[str]:
    """Return the slot family a garment type belongs to, if recognised."""

    key = normalize_label(garment_type)
    if not key:
        return None
    for family, names in TYPE_FAMILIES.items():
        if key in names:
            return family
    for family in _SUBSTRING_PRIORITY:
        if any(name in key for name in TYPE_FAMILIES[family]):
            return family
    return None


def normalize_layering_category(value: Optional[str], garment_type: Optional[str] = None) -> str:
    """Normalise a layering category, inferring it from the garment type when unknown."""

    key = normalize_label(value)
    if key in LAYERING_CATEGORIES:
        return key
    return type_family(garment_type) or "accessory"


def slot_for(garment_type: Optional[str], layering_category: str) -> str:
    """Return the outfit slot an item fills.

    Shoes and bottoms are structural: their type wins over whatever layering
    category the vision metadata assigned.
    """

    family = type_family(garment_type)
    if family in {"shoes", "bottom"}:
        return family
    return layering_category


def is_known_occasion(occasion: str) -> bool:
    return normalize_label(occasion) in OCCASION_SLOTS


def occasion_slots(occasion: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """Return ``(required, optional)`` slots for an occasion.

    Raises a :class:`KeyError` when the occasion has no default template.
    """

    return OCCASION_SLOTS[normalize_label(occasion)]


def is_strong_pattern(pattern: Optional[str]) -> bool:
    return normalize_label(pattern) not in SOLID_PATTERNS


def normalise_tags(values: Iterable[str]) -> FrozenSet[str]:
    """Normalise and deduplicate free-form tags."""

    return frozenset(normalize_label(value) for value in values if normalize_label(value))


__all__ = [
    "LAYERING_CATEGORIES",
    "SLOT_ORDER",
    "TYPE_FAMILIES",
    "TIMELESS_TYPES",
    "OCCASION_SLOTS",
    "OCCASION_VIBES",
    "KNOWN_VIBES",
    "VERSATILE_VIBES",
    "normalize_label",
    "type_family",
    "normalize_layering_category",
    "slot_for",
    "is_known_occasion",
    "occasion_slots",
    "is_strong_pattern",
    "normalise_tags",
]
