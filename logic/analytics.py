"""Wardrobe composition summaries: color, type and vibe counts, wear frequency and gaps."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.clothing_item import ClothingItem, WearEvent
from models.color_theory import normalize_color_name

logger = logging.getLogger(__name__)

# (label, head nouns, required canonical color)
BASICS: Tuple[Tuple[str, Tuple[str, ...], Optional[str]], ...] = (
    ("white shirt", ("shirt", "blouse", "tee"), "white"),
    ("black pants", ("pants", "trousers", "slacks"), "black"),
    ("jeans", ("jeans",), None),
    ("jacket", ("jacket", "blazer"), None),
    ("dress", ("dress",), None),
)


@dataclass(frozen=True)
class ItemWear:
    item_id: int
    item_type: Optional[str]
    wear_count: int


@dataclass(frozen=True)
class WardrobeAnalytics:
    """Summary of what a closet holds and how it is used.

    Distributions are ``(label, count)`` pairs, most common first with ties
    broken alphabetically. ``diversity_score`` is an integer in [0, 100].
    """

    total_items: int
    color_distribution: List[Tuple[str, int]] = field(default_factory=list)
    type_breakdown: List[Tuple[str, int]] = field(default_factory=list)
    vibe_counts: List[Tuple[str, int]] = field(default_factory=list)
    wear_frequency: List[ItemWear] = field(default_factory=list)
    diversity_score: int = 0
    missing_basics: List[str] = field(default_factory=list)


def _ranked(counter: Counter) -> List[Tuple[str, int]]:
    return sorted(counter.items(), key=lambda entry: (-entry[1], entry[0]))


def _head_noun(item_type: str) -> str:
    words = item_type.replace("-", " ").split()
    return words[-1] if words else ""


def diversity_score(unique_types: int, unique_colors: int, total_items: int) -> int:
    """``min(100, round((types * 10 + colors * 5) / total * 10))``, halves rounding up."""

    if total_items <= 0:
        return 0
    raw = (unique_types * 10 + unique_colors * 5) * 10 / total_items
    return min(100, int(math.floor(raw + 0.5)))


def missing_basics(catalog: Iterable[ClothingItem]) -> List[str]:
    """Return the wardrobe staples with no matching item, in a fixed order."""

    owned = {(_head_noun(item.type), normalize_color_name(item.primary_color)) for item in catalog}
    missing = []
    for label, nouns, color in BASICS:
        if not any(noun in nouns and (color is None or color == owned_color) for noun, owned_color in owned):
            missing.append(label)
    return missing


def wear_frequency(
    catalog: Sequence[ClothingItem], wear_history: Iterable[WearEvent]
) -> List[ItemWear]:
    """Count wear events per item, most worn first; unknown ids keep a ``None`` type."""

    types: Dict[int, str] = {item.id: item.type for item in catalog}
    counts = Counter(event.item_id for event in wear_history)
    entries = [
        ItemWear(item_id=item_id, item_type=types.get(item_id), wear_count=count)
        for item_id, count in counts.items()
    ]
    entries.sort(key=lambda entry: (-entry.wear_count, entry.item_id))
    return entries


def wardrobe_analytics(
    catalog: Sequence[ClothingItem], wear_history: Optional[Iterable[WearEvent]] = None
) -> WardrobeAnalytics:
    """Summarise a catalog and its wear history.

    Colors are grouped by canonical name so "grey" and "charcoal" count
    together. Items without a vibe are left out of the vibe counts.
    """

    items = list(catalog)
    colors = Counter(normalize_color_name(item.primary_color) for item in items if item.primary_color)
    types = Counter(item.type for item in items if item.type)
    vibes = Counter(item.vibe for item in items if item.vibe)

    analytics = WardrobeAnalytics(
        total_items=len(items),
        color_distribution=_ranked(colors),
        type_breakdown=_ranked(types),
        vibe_counts=_ranked(vibes),
        wear_frequency=wear_frequency(items, wear_history or []),
        diversity_score=diversity_score(len(types), len(colors), len(items)),
        missing_basics=missing_basics(items),
    )
    logger.info(
        "Analysed %s items: diversity %s, %s basics missing",
        analytics.total_items,
        analytics.diversity_score,
        len(analytics.missing_basics),
    )
    return analytics


__all__ = [
    "BASICS",
    "ItemWear",
    "WardrobeAnalytics",
    "diversity_score",
    "missing_basics",
    "wear_frequency",
    "wardrobe_analytics",
]
