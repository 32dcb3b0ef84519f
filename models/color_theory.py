"""Rule-table color harmony helpers for deterministic outfit scoring."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

NEUTRAL = "neutral"
WARM = "warm"
COOL = "cool"

COLOR_MAP: Dict[str, str] = {
    "grey": "gray",
    "charcoal": "gray",
    "silver": "gray",
    "heather gray": "gray",
    "off white": "white",
    "ivory": "white",
    "cream": "beige",
    "tan": "beige",
    "taupe": "beige",
    "khaki": "beige",
    "sand": "beige",
    "camel": "brown",
    "chocolate": "brown",
    "navy blue": "navy",
    "denim": "navy",
    "light blue": "blue",
    "sky blue": "blue",
    "baby blue": "blue",
    "royal blue": "blue",
    "cobalt": "blue",
    "indigo": "blue",
    "burgundy": "red",
    "maroon": "red",
    "wine": "red",
    "crimson": "red",
    "coral": "orange",
    "peach": "orange",
    "rust": "orange",
    "mustard": "yellow",
    "gold": "yellow",
    "magenta": "pink",
    "fuchsia": "pink",
    "hot pink": "pink",
    "blush": "pink",
    "olive": "green",
    "mint": "green",
    "sage": "green",
    "emerald": "green",
    "forest green": "green",
    "turquoise": "teal",
    "aqua": "teal",
    "lavender": "purple",
    "violet": "purple",
    "lilac": "purple",
    "plum": "purple",
}

COLOR_FAMILIES: Dict[str, str] = {
    "black": NEUTRAL,
    "white": NEUTRAL,
    "gray": NEUTRAL,
    "beige": NEUTRAL,
    "navy": NEUTRAL,
    "brown": NEUTRAL,
    "red": WARM,
    "orange": WARM,
    "yellow": WARM,
    "pink": WARM,
    "green": COOL,
    "teal": COOL,
    "blue": COOL,
    "purple": COOL,
}

_COMPLEMENTARY_PAIRS = {
    ("red", "green"),
    ("blue", "orange"),
    ("yellow", "purple"),
    ("pink", "green"),
    ("teal", "red"),
}

_ANALOGOUS_PAIRS = {
    ("red", "orange"),
    ("orange", "yellow"),
    ("yellow", "green"),
    ("green", "teal"),
    ("teal", "blue"),
    ("blue", "purple"),
    ("purple", "pink"),
    ("pink", "red"),
}

_TRIADS: List[FrozenSet[str]] = [
    frozenset({"red", "yellow", "blue"}),
    frozenset({"orange", "green", "purple"}),
]

_SUGGESTIONS: Dict[str, List[str]] = {
    "black": ["white", "gray", "beige", "red", "pink"],
    "white": ["navy", "black", "beige", "blue", "green"],
    "gray": ["white", "black", "navy", "pink", "yellow"],
    "beige": ["white", "brown", "navy", "green", "blue"],
    "navy": ["white", "beige", "gray", "red", "pink"],
    "brown": ["beige", "white", "navy", "green", "orange"],
    "blue": ["white", "navy", "gray", "brown", "orange", "yellow"],
    "red": ["black", "white", "navy", "gray", "green"],
    "green": ["beige", "brown", "white", "navy", "red"],
    "yellow": ["gray", "white", "navy", "purple", "blue"],
    "purple": ["gray", "black", "white", "yellow"],
    "orange": ["navy", "brown", "beige", "blue"],
    "pink": ["gray", "white", "navy", "beige", "green"],
    "teal": ["white", "gray", "beige", "red"],
}

_RULE_SCORES = {
    "monochrome": 9.0,
    "neutral palette": 10.0,
    "neutral with accent": 9.0,
    "complementary": 8.0,
    "analogous": 8.0,
    "triadic": 8.0,
    "single temperature": 7.5,
    "buffered clash": 6.0,
    "clash": 4.0,
    "too many colors": 3.0,
}


@dataclass(frozen=True)
class HarmonyReport:
    """Outcome of a palette validation."""

    is_harmonious: bool
    conflicts: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    score: float = 5.0
    rule_used: str = "none"
    colors: List[str] = field(default_factory=list)


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical color name.

    Exact aliases win; otherwise the longest canonical or alias name found as
    a whole word or phrase is used ("dark navy blue" -> "navy", while
    "tangerine" stays unknown). Unrecognised names are returned lower-cased
    and stripped.
    """

    key = " ".join(str(raw_string).strip().lower().replace("-", " ").split())
    if key in COLOR_FAMILIES:
        return key
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    words = key.split()
    phrases = {" ".join(words[start:end]) for start in range(len(words)) for end in range(start + 1, len(words) + 1)}
    candidates = [name for name in list(COLOR_MAP) + list(COLOR_FAMILIES) if name in phrases]
    if candidates:
        best = max(candidates, key=lambda name: (len(name), name))
        return COLOR_MAP.get(best, best)
    return key


def color_family(color: str) -> Optional[str]:
    """Return ``neutral``/``warm``/``cool`` for a color, or ``None`` if unknown."""

    return COLOR_FAMILIES.get(normalize_color_name(color))


def _pair(c1: str, c2: str, table: Set[Tuple[str, str]]) -> bool:
    return (c1, c2) in table or (c2, c1) in table


def monochrome(color_list: Iterable[str]) -> bool:
    """Return True when all provided colors collapse to a single tone."""

    unique_colors = {normalize_color_name(color) for color in color_list if color}
    return len(unique_colors) <= 1


def complementary(color1: str, color2: str) -> bool:
    """Return True when the colors form a complementary pair."""

    return _pair(normalize_color_name(color1), normalize_color_name(color2), _COMPLEMENTARY_PAIRS)


def analogous(color1: str, color2: str) -> bool:
    """Return True when the colors sit next to each other on the wheel."""

    return _pair(normalize_color_name(color1), normalize_color_name(color2), _ANALOGOUS_PAIRS)


def triadic(colors: Sequence[str]) -> bool:
    """Return True when the distinct colors form exactly one of the known triads."""

    distinct = frozenset(normalize_color_name(color) for color in colors if color)
    return distinct in _TRIADS


def _pair_relation(c1: str, c2: str) -> str:
    if c1 == c2:
        return "monochrome"
    if complementary(c1, c2):
        return "complementary"
    if analogous(c1, c2):
        return "analogous"
    return "none"


def validate_color_palette(colors: Iterable[Optional[str]], max_accent_colors: int = 3) -> HarmonyReport:
    """Check a palette against the harmony rule table.

    Neutrals (and unrecognised names, which degrade to neutral-compatible)
    never clash. Accents from a single temperature family are always
    harmonious. Mixed warm/cool accents must be related (complementary,
    analogous, triadic) or be bridged by a neutral piece.
    """

    raw_names = [str(color) for color in colors if color and str(color).strip()]
    if not raw_names:
        return HarmonyReport(is_harmonious=True, notes=["no colors to validate"], score=5.0)

    notes: List[str] = []
    conflicts: List[str] = []
    canonical: List[str] = []
    accents: List[str] = []
    neutral_buffer = False
    for raw in raw_names:
        name = normalize_color_name(raw)
        family = COLOR_FAMILIES.get(name)
        canonical.append(name)
        if family is None:
            notes.append(f"unrecognized color '{raw}' treated as neutral (low confidence)")
            neutral_buffer = True
        elif family == NEUTRAL:
            neutral_buffer = True
        elif name not in accents:
            accents.append(name)

    families = {COLOR_FAMILIES[name] for name in accents}
    if len(set(canonical)) == 1:
        rule = "monochrome"
    elif not accents:
        rule = "neutral palette"
    elif len(accents) == 1:
        rule = "neutral with accent"
    elif len(families) == 1:
        rule = "single temperature"
        relations = {_pair_relation(a, b) for a, b in combinations(accents, 2)}
        if relations == {"analogous"}:
            rule = "analogous"
        if len(accents) > max_accent_colors:
            notes.append(f"{len(accents)} accent colors; consider trimming to {max_accent_colors}")
    elif len(accents) > max_accent_colors:
        rule = "too many colors"
        conflicts.append(f"too many accent colors ({len(accents)} > {max_accent_colors})")
    elif triadic(accents):
        rule = "triadic"
    else:
        clashes = []
        related = []
        for a, b in combinations(accents, 2):
            relation = _pair_relation(a, b)
            if relation != "none":
                related.append(relation)
            elif COLOR_FAMILIES[a] != COLOR_FAMILIES[b]:
                clashes.append((a, b))
        if not clashes:
            rule = "complementary" if "complementary" in related else "analogous"
        elif neutral_buffer:
            rule = "buffered clash"
            for a, b in clashes:
                notes.append(f"a neutral piece bridges {a} and {b}")
        else:
            rule = "clash"
            for a, b in clashes:
                conflicts.append(f"{a} clashes with {b} without a neutral buffer")

    report = HarmonyReport(
        is_harmonious=not conflicts,
        conflicts=conflicts,
        notes=notes,
        score=_RULE_SCORES[rule],
        rule_used=rule,
        colors=canonical,
    )
    logger.debug("palette %s -> %s (%s)", canonical, report.is_harmonious, rule)
    return report


def suggest_complementary_colors(color: str) -> List[str]:
    """Return colors that pair well with ``color``; empty for unknown colors."""

    return list(_SUGGESTIONS.get(normalize_color_name(color), []))


__all__ = [
    "HarmonyReport",
    "COLOR_FAMILIES",
    "normalize_color_name",
    "color_family",
    "monochrome",
    "complementary",
    "analogous",
    "triadic",
    "validate_color_palette",
    "suggest_complementary_colors",
]
