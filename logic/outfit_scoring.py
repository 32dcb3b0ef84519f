"""Deterministic scoring for candidate outfits."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from logic.recency import recency_bonus
from models.clothing_item import ClothingItem
from models.color_theory import HarmonyReport, validate_color_palette
from models.taxonomy import KNOWN_VIBES, OCCASION_VIBES, is_strong_pattern, normalize_label

NEUTRAL_RECENCY = 0.5
UNKNOWN_VIBE_MATCH = 0.3

_RULE_PHRASES = {
    "monochrome": "monochrome look",
    "neutral palette": "neutral palette",
    "neutral with accent": "neutral base with a pop of color",
    "complementary": "complementary colors",
    "analogous": "analogous colors",
    "triadic": "triadic colors",
    "single temperature": "single-temperature palette",
}


@dataclass(frozen=True)
class ScoringWeights:
    """Relative emphasis of each scoring rule.

    Color and vibe dominate, recency is a secondary nudge toward rotation and
    the pattern penalty is capped.
    """

    color: float = 0.4
    vibe: float = 0.4
    recency: float = 0.2
    pattern: float = 0.3
    pattern_penalty_cap: float = 1.0

    def __post_init__(self) -> None:
        for name in ("color", "vibe", "recency", "pattern", "pattern_penalty_cap"):
            if getattr(self, name) < 0:
                raise ValueError(f"Scoring weight '{name}' must be non-negative")
        if self.color + self.vibe + self.recency <= 0:
            raise ValueError("At least one of color, vibe or recency weights must be positive")


@dataclass(frozen=True)
class OutfitScore:
    score: float
    contributions: Dict[str, float]
    reasons: List[str]
    harmony: HarmonyReport = field(default_factory=lambda: HarmonyReport(is_harmonious=True))


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def vibe_match(item: ClothingItem, occasion: str) -> float:
    """Score how well an item's vibe and tags suit an occasion."""

    occasion_key = normalize_label(occasion)
    vibes = OCCASION_VIBES.get(occasion_key, frozenset())
    vibe = normalize_label(item.vibe)
    if vibe and vibe == occasion_key:
        return 1.0
    if vibe in vibes:
        return 0.8
    if item.tags & (vibes | {occasion_key}):
        return 0.5
    if not vibe or vibe not in KNOWN_VIBES:
        return UNKNOWN_VIBE_MATCH
    return 0.1


def pattern_penalty(items: Sequence[ClothingItem], cap: float) -> float:
    """Penalty for stacking strong patterns: 0.5 per extra patterned piece, capped."""

    patterned = sum(1 for item in items if is_strong_pattern(item.pattern))
    if patterned <= 1:
        return 0.0
    return min(cap, 0.5 * (patterned - 1))


def score_outfit(
    items: Sequence[ClothingItem],
    occasion: str,
    forgottenness: Optional[Mapping[int, float]] = None,
    weights: Optional[ScoringWeights] = None,
    max_accent_colors: int = 3,
) -> OutfitScore:
    """Calculate the 0-10 composite score, per-rule contributions and reasons.

    ``forgottenness`` maps item id to its forgottenness score; when omitted the
    recency term is neutral and contributes no reason.
    """

    weights = weights or ScoringWeights()
    harmony = validate_color_palette([color for item in items for color in item.colors], max_accent_colors)
    color_val = _clamp(harmony.score / 10.0)
    vibe_val = sum(vibe_match(item, occasion) for item in items) / len(items) if items else 0.0

    unworn_present = False
    if forgottenness is None or not items:
        recency_val = NEUTRAL_RECENCY
    else:
        item_scores = [forgottenness.get(item.id, -math.inf) for item in items]
        unworn_present = any(score == -math.inf for score in item_scores)
        recency_val = sum(recency_bonus(score) for score in item_scores) / len(item_scores)
    penalty = pattern_penalty(items, weights.pattern_penalty_cap)

    positive_weight = weights.color + weights.vibe + weights.recency
    blended = (weights.color * color_val + weights.vibe * vibe_val + weights.recency * recency_val) / positive_weight
    composite = _clamp(blended - weights.pattern * penalty)

    reasons: List[str] = []
    if harmony.is_harmonious and harmony.rule_used in _RULE_PHRASES:
        reasons.append(_RULE_PHRASES[harmony.rule_used])
    elif harmony.rule_used == "buffered clash":
        reasons.append("neutral piece balances bolder colors")
    if vibe_val >= 0.7:
        reasons.append(f"matches {normalize_label(occasion)} vibe")
    if forgottenness is not None:
        if unworn_present:
            reasons.append("brings back an unworn piece")
        elif recency_val >= 0.7:
            reasons.append("rotates in rarely worn pieces")
    if penalty > 0:
        reasons.append("busy pattern mix")

    return OutfitScore(
        score=round(10.0 * composite, 2),
        contributions={
            "color": round(color_val, 4),
            "vibe": round(vibe_val, 4),
            "recency": round(recency_val, 4),
            "pattern_penalty": round(penalty, 4),
        },
        reasons=reasons,
        harmony=harmony,
    )


__all__ = ["ScoringWeights", "OutfitScore", "vibe_match", "pattern_penalty", "score_outfit"]
