"""Outfit and capsule plan result schemas."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from models.clothing_item import ClothingItem
from models.color_theory import HarmonyReport


@dataclass
class GeneratedOutfit:
    slots: Dict[str, ClothingItem]
    occasion: str
    score: float
    reasoning: str
    harmony: HarmonyReport
    contributions: Dict[str, float] = field(default_factory=dict)

    @property
    def items(self) -> List[ClothingItem]:
        return list(self.slots.values())

    @property
    def item_ids(self) -> FrozenSet[int]:
        return frozenset(item.id for item in self.slots.values())

    def as_dict(self) -> Dict[str, object]:
        return {
            "items": {slot: item.id for slot, item in self.slots.items()},
            "occasion": self.occasion,
            "score": self.score,
            "reasoning": self.reasoning,
            "is_harmonious": self.harmony.is_harmonious,
        }


@dataclass
class CapsuleDay:
    index: int
    label: str
    occasion: str
    outfit: Optional[GeneratedOutfit] = None
    gap_reason: Optional[str] = None

    @property
    def filled(self) -> bool:
        return self.outfit is not None


@dataclass
class CapsulePlan:
    items: List[ClothingItem]
    days: List[CapsuleDay]
    versatility_score: float
    item_usage: Dict[int, int] = field(default_factory=dict)

    @property
    def outfits(self) -> List[GeneratedOutfit]:
        return [day.outfit for day in self.days if day.outfit is not None]

    @property
    def gaps(self) -> List[CapsuleDay]:
        return [day for day in self.days if not day.filled]

    @property
    def gap_summary(self) -> str:
        gaps = self.gaps
        if not gaps:
            return "all days planned"
        details = "; ".join(f"{day.label}: {day.gap_reason}" for day in gaps)
        return f"{len(gaps)} of {len(self.days)} days unfilled ({details})"


__all__ = ["GeneratedOutfit", "CapsuleDay", "CapsulePlan"]
