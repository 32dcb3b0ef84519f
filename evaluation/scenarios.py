"""Evaluation scenarios exercising outfits, capsules, similarity and weather layering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from tools.weather_provider import WeatherProfile, build_profile


@dataclass
class EvaluationScenario:
    name: str
    description: str
    operation: str
    wardrobe_items: List[Dict[str, object]]
    arguments: Dict[str, object] = field(default_factory=dict)
    weather_profile: Optional[WeatherProfile] = None
    wear_history: List[Dict[str, object]] = field(default_factory=list)
    expectations: Dict[str, object] = field(default_factory=dict)


def _three_piece_casual() -> List[Dict[str, object]]:
    return [
        {"id": 1, "type": "shirt", "layeringCategory": "base", "primaryColor": "white"},
        {"id": 2, "type": "pants", "layeringCategory": "bottom", "primaryColor": "navy"},
        {"id": 3, "type": "shoes", "layeringCategory": "accessory", "primaryColor": "brown"},
    ]


def _wardrobe_fixtures() -> List[Dict[str, object]]:
    return [
        {"id": 10, "type": "t-shirt", "primaryColor": "white", "vibe": "casual"},
        {"id": 11, "type": "shirt", "primaryColor": "light blue", "vibe": "classic"},
        {"id": 12, "type": "blouse", "primaryColor": "pink", "vibe": "romantic"},
        {"id": 13, "type": "tank top", "primaryColor": "black", "vibe": "casual"},
        {"id": 20, "type": "jeans", "primaryColor": "blue", "vibe": "casual"},
        {"id": 21, "type": "chinos", "primaryColor": "beige", "vibe": "classic"},
        {"id": 22, "type": "skirt", "primaryColor": "black", "vibe": "elegant", "pattern": "solid"},
        {"id": 30, "type": "sneakers", "primaryColor": "white", "vibe": "sporty"},
        {"id": 31, "type": "loafers", "primaryColor": "brown", "vibe": "classic"},
        {"id": 32, "type": "boots", "primaryColor": "black", "vibe": "edgy"},
        {"id": 40, "type": "cardigan", "primaryColor": "gray", "vibe": "casual"},
        {"id": 50, "type": "trench coat", "primaryColor": "beige", "vibe": "classic"},
        {"id": 60, "type": "scarf", "primaryColor": "red", "vibe": "casual"},
    ]


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="three_piece_casual",
        description="Minimal neutral wardrobe composes a single harmonious casual outfit.",
        operation="generate_outfit",
        wardrobe_items=_three_piece_casual(),
        arguments={"occasion": "casual"},
        expectations={"item_ids": [1, 2, 3], "harmonious": True, "positive_score": True},
    ),
    EvaluationScenario(
        name="empty_catalog",
        description="No clothes yields an explicit insufficiency instead of an outfit.",
        operation="generate_outfit",
        wardrobe_items=[],
        arguments={"occasion": "casual"},
        expectations={"reason": "no items available"},
    ),
    EvaluationScenario(
        name="distinct_batch",
        description="A varied wardrobe produces several outfits with different item-sets.",
        operation="generate_outfits",
        wardrobe_items=_wardrobe_fixtures(),
        arguments={"count": 3, "occasion": "casual"},
        expectations={"min_outfits": 3, "distinct": True},
    ),
    EvaluationScenario(
        name="weekly_capsule",
        description="A week of casual and work days is planned from a small wardrobe.",
        operation="generate_capsule",
        wardrobe_items=_wardrobe_fixtures(),
        arguments={"period": "weekly", "occasion_mix": {"casual": 3, "work": 4}},
        expectations={"days": 7, "max_gaps": 0},
    ),
    EvaluationScenario(
        name="forgotten_pieces",
        description="Unworn items surface ahead of anything worn recently.",
        operation="rank_forgotten",
        wardrobe_items=_three_piece_casual(),
        arguments={"limit": 3, "today": date(2024, 3, 1)},
        wear_history=[
            {"item_id": 1, "worn_on": "2024-02-28"},
            {"item_id": 1, "worn_on": "2024-02-20"},
            {"item_id": 2, "worn_on": "2024-01-05"},
        ],
        expectations={"first_item_id": 3},
    ),
    EvaluationScenario(
        name="cold_rainy_day",
        description="Cold, wet weather calls for mid and outer layers.",
        operation="required_layers_for",
        wardrobe_items=[],
        arguments={"latitude": 41.88, "longitude": -87.63},
        weather_profile=build_profile(temperature_f=40.0, precipitation=1.2, weather_code=61),
        expectations={"includes_layers": ["mid", "outer"]},
    ),
]
