"""Tests for outfit scoring and deterministic outfit assembly."""
from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.outfit_builder import (
    EXHAUSTED_REASON,
    NO_ITEMS_REASON,
    build_request,
    compose_distinct,
    generate_outfit,
    generate_outfits,
    partition_catalog,
    resolve_slots,
)
from logic.outfit_scoring import ScoringWeights, pattern_penalty, score_outfit, vibe_match
from models.clothing_item import ClothingItem, WearEvent, build_catalog
from models.errors import InvalidInput


def _three_piece() -> List[ClothingItem]:
    return build_catalog(
        [
            {"type": "shirt", "layeringCategory": "base", "primaryColor": "white"},
            {"type": "pants", "layeringCategory": "bottom", "primaryColor": "navy"},
            {"type": "shoes", "layeringCategory": "accessory", "primaryColor": "brown"},
        ]
    )


def _wardrobe() -> List[ClothingItem]:
    return build_catalog(
        [
            {"id": 1, "type": "t-shirt", "primaryColor": "white", "vibe": "casual"},
            {"id": 2, "type": "shirt", "primaryColor": "blue", "vibe": "classic"},
            {"id": 3, "type": "tank top", "primaryColor": "black", "vibe": "casual"},
            {"id": 10, "type": "jeans", "primaryColor": "navy", "vibe": "casual"},
            {"id": 11, "type": "chinos", "primaryColor": "beige", "vibe": "classic"},
            {"id": 20, "type": "sneakers", "primaryColor": "white", "vibe": "sporty"},
            {"id": 21, "type": "loafers", "primaryColor": "brown", "vibe": "classic"},
            {"id": 30, "type": "trench coat", "primaryColor": "beige", "vibe": "classic"},
            {"id": 40, "type": "cardigan", "primaryColor": "gray", "vibe": "casual"},
        ]
    )


def test_three_piece_casual_outfit_uses_every_item():
    result = generate_outfit(_three_piece(), "casual")

    assert result.ok
    outfit = result.outfit
    assert outfit.item_ids == frozenset({1, 2, 3})
    assert set(outfit.slots) == {"base", "bottom", "shoes"}
    assert outfit.harmony.is_harmonious
    assert outfit.score > 0
    assert outfit.reasoning.startswith("Casual outfit: neutral palette")


def test_empty_catalog_reports_no_items():
    result = generate_outfit([], "casual")
    assert result.outfit is None
    assert result.reason == NO_ITEMS_REASON


def test_missing_slot_reports_insufficient_wardrobe():
    catalog = [item for item in _three_piece() if item.slot != "shoes"]
    result = generate_outfit(catalog, "casual")
    assert result.outfit is None
    assert result.failure.missing_slots == ["shoes"]
    assert "shoes" in result.reason


def test_invalid_inputs_are_rejected():
    with pytest.raises(InvalidInput):
        generate_outfit(_three_piece(), "")
    with pytest.raises(InvalidInput):
        generate_outfit(_three_piece(), "gala")
    with pytest.raises(InvalidInput):
        generate_outfit(_three_piece(), "casual", required_layers=["cape"])
    with pytest.raises(InvalidInput):
        generate_outfit(_three_piece(), "casual", exclude_item_ids=["abc"])
    with pytest.raises(InvalidInput):
        generate_outfits(_three_piece(), -1, "casual")


def test_unknown_occasion_allowed_with_explicit_layers():
    result = generate_outfit(_three_piece(), "gala", required_layers=["base", "shoes"])
    assert result.ok
    assert set(result.outfit.slots) == {"base", "shoes"}


def test_resolve_slots_orders_and_dedupes_layers():
    required, optional = resolve_slots("casual", ["shoes", "Base", "base", "outer"])
    assert required == ["base", "outer", "shoes"]
    assert optional == []
    assert resolve_slots("work") == (["base", "bottom", "shoes"], ["mid", "outer"])


def test_required_layers_force_mid_and_outer():
    result = generate_outfit(_wardrobe(), "casual", required_layers=["base", "bottom", "mid", "outer", "shoes"])
    assert result.ok
    assert result.outfit.slots["mid"].id == 40
    assert result.outfit.slots["outer"].id == 30


def test_excluded_items_never_appear():
    result = generate_outfit(_wardrobe(), "casual", exclude_item_ids=["1", 20])
    assert result.ok
    assert not result.outfit.item_ids & {1, 20}


def test_exhaustive_and_greedy_strategies_are_reported():
    catalog = _wardrobe()
    exhaustive = generate_outfit(catalog, "casual")
    greedy = generate_outfit(catalog, "casual", exhaustive_limit=1)

    assert exhaustive.diagnostics["strategy"] == "exhaustive"
    assert exhaustive.diagnostics["combinations_scored"] >= 3 * 2 * 2
    assert greedy.diagnostics["strategy"] == "greedy"
    assert greedy.ok


def test_generation_is_deterministic():
    catalog = _wardrobe()
    first = generate_outfit(catalog, "work")
    second = generate_outfit(list(reversed(catalog)), "work")
    assert first.outfit.item_ids == second.outfit.item_ids
    assert first.outfit.score == second.outfit.score


def test_batch_outfits_are_pairwise_distinct():
    outfits = generate_outfits(_wardrobe(), 4, "casual")

    assert len(outfits) == 4
    item_sets = [outfit.item_ids for outfit in outfits]
    assert len(set(item_sets)) == len(item_sets)
    scores = [outfit.score for outfit in outfits]
    assert scores == sorted(scores, reverse=True)


def test_batch_stops_when_combinations_run_out():
    outfits = generate_outfits(_three_piece(), 3, "casual")
    assert len(outfits) == 1
    assert generate_outfits(_three_piece(), 0, "casual") == []


def test_compose_distinct_reports_exhaustion():
    catalog = _three_piece()
    request = build_request(catalog, "casual")
    result = compose_distinct(partition_catalog(catalog), request, {frozenset({1, 2, 3})})
    assert result.outfit is None
    assert result.reason == EXHAUSTED_REASON


def test_partition_skips_duplicate_ids():
    catalog = _three_piece()
    by_slot = partition_catalog(catalog + [catalog[0]])
    assert [item.id for item in by_slot["base"]] == [1]
    assert by_slot["shoes"][0].layering_category == "accessory"


def test_wear_history_prefers_unworn_pieces():
    catalog = build_catalog(
        [
            {"id": 1, "type": "shirt", "primaryColor": "white"},
            {"id": 2, "type": "shirt", "primaryColor": "white"},
            {"id": 3, "type": "jeans", "primaryColor": "navy"},
            {"id": 4, "type": "sneakers", "primaryColor": "white"},
        ]
    )
    history = [WearEvent(item_id=1, worn_on="2024-02-29"), WearEvent(item_id=1, worn_on="2024-02-28")]
    result = generate_outfit(catalog, "casual", wear_history=history, today=date(2024, 3, 1))
    assert result.outfit.slots["base"].id == 2
    assert "brings back an unworn piece" in result.outfit.reasoning


def test_vibe_match_levels():
    item = ClothingItem(id=1, type="shirt", primary_color="white", vibe="casual")
    assert vibe_match(item, "casual") == 1.0
    assert vibe_match(ClothingItem(id=2, type="shirt", primary_color="white", vibe="classic"), "work") == 0.8
    assert vibe_match(ClothingItem(id=3, type="shirt", primary_color="white", tags=["sporty"]), "sport") == 0.5
    assert vibe_match(ClothingItem(id=4, type="shirt", primary_color="white"), "formal") == 0.3
    assert vibe_match(ClothingItem(id=5, type="shirt", primary_color="white", vibe="boho"), "formal") == 0.1


def test_pattern_penalty_is_capped():
    patterned = [
        ClothingItem(id=index, type="shirt", primary_color="white", pattern="striped") for index in range(1, 6)
    ]
    assert pattern_penalty(patterned[:1], cap=1.0) == 0.0
    assert pattern_penalty(patterned[:2], cap=1.0) == 0.5
    assert pattern_penalty(patterned, cap=1.0) == 1.0


def test_score_outfit_worked_example_and_weights():
    items = _three_piece()
    result = score_outfit(items, "casual")
    assert result.score == pytest.approx(6.2)
    assert result.contributions["color"] == 1.0

    color_only = score_outfit(items, "casual", weights=ScoringWeights(color=1.0, vibe=0.0, recency=0.0))
    assert color_only.score == 10.0
    with pytest.raises(ValueError):
        ScoringWeights(color=-1.0)


def _grid_wardrobe() -> List[ClothingItem]:
    colors = ["white", "gray", "black"]
    raw = []
    for offset, garment in ((0, "shirt"), (10, "jeans"), (20, "sneakers")):
        for index, color in enumerate(colors, start=1):
            raw.append({"id": offset + index, "type": garment, "primaryColor": color})
    return build_catalog(raw)


def test_batch_uses_every_distinct_combination():
    outfits = generate_outfits(_grid_wardrobe(), 27, "casual")

    assert len(outfits) == 27
    assert len({outfit.item_ids for outfit in outfits}) == 27
    assert len(generate_outfits(_grid_wardrobe(), 30, "casual")) == 27


def test_compose_distinct_finds_last_unused_combination():
    catalog = _grid_wardrobe()
    request = build_request(catalog, "casual")
    every = {
        frozenset({base, bottom, shoes})
        for base in (1, 2, 3)
        for bottom in (11, 12, 13)
        for shoes in (21, 22, 23)
    }
    remaining = frozenset({3, 13, 23})
    result = compose_distinct(partition_catalog(catalog), request, every - {remaining})

    assert result.outfit.item_ids == remaining
    assert result.diagnostics["search"] == "enumerated"
