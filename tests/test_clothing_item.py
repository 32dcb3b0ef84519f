"""Tests for clothing item normalisation and the garment taxonomy."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models import ClothingItem, InsufficientWardrobe, InvalidInput, build_catalog, from_raw_metadata
from models.taxonomy import normalize_layering_category, occasion_slots, slot_for, type_family


def test_from_raw_metadata_accepts_camel_case_fields():
    item = from_raw_metadata(
        {
            "itemId": "12",
            "type": "Button-Down",
            "primaryColor": " White ",
            "secondaryColor": "",
            "layeringCategory": "BASE",
            "tags": "Work",
            "userId": "user-1",
        }
    )
    assert item.id == 12
    assert item.type == "button down"
    assert item.primary_color == "white"
    assert item.secondary_color is None
    assert item.layering_category == "base"
    assert item.tags == frozenset({"work"})
    assert item.colors == ["white"]


def test_missing_required_fields_are_rejected():
    with pytest.raises(InvalidInput):
        from_raw_metadata({"id": 1})
    with pytest.raises(InvalidInput):
        from_raw_metadata({"id": "shirt-1", "type": "shirt"})
    with pytest.raises(InvalidInput):
        ClothingItem(id=True, type="shirt", primary_color="white")


def test_build_catalog_numbers_items_without_ids():
    catalog = build_catalog([{"type": "shirt"}, {"type": "jeans", "id": 40}, {"type": "boots"}])
    assert [item.id for item in catalog] == [1, 40, 3]


def test_structural_types_override_layering_category():
    assert slot_for("dress shoes", "accessory") == "shoes"
    assert slot_for("dress pants", "base") == "bottom"
    assert slot_for("denim jacket", "mid") == "mid"
    assert type_family("rain jacket") == "outer"
    assert type_family("kimono") is None


def test_layering_category_is_inferred_from_type():
    assert normalize_layering_category("", "hoodie") == "mid"
    assert normalize_layering_category("unknown", "kimono") == "accessory"
    assert ClothingItem(id=1, type="parka", primary_color="olive").slot == "outer"


def test_occasion_templates():
    required, optional = occasion_slots("Work")
    assert required == ("base", "bottom", "shoes")
    assert optional == ("mid", "outer")
    with pytest.raises(KeyError):
        occasion_slots("gala")


def test_insufficient_wardrobe_is_a_value():
    failure = InsufficientWardrobe("no candidates for slot(s): shoes", missing_slots=["shoes"])
    assert str(failure) == "no candidates for slot(s): shoes"
    assert not isinstance(failure, Exception)
