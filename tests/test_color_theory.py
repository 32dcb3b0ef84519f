"""Unit tests for palette validation and color suggestions."""
from __future__ import annotations

import sys
from itertools import combinations
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.color_theory import (
    COLOR_FAMILIES,
    analogous,
    color_family,
    complementary,
    monochrome,
    normalize_color_name,
    suggest_complementary_colors,
    triadic,
    validate_color_palette,
)

NEUTRALS = [name for name, family in COLOR_FAMILIES.items() if family == "neutral"]
WARM = [name for name, family in COLOR_FAMILIES.items() if family == "warm"]
COOL = [name for name, family in COLOR_FAMILIES.items() if family == "cool"]


def test_color_normalization_handles_aliases_and_phrases():
    assert normalize_color_name("Grey") == "gray"
    assert normalize_color_name("navy-blue") == "navy"
    assert normalize_color_name("dark navy blue") == "navy"
    assert normalize_color_name("Light Blue") == "blue"
    assert normalize_color_name("chartreuse") == "chartreuse"
    assert color_family("burgundy") == "warm"
    assert color_family("chartreuse") is None


def test_pair_helpers_are_symmetric():
    assert complementary("red", "green") and complementary("green", "red")
    assert analogous("blue", "teal") and analogous("teal", "blue")
    assert not complementary("red", "blue")
    assert monochrome(["navy", "navy blue", "denim"])
    assert not monochrome(["navy", "white"])
    assert triadic(["red", "yellow", "blue"])
    assert not triadic(["red", "yellow"])


@pytest.mark.parametrize("family", [WARM, COOL])
def test_single_accent_family_is_always_harmonious(family):
    for size in range(1, len(family) + 1):
        for accents in combinations(family, size):
            report = validate_color_palette(list(accents) + NEUTRALS[:2])
            assert report.is_harmonious, (accents, report.conflicts)


def test_neutral_only_palette_scores_highest():
    report = validate_color_palette(["white", "navy", "brown"])
    assert report.is_harmonious
    assert report.rule_used == "neutral palette"
    assert report.score == 10.0
    assert report.conflicts == []


def test_empty_palette_is_harmonious_with_note():
    report = validate_color_palette([])
    assert report.is_harmonious
    assert report.notes == ["no colors to validate"]


def test_unrelated_cross_family_accents_clash_without_buffer():
    report = validate_color_palette(["red", "blue"])
    assert not report.is_harmonious
    assert report.rule_used == "clash"
    assert report.conflicts == ["red clashes with blue without a neutral buffer"]


def test_neutral_piece_bridges_a_clash():
    report = validate_color_palette(["red", "blue", "white"])
    assert report.is_harmonious
    assert report.rule_used == "buffered clash"
    assert "a neutral piece bridges red and blue" in report.notes


def test_complementary_and_triadic_rules():
    assert validate_color_palette(["blue", "orange"]).rule_used == "complementary"
    assert validate_color_palette(["red", "yellow", "blue"]).rule_used == "triadic"


def test_too_many_mixed_accents_is_a_conflict():
    report = validate_color_palette(["red", "orange", "green", "blue"], max_accent_colors=3)
    assert not report.is_harmonious
    assert report.rule_used == "too many colors"
    assert report.conflicts == ["too many accent colors (4 > 3)"]


def test_unknown_colors_degrade_to_neutral_with_low_confidence_note():
    report = validate_color_palette(["chartreuse", "red"])
    assert report.is_harmonious
    assert report.notes == ["unrecognized color 'chartreuse' treated as neutral (low confidence)"]


def test_suggestions_follow_table_and_unknown_is_empty():
    assert suggest_complementary_colors("Navy")[:3] == ["white", "beige", "gray"]
    assert suggest_complementary_colors("chartreuse") == []
    first = suggest_complementary_colors("red")
    first.append("mutated")
    assert "mutated" not in suggest_complementary_colors("red")


def test_color_names_match_whole_words_only():
    assert normalize_color_name("tangerine") == "tangerine"
    assert color_family("tangerine") is None
    assert color_family("titanium") is None
    assert normalize_color_name("pale sky blue") == "blue"
    assert normalize_color_name("dark navy blue") == "navy"
    assert normalize_color_name("washed tan") == "beige"


def test_every_suggestion_is_a_canonical_color():
    for color in COLOR_FAMILIES:
        for suggestion in suggest_complementary_colors(color):
            assert normalize_color_name(suggestion) == suggestion
            assert suggestion in COLOR_FAMILIES, (color, suggestion)
    blue = suggest_complementary_colors("blue")
    assert "brown" in blue
    assert "camel" not in blue
    assert "cream" not in suggest_complementary_colors("orange")
