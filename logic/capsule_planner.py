"""Capsule wardrobe planning over a weekly or monthly period."""
from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from logic.outfit_builder import (
    DEFAULT_EXHAUSTIVE_LIMIT,
    EXHAUSTED_REASON,
    CompositionRequest,
    build_request,
    compose,
    compose_distinct,
    partition_catalog,
    resolve_slots,
)
from logic.outfit_scoring import ScoringWeights
from models.clothing_item import ClothingItem, WearEvent
from models.color_theory import NEUTRAL, color_family
from models.errors import InvalidInput
from models.outfit import CapsuleDay, CapsulePlan
from models.taxonomy import TIMELESS_TYPES, VERSATILE_VIBES, is_known_occasion, normalize_label

logger = logging.getLogger(__name__)

PERIOD_DAYS: Dict[str, int] = {"weekly": 7, "monthly": 30}
DEFAULT_CAPSULE_SIZES: Dict[str, int] = {"weekly": 12, "monthly": 25}
DEFAULT_OCCASION_MIX: Dict[str, float] = {"casual": 1.0}
WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def period_key(period: str) -> str:
    key = normalize_label(period) if isinstance(period, str) else ""
    if key not in PERIOD_DAYS:
        raise InvalidInput(f"Unrecognized period {period!r}. Allowed: {sorted(PERIOD_DAYS)}")
    return key


def day_label(index: int) -> str:
    return WEEK_DAYS[index] if index < len(WEEK_DAYS) else f"Day {index + 1}"


def expand_occasion_mix(occasion_mix: Mapping[str, float], days: int) -> List[str]:
    """Turn an occasion distribution into a per-day sequence.

    Counts are apportioned by largest remainder and interleaved with a smooth
    weighted round-robin so that, e.g., 3 casual / 4 work alternates rather
    than clustering.
    """

    if not occasion_mix:
        raise InvalidInput("occasion_mix must name at least one occasion")
    weights: Dict[str, float] = {}
    for occasion, weight in occasion_mix.items():
        key = normalize_label(occasion)
        if not is_known_occasion(key):
            raise InvalidInput(f"Unknown occasion '{occasion}' in occasion_mix")
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0 or math.isnan(weight):
            raise InvalidInput(f"Weight for occasion '{occasion}' must be a non-negative number")
        weights[key] = weights.get(key, 0.0) + float(weight)
    total = sum(weights.values())
    if total <= 0:
        raise InvalidInput("occasion_mix weights must not all be zero")

    quotas = {occasion: weight / total * days for occasion, weight in weights.items()}
    counts = {occasion: int(math.floor(quota)) for occasion, quota in quotas.items()}
    order = list(weights)
    leftovers = sorted(order, key=lambda occ: (-(quotas[occ] - counts[occ]), order.index(occ)))
    for occasion in leftovers[: days - sum(counts.values())]:
        counts[occasion] += 1

    active = [occasion for occasion in order if counts[occasion] > 0]
    current = {occasion: 0 for occasion in active}
    sequence: List[str] = []
    for _ in range(days):
        for occasion in active:
            current[occasion] += counts[occasion]
        pick = max(active, key=lambda occ: current[occ])
        current[pick] -= days
        sequence.append(pick)
    return sequence


def versatility_prior(item: ClothingItem) -> int:
    """Neutral color (3) + timeless type (2) + casual/classic vibe (1)."""

    score = 0
    if color_family(item.primary_color) == NEUTRAL:
        score += 3
    if any(name in item.type for name in TIMELESS_TYPES):
        score += 2
    if normalize_label(item.vibe) in VERSATILE_VIBES:
        score += 1
    return score


def _combination_value(counts: Counter, templates: Sequence[Tuple[List[str], List[str]]]) -> Tuple[int, int]:
    coverage = 0
    combos = 0
    for required, optional in templates:
        coverage += sum(1 for slot in required if counts[slot] > 0)
        value = 1
        for slot in required:
            value *= counts[slot]
        for slot in optional:
            value *= counts[slot] + 1
        combos += value
    return coverage, combos


def select_working_subset(
    catalog: Sequence[ClothingItem], occasions: Iterable[str], size: int
) -> List[ClothingItem]:
    """Pick a versatile subset of at most ``size`` items.

    Greedy set-cover: each step adds the item that covers the most still-empty
    required slots, then the one unlocking the most additional valid slot
    combinations across the planned occasions.
    """

    items = sorted(catalog, key=lambda item: item.id)
    if len(items) <= size:
        return items
    templates = [resolve_slots(occasion) for occasion in dict.fromkeys(occasions)]
    counts: Counter = Counter()
    selected: List[ClothingItem] = []
    remaining = list(items)
    while remaining and len(selected) < size:
        base_coverage, base_combos = _combination_value(counts, templates)
        best_key = None
        best_index = 0
        for index, item in enumerate(remaining):
            counts[item.slot] += 1
            coverage, combos = _combination_value(counts, templates)
            counts[item.slot] -= 1
            key = (coverage - base_coverage, combos - base_combos, versatility_prior(item), -item.id)
            if best_key is None or key > best_key:
                best_key = key
                best_index = index
        chosen = remaining.pop(best_index)
        counts[chosen.slot] += 1
        selected.append(chosen)
    logger.info("Selected %s of %s items for the capsule", len(selected), len(items))
    return sorted(selected, key=lambda item: item.id)


def generate_capsule(
    catalog: Sequence[ClothingItem],
    period: str = "weekly",
    occasion_mix: Optional[Mapping[str, float]] = None,
    wear_history: Optional[Iterable[WearEvent]] = None,
    weights: Optional[ScoringWeights] = None,
    today: Optional[date] = None,
    capsule_sizes: Optional[Mapping[str, int]] = None,
    exhaustive_limit: int = DEFAULT_EXHAUSTIVE_LIMIT,
    max_accent_colors: int = 3,
) -> CapsulePlan:
    """Plan one outfit per day over ``period`` from a versatile catalog subset.

    Days that cannot be filled are reported as gaps; the plan always returns.
    """

    key = period_key(period)
    days = PERIOD_DAYS[key]
    occasions = expand_occasion_mix(occasion_mix or DEFAULT_OCCASION_MIX, days)
    sizes = {**DEFAULT_CAPSULE_SIZES, **(capsule_sizes or {})}
    subset = select_working_subset(catalog, occasions, sizes[key])
    by_slot = partition_catalog(subset)
    history = list(wear_history) if wear_history is not None else None

    requests: Dict[str, CompositionRequest] = {
        occasion: build_request(
            subset, occasion, None, history, weights, today, exhaustive_limit, max_accent_colors
        )
        for occasion in dict.fromkeys(occasions)
    }

    seen: Set[FrozenSet[int]] = set()
    usage: Counter = Counter()
    plan_days: List[CapsuleDay] = []
    previous_set: Optional[FrozenSet[int]] = None
    previous_by_slot: Dict[str, Set[int]] = {}
    for index, occasion in enumerate(occasions):
        label = day_label(index)
        request = requests[occasion]
        result = compose_distinct(by_slot, request, seen, previous_by_slot)
        if result.outfit is None and result.reason == EXHAUSTED_REASON:
            soft = {previous_set} if previous_set else set()
            result = compose_distinct(by_slot, request, soft, previous_by_slot)
            if result.outfit is None and result.reason == EXHAUSTED_REASON:
                result = compose(by_slot, request)
            logger.info("%s repeats an earlier combination; distinct options exhausted", label)

        if result.outfit is None:
            logger.info("Leaving %s unfilled: %s", label, result.reason)
            plan_days.append(CapsuleDay(index=index, label=label, occasion=occasion, gap_reason=result.reason))
            previous_set = None
            previous_by_slot = {}
            continue

        outfit = result.outfit
        plan_days.append(CapsuleDay(index=index, label=label, occasion=occasion, outfit=outfit))
        seen.add(outfit.item_ids)
        usage.update(outfit.item_ids)
        previous_set = outfit.item_ids
        previous_by_slot = {slot: {item.id} for slot, item in outfit.slots.items()}

    versatility = len(seen) / days
    plan = CapsulePlan(
        items=subset,
        days=plan_days,
        versatility_score=round(versatility, 4),
        item_usage=dict(sorted(usage.items())),
    )
    logger.info("Planned %s capsule: %s", key, plan.gap_summary)
    return plan


__all__ = [
    "PERIOD_DAYS",
    "DEFAULT_CAPSULE_SIZES",
    "period_key",
    "day_label",
    "expand_occasion_mix",
    "versatility_prior",
    "select_working_subset",
    "generate_capsule",
]
