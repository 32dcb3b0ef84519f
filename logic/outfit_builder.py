"""Deterministic outfit assembly with transparent diagnostics."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import date
from itertools import product
from typing import Deque, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from logic.outfit_scoring import OutfitScore, ScoringWeights, score_outfit
from logic.recency import forgottenness_scores
from models.clothing_item import ClothingItem, WearEvent, coerce_item_id
from models.errors import InsufficientWardrobe, InvalidInput
from models.outfit import GeneratedOutfit
from models.taxonomy import (
    LAYERING_CATEGORIES,
    SLOT_ORDER,
    is_known_occasion,
    normalize_label,
    occasion_slots,
)

logger = logging.getLogger(__name__)

NO_ITEMS_REASON = "no items available"
EXHAUSTED_REASON = "no new combination available"
DEFAULT_EXHAUSTIVE_LIMIT = 4
_MAX_SEARCH_STATES = 64
_MAX_ENUMERATED_COMBINATIONS = 2048


@dataclass(frozen=True)
class CompositionRequest:
    """Resolved, validated parameters shared by every construction in one call."""

    occasion: str
    required_slots: Tuple[str, ...]
    optional_slots: Tuple[str, ...] = ()
    forgottenness: Optional[Mapping[int, float]] = None
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    exhaustive_limit: int = DEFAULT_EXHAUSTIVE_LIMIT
    max_accent_colors: int = 3

    @property
    def anchor_slot(self) -> str:
        return self.required_slots[0]

    @property
    def slots(self) -> Tuple[str, ...]:
        return self.required_slots + self.optional_slots


@dataclass(frozen=True)
class OutfitBuildResult:
    outfit: Optional[GeneratedOutfit]
    failure: Optional[InsufficientWardrobe] = None
    diagnostics: Dict[str, object] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outfit is not None

    @property
    def reason(self) -> Optional[str]:
        return self.failure.reason if self.failure else None


def _slot_rank(slot: str) -> int:
    return SLOT_ORDER.index(slot)


def resolve_slots(occasion: str, required_layers: Optional[Sequence[str]] = None) -> Tuple[List[str], List[str]]:
    """Return ``(required, optional)`` slots in construction order.

    ``required_layers`` is taken literally when supplied; otherwise the
    occasion's default template applies.
    """

    if not isinstance(occasion, str) or not occasion.strip():
        raise InvalidInput("occasion must be a non-empty string")
    if required_layers:
        requested: List[str] = []
        for layer in required_layers:
            key = normalize_label(layer)
            if key not in LAYERING_CATEGORIES:
                raise InvalidInput(f"Unknown layering slot '{layer}'. Allowed: {LAYERING_CATEGORIES}")
            if key not in requested:
                requested.append(key)
        return sorted(requested, key=_slot_rank), []
    if not is_known_occasion(occasion):
        raise InvalidInput(f"Unknown occasion '{occasion}' has no default slot mapping")
    required, optional = occasion_slots(occasion)
    return sorted(required, key=_slot_rank), sorted(optional, key=_slot_rank)


def build_request(
    catalog: Sequence[ClothingItem],
    occasion: str,
    required_layers: Optional[Sequence[str]] = None,
    wear_history: Optional[Iterable[WearEvent]] = None,
    weights: Optional[ScoringWeights] = None,
    today: Optional[date] = None,
    exhaustive_limit: int = DEFAULT_EXHAUSTIVE_LIMIT,
    max_accent_colors: int = 3,
) -> CompositionRequest:
    required, optional = resolve_slots(occasion, required_layers)
    forgottenness = None
    if wear_history is not None:
        forgottenness = forgottenness_scores(catalog, list(wear_history), today)
    return CompositionRequest(
        occasion=normalize_label(occasion),
        required_slots=tuple(required),
        optional_slots=tuple(optional),
        forgottenness=forgottenness,
        weights=weights or ScoringWeights(),
        exhaustive_limit=exhaustive_limit,
        max_accent_colors=max_accent_colors,
    )


def partition_catalog(catalog: Iterable[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    """Group items by the outfit slot they fill, each group sorted by id."""

    grouped: Dict[str, List[ClothingItem]] = {}
    seen: Set[int] = set()
    for item in catalog:
        if item.id in seen:
            logger.warning("Skipping duplicate catalog entry for item %s", item.id)
            continue
        seen.add(item.id)
        grouped.setdefault(item.slot, []).append(item)
    for values in grouped.values():
        values.sort(key=lambda i: i.id)
    return grouped


def _score(items: Sequence[ClothingItem], request: CompositionRequest) -> OutfitScore:
    return score_outfit(
        items,
        request.occasion,
        forgottenness=request.forgottenness,
        weights=request.weights,
        max_accent_colors=request.max_accent_colors,
    )


def _reasoning(occasion: str, reasons: List[str]) -> str:
    label = occasion.capitalize()
    if not reasons:
        return f"{label} outfit assembled from available pieces"
    return f"{label} outfit: " + ", ".join(reasons)


def _best_exhaustive(
    candidates: Dict[str, List[ClothingItem]], request: CompositionRequest
) -> Tuple[List[ClothingItem], int]:
    best: List[ClothingItem] = []
    best_key: Optional[Tuple[float, Tuple[int, ...]]] = None
    evaluated = 0
    for combo in product(*(candidates[slot] for slot in request.required_slots)):
        evaluated += 1
        key = (-_score(combo, request).score, tuple(item.id for item in combo))
        if best_key is None or key < best_key:
            best_key = key
            best = list(combo)
    return best, evaluated


def _best_greedy(
    candidates: Dict[str, List[ClothingItem]], request: CompositionRequest
) -> Tuple[List[ClothingItem], int]:
    chosen: List[ClothingItem] = []
    evaluated = 0
    for slot in request.required_slots:
        best_item = None
        best_key: Optional[Tuple[float, int]] = None
        for candidate in candidates[slot]:
            evaluated += 1
            key = (-_score(chosen + [candidate], request).score, candidate.id)
            if best_key is None or key < best_key:
                best_key = key
                best_item = candidate
        chosen.append(best_item)
    return chosen, evaluated


def compose(
    by_slot: Mapping[str, List[ClothingItem]],
    request: CompositionRequest,
    excluded: FrozenSet[int] = frozenset(),
) -> OutfitBuildResult:
    """Build one outfit from a partitioned catalog, skipping ``excluded`` ids."""

    diagnostics: Dict[str, object] = {
        "required_slots": list(request.required_slots),
        "optional_slots": list(request.optional_slots),
        "excluded_count": len(excluded),
    }
    if not any(by_slot.values()):
        diagnostics["reason"] = NO_ITEMS_REASON
        return OutfitBuildResult(outfit=None, failure=InsufficientWardrobe(NO_ITEMS_REASON), diagnostics=diagnostics)

    candidates = {
        slot: [item for item in by_slot.get(slot, []) if item.id not in excluded] for slot in request.slots
    }
    diagnostics["candidate_counts"] = {slot: len(values) for slot, values in candidates.items()}
    missing = [slot for slot in request.required_slots if not candidates[slot]]
    if missing:
        reason = f"no candidates for slot(s): {', '.join(missing)}"
        logger.info("Insufficient wardrobe for %s outfit: %s", request.occasion, reason)
        diagnostics["reason"] = reason
        return OutfitBuildResult(
            outfit=None, failure=InsufficientWardrobe(reason, missing_slots=missing), diagnostics=diagnostics
        )

    if all(len(candidates[slot]) <= request.exhaustive_limit for slot in request.required_slots):
        chosen, evaluated = _best_exhaustive(candidates, request)
        diagnostics["strategy"] = "exhaustive"
    else:
        chosen, evaluated = _best_greedy(candidates, request)
        diagnostics["strategy"] = "greedy"

    current = _score(chosen, request)
    for slot in request.optional_slots:
        best_option = None
        best_key: Optional[Tuple[float, int]] = None
        for candidate in candidates[slot]:
            evaluated += 1
            option = _score(chosen + [candidate], request)
            key = (-option.score, candidate.id)
            if best_key is None or key < best_key:
                best_key = key
                best_option = (candidate, option)
        if best_option and best_option[1].score >= current.score:
            chosen.append(best_option[0])
            current = best_option[1]
            logger.debug("Added optional %s item %s", slot, best_option[0].id)
    diagnostics["combinations_scored"] = evaluated

    slots = {item.slot: item for item in sorted(chosen, key=lambda i: _slot_rank(i.slot))}
    outfit = GeneratedOutfit(
        slots=slots,
        occasion=request.occasion,
        score=current.score,
        reasoning=_reasoning(request.occasion, current.reasons),
        harmony=current.harmony,
        contributions=current.contributions,
    )
    diagnostics["chosen_ids"] = [item.id for item in slots.values()]
    logger.info("Selected %s outfit %s with score=%s", request.occasion, diagnostics["chosen_ids"], outfit.score)
    return OutfitBuildResult(outfit=outfit, diagnostics=diagnostics)


def _best_unseen_combination(
    by_slot: Mapping[str, List[ClothingItem]],
    request: CompositionRequest,
    forbidden: Set[FrozenSet[int]],
    excluded: FrozenSet[int],
) -> Tuple[bool, Optional[OutfitBuildResult]]:
    """Score every required-slot combination and return the best unseen outfit.

    Returns ``(False, None)`` when the combination space is too large to
    enumerate. Each combination is pinned by excluding the other candidates of
    its slots; optional slots are filled as usual, or left empty when the
    filled outfit was already used.
    """

    candidates = {
        slot: [item for item in by_slot.get(slot, []) if item.id not in excluded] for slot in request.slots
    }
    total = 1
    for slot in request.required_slots:
        total *= len(candidates[slot])
    if total > _MAX_ENUMERATED_COMBINATIONS:
        return False, None

    required_ids = frozenset(item.id for slot in request.required_slots for item in candidates[slot])
    optional_ids = frozenset(item.id for slot in request.optional_slots for item in candidates[slot])
    best: Optional[OutfitBuildResult] = None
    best_key: Optional[Tuple[float, Tuple[int, ...]]] = None
    for combo in product(*(candidates[slot] for slot in request.required_slots)):
        pinned = excluded | (required_ids - {item.id for item in combo})
        for blocked in (pinned, pinned | optional_ids):
            result = compose(by_slot, request, blocked)
            if result.outfit is None or result.outfit.item_ids in forbidden:
                continue
            key = (-result.outfit.score, tuple(sorted(result.outfit.item_ids)))
            if best_key is None or key < best_key:
                best_key = key
                best = result
            break
    if best is not None:
        best.diagnostics["relaxed"] = True
        best.diagnostics["search"] = "enumerated"
        best.diagnostics["combinations_enumerated"] = total
    return True, best


def compose_distinct(
    by_slot: Mapping[str, List[ClothingItem]],
    request: CompositionRequest,
    forbidden: Set[FrozenSet[int]],
    avoid_by_slot: Optional[Mapping[str, Set[int]]] = None,
    excluded: FrozenSet[int] = frozenset(),
) -> OutfitBuildResult:
    """Build an outfit whose item-set is not in ``forbidden``.

    Items in ``avoid_by_slot`` are excluded first. If that cannot produce a new
    outfit, slots are relaxed one at a time, least-constrained (most
    candidates) first with the anchor slot last. After that every required-slot
    combination is scored when the space is small enough; larger catalogs fall
    back to a bounded search that swaps single items out of repeated outfits.
    """

    avoid_by_slot = avoid_by_slot or {}
    available = {
        slot: sum(1 for item in by_slot.get(slot, []) if item.id not in excluded) for slot in request.slots
    }
    relax_order = sorted(
        (slot for slot in request.slots if slot != request.anchor_slot),
        key=lambda slot: (-available[slot], _slot_rank(slot)),
    ) + [request.anchor_slot]

    avoided = list(relax_order)
    plans: List[FrozenSet[int]] = []
    while True:
        blocked = set(excluded)
        for slot in avoided:
            blocked.update(avoid_by_slot.get(slot, set()))
        plans.append(frozenset(blocked))
        if not avoided:
            break
        avoided.pop(0)

    results: Dict[FrozenSet[int], OutfitBuildResult] = {}
    for plan in dict.fromkeys(plans):
        result = compose(by_slot, request, plan)
        results[plan] = result
        if result.outfit is not None and result.outfit.item_ids not in forbidden:
            result.diagnostics["relaxed"] = plan != plans[0]
            return result

    baseline = results[frozenset(excluded)]
    if baseline.outfit is None:
        return baseline

    enumerated, best = _best_unseen_combination(by_slot, request, forbidden, frozenset(excluded))
    if best is not None:
        return best
    if enumerated:
        return OutfitBuildResult(
            outfit=None,
            failure=InsufficientWardrobe(EXHAUSTED_REASON),
            diagnostics={"search": "enumerated"},
        )

    frontier: Deque[FrozenSet[int]] = deque([frozenset(excluded)])
    visited: Set[FrozenSet[int]] = set()
    while frontier and len(visited) < _MAX_SEARCH_STATES:
        blocked = frontier.popleft()
        if blocked in visited:
            continue
        visited.add(blocked)
        result = compose(by_slot, request, blocked)
        if result.outfit is None:
            continue
        if result.outfit.item_ids not in forbidden:
            result.diagnostics["relaxed"] = True
            return result
        for slot in relax_order:
            item = result.outfit.slots.get(slot)
            if item is not None:
                frontier.append(blocked | {item.id})

    return OutfitBuildResult(
        outfit=None,
        failure=InsufficientWardrobe(EXHAUSTED_REASON),
        diagnostics={"search_visited": len(visited)},
    )


def _coerce_excluded(exclude_item_ids: Optional[Iterable[object]]) -> FrozenSet[int]:
    return frozenset(coerce_item_id(value) for value in exclude_item_ids or ())


def generate_outfit(
    catalog: Sequence[ClothingItem],
    occasion: str = "casual",
    required_layers: Optional[Sequence[str]] = None,
    exclude_item_ids: Optional[Iterable[object]] = None,
    wear_history: Optional[Iterable[WearEvent]] = None,
    weights: Optional[ScoringWeights] = None,
    today: Optional[date] = None,
    exhaustive_limit: int = DEFAULT_EXHAUSTIVE_LIMIT,
    max_accent_colors: int = 3,
) -> OutfitBuildResult:
    """Select one coherent outfit, or report why the wardrobe cannot fill it."""

    excluded = _coerce_excluded(exclude_item_ids)
    request = build_request(
        catalog, occasion, required_layers, wear_history, weights, today, exhaustive_limit, max_accent_colors
    )
    return compose(partition_catalog(catalog), request, excluded)


def generate_outfits(
    catalog: Sequence[ClothingItem],
    count: int,
    occasion: str = "casual",
    required_layers: Optional[Sequence[str]] = None,
    exclude_item_ids: Optional[Iterable[object]] = None,
    wear_history: Optional[Iterable[WearEvent]] = None,
    weights: Optional[ScoringWeights] = None,
    today: Optional[date] = None,
    exhaustive_limit: int = DEFAULT_EXHAUSTIVE_LIMIT,
    max_accent_colors: int = 3,
) -> List[GeneratedOutfit]:
    """Return up to ``count`` outfits with pairwise-distinct item-sets, best first."""

    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidInput(f"count must be a non-negative integer, got {count!r}")
    excluded = _coerce_excluded(exclude_item_ids)
    request = build_request(
        catalog, occasion, required_layers, wear_history, weights, today, exhaustive_limit, max_accent_colors
    )
    by_slot = partition_catalog(catalog)

    accepted: List[GeneratedOutfit] = []
    seen: Set[FrozenSet[int]] = set()
    used_by_slot: Dict[str, Set[int]] = {}
    for index in range(count):
        result = compose_distinct(by_slot, request, seen, used_by_slot, excluded)
        if result.outfit is None:
            logger.info("Stopping batch after %s of %s outfits: %s", index, count, result.reason)
            break
        accepted.append(result.outfit)
        seen.add(result.outfit.item_ids)
        for slot, item in result.outfit.slots.items():
            used_by_slot.setdefault(slot, set()).add(item.id)

    accepted.sort(key=lambda outfit: (-outfit.score, sorted(outfit.item_ids)))
    return accepted


__all__ = [
    "CompositionRequest",
    "OutfitBuildResult",
    "NO_ITEMS_REASON",
    "EXHAUSTED_REASON",
    "resolve_slots",
    "build_request",
    "partition_catalog",
    "compose",
    "compose_distinct",
    "generate_outfit",
    "generate_outfits",
]
