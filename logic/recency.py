"""Wear-recency ("forgottenness") scoring over caller-supplied wear history."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from models.clothing_item import ClothingItem, WearEvent
from models.errors import InvalidInput

logger = logging.getLogger(__name__)

WEAR_WEIGHT = 10
_BONUS_SCALE = 20.0


@dataclass(frozen=True)
class WearStats:
    wear_count: int
    last_worn: Optional[date]
    days_since_last_worn: float


@dataclass(frozen=True)
class ForgottenItem:
    """An item ranked by how long it has been left in the closet."""

    item: ClothingItem
    score: float
    wear_count: int
    days_since_last_worn: Optional[int]


def index_wear_history(wear_history: Iterable[WearEvent]) -> Dict[int, List[WearEvent]]:
    """Group wear events by item id."""

    grouped: Dict[int, List[WearEvent]] = {}
    for event in wear_history:
        grouped.setdefault(event.item_id, []).append(event)
    return grouped


def _stats_from_events(events: Sequence[WearEvent], today: date) -> WearStats:
    if not events:
        return WearStats(wear_count=0, last_worn=None, days_since_last_worn=math.inf)
    last_worn = max(event.worn_on for event in events)
    days = max(0, (today - last_worn).days)
    return WearStats(wear_count=len(events), last_worn=last_worn, days_since_last_worn=float(days))


def wear_stats(item_id: int, wear_history: Iterable[WearEvent], today: Optional[date] = None) -> WearStats:
    """Derive wear count and days since last worn for one item."""

    today = today or date.today()
    events = [event for event in wear_history if event.item_id == item_id]
    return _stats_from_events(events, today)


def _score(stats: WearStats) -> float:
    if stats.wear_count == 0:
        return -math.inf
    return int(stats.wear_count * WEAR_WEIGHT - stats.days_since_last_worn)


def forgottenness_score(
    item: ClothingItem, wear_history: Iterable[WearEvent], today: Optional[date] = None
) -> float:
    """Return ``wear_count * 10 - days_since_last_worn``; lower is more forgotten.

    Unworn items score ``-inf`` so they outrank every worn item regardless of
    wear count.
    """

    return _score(wear_stats(item.id, wear_history, today))


def forgottenness_scores(
    items: Iterable[ClothingItem], wear_history: Iterable[WearEvent], today: Optional[date] = None
) -> Dict[int, float]:
    """Score many items with a single pass over the history."""

    today = today or date.today()
    grouped = index_wear_history(wear_history)
    return {item.id: _score(_stats_from_events(grouped.get(item.id, []), today)) for item in items}


def recency_bonus(score: float) -> float:
    """Map a forgottenness score onto [0, 1]; unworn items get 1.0."""

    if score == -math.inf:
        return 1.0
    exponent = max(-700.0, min(700.0, score / _BONUS_SCALE))
    return 1.0 / (1.0 + math.exp(exponent))


def rank_forgotten(
    items: Iterable[ClothingItem],
    wear_history: Iterable[WearEvent],
    limit: int,
    today: Optional[date] = None,
) -> List[ForgottenItem]:
    """Return the most forgotten items first, ties broken by ascending id."""

    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidInput(f"limit must be a non-negative integer, got {limit!r}")
    today = today or date.today()
    grouped = index_wear_history(wear_history)
    ranked = []
    for item in items:
        stats = _stats_from_events(grouped.get(item.id, []), today)
        days = None if stats.wear_count == 0 else int(stats.days_since_last_worn)
        ranked.append(ForgottenItem(item=item, score=_score(stats), wear_count=stats.wear_count, days_since_last_worn=days))
    ranked.sort(key=lambda entry: (entry.score, entry.item.id))
    logger.info("Ranked %s items for forgottenness, returning %s", len(ranked), min(limit, len(ranked)))
    return ranked[:limit]


__all__ = [
    "WearStats",
    "ForgottenItem",
    "index_wear_history",
    "wear_stats",
    "forgottenness_score",
    "forgottenness_scores",
    "recency_bonus",
    "rank_forgotten",
]
