"""Clothing item and wear event data models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from models.errors import InvalidInput
from models.taxonomy import normalise_tags, normalize_label, normalize_layering_category, slot_for

_NORM_TOLERANCE = 1e-6

# camelCase keys emitted by the vision-analysis collaborator.
_FIELD_ALIASES = {
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "layeringCategory": "layering_category",
    "userId": "user_id",
    "itemId": "id",
    "item_id": "id",
}


def coerce_item_id(value: Any) -> int:
    """Return ``value`` as an item id, raising :class:`InvalidInput` when non-numeric."""

    if isinstance(value, bool):
        raise InvalidInput(f"Item id must be numeric, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise InvalidInput(f"Item id must be numeric, got {value!r}")


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError as exc:
            raise InvalidInput(f"Unparseable wear date {value!r}") from exc
    raise InvalidInput(f"Wear date must be a date, got {type(value).__name__}")


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ClothingItem:
    """A garment from a user's digitized wardrobe.

    ``embedding`` is a cache slot; the core never fills it in place; callers
    write back the vector returned by the embedding helper.
    """

    id: int
    type: str
    primary_color: str
    secondary_color: Optional[str] = None
    pattern: Optional[str] = None
    fit: Optional[str] = None
    vibe: Optional[str] = None
    layering_category: str = ""
    tags: FrozenSet[str] = field(default_factory=frozenset)
    notes: Optional[str] = None
    user_id: Optional[str] = None
    embedding: Optional[List[float]] = None

    def __post_init__(self) -> None:
        self.id = coerce_item_id(self.id)
        self.type = normalize_label(self.type)
        self.primary_color = str(self.primary_color or "").strip().lower()
        self.secondary_color = _clean(self.secondary_color)
        self.pattern = _clean(self.pattern)
        self.fit = _clean(self.fit)
        self.vibe = _clean(self.vibe)
        self.layering_category = normalize_layering_category(self.layering_category, self.type)
        self.tags = normalise_tags(_ensure_list(self.tags))
        if self.embedding is not None:
            vector = [float(value) for value in self.embedding]
            norm = math.sqrt(sum(value * value for value in vector))
            if not vector or abs(norm - 1.0) > _NORM_TOLERANCE:
                raise InvalidInput(f"Embedding for item {self.id} must be a unit vector (norm={norm:.6f})")
            self.embedding = vector

    @property
    def slot(self) -> str:
        """Outfit slot this item fills."""

        return slot_for(self.type, self.layering_category)

    @property
    def colors(self) -> List[str]:
        return [color for color in (self.primary_color, self.secondary_color) if color]

    def metadata(self) -> Dict[str, Optional[str]]:
        """Descriptive fields used for embeddings, in a fixed order."""

        return {
            "type": self.type,
            "primary_color": self.primary_color,
            "secondary_color": self.secondary_color,
            "pattern": self.pattern,
            "vibe": self.vibe,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class WearEvent:
    """A single recorded wear of an item."""

    item_id: int
    worn_on: date
    context: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_id", coerce_item_id(self.item_id))
        object.__setattr__(self, "worn_on", _coerce_date(self.worn_on))


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from loose analysis metadata."""

    data = {_FIELD_ALIASES.get(key, key): value for key, value in metadata.items()}
    missing = [name for name in ("id", "type") if data.get(name) in (None, "")]
    if missing:
        raise InvalidInput(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        id=data["id"],
        type=str(data["type"]),
        primary_color=str(data.get("primary_color") or ""),
        secondary_color=data.get("secondary_color"),
        pattern=data.get("pattern"),
        fit=data.get("fit"),
        vibe=data.get("vibe"),
        layering_category=str(data.get("layering_category") or ""),
        tags=frozenset(_ensure_list(data.get("tags"))),
        notes=data.get("notes"),
        user_id=data.get("user_id"),
        embedding=data.get("embedding"),
    )


def build_catalog(raw_items: Iterable[Dict[str, Any]]) -> List[ClothingItem]:
    """Build a catalog from raw metadata dicts, auto-numbering entries without ids."""

    catalog = []
    for index, raw in enumerate(raw_items, start=1):
        payload = dict(raw)
        if not any(key in payload for key in ("id", "item_id", "itemId")):
            payload["id"] = index
        catalog.append(from_raw_metadata(payload))
    return catalog


__all__ = ["ClothingItem", "WearEvent", "coerce_item_id", "from_raw_metadata", "build_catalog"]
