"""Deterministic hash-based embeddings for clothing items.

These vectors are a placeholder for a real perceptual/vision embedding
service: they carry no visual meaning, only exact-metadata identity. Items
with identical metadata map to identical unit vectors; anything else is
effectively random relative to each other.
"""

from __future__ import annotations

import hashlib
import math
from dataclasses import replace
from typing import List, Mapping, Optional, Union

from models.clothing_item import ClothingItem

DEFAULT_DIMENSION = 64
SENTINEL_TEXT = "default"
EMBEDDING_FIELDS = ("type", "primary_color", "secondary_color", "pattern", "vibe", "notes")

Metadata = Union[ClothingItem, Mapping[str, Optional[str]]]


def _normalise(vector: List[float]) -> List[float]:
    length = math.sqrt(sum(value * value for value in vector))
    if length == 0:
        return [1.0] + [0.0] * (len(vector) - 1)
    return [value / length for value in vector]


class EmbeddingHelper:
    """Creates repeatable unit embeddings from item metadata."""

    def __init__(self, dimension: int = DEFAULT_DIMENSION) -> None:
        if dimension <= 0:
            raise ValueError("Embedding dimension must be positive")
        self.dimension = dimension

    @staticmethod
    def metadata_text(metadata: Metadata) -> str:
        """Concatenate the non-empty descriptive fields, lower-cased."""

        fields = metadata.metadata() if isinstance(metadata, ClothingItem) else metadata
        parts = [str(fields.get(name) or "").strip() for name in EMBEDDING_FIELDS]
        return " ".join(part for part in parts if part).lower()

    def _hash_to_vector(self, text: str) -> List[float]:
        raw = bytearray()
        block = 0
        while len(raw) < self.dimension:
            raw.extend(hashlib.sha256(f"{text}\x00{block}".encode("utf-8")).digest())
            block += 1
        return _normalise([(byte / 255.0) * 2.0 - 1.0 for byte in raw[: self.dimension]])

    def generate_embedding(self, metadata: Metadata) -> List[float]:
        """Return the unit vector for ``metadata``; empty metadata hashes a sentinel."""

        return self._hash_to_vector(self.metadata_text(metadata) or SENTINEL_TEXT)

    def get_or_compute_embedding(self, item: ClothingItem) -> List[float]:
        """Return the cached vector, or compute one without touching the item."""

        if item.embedding:
            return list(item.embedding)
        return self.generate_embedding(item)

    def with_embedding(self, item: ClothingItem) -> ClothingItem:
        """Return a copy of ``item`` carrying its embedding, for caller write-back."""

        if item.embedding:
            return item
        return replace(item, embedding=self.generate_embedding(item))


__all__ = ["EmbeddingHelper", "DEFAULT_DIMENSION", "EMBEDDING_FIELDS"]
