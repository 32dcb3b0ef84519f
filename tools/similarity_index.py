"""In-memory nearest-neighbour lookups over cached item embeddings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from models.clothing_item import ClothingItem
from models.errors import InvalidInput
from tools.embeddings import EmbeddingHelper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarityMatch:
    item: ClothingItem
    score: float


def similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of two unit vectors; mismatched or empty vectors are not comparable (0)."""

    if not a or not b or len(a) != len(b):
        return 0.0
    return sum(x * y for x, y in zip(a, b))


def find_similar_items(
    query_vector: Sequence[float], candidates: Iterable[ClothingItem], k: int
) -> List[SimilarityMatch]:
    """Rank candidates with a cached embedding by similarity, ties by ascending id."""

    if isinstance(k, bool) or not isinstance(k, int) or k < 0:
        raise InvalidInput(f"k must be a non-negative integer, got {k!r}")
    if not query_vector:
        raise InvalidInput("query vector must not be empty")

    scored: List[SimilarityMatch] = []
    skipped = 0
    for item in candidates:
        if not item.embedding:
            skipped += 1
            continue
        scored.append(SimilarityMatch(item=item, score=similarity(query_vector, item.embedding)))
    if skipped:
        logger.debug("Skipped %s candidates without cached embeddings", skipped)

    scored.sort(key=lambda match: (-match.score, match.item.id))
    return scored[:k]


class SimilarityIndex:
    """Similarity lookups accepting either a query vector or an item."""

    def __init__(self, embedding_helper: Optional[EmbeddingHelper] = None) -> None:
        self.embedding_helper = embedding_helper or EmbeddingHelper()

    def similar_items(
        self,
        query: Union[ClothingItem, Sequence[float]],
        candidates: Iterable[ClothingItem],
        k: int = 10,
    ) -> List[SimilarityMatch]:
        if isinstance(query, ClothingItem):
            vector = self.embedding_helper.get_or_compute_embedding(query)
            candidates = [item for item in candidates if item.id != query.id]
        else:
            vector = [float(value) for value in query]
        matches = find_similar_items(vector, candidates, k)
        logger.info("Similarity query returned %s matches", len(matches))
        return matches


__all__ = ["SimilarityMatch", "SimilarityIndex", "similarity", "find_similar_items"]
