"""Closet engine facade wiring configuration, logging and the recommendation core."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from closet_app.config import EngineConfig
from closet_app.logging_config import configure_logging, get_logger
from logic.analytics import WardrobeAnalytics, wardrobe_analytics
from logic.capsule_planner import generate_capsule
from logic.outfit_builder import OutfitBuildResult, generate_outfit, generate_outfits
from logic.recency import ForgottenItem, rank_forgotten
from logic.validation import (
    BatchOutfitRequest,
    CapsuleRequest,
    ColorRequest,
    OutfitRequest,
    RankForgottenRequest,
    SimilarItemsRequest,
)
from models.clothing_item import ClothingItem, WearEvent
from models.color_theory import HarmonyReport, suggest_complementary_colors, validate_color_palette
from models.outfit import CapsulePlan, GeneratedOutfit
from tools.embeddings import EmbeddingHelper
from tools.observability import instrument_operation
from tools.similarity_index import SimilarityIndex, SimilarityMatch
from tools.weather_provider import OpenMeteoProvider, WeatherProvider

LOGGER = get_logger(__name__)


class ClosetEngine:
    """Exposes outfit, capsule, color, recency, similarity and analytics operations.

    Every operation is a pure function of its arguments plus configuration;
    callers own fetching the catalog and wear history and persisting results.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        weather_provider: WeatherProvider | None = None,
    ) -> None:
        self.config = config or EngineConfig.from_env()
        configure_logging(self.config.log_level)
        self.weights = self.config.scoring_weights()
        self.embedding_helper = EmbeddingHelper(self.config.embedding_dimension)
        self.similarity_index = SimilarityIndex(self.embedding_helper)
        self.weather_provider = weather_provider or OpenMeteoProvider(
            timeout_seconds=self.config.weather_timeout_seconds
        )

    @instrument_operation("generate_outfit", input_model=OutfitRequest)
    def generate_outfit(
        self,
        catalog: Sequence[ClothingItem],
        occasion: str = "casual",
        required_layers: Optional[List[str]] = None,
        exclude_item_ids: Optional[List[int]] = None,
        wear_history: Optional[Iterable[WearEvent]] = None,
        today: Optional[date] = None,
    ) -> OutfitBuildResult:
        return generate_outfit(
            catalog,
            occasion,
            required_layers=required_layers,
            exclude_item_ids=exclude_item_ids,
            wear_history=wear_history,
            weights=self.weights,
            today=today,
            exhaustive_limit=self.config.exhaustive_search_limit,
            max_accent_colors=self.config.max_accent_colors,
        )

    @instrument_operation("generate_outfits", input_model=BatchOutfitRequest)
    def generate_outfits(
        self,
        catalog: Sequence[ClothingItem],
        count: int = 3,
        occasion: str = "casual",
        required_layers: Optional[List[str]] = None,
        exclude_item_ids: Optional[List[int]] = None,
        wear_history: Optional[Iterable[WearEvent]] = None,
        today: Optional[date] = None,
    ) -> List[GeneratedOutfit]:
        return generate_outfits(
            catalog,
            count,
            occasion,
            required_layers=required_layers,
            exclude_item_ids=exclude_item_ids,
            wear_history=wear_history,
            weights=self.weights,
            today=today,
            exhaustive_limit=self.config.exhaustive_search_limit,
            max_accent_colors=self.config.max_accent_colors,
        )

    @instrument_operation("generate_capsule", input_model=CapsuleRequest)
    def generate_capsule(
        self,
        catalog: Sequence[ClothingItem],
        period: str = "weekly",
        occasion_mix: Optional[Mapping[str, float]] = None,
        wear_history: Optional[Iterable[WearEvent]] = None,
        today: Optional[date] = None,
    ) -> CapsulePlan:
        return generate_capsule(
            catalog,
            period,
            occasion_mix=occasion_mix,
            wear_history=wear_history,
            weights=self.weights,
            today=today,
            capsule_sizes=self.config.capsule_sizes(),
            exhaustive_limit=self.config.exhaustive_search_limit,
            max_accent_colors=self.config.max_accent_colors,
        )

    @instrument_operation("validate_colors", input_model=ColorRequest)
    def validate_colors(self, colors: Sequence[Optional[str]]) -> HarmonyReport:
        return validate_color_palette(colors, self.config.max_accent_colors)

    @instrument_operation("suggest_complementary")
    def suggest_complementary(self, color: str) -> List[str]:
        return suggest_complementary_colors(color)

    @instrument_operation("rank_forgotten", input_model=RankForgottenRequest)
    def rank_forgotten(
        self,
        catalog: Sequence[ClothingItem],
        wear_history: Iterable[WearEvent],
        limit: int = 10,
        today: Optional[date] = None,
    ) -> List[ForgottenItem]:
        return rank_forgotten(catalog, wear_history, limit, today)

    @instrument_operation("similar_items", input_model=SimilarItemsRequest)
    def similar_items(
        self,
        query: Union[ClothingItem, Sequence[float]],
        candidates: Iterable[ClothingItem],
        k: int = 10,
    ) -> List[SimilarityMatch]:
        return self.similarity_index.similar_items(query, candidates, k)

    @instrument_operation("wardrobe_analytics")
    def wardrobe_analytics(
        self,
        catalog: Sequence[ClothingItem],
        wear_history: Optional[Iterable[WearEvent]] = None,
    ) -> WardrobeAnalytics:
        return wardrobe_analytics(catalog, wear_history)

    def get_or_compute_embedding(self, item: ClothingItem) -> List[float]:
        return self.embedding_helper.get_or_compute_embedding(item)

    def with_embedding(self, item: ClothingItem) -> ClothingItem:
        return self.embedding_helper.with_embedding(item)

    @instrument_operation("required_layers_for")
    def required_layers_for(self, latitude: float, longitude: float) -> List[str]:
        """Ask the weather collaborator which outfit slots the day calls for."""

        profile = self.weather_provider.get_forecast(latitude, longitude)
        LOGGER.info("Weather %s suggests layers %s", profile.conditions, profile.required_layers)
        return list(profile.required_layers)


__all__ = ["ClosetEngine"]
