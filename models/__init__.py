"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, WearEvent, build_catalog, from_raw_metadata
from models.errors import InsufficientWardrobe, InvalidInput

__all__ = ["ClothingItem", "WearEvent", "build_catalog", "from_raw_metadata", "InsufficientWardrobe", "InvalidInput"]
