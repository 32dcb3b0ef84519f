"""Pydantic schemas for validating scalar arguments of the public operations."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.errors import InvalidInput


class OutfitRequest(BaseModel):
    """Input contract for single-outfit generation."""

    occasion: str = Field(default="casual", min_length=1)
    required_layers: Optional[List[str]] = None
    exclude_item_ids: Optional[List[int]] = None


class BatchOutfitRequest(BaseModel):
    """Input contract for batch outfit generation."""

    count: int = Field(ge=0)
    occasion: str = Field(default="casual", min_length=1)
    required_layers: Optional[List[str]] = None
    exclude_item_ids: Optional[List[int]] = None


class CapsuleRequest(BaseModel):
    """Input contract for capsule planning."""

    period: Literal["weekly", "monthly"] = "weekly"
    occasion_mix: Optional[Dict[str, float]] = None

    @field_validator("period", mode="before")
    @classmethod
    def _lower_period(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("occasion_mix")
    @classmethod
    def _non_negative(cls, value: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
        if value is not None and any(weight < 0 for weight in value.values()):
            raise ValueError("occasion weights must be non-negative")
        return value


class RankForgottenRequest(BaseModel):
    limit: int = Field(default=10, ge=0)


class SimilarItemsRequest(BaseModel):
    k: int = Field(default=10, ge=0)


class ColorRequest(BaseModel):
    colors: List[Optional[str]] = Field(default_factory=list)


def invalid_input(message: str, exc: ValidationError) -> InvalidInput:
    """Translate Pydantic errors into an :class:`InvalidInput` with details."""

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return InvalidInput(message, details=details)


__all__ = [
    "OutfitRequest",
    "BatchOutfitRequest",
    "CapsuleRequest",
    "RankForgottenRequest",
    "SimilarItemsRequest",
    "ColorRequest",
    "invalid_input",
]
