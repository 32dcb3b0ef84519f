"""Error and failure types shared by the recommendation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class InvalidInput(ValueError):
    """Raised when a caller passes malformed ids, periods, occasions or vectors."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


@dataclass(frozen=True)
class InsufficientWardrobe:
    """Non-fatal result describing why an outfit or capsule day could not be filled."""

    reason: str
    missing_slots: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.reason


__all__ = ["InvalidInput", "InsufficientWardrobe"]
