"""Configuration helpers for the closet engine."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Dict, Optional

from logic.outfit_scoring import ScoringWeights

_INT_KEYS = {
    "embedding_dimension",
    "max_accent_colors",
    "exhaustive_search_limit",
    "weekly_capsule_size",
    "monthly_capsule_size",
}
_FLOAT_KEYS = {
    "color_weight",
    "vibe_weight",
    "recency_weight",
    "pattern_weight",
    "pattern_penalty_cap",
    "weather_timeout_seconds",
}


@dataclass
class EngineConfig:
    """Tunable values for scoring, capsule sizing and collaborators.

    Weights follow the documented emphasis: color and vibe dominate, recency
    nudges rotation, and the pattern-clash penalty is capped.
    """

    embedding_dimension: int = 64
    color_weight: float = 0.4
    vibe_weight: float = 0.4
    recency_weight: float = 0.2
    pattern_weight: float = 0.3
    pattern_penalty_cap: float = 1.0
    max_accent_colors: int = 3
    exhaustive_search_limit: int = 4
    weekly_capsule_size: int = 12
    monthly_capsule_size: int = 25
    weather_timeout_seconds: float = 5.0
    log_level: str = "INFO"
    environment: Optional[str] = None

    def __post_init__(self) -> None:
        if self.embedding_dimension <= 0:
            raise ValueError("embedding_dimension must be positive")
        if self.max_accent_colors < 1:
            raise ValueError("max_accent_colors must be at least 1")
        if self.exhaustive_search_limit < 0:
            raise ValueError("exhaustive_search_limit must be non-negative")
        if self.weekly_capsule_size < 1 or self.monthly_capsule_size < 1:
            raise ValueError("capsule sizes must be positive")
        self.scoring_weights()

    def scoring_weights(self) -> ScoringWeights:
        return ScoringWeights(
            color=self.color_weight,
            vibe=self.vibe_weight,
            recency=self.recency_weight,
            pattern=self.pattern_weight,
            pattern_penalty_cap=self.pattern_penalty_cap,
        )

    def capsule_sizes(self) -> Dict[str, int]:
        return {"weekly": self.weekly_capsule_size, "monthly": self.monthly_capsule_size}

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default; environment variables (upper-cased keys) override file values.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        values: dict = {}
        for config_field in fields(cls):
            if config_field.name == "environment":
                continue
            raw = os.getenv(config_field.name.upper(), yaml_config.get(config_field.name))
            if raw is None or raw == "":
                continue
            try:
                if config_field.name in _INT_KEYS:
                    values[config_field.name] = int(raw)
                elif config_field.name in _FLOAT_KEYS:
                    values[config_field.name] = float(raw)
                else:
                    values[config_field.name] = str(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid value for {config_field.name}: {raw!r}") from exc

        return cls(environment=env_name, **values)

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
