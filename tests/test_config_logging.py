"""Configuration loading and logging helper tests."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from closet_app.config import EngineConfig
from closet_app.logging_config import (
    CORRELATION_ID,
    JsonFormatter,
    correlation_context,
    ensure_correlation_id,
    operation_context,
    redact_for_log,
)

_ENV_KEYS = ["APP_ENV", "APP_CONFIG_PATH", "CLOSET_CONFIG_DIR", "COLOR_WEIGHT", "MAX_ACCENT_COLORS", "LOG_LEVEL"]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_follow_documented_emphasis():
    config = EngineConfig.from_env()
    weights = config.scoring_weights()
    assert weights.color == weights.vibe == 0.4
    assert weights.recency < weights.color
    assert config.capsule_sizes() == {"weekly": 12, "monthly": 25}
    assert config.environment is None


def test_environment_yaml_and_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "staging.yaml").write_text(
        "# staging tuning\ncolor_weight: 0.6\nweekly_capsule_size: 10\nlog_level: 'DEBUG'\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("CLOSET_CONFIG_DIR", str(env_dir))
    monkeypatch.setenv("MAX_ACCENT_COLORS", "2")

    config = EngineConfig.from_env()

    assert config.environment == "staging"
    assert config.color_weight == 0.6
    assert config.weekly_capsule_size == 10
    assert config.log_level == "DEBUG"
    assert config.max_accent_colors == 2


def test_explicit_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "closet.yaml"
    path.write_text("exhaustive_search_limit: 6\n")
    monkeypatch.setenv("APP_CONFIG_PATH", str(path))
    assert EngineConfig.from_env().exhaustive_search_limit == 6


def test_invalid_values_fail_at_load_time(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("COLOR_WEIGHT", "heavy")
    with pytest.raises(ValueError):
        EngineConfig.from_env()
    with pytest.raises(ValueError):
        EngineConfig(color_weight=0.0, vibe_weight=0.0, recency_weight=0.0)
    with pytest.raises(ValueError):
        EngineConfig(weekly_capsule_size=0)


def test_redaction_scrubs_sensitive_fields():
    payload = {
        "user_id": "u-123",
        "notes": "birthday gift",
        "contact": "someone@example.com",
        "image": "https://cdn.example.com/1.jpg",
        "nested": [{"latitude": 1.0, "type": "coat"}],
        "count": 3,
    }
    scrubbed = redact_for_log(payload)
    assert scrubbed["user_id"] == "[redacted]"
    assert scrubbed["notes"] == "[redacted]"
    assert scrubbed["contact"] == "[redacted-email]"
    assert scrubbed["image"] == "[redacted-url]"
    assert scrubbed["nested"] == [{"latitude": "[redacted]", "type": "coat"}]
    assert scrubbed["count"] == 3


def test_correlation_ids_are_scoped():
    with correlation_context("abc123") as scoped:
        assert scoped == "abc123"
        assert ensure_correlation_id() == "abc123"
        with operation_context("generate_outfit") as inner:
            assert inner != "abc123"
            assert CORRELATION_ID.get() == inner
        assert CORRELATION_ID.get() == "abc123"
        with operation_context("rank_forgotten", correlation_id="req-7") as explicit:
            assert explicit == "req-7"
    assert CORRELATION_ID.get() != "abc123"


def test_json_formatter_includes_extras():
    record = logging.LogRecord("closet", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.event = "greeting"
    record.correlation_id = "cid"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "hello world"
    assert payload["event"] == "greeting"
    assert payload["correlation_id"] == "cid"
