"""Tests for the weather layering collaborator."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests

sys.path.append(str(Path(__file__).resolve().parents[1]))

from tools.weather_provider import (
    OPEN_METEO_URL,
    MockWeatherProvider,
    OpenMeteoProvider,
    WeatherProvider,
    build_profile,
    describe_weather_code,
    layers_for_conditions,
)


class _FakeResponse:
    def __init__(self, payload, status_error: Exception | None = None) -> None:
        self._payload = payload
        self._status_error = status_error

    def raise_for_status(self) -> None:
        if self._status_error:
            raise self._status_error

    def json(self):
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def test_layers_follow_temperature_and_precipitation():
    assert layers_for_conditions(80, 0) == ["base", "bottom", "shoes"]
    assert layers_for_conditions(60, 0) == ["base", "bottom", "mid", "shoes"]
    assert layers_for_conditions(40, 0) == ["base", "bottom", "mid", "outer", "shoes"]
    assert layers_for_conditions(72, 0.4) == ["base", "bottom", "outer", "shoes"]


def test_weather_codes_map_to_descriptions():
    assert describe_weather_code(0) == "Clear"
    assert describe_weather_code(2) == "Partly Cloudy"
    assert describe_weather_code(45) == "Foggy"
    assert describe_weather_code(61) == "Rainy"
    assert describe_weather_code(73) == "Snowy"
    assert describe_weather_code(95) == "Stormy"


def test_open_meteo_parses_current_conditions():
    payload = {"current": {"temperature_2m": 38.5, "precipitation": 0.0, "weather_code": 3}}
    session = _FakeSession(response=_FakeResponse(payload))
    provider = OpenMeteoProvider(timeout_seconds=2.5, session=session)

    profile = provider.get_forecast(48.85, 2.35)

    assert isinstance(provider, WeatherProvider)
    assert profile.conditions == "Partly Cloudy"
    assert profile.required_layers == ["base", "bottom", "mid", "outer", "shoes"]
    assert profile.guidance.startswith("Cold")
    assert session.calls[0]["url"] == OPEN_METEO_URL
    assert session.calls[0]["timeout"] == 2.5
    assert session.calls[0]["params"]["temperature_unit"] == "fahrenheit"


def test_open_meteo_falls_back_on_request_errors():
    provider = OpenMeteoProvider(session=_FakeSession(error=requests.ConnectionError("offline")))
    profile = provider.get_forecast(0.0, 0.0)
    assert profile.temperature_f == 60.0
    assert profile.required_layers == ["base", "bottom", "mid", "shoes"]


def test_open_meteo_falls_back_on_http_and_schema_errors():
    http_error = _FakeResponse({}, status_error=requests.HTTPError("503"))
    assert OpenMeteoProvider(session=_FakeSession(response=http_error)).get_forecast(1, 1).temperature_f == 60.0

    malformed = _FakeResponse({"current": {"precipitation": 1.0}})
    assert OpenMeteoProvider(session=_FakeSession(response=malformed)).get_forecast(1, 1).conditions == "Clear"


def test_open_meteo_rejects_out_of_range_coordinates():
    with pytest.raises(ValueError):
        OpenMeteoProvider(session=_FakeSession()).get_forecast(120.0, 0.0)


def test_mock_provider_returns_configured_profile():
    default = MockWeatherProvider().get_forecast(0, 0)
    assert default.required_layers == ["base", "bottom", "shoes"]

    rainy = build_profile(temperature_f=55.0, precipitation=2.0, weather_code=63)
    assert MockWeatherProvider(profile=rainy).get_forecast(0, 0) is rainy
    assert rainy.guidance.endswith("bring a rain layer")
