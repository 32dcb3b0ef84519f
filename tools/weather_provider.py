"""Weather collaborators that translate a forecast into required outfit layers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

import requests
from pydantic import BaseModel, ValidationError

LOGGER = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
MID_LAYER_BELOW_F = 65
OUTER_LAYER_BELOW_F = 50


class _Current(BaseModel):
    temperature_2m: float
    precipitation: float = 0.0
    weather_code: int = 0


class _ForecastResponse(BaseModel):
    current: _Current


@dataclass
class WeatherProfile:
    """Minimal weather profile."""

    temperature_f: float
    precipitation: float
    conditions: str
    required_layers: List[str] = field(default_factory=list)
    guidance: str = ""


def layers_for_conditions(temperature_f: float, precipitation: float) -> List[str]:
    """Return the outfit slots a day's weather calls for, in construction order."""

    layers = ["base", "bottom"]
    if temperature_f < MID_LAYER_BELOW_F:
        layers.append("mid")
    if temperature_f < OUTER_LAYER_BELOW_F or precipitation > 0:
        layers.append("outer")
    layers.append("shoes")
    return layers


def describe_weather_code(code: int) -> str:
    """Map a WMO weather interpretation code to a short description."""

    if code == 0:
        return "Clear"
    if code <= 3:
        return "Partly Cloudy"
    if code <= 48:
        return "Foggy"
    if code <= 67:
        return "Rainy"
    if code <= 77:
        return "Snowy"
    if code <= 82:
        return "Rainy"
    if code <= 86:
        return "Snowy"
    return "Stormy"


def _guidance(temperature_f: float, precipitation: float) -> str:
    if temperature_f > 75:
        text = "Hot: light, breathable fabrics"
    elif temperature_f > 65:
        text = "Mild: a single layer works"
    elif temperature_f > 50:
        text = "Cool: add a light jacket or sweater"
    elif temperature_f > 35:
        text = "Cold: multiple layers and a warm jacket"
    else:
        text = "Freezing: bundle up in your warmest pieces"
    if precipitation > 0:
        text += "; bring a rain layer"
    return text


def build_profile(temperature_f: float, precipitation: float, weather_code: int) -> WeatherProfile:
    return WeatherProfile(
        temperature_f=temperature_f,
        precipitation=precipitation,
        conditions=describe_weather_code(weather_code),
        required_layers=layers_for_conditions(temperature_f, precipitation),
        guidance=_guidance(temperature_f, precipitation),
    )


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def get_forecast(self, latitude: float, longitude: float) -> WeatherProfile:
        """Return the current weather profile for a location."""


class OpenMeteoProvider(WeatherProvider):
    """Open-Meteo provider (no API key) with schema validation and graceful fallbacks."""

    def __init__(self, timeout_seconds: float = 5.0, session: requests.Session | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def _fallback_profile(self, reason: str) -> WeatherProfile:
        LOGGER.warning("Using fallback weather profile", extra={"reason": reason})
        return build_profile(temperature_f=60.0, precipitation=0.0, weather_code=0)

    def get_forecast(self, latitude: float, longitude: float) -> WeatherProfile:
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValueError("latitude/longitude out of range")

        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m,precipitation,weather_code",
            "temperature_unit": "fahrenheit",
        }
        LOGGER.info("Fetching weather forecast")
        try:
            response = self.session.get(OPEN_METEO_URL, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _ForecastResponse.model_validate(response.json())
        except (requests.Timeout, requests.RequestException) as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            return self._fallback_profile("request_error")
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            return self._fallback_profile("schema_validation")

        current = parsed.current
        return build_profile(current.temperature_2m, current.precipitation, current.weather_code)


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    def __init__(self, profile: WeatherProfile | None = None) -> None:
        self.profile = profile or build_profile(temperature_f=70.0, precipitation=0.0, weather_code=0)

    def get_forecast(self, latitude: float, longitude: float) -> WeatherProfile:
        LOGGER.info("Returning mock forecast")
        return self.profile


__all__ = [
    "WeatherProfile",
    "WeatherProvider",
    "OpenMeteoProvider",
    "MockWeatherProvider",
    "layers_for_conditions",
    "describe_weather_code",
    "build_profile",
]
