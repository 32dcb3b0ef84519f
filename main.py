"""Simple entrypoint to run the closet engine locally against a sample wardrobe."""

from closet_app.app import ClosetEngine
from evaluation.harness import run_smoke_checks
from models.clothing_item import build_catalog
from tools.weather_provider import MockWeatherProvider

SAMPLE_WARDROBE = [
    {"type": "shirt", "layeringCategory": "base", "primaryColor": "white", "vibe": "classic"},
    {"type": "pants", "layeringCategory": "bottom", "primaryColor": "navy", "vibe": "classic"},
    {"type": "shoes", "layeringCategory": "accessory", "primaryColor": "brown", "vibe": "casual"},
]


def main() -> None:
    engine = ClosetEngine(weather_provider=MockWeatherProvider())
    result = engine.generate_outfit(build_catalog(SAMPLE_WARDROBE), occasion="casual")
    if result.outfit:
        print(result.outfit.as_dict())
    else:
        print(result.reason)
    for line in run_smoke_checks():
        print(line)


if __name__ == "__main__":
    main()
