"""Lightweight evaluation harness for deterministic scenarios."""

from __future__ import annotations

from typing import Dict, List

from closet_app.app import ClosetEngine
from closet_app.config import EngineConfig
from evaluation.scenarios import EvaluationScenario, SCENARIOS
from models.clothing_item import WearEvent, build_catalog
from tools.weather_provider import MockWeatherProvider


def _summarize(scenario: EvaluationScenario, result: object) -> Dict[str, object]:
    if scenario.operation == "generate_outfit":
        outfit = result.outfit
        return {
            "reason": result.reason,
            "item_ids": sorted(outfit.item_ids) if outfit else [],
            "harmonious": outfit.harmony.is_harmonious if outfit else None,
            "score": outfit.score if outfit else 0.0,
        }
    if scenario.operation == "generate_outfits":
        return {"item_sets": [sorted(outfit.item_ids) for outfit in result]}
    if scenario.operation == "generate_capsule":
        return {
            "days": len(result.days),
            "gaps": len(result.gaps),
            "versatility": result.versatility_score,
        }
    if scenario.operation == "rank_forgotten":
        return {"ranked_ids": [entry.item.id for entry in result]}
    if scenario.operation == "required_layers_for":
        return {"layers": list(result)}
    raise ValueError(f"Unsupported scenario operation '{scenario.operation}'")


def _evaluate_expectations(expectations: Dict[str, object], summary: Dict[str, object]) -> Dict[str, bool]:
    checks: Dict[str, bool] = {}
    if "item_ids" in expectations:
        checks["item_ids"] = summary.get("item_ids") == sorted(expectations["item_ids"])
    if "harmonious" in expectations:
        checks["harmonious"] = summary.get("harmonious") is expectations["harmonious"]
    if expectations.get("positive_score"):
        checks["positive_score"] = float(summary.get("score") or 0.0) > 0
    if "reason" in expectations:
        checks["reason"] = summary.get("reason") == expectations["reason"]
    if "min_outfits" in expectations:
        checks["min_outfits"] = len(summary.get("item_sets", [])) >= int(expectations["min_outfits"])
    if expectations.get("distinct"):
        sets = [tuple(ids) for ids in summary.get("item_sets", [])]
        checks["distinct"] = len(set(sets)) == len(sets)
    if "days" in expectations:
        checks["days"] = summary.get("days") == expectations["days"]
    if "max_gaps" in expectations:
        checks["max_gaps"] = int(summary.get("gaps", 0)) <= int(expectations["max_gaps"])
    if "first_item_id" in expectations:
        ranked = summary.get("ranked_ids") or [None]
        checks["first_item_id"] = ranked[0] == expectations["first_item_id"]
    if "includes_layers" in expectations:
        layers = summary.get("layers", [])
        checks["includes_layers"] = all(layer in layers for layer in expectations["includes_layers"])
    return checks


def run_scenario(scenario: EvaluationScenario) -> Dict[str, object]:
    engine = ClosetEngine(
        config=EngineConfig(),
        weather_provider=MockWeatherProvider(profile=scenario.weather_profile),
    )
    arguments = dict(scenario.arguments)
    if scenario.operation != "required_layers_for":
        arguments["catalog"] = build_catalog(scenario.wardrobe_items)
    if scenario.operation == "rank_forgotten":
        arguments["wear_history"] = [WearEvent(**event) for event in scenario.wear_history]

    result = getattr(engine, scenario.operation)(**arguments)
    summary = _summarize(scenario, result)
    checks = _evaluate_expectations(scenario.expectations, summary)
    return {
        "scenario": scenario.name,
        "passed": all(checks.values()),
        "checks": checks,
        "summary": summary,
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]
