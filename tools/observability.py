"""Observability helpers for instrumenting public engine operations."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from closet_app.logging_config import get_logger, log_event, operation_context, redact_for_log
from logic.validation import invalid_input

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_arguments(arguments: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(arguments.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        if isinstance(value, (list, tuple)) and len(value) > 5:
            preview[key] = f"<{len(value)} entries>"
        else:
            preview[key] = value
    return redact_for_log(preview)


def instrument_operation(
    operation: str,
    input_model: type[BaseModel] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap an operation to validate scalar arguments and emit structured logs.

    Only the arguments declared on ``input_model`` are validated; validated
    values replace the raw ones. A :class:`pydantic.ValidationError` surfaces
    as :class:`models.errors.InvalidInput`.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with operation_context(operation) as correlation_id:
                return _run(correlation_id, args, kwargs)

        def _run(correlation_id: str, args: tuple, kwargs: dict) -> R:
            start = time.perf_counter()
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()

            if input_model:
                declared = {
                    name: bound.arguments[name]
                    for name in input_model.model_fields
                    if name in bound.arguments
                }
                try:
                    validated = input_model.model_validate(declared)
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "operation_validation_failed",
                        operation=operation,
                        correlation_id=correlation_id,
                        errors=redact_for_log(exc.errors()),
                    )
                    raise invalid_input(f"Invalid arguments for {operation}", exc) from exc
                for name in declared:
                    bound.arguments[name] = getattr(validated, name)

            visible = {key: value for key, value in bound.arguments.items() if key != "self"}
            log_event(
                LOGGER,
                logging.INFO,
                "operation_started",
                operation=operation,
                correlation_id=correlation_id,
                arguments=_preview_arguments(visible),
            )
            try:
                result = func(*bound.args, **bound.kwargs)
            except Exception:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "operation_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=duration_ms,
                    exc_info=True,
                )
                raise
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            log_event(
                LOGGER,
                logging.INFO,
                "operation_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=duration_ms,
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
