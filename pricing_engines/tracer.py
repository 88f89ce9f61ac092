"""
pricing_engines.tracer -- PRICING_ENGINE_TRACE records for pipeline stages.

Responsibility:
    ``@traced_engine`` wraps a pure stage and emits one DEBUG record per
    call with the stage name and version, a fingerprint of the selected
    keyword inputs, the outcome and ``duration_ms``.  Equal fingerprints
    mean a stage was called with the same fingerprinted arguments.  Records
    that carry an ``id`` (entries, rules) contribute only that id, so an edit
    that keeps a record's id is not visible in the fingerprint.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Emits a log record only; never changes inputs, results or exceptions.

Invariants enforced:
    - Fingerprints are deterministic: Decimals are normalized (25 and
      25.000 hash alike), mappings are key-sorted, records with an ``id``
      hash by id.  SHA-256, truncated to 16 hex chars.
    - Missing fingerprint fields hash as "null".
    - A stage that raises is traced with ``outcome="error"`` and the
      exception's ``code`` before the exception propagates unchanged.

Usage:
    from pricing_engines.tracer import traced_engine

    @traced_engine(
        "tiers", "1.0",
        fingerprint_fields=("quantity", "as_of"),
        summarize=lambda entry: {"entry_id": entry.id},
    )
    def select(self, *, entries, quantity, as_of):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import time
from collections.abc import Callable, Mapping
from dataclasses import fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pricing_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_TYPE = "PRICING_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    """Stable text form of a value for fingerprinting."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (int, str)):
        return str(value)
    if isinstance(value, Mapping):
        items = sorted(value.items())
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    if hasattr(value, "id"):
        return str(value.id)
    if is_dataclass(value):
        # ShipTo, Money: hash field by field
        return "(" + ",".join(
            f"{f.name}={_canonicalize(getattr(value, f.name))}" for f in fields(value)
        ) + ")"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """Deterministic SHA-256 fingerprint of the named keyword inputs."""
    canonical = "|".join(
        f"{name}={_canonicalize(kwargs.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
    summarize: Callable[[Any], dict[str, Any]] | None = None,
) -> Callable:
    """Decorator that emits PRICING_ENGINE_TRACE for a pipeline stage.

    Args:
        engine_name: Stage identifier (e.g., "tiers").
        engine_version: Stage version (e.g., "1.0").
        fingerprint_fields: Keyword argument names hashed into
            ``input_fingerprint``.
        summarize: Optional callable turning the stage's result into extra
            trace fields (e.g. the chosen entry id).
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            trace: dict[str, Any] = {
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": (
                    compute_input_fingerprint(fingerprint_fields, kwargs)
                    if fingerprint_fields else ""
                ),
                "function": func.__qualname__,
            }

            t0 = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                trace["outcome"] = "error"
                trace["error_code"] = getattr(exc, "code", type(exc).__name__)
                trace["duration_ms"] = round((time.monotonic() - t0) * 1000, 2)
                _logger.debug(TRACE_TYPE, extra=trace)
                raise

            trace["outcome"] = "ok"
            trace["duration_ms"] = round((time.monotonic() - t0) * 1000, 2)
            if summarize is not None:
                trace.update(summarize(result))
            _logger.debug(TRACE_TYPE, extra=trace)
            return result

        return wrapper

    return decorator
