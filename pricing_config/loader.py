"""
Configuration Loader (``pricing_config.loader``).

Responsibility
--------------
Loads a YAML file and parses it into a ``PricingConfig``.  Services do not
call this directly; the single public entry point for runtime config is
``pricing_config.get_active_config()``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; unknown keys are rejected rather than ignored.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``pricing`` section  -> ``KeyError``.
* Wrong value types  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from pricing_config.schema import PricingConfig

_KNOWN_KEYS = frozenset(f.name for f in fields(PricingConfig)) - {"checksum"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of data."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_pricing_config(data: dict[str, Any]) -> PricingConfig:
    """
    Parse a ``PricingConfig`` from the document's ``pricing`` section.

    Raises:
        KeyError: if the ``pricing`` section is missing.
        ValueError: on unknown keys or invalid values.
    """
    section = data["pricing"]
    if not isinstance(section, dict):
        raise ValueError(f"'pricing' must be a mapping, got {type(section).__name__}")

    unknown = set(section) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown pricing config keys: {sorted(unknown)}")

    values = dict(section)
    if "log_level" in values:
        values["log_level"] = str(values["log_level"]).upper()

    return PricingConfig(**values, checksum=compute_checksum(section))


def load_config(path: Path) -> PricingConfig:
    """Load and parse a pricing config file."""
    return parse_pricing_config(load_yaml_file(path))
