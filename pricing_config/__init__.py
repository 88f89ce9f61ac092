"""
pricing_config -- single public entrypoint for pricing configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.  Returns a frozen ``PricingConfig``.

Architecture position:
    Configuration -- sits above ``pricing_kernel`` / ``pricing_engines`` and
    below ``pricing_services``.  The kernel and engines MUST NEVER import
    from ``pricing_config``; services translate config into constructor
    arguments.

Failure modes:
    - ``FileNotFoundError`` -- the requested config file does not exist.
    - ``KeyError`` / ``ValueError`` -- structural or value errors.
"""

from __future__ import annotations

from pathlib import Path

from pricing_config.loader import load_config
from pricing_config.schema import PricingConfig
from pricing_kernel.logging_config import configure_logging, get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | str | None = None) -> PricingConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a YAML config file.  Defaults to the
            bundled ``defaults.yaml``.

    Returns:
        PricingConfig parsed from the file, with its checksum.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_config(path)

    _logger.info(
        "PRICING_CONFIG_TRACE",
        extra={
            "trace_type": "PRICING_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": config.checksum,
            "batch_max_workers": config.batch_max_workers,
        },
    )
    return config


def configure_pricing_logging(
    config: PricingConfig | None = None,
    **handler_kwargs,
) -> PricingConfig:
    """Configure kernel logging at the config's ``log_level``.

    Extra keyword arguments (``stream``, ``handler``) are passed to
    ``configure_logging``.  Returns the config that was applied.
    """
    config = config or get_active_config()
    configure_logging(level=config.log_level, **handler_kwargs)
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PricingConfig",
    "configure_pricing_logging",
    "get_active_config",
]
