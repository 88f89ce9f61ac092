"""
Configuration Schema (``pricing_config.schema``).

Responsibility
--------------
Frozen dataclass describing the runtime pricing configuration: rounding
places for rates, the default batch worker count and the log level.

Architecture position
---------------------
**Config layer** -- pure data definitions, zero I/O.  Consumed by the
loader (which produces it) and by ``pricing_services`` (which reads it).
"""

from __future__ import annotations

from dataclasses import dataclass

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class PricingConfig:
    """
    Pricing engine settings.

    Money is always rounded to the currency's minor units; these settings
    cover everything else that gets rounded.
    """

    rate_places: int = 2  # Tax rule rate_pct in results
    discount_places: int = 2  # Tier discount_pct in results
    effective_rate_places: int = 4  # Effective tax rate in results
    quantity_places: int | None = None  # None keeps the quantity as given
    batch_max_workers: int = 8
    log_level: str = "INFO"
    checksum: str = ""

    def __post_init__(self) -> None:
        for name in ("rate_places", "discount_places", "effective_rate_places"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if self.quantity_places is not None and (
            not isinstance(self.quantity_places, int) or self.quantity_places < 0
        ):
            raise ValueError(
                f"quantity_places must be null or a non-negative integer, "
                f"got {self.quantity_places!r}"
            )
        if not isinstance(self.batch_max_workers, int) or self.batch_max_workers < 1:
            raise ValueError(
                f"batch_max_workers must be a positive integer, got {self.batch_max_workers!r}"
            )
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}"
            )
