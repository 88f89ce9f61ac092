"""
Catalog Validation - Check catalog records before they reach the pricing
pipeline.

The engine itself performs no range checks (a 150% discount would simply
produce a negative price); records are expected to pass through these
validators when they are created or imported.

Each ``validate_*`` function returns a ValidationResult listing every
problem found; the matching ``ensure_valid_*`` raises CatalogValidationError
carrying the same messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pricing_kernel.domain.catalog import PriceBasis, PriceBook, PriceBookEntry, TaxRule
from pricing_kernel.domain.clock import as_utc
from pricing_kernel.domain.currency import CurrencyRegistry
from pricing_kernel.exceptions import CatalogValidationError
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.validation")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one catalog record."""

    record_type: str
    record_id: str | None
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _window_errors(valid_from, valid_to) -> list[str]:
    if valid_from is not None and valid_to is not None:
        if as_utc(valid_from) >= as_utc(valid_to):
            return ["valid_from must be earlier than valid_to."]
    return []


def validate_price_book_entry(entry: PriceBookEntry) -> ValidationResult:
    """Check a tier: product XOR variant, price, discount, quantity range, window."""
    errors: list[str] = []

    if bool(entry.product_id) == bool(entry.variant_id):
        errors.append("Provide exactly one of product_id or variant_id.")
    if entry.unit_price < _ZERO:
        errors.append("unit_price must be >= 0.")
    if entry.discount_pct is not None and not (_ZERO <= entry.discount_pct <= _HUNDRED):
        errors.append("discount_pct must be between 0 and 100.")
    if entry.min_qty is not None and entry.min_qty <= _ZERO:
        errors.append("min_qty must be > 0.")
    if entry.max_qty is not None and entry.max_qty <= _ZERO:
        errors.append("max_qty must be > 0.")
    if (
        entry.min_qty is not None
        and entry.max_qty is not None
        and entry.max_qty < entry.min_qty
    ):
        errors.append("max_qty must be >= min_qty.")
    errors.extend(_window_errors(entry.valid_from, entry.valid_to))

    return _result("price_book_entry", entry.id, errors)


def validate_tax_rule(rule: TaxRule) -> ValidationResult:
    """Check a tax rule: name, rate range, window."""
    errors: list[str] = []

    if not rule.name or not rule.name.strip():
        errors.append("name is required.")
    if not (_ZERO <= rule.rate_pct <= _HUNDRED):
        errors.append("rate_pct must be between 0 and 100.")
    if rule.postal_pattern is not None and not rule.postal_pattern.strip():
        errors.append("postal_pattern must not be blank.")
    errors.extend(_window_errors(rule.valid_from, rule.valid_to))

    return _result("tax_rule", rule.id, errors)


def validate_price_book(book: PriceBook) -> ValidationResult:
    """Check a price book: currency code and price basis."""
    errors: list[str] = []

    if not isinstance(book.currency, str) or len(book.currency) != 3:
        errors.append("currency must be a three-letter code.")
    elif not CurrencyRegistry.is_valid(book.currency):
        errors.append(f"currency {book.currency!r} is not a recognized ISO 4217 code.")

    raw = book.price_basis
    if raw is not None and not isinstance(raw, PriceBasis):
        if str(raw).strip().upper() not in PriceBasis.__members__:
            errors.append(
                f"price_basis must be one of {', '.join(PriceBasis.__members__)}."
            )

    return _result("price_book", book.id, errors)


def ensure_valid_price_book_entry(entry: PriceBookEntry) -> PriceBookEntry:
    _raise_if_invalid(validate_price_book_entry(entry))
    return entry


def ensure_valid_tax_rule(rule: TaxRule) -> TaxRule:
    _raise_if_invalid(validate_tax_rule(rule))
    return rule


def ensure_valid_price_book(book: PriceBook) -> PriceBook:
    _raise_if_invalid(validate_price_book(book))
    return book


def _result(record_type: str, record_id: str | None, errors: list[str]) -> ValidationResult:
    result = ValidationResult(record_type, record_id, tuple(errors))
    if errors:
        logger.info("catalog_record_invalid", extra={
            "record_type": record_type,
            "record_id": record_id,
            "errors": list(errors),
        })
    return result


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.is_valid:
        raise CatalogValidationError(result.record_type, result.record_id, result.errors)
