"""
Module: pricing_kernel.db.types
Responsibility: Annotated type aliases for catalog column types, so every
    model stores prices, percentages and codes with identical definitions.
    Each alias is mapped to its SQL type in Base.type_annotation_map.
Architecture position: Kernel > DB.  Imported by db/base.py and models/.
    MUST NOT import from any other layer.

Invariants enforced:
    - Decimal columns never round-trip through float.  Dialects with native
      Decimal support (PostgreSQL) get NUMERIC; the rest (SQLite) store the
      exact decimal text and read it back with decimal_from_str().
"""

from decimal import Decimal
from typing import Annotated, Any

from sqlalchemy import Numeric, String
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator, TypeEngine


def decimal_from_str(value: str) -> Decimal:
    """
    Parse a stored decimal string.

    Raises:
        decimal.InvalidOperation: If value is not a number.
    """
    return Decimal(value)


class ExactDecimal(TypeDecorator):
    """NUMERIC(precision, scale) where supported, exact decimal text otherwise."""

    impl = Numeric
    cache_ok = True

    def __init__(self, precision: int, scale: int):
        super().__init__(precision, scale)
        self.precision = precision
        self.scale = scale

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine:
        if dialect.supports_native_decimal:
            return dialect.type_descriptor(Numeric(self.precision, self.scale))
        # sign and decimal point
        return dialect.type_descriptor(String(self.precision + 2))

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None or dialect.supports_native_decimal:
            return value
        return format(Decimal(value), "f")

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None or dialect.supports_native_decimal:
            return value
        return decimal_from_str(value)


# Prices and quantities: 38 digits total, 9 decimal places
Amount = Annotated[Decimal, "amount"]

# Percentages (discounts, tax rates)
Percent = Annotated[Decimal, "percent"]

# Three-letter currency code (e.g., "USD", "EUR")
CurrencyCode = Annotated[str, "currency"]

# Foreign-key and reference identifiers
RefId = Annotated[str, "ref_id"]

# Short identifier strings (country, region, role, basis)
ShortCode = Annotated[str, "short_code"]

# Display names
Name = Annotated[str, "name"]

SQL_TYPES: dict = {
    Amount: ExactDecimal(38, 9),
    Percent: ExactDecimal(9, 4),
    CurrencyCode: String(3),
    RefId: String(64),
    ShortCode: String(50),
    Name: String(200),
}
