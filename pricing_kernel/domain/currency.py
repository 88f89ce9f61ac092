"""Currency -- ISO 4217 registry and minor-unit precision for rounding."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable amount, e.g. Decimal("0.01") for EUR."""
        return Decimal(1).scaleb(-self.decimal_places)


def _table(*rows: tuple[str, int, str]) -> dict[str, CurrencyInfo]:
    return {code: CurrencyInfo(code, places, name) for code, places, name in rows}


class CurrencyRegistry:
    """Registry of ISO 4217 currencies with their minor-unit decimal places."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = _table(
        # Two decimal places
        ("AED", 2, "UAE Dirham"),
        ("AUD", 2, "Australian Dollar"),
        ("BGN", 2, "Bulgarian Lev"),
        ("BRL", 2, "Brazilian Real"),
        ("CAD", 2, "Canadian Dollar"),
        ("CHF", 2, "Swiss Franc"),
        ("CNY", 2, "Chinese Yuan"),
        ("CZK", 2, "Czech Koruna"),
        ("DKK", 2, "Danish Krone"),
        ("EUR", 2, "Euro"),
        ("GBP", 2, "Pound Sterling"),
        ("HKD", 2, "Hong Kong Dollar"),
        ("HUF", 2, "Hungarian Forint"),
        ("ILS", 2, "Israeli New Shekel"),
        ("INR", 2, "Indian Rupee"),
        ("MXN", 2, "Mexican Peso"),
        ("MYR", 2, "Malaysian Ringgit"),
        ("NOK", 2, "Norwegian Krone"),
        ("NZD", 2, "New Zealand Dollar"),
        ("PHP", 2, "Philippine Peso"),
        ("PLN", 2, "Polish Zloty"),
        ("RON", 2, "Romanian Leu"),
        ("SEK", 2, "Swedish Krona"),
        ("SGD", 2, "Singapore Dollar"),
        ("THB", 2, "Thai Baht"),
        ("TRY", 2, "Turkish Lira"),
        ("USD", 2, "US Dollar"),
        ("ZAR", 2, "South African Rand"),
        # Zero decimal places
        ("CLP", 0, "Chilean Peso"),
        ("ISK", 0, "Icelandic Krona"),
        ("JPY", 0, "Japanese Yen"),
        ("KRW", 0, "South Korean Won"),
        ("VND", 0, "Vietnamese Dong"),
        ("XAF", 0, "Central African CFA Franc"),
        ("XOF", 0, "West African CFA Franc"),
        # Three decimal places
        ("BHD", 3, "Bahraini Dinar"),
        ("JOD", 3, "Jordanian Dinar"),
        ("KWD", 3, "Kuwaiti Dinar"),
        ("OMR", 3, "Omani Rial"),
        ("TND", 3, "Tunisian Dinar"),
    )

    # Minor units used for codes the registry does not know
    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is a known ISO 4217 code."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get minor-unit decimal places, falling back to the default."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code."""
        if not code or not isinstance(code, str):
            raise ValueError(f"Invalid currency code: {code!r}")

        normalized = code.upper().strip()
        if len(normalized) != 3:
            raise ValueError(f"Currency code must be 3 characters: {code!r}")
        if normalized not in cls._CURRENCIES:
            raise ValueError(f"Invalid ISO 4217 currency code: {code!r}")
        return normalized

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all known currency codes."""
        return frozenset(cls._CURRENCIES)
