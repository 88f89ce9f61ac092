"""
Values -- Immutable, self-validating money value objects.

Responsibility:
    Provides Currency and Money, the only types that carry currency-bearing
    amounts out of the pricing pipeline. Also hosts the Decimal coercion
    helper used wherever a number enters the domain.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    No outward dependencies except pricing_kernel.domain.currency.

Invariants enforced:
    - Decimal only: floats are rejected at construction, never converted.
    - Money pairs an amount with its currency; arithmetic refuses to mix
      currencies.
    - Rounding precision is derived from the currency's minor units and is
      never applied implicitly (callers call .round()).

Failure modes:
    - TypeError when a float is supplied as an amount or factor.
    - ValueError on malformed currency codes or non-numeric amounts.
    - ValueError when arithmetic mixes different currencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pricing_kernel.domain.currency import CurrencyRegistry


def to_decimal(value: Decimal | int | str, field_name: str = "value") -> Decimal:
    """
    Coerce an int or numeric string to Decimal.

    Raises:
        TypeError: If value is a float (binary floats never enter the domain).
        ValueError: If value is not a finite number.
    """
    if isinstance(value, bool):
        raise TypeError(f"{field_name} must be Decimal, int or str, got bool")
    if isinstance(value, float):
        raise TypeError(f"{field_name} must not be a float: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid {field_name}: {value!r}") from e
    else:
        raise TypeError(f"{field_name} must be Decimal, int or str, got {type(value)}")
    if not result.is_finite():
        raise ValueError(f"{field_name} must be finite: {value!r}")
    return result


def quantize_places(value: Decimal, places: int, rounding: str = ROUND_HALF_UP) -> Decimal:
    """Round value to a fixed number of decimal places (half-up by default)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=rounding)


@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency code value object.

    Contract:
        Wraps a three-letter currency code, normalized to upper case.
        Minor-unit precision is looked up in CurrencyRegistry; codes the
        registry does not know use its default precision, so a price book's
        currency always propagates unchanged.
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if len(normalized) != 3 or not normalized.isalpha():
            raise ValueError(f"Invalid currency code: {self.code!r}")
        object.__setattr__(self, "code", normalized)

    @property
    def decimal_places(self) -> int:
        """Minor-unit decimal places for this currency."""
        return CurrencyRegistry.get_decimal_places(self.code)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency. Arithmetic keeps full
        precision; only round() changes the scale.

    Non-goals:
        - Does NOT perform currency conversion.
        - Does NOT auto-round.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount, "amount"))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """Factory method for creating Money."""
        return cls(amount=to_decimal(amount, "amount"), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    @property
    def is_negative(self) -> bool:
        return self.amount < Decimal("0")

    def round(self, rounding: str = ROUND_HALF_UP) -> Money:
        """Round to the currency's minor units. Returns a new Money."""
        return Money(
            amount=quantize_places(self.amount, self.currency.decimal_places, rounding),
            currency=self.currency,
        )

    def format(self) -> str:
        """Fixed-point string at the currency's precision, e.g. '110.00'."""
        return format(self.round().amount, "f")

    def _check_currency(self, other: Money, op: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {op} Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __mul__(self, factor: Decimal | int | str) -> Money:
        if isinstance(factor, Money) or isinstance(factor, float):
            return NotImplemented
        return Money(amount=self.amount * to_decimal(factor, "factor"), currency=self.currency)

    def __rmul__(self, factor: Decimal | int | str) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Decimal | int | str) -> Money:
        if isinstance(divisor, Money) or isinstance(divisor, float):
            return NotImplemented
        return Money(amount=self.amount / to_decimal(divisor, "divisor"), currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"
