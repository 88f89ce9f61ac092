"""
Typed Exception Hierarchy for the Pricing Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A rejected quote is always better than a wrong price, so every failure in the
pricing pipeline is raised as a TYPED exception that callers catch by class
and report by CODE, never by parsing the message:

    try:
        line = service.quote_or_raise(request)
    except NoPriceTierError as e:
        api_response(code=e.code, product=e.product_id, qty=str(e.quantity))

Every exception:
  1. Inherits from PricingKernelError (catchable as a group)
  2. Has a `code` class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (survives logging and serialization)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PricingKernelError (base)
    |
    +-- ProductNotFoundError
    |   +-- VariantNotFoundError
    +-- NoActivePriceBookError
    +-- NoPriceTierError
    +-- InvalidQuantityError
    +-- PricingError                (catch-all, always carries a message)
    +-- CatalogValidationError
    +-- RateCardError
        +-- NoActiveRateCardError
        +-- NoMatchingRateError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                       | When Raised
---------------------------|------------------------------------------------
PRODUCT_NOT_FOUND          | Product id unknown or owned by another org
VARIANT_NOT_FOUND          | Variant is not one of the product's variants
NO_ACTIVE_PRICE_BOOK       | Neither explicit nor default book resolves
NO_PRICE_TIER              | No entry fits the quantity / as-of window
INVALID_QUANTITY           | Quantity <= 0
PRICING_ERROR              | Anything unexpected during pricing
CATALOG_VALIDATION_FAILED  | Entry / rule / book fails upstream validation
NO_ACTIVE_RATE_CARD        | Neither explicit nor default rate card resolves
NO_MATCHING_RATE           | No rate card item fits user / role / window

None of these are retryable: they describe configuration or data problems,
not transient faults.
"""

from decimal import Decimal


class PricingKernelError(Exception):
    """
    Base exception for all pricing kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PRICING_KERNEL_ERROR"


class ProductNotFoundError(PricingKernelError):
    """Product does not exist for the requesting organization."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str, organization_id: str):
        self.product_id = product_id
        self.organization_id = organization_id
        super().__init__(
            f"Product not found: {product_id} (organization {organization_id})"
        )


class VariantNotFoundError(ProductNotFoundError):
    """Variant does not belong to the requested product."""

    code: str = "VARIANT_NOT_FOUND"

    def __init__(self, variant_id: str, product_id: str, organization_id: str):
        self.variant_id = variant_id
        self.product_id = product_id
        self.organization_id = organization_id
        PricingKernelError.__init__(
            self, f"Variant {variant_id} not found on product {product_id}"
        )


class NoActivePriceBookError(PricingKernelError):
    """Neither the explicit nor the default price book resolves."""

    code: str = "NO_ACTIVE_PRICE_BOOK"

    def __init__(self, organization_id: str, price_book_id: str | None = None):
        self.organization_id = organization_id
        self.price_book_id = price_book_id
        super().__init__(f"No active price book for organization {organization_id}")


class NoPriceTierError(PricingKernelError):
    """No price book entry satisfies the quantity / date window."""

    code: str = "NO_PRICE_TIER"

    def __init__(
        self,
        price_book_id: str,
        product_id: str,
        quantity: Decimal,
        variant_id: str | None = None,
        reason: str = "No valid tier for given quantity/date",
    ):
        self.price_book_id = price_book_id
        self.product_id = product_id
        self.variant_id = variant_id
        self.quantity = quantity
        self.reason = reason
        super().__init__(
            f"{reason}: product {product_id}"
            + (f" variant {variant_id}" if variant_id else "")
            + f" qty {quantity} in price book {price_book_id}"
        )


class InvalidQuantityError(PricingKernelError):
    """Requested quantity is not strictly positive."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity: Decimal):
        self.quantity = quantity
        super().__init__(f"Quantity must be > 0, got {quantity}")


class PricingError(PricingKernelError):
    """Catch-all for unexpected failures while pricing a line."""

    code: str = "PRICING_ERROR"

    def __init__(self, message: str):
        self.detail = message or "Pricing error"
        super().__init__(self.detail)


class CatalogValidationError(PricingKernelError):
    """Catalog record failed validation before it reached the engine."""

    code: str = "CATALOG_VALIDATION_FAILED"

    def __init__(self, record_type: str, record_id: str | None, errors: tuple[str, ...]):
        self.record_type = record_type
        self.record_id = record_id
        self.errors = errors
        super().__init__(
            f"Invalid {record_type} {record_id or '<new>'}: " + "; ".join(errors)
        )


class RateCardError(PricingKernelError):
    """Base exception for rate card resolution errors."""

    code: str = "RATE_CARD_ERROR"


class NoActiveRateCardError(RateCardError):
    """Neither the explicit nor the default rate card resolves."""

    code: str = "NO_ACTIVE_RATE_CARD"

    def __init__(self, organization_id: str, rate_card_id: str | None = None):
        self.organization_id = organization_id
        self.rate_card_id = rate_card_id
        super().__init__(f"No active rate card for organization {organization_id}")


class NoMatchingRateError(RateCardError):
    """No rate card item matches the user, role and as-of time."""

    code: str = "NO_MATCHING_RATE"

    def __init__(self, rate_card_id: str, user_id: str | None, role: str | None):
        self.rate_card_id = rate_card_id
        self.user_id = user_id
        self.role = role
        super().__init__(
            f"No matching rate in rate card {rate_card_id} "
            f"(user={user_id}, role={role})"
        )
