"""
Module: pricing_services.quote_service
Responsibility:
    Library entry point for pricing a single line.  Orchestrates the pure
    pipeline stages over injected catalog ports, a Clock and a
    PricingConfig:

        quantity check -> product (org-scoped, variant ownership)
        -> price book -> entries -> tier -> discount -> unit
        -> tax rules -> jurisdiction match -> compound / basis -> assemble

Architecture position:
    Services -- stateless orchestration over pricing_engines.  Reads the
    catalog only through the ports in pricing_kernel.domain.ports.

Invariants enforced:
    - No partial results: each stage raises on its first failure and
      ``quote()`` converts that error into a PriceQuoteFailure.
    - The as-of time is the request's, else the injected clock's now(),
      so every quote is replayable.
    - Only rules of the product's own tax class are considered.
    - Stateless across calls; safe to share between threads.

Failure modes:
    - quote() never raises for domain failures; quote_or_raise() raises
      the typed PricingKernelError (or PricingError for unexpected faults).
"""

from __future__ import annotations

import time
from datetime import datetime
from decimal import Decimal

from pricing_config import PricingConfig, get_active_config
from pricing_engines.assembler import ResultAssembler
from pricing_engines.basis import BasisNormalizer
from pricing_engines.discount import DiscountApplier
from pricing_engines.jurisdiction import TaxMatcher
from pricing_engines.price_book import PriceBookResolver
from pricing_engines.tax import TaxCompounder
from pricing_engines.tiers import TierSelector
from pricing_kernel.domain.catalog import Product
from pricing_kernel.domain.clock import Clock, SystemClock, as_utc
from pricing_kernel.domain.ports import CatalogReader
from pricing_kernel.domain.quote import PricedLine, PriceQuoteRequest, PriceQuoteResult
from pricing_kernel.domain.values import Money
from pricing_kernel.exceptions import (
    InvalidQuantityError,
    PricingError,
    PricingKernelError,
    ProductNotFoundError,
    VariantNotFoundError,
)
from pricing_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.quote")


class PriceQuoteService:
    """
    Price one line against a catalog.

    Contract:
        ``quote()`` returns a PriceQuoteResult and never raises for domain
        failures.  ``quote_or_raise()`` returns the PricedLine or raises
        the typed error.

    Args:
        catalog: Anything implementing CatalogReader.
        clock: Source of "now" for requests without as_of.
        config: Pricing settings; defaults to get_active_config().
    """

    def __init__(
        self,
        catalog: CatalogReader,
        clock: Clock | None = None,
        config: PricingConfig | None = None,
    ):
        self._catalog = catalog
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()

        self._books = PriceBookResolver()
        self._tiers = TierSelector()
        self._discounts = DiscountApplier()
        self._matcher = TaxMatcher()
        self._normalizer = BasisNormalizer(TaxCompounder())
        self._assembler = ResultAssembler(
            rate_places=self._config.rate_places,
            discount_places=self._config.discount_places,
            effective_rate_places=self._config.effective_rate_places,
            quantity_places=self._config.quantity_places,
        )

    @property
    def config(self) -> PricingConfig:
        return self._config

    def quote(self, request: PriceQuoteRequest) -> PriceQuoteResult:
        """Price a line, returning a failure result instead of raising."""
        try:
            return self.quote_or_raise(request)
        except PricingKernelError as exc:
            return self._assembler.failure(exc)

    def quote_or_raise(self, request: PriceQuoteRequest) -> PricedLine:
        """
        Price a line.

        Raises:
            InvalidQuantityError: quantity <= 0.
            ProductNotFoundError: unknown product or foreign organization.
            VariantNotFoundError: variant does not belong to the product.
            NoActivePriceBookError: no explicit or default book resolves.
            NoPriceTierError: no tier prices this quantity at as_of.
            PricingError: any unexpected failure, with its message.
        """
        with LogContext.bind(
            correlation_id=request.correlation_id,
            organization_id=request.organization_id,
        ):
            t0 = time.monotonic()
            logger.info("price_quote_started", extra={
                "product_id": request.product_id,
                "variant_id": request.variant_id,
                "price_book_id": request.price_book_id,
                "quantity": str(request.quantity),
            })
            try:
                line = self._price(request)
            except PricingKernelError as exc:
                logger.info("price_quote_failed", extra={
                    "product_id": request.product_id,
                    "error_code": exc.code,
                    "error": str(exc),
                })
                raise
            except Exception as exc:
                logger.exception("price_quote_failed", extra={
                    "product_id": request.product_id,
                    "error_code": PricingError.code,
                })
                raise PricingError(str(exc)) from exc

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info("price_quote_completed", extra={
                "product_id": line.product_id,
                "price_book_id": line.price_book_id,
                "entry_id": line.entry_id,
                "currency": line.currency,
                "line_total": line.line_total.format(),
                "duration_ms": duration_ms,
            })
            return line

    def _price(self, request: PriceQuoteRequest) -> PricedLine:
        if request.quantity <= Decimal("0"):
            raise InvalidQuantityError(request.quantity)

        as_of = self._resolve_as_of(request.as_of)
        product = self._load_product(request)

        book = self._books.resolve(
            self._catalog, request.organization_id, request.price_book_id
        )

        entries = self._catalog.get_price_book_entries(
            book.id, product.id, request.variant_id
        )
        entry = self._tiers.select(
            entries=entries,
            price_book_id=book.id,
            product_id=product.id,
            variant_id=request.variant_id,
            quantity=request.quantity,
            as_of=as_of,
        )

        unit_price = Money.of(self._discounts.apply(entry), book.currency)
        unit_id = request.unit_id or entry.unit_id or product.default_unit_id

        rules = ()
        if product.tax_class_id:
            candidates = [
                r for r in self._catalog.get_tax_rules(product.tax_class_id)
                if r.tax_class_id == product.tax_class_id
            ]
            rules = self._matcher.match(rules=candidates, ship_to=request.ship_to, as_of=as_of)

        line = self._normalizer.normalize(unit_price * request.quantity, book.basis, rules)

        return self._assembler.assemble(
            product_id=product.id,
            variant_id=request.variant_id,
            book=book,
            entry=entry,
            unit_id=unit_id,
            quantity=request.quantity,
            unit_price=unit_price,
            tax_class_id=product.tax_class_id,
            line=line,
            as_of=as_of,
        )

    def _resolve_as_of(self, as_of: datetime | None) -> datetime:
        return as_utc(as_of) if as_of is not None else self._clock.now()

    def _load_product(self, request: PriceQuoteRequest) -> Product:
        product = self._catalog.get_product(request.product_id)
        if product is None or product.organization_id != request.organization_id:
            raise ProductNotFoundError(request.product_id, request.organization_id)
        if request.variant_id is not None and not product.has_variant(request.variant_id):
            raise VariantNotFoundError(
                request.variant_id, request.product_id, request.organization_id
            )
        return product
