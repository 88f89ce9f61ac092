"""
Module: pricing_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure pricing
    stages.  This is the canonical import surface for pricing_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pricing_kernel (domain, exceptions, logging) and sibling
    engine modules.  MUST NOT import pricing_services or pricing_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``; the as-of time is
      always passed in.
    - Decimal-only arithmetic; floats are rejected at the domain boundary.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from pricing_engines import TierSelector, TaxMatcher, TaxCompounder
"""

from pricing_engines.assembler import ResultAssembler
from pricing_engines.basis import BasisNormalizer, NormalizedLine
from pricing_engines.discount import DiscountApplier, apply_discount
from pricing_engines.jurisdiction import (
    TaxMatcher,
    compile_postal_pattern,
    glob_to_regex,
    postal_matches,
    rule_matches,
)
from pricing_engines.price_book import PriceBookResolver, pick_default_book
from pricing_engines.rate_card import (
    RateCardResolver,
    RateResolution,
    pick_default_card,
    pick_rate_item,
)
from pricing_engines.tax import (
    TaxComputation,
    TaxCompounder,
    TaxLine,
    effective_rate,
    order_rules,
)
from pricing_engines.tiers import TierSelector, entries_in_scope, rank_tiers
from pricing_engines.validation import (
    ValidationResult,
    ensure_valid_price_book,
    ensure_valid_price_book_entry,
    ensure_valid_tax_rule,
    validate_price_book,
    validate_price_book_entry,
    validate_tax_rule,
)

__all__ = [
    "BasisNormalizer",
    "DiscountApplier",
    "NormalizedLine",
    "PriceBookResolver",
    "RateCardResolver",
    "RateResolution",
    "ResultAssembler",
    "TaxComputation",
    "TaxCompounder",
    "TaxLine",
    "TaxMatcher",
    "TierSelector",
    "ValidationResult",
    "apply_discount",
    "compile_postal_pattern",
    "effective_rate",
    "ensure_valid_price_book",
    "ensure_valid_price_book_entry",
    "ensure_valid_tax_rule",
    "entries_in_scope",
    "glob_to_regex",
    "order_rules",
    "pick_default_book",
    "pick_default_card",
    "pick_rate_item",
    "postal_matches",
    "rank_tiers",
    "rule_matches",
    "validate_price_book",
    "validate_price_book_entry",
    "validate_tax_rule",
]
