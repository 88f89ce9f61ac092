"""
Module: pricing_kernel.selectors.in_memory
Responsibility: Dictionary-backed catalog implementing CatalogReader and
    RateCardReader.  Used by tests, fixtures and callers that already hold
    their catalog in memory.
Architecture position: Kernel > Selectors.  Pure, no I/O.

Invariants enforced:
    - Entry lookup follows the same product/variant narrowing as the
      SQLAlchemy selector.
    - Records are frozen DTOs; readers get tuples, never the internal lists.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from pricing_kernel.domain.catalog import (
    PriceBook,
    PriceBookEntry,
    Product,
    RateCard,
    RateCardItem,
    TaxClass,
    TaxRule,
)


class InMemoryCatalog:
    """
    In-memory catalog store.

    Populate with the ``add_*`` methods (or pass iterables to the
    constructor), then hand the instance to PriceQuoteService or
    RateCardResolver.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        price_books: Iterable[PriceBook] = (),
        entries: Iterable[PriceBookEntry] = (),
        tax_rules: Iterable[TaxRule] = (),
        rate_cards: Iterable[RateCard] = (),
        rate_card_items: Iterable[RateCardItem] = (),
    ):
        self._products: dict[str, Product] = {}
        self._price_books: dict[str, PriceBook] = {}
        self._entries: dict[str, list[PriceBookEntry]] = defaultdict(list)
        self._tax_rules: dict[str, list[TaxRule]] = defaultdict(list)
        self._rate_cards: dict[str, RateCard] = {}
        self._rate_card_items: dict[str, list[RateCardItem]] = defaultdict(list)

        for product in products:
            self.add_product(product)
        for book in price_books:
            self.add_price_book(book)
        for entry in entries:
            self.add_entry(entry)
        for rule in tax_rules:
            self.add_tax_rule(rule)
        for card in rate_cards:
            self.add_rate_card(card)
        for item in rate_card_items:
            self.add_rate_card_item(item)

    # -- writers ------------------------------------------------------------

    def add_product(self, product: Product) -> Product:
        self._products[product.id] = product
        return product

    def add_price_book(self, book: PriceBook) -> PriceBook:
        self._price_books[book.id] = book
        return book

    def add_entry(self, entry: PriceBookEntry) -> PriceBookEntry:
        self._entries[entry.price_book_id].append(entry)
        return entry

    def add_tax_class(self, tax_class: TaxClass) -> TaxClass:
        """Register the rules a tax class carries. Lookups go by rule.tax_class_id."""
        for rule in tax_class.rules:
            self.add_tax_rule(rule)
        return tax_class

    def add_tax_rule(self, rule: TaxRule) -> TaxRule:
        self._tax_rules[rule.tax_class_id].append(rule)
        return rule

    def add_rate_card(self, card: RateCard) -> RateCard:
        self._rate_cards[card.id] = card
        return card

    def add_rate_card_item(self, item: RateCardItem) -> RateCardItem:
        self._rate_card_items[item.rate_card_id].append(item)
        return item

    # -- CatalogReader ------------------------------------------------------

    def get_product(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def get_price_book(self, price_book_id: str) -> PriceBook | None:
        return self._price_books.get(price_book_id)

    def find_price_books(self, organization_id: str) -> Sequence[PriceBook]:
        return tuple(
            b for b in self._price_books.values() if b.organization_id == organization_id
        )

    def get_price_book_entries(
        self,
        price_book_id: str,
        product_id: str,
        variant_id: str | None = None,
    ) -> Sequence[PriceBookEntry]:
        return tuple(
            e
            for e in self._entries.get(price_book_id, ())
            if (e.product_id == product_id and e.variant_id is None)
            or (variant_id is not None and e.variant_id == variant_id)
        )

    def get_tax_rules(self, tax_class_id: str) -> Sequence[TaxRule]:
        return tuple(self._tax_rules.get(tax_class_id, ()))

    # -- RateCardReader -----------------------------------------------------

    def get_rate_card(self, rate_card_id: str) -> RateCard | None:
        return self._rate_cards.get(rate_card_id)

    def find_rate_cards(self, organization_id: str) -> Sequence[RateCard]:
        return tuple(
            c for c in self._rate_cards.values() if c.organization_id == organization_id
        )

    def get_rate_card_items(self, rate_card_id: str) -> Sequence[RateCardItem]:
        return tuple(self._rate_card_items.get(rate_card_id, ()))
