"""
Price Book Resolver - Select the active price book for a quote.

Pure selection over books read through a PriceBookReader: an explicit book
wins when it is active and owned by the requesting organization, otherwise
the organization's active default book is used.

Usage:
    from pricing_engines.price_book import PriceBookResolver

    book = PriceBookResolver().resolve(
        reader=catalog,
        organization_id="org-1",
        price_book_id=None,
    )
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from pricing_kernel.domain.catalog import PriceBook
from pricing_kernel.domain.clock import as_utc
from pricing_kernel.domain.ports import PriceBookReader
from pricing_kernel.exceptions import NoActivePriceBookError
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.price_book")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _created_key(book: PriceBook) -> datetime:
    return as_utc(book.created_at) if book.created_at is not None else _OLDEST


def pick_default_book(books: Sequence[PriceBook], organization_id: str) -> PriceBook | None:
    """
    Most recently created active default book of the organization.

    Ties on created_at are broken by id ascending.
    """
    candidates = [
        b for b in books
        if b.organization_id == organization_id and b.is_active and b.is_default
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda b: b.id)
    candidates.sort(key=_created_key, reverse=True)
    return candidates[0]


class PriceBookResolver:
    """
    Resolve which price book prices a line.

    An explicit id that is missing, inactive or owned by another
    organization falls through to the default book rather than failing.
    """

    def resolve(
        self,
        reader: PriceBookReader,
        organization_id: str,
        price_book_id: str | None = None,
    ) -> PriceBook:
        """
        Raises:
            NoActivePriceBookError: If neither the explicit nor a default
                book resolves.
        """
        if price_book_id is not None:
            explicit = reader.get_price_book(price_book_id)
            if (
                explicit is not None
                and explicit.is_active
                and explicit.organization_id == organization_id
            ):
                logger.debug("price_book_resolved", extra={
                    "price_book_id": explicit.id,
                    "source": "explicit",
                })
                return explicit
            logger.info("explicit_price_book_rejected", extra={
                "price_book_id": price_book_id,
                "found": explicit is not None,
            })

        book = pick_default_book(reader.find_price_books(organization_id), organization_id)
        if book is None:
            logger.warning("no_active_price_book", extra={
                "organization_id": organization_id,
                "price_book_id": price_book_id,
            })
            raise NoActivePriceBookError(organization_id, price_book_id)

        logger.debug("price_book_resolved", extra={
            "price_book_id": book.id,
            "source": "default",
        })
        return book
