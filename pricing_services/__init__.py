"""
pricing_services -- orchestration over the pure pricing engines.

Usage:
    from pricing_services import PriceQuoteService, quote_lines

    service = PriceQuoteService(catalog)
    result = service.quote(request)
"""

from pricing_services.batch import quote_lines
from pricing_services.quote_service import PriceQuoteService

__all__ = [
    "PriceQuoteService",
    "quote_lines",
]
