"""ORM models for the pricing catalog."""

from pricing_kernel.models.price_book import PriceBookEntryModel, PriceBookModel
from pricing_kernel.models.product import ProductModel, ProductVariantModel
from pricing_kernel.models.rate_card import RateCardItemModel, RateCardModel
from pricing_kernel.models.tax import TaxClassModel, TaxRuleModel

__all__ = [
    "ProductModel",
    "ProductVariantModel",
    "PriceBookModel",
    "PriceBookEntryModel",
    "TaxClassModel",
    "TaxRuleModel",
    "RateCardModel",
    "RateCardItemModel",
]
