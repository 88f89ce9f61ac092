"""
Pricing Kernel

Value types, ports and infrastructure for line-item pricing:
- Decimal-only money with ISO 4217 precision
- Immutable catalog snapshots (products, price books, tiers, tax rules)
- Typed, coded exceptions
- Structured JSON logging
- Read-only repository adapters (in-memory and SQLAlchemy)
"""

__version__ = "0.1.0"
