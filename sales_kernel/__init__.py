"""
Sales Kernel - pricing core of the shop's sale form.

Provides:
- Money and exchange-rate value objects (Decimal only)
- Batch and discount-code snapshots shared by the pricing engines
- Persistence of stock batches and discount codes
- Typed errors and structured logging
"""

__version__ = "0.1.0"
