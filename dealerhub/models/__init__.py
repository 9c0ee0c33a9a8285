"""
Data Models Package
Validation models for ingested data.
"""

from .product import CatalogEntryIngestion, DEFAULT_STOCK_ID

__all__ = [
    "CatalogEntryIngestion",
    "DEFAULT_STOCK_ID",
]
