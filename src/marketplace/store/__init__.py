"""Marketplace persistence package.

Provides the SQLite schema and a store class wrapping every read and
conditional write the core performs.
"""

from marketplace.store.schema import (
    close_marketplace_db,
    init_marketplace_db,
    init_marketplace_tables,
)
from marketplace.store.store import MarketplaceStore

__all__ = [
    "MarketplaceStore",
    "close_marketplace_db",
    "init_marketplace_db",
    "init_marketplace_tables",
]
