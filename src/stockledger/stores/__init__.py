# Catalog and ledger stores, injected into the ingest and analysis components

from .base import CatalogStore, LedgerStore
from .memory import InMemoryCatalogStore, InMemoryLedgerStore
from .sqlite import SQLiteDatabase, SQLiteCatalogStore, SQLiteLedgerStore

__all__ = [
    "CatalogStore",
    "LedgerStore",
    "InMemoryCatalogStore",
    "InMemoryLedgerStore",
    "SQLiteDatabase",
    "SQLiteCatalogStore",
    "SQLiteLedgerStore",
]
