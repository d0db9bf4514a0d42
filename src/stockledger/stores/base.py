"""
Store interfaces the ingest and analysis components depend on.

Components receive a store instance; they never reach for a module-level
database handle. Any object with these methods will do.
"""

from typing import Iterable, Protocol

from ..core.models import Product, SaleEvent


class CatalogStore(Protocol):
    def find_all(self) -> list[Product]: ...

    def find_by_name(self, name: str) -> Product | None: ...

    def find_by_article(self, article: str) -> Product | None: ...

    def upsert(self, product: Product) -> None:
        """Insert, or overwrite the product with the same name."""
        ...

    def delete_all(self) -> None: ...


class LedgerStore(Protocol):
    def find_all(self) -> list[SaleEvent]: ...

    def find_sorted_by_date_desc(self) -> list[SaleEvent]: ...

    def insert(self, event: SaleEvent) -> None: ...

    def insert_many(self, events: Iterable[SaleEvent]) -> None: ...

    def delete_all(self) -> None: ...

    def replace_all(self, events: Iterable[SaleEvent]) -> None:
        """Delete every event and insert the new ones as a single unit."""
        ...
