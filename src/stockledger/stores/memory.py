"""In-process stores. Used by tests and by one-shot batch runs."""

from dataclasses import replace
from typing import Iterable

from ..core.models import Product, SaleEvent


class InMemoryCatalogStore:
    """Catalog keyed by product name, in first-insert order."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: dict[str, Product] = {}
        for product in products:
            self.upsert(product)

    def find_all(self) -> list[Product]:
        return [replace(p) for p in self._products.values()]

    def find_by_name(self, name: str) -> Product | None:
        product = self._products.get(name)
        return replace(product) if product else None

    def find_by_article(self, article: str) -> Product | None:
        if not article:
            return None
        for product in self._products.values():
            if product.article == article:
                return replace(product)
        return None

    def upsert(self, product: Product) -> None:
        self._products[product.name] = replace(product)

    def delete_all(self) -> None:
        self._products.clear()

    def __len__(self) -> int:
        return len(self._products)


class InMemoryLedgerStore:
    """Sale ledger held as a list, in insertion order."""

    def __init__(self, events: Iterable[SaleEvent] = ()):
        self._events: list[SaleEvent] = [replace(e) for e in events]

    def find_all(self) -> list[SaleEvent]:
        return [replace(e) for e in self._events]

    def find_sorted_by_date_desc(self) -> list[SaleEvent]:
        return sorted(self.find_all(), key=lambda e: e.date, reverse=True)

    def insert(self, event: SaleEvent) -> None:
        self._events.append(replace(event))

    def insert_many(self, events: Iterable[SaleEvent]) -> None:
        for event in events:
            self.insert(event)

    def delete_all(self) -> None:
        self._events.clear()

    def replace_all(self, events: Iterable[SaleEvent]) -> None:
        self._events = [replace(e) for e in events]

    def __len__(self) -> int:
        return len(self._events)
