"""
Operations exposed to the presentation layer.

Any host (HTTP API, CLI, batch job) wraps an InventoryService. Stores are
injected; nothing here holds a global database handle.
"""

import logging
import threading
from pathlib import Path
from typing import Any, BinaryIO, Mapping, Sequence

from .clients.spreadsheet import SpreadsheetLoader
from .config import PipelineSettings
from .core.analysis import analyze_inventory
from .core.attribution import compute_capital_split, compute_stats
from .core.catalog import CatalogIngestor
from .core.models import Product, SaleEvent
from .core.reports import CapitalSplit, IngestResult, InventoryReport, SalesStats
from .core.sales import SaleIngestor
from .stores.base import CatalogStore, LedgerStore

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Catalog + ledger reconciliation and analytics.

    Ingests are serialized: one file is processed fully before the next
    starts. Reads take a snapshot list from the store per call.

    Usage:
        service = InventoryService(InMemoryCatalogStore(), InMemoryLedgerStore())
        service.ingest_stock_file("stock.xlsx")
        service.ingest_sales_file("orders.xlsx")
        service.get_stats().mine_share
        service.analyze_inventory().alerts
    """

    def __init__(
        self,
        catalog: CatalogStore,
        ledger: LedgerStore,
        settings: PipelineSettings | None = None,
        loader: SpreadsheetLoader | None = None,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.settings = settings or PipelineSettings()
        self.loader = loader or SpreadsheetLoader()
        self.catalog_ingestor = CatalogIngestor(catalog, self.settings)
        self.sale_ingestor = SaleIngestor(catalog, ledger, self.settings)
        self._ingest_lock = threading.Lock()

    # --- Ingest ---

    def ingest_stock(self, rows: Sequence[Mapping[str, Any]]) -> IngestResult:
        with self._ingest_lock:
            return self.catalog_ingestor.ingest(rows)

    def ingest_sales(
        self, source: Sequence[Mapping[str, Any]] | Mapping[str, Sequence[Mapping[str, Any]]]
    ) -> IngestResult:
        with self._ingest_lock:
            return self.sale_ingestor.ingest(source)

    def ingest_stock_file(self, source: Path | str | BinaryIO, suffix: str | None = None) -> IngestResult:
        """Decode a stock export (first sheet) and upsert it into the catalog."""
        rows = self.loader.load_rows(source, suffix)
        return self.ingest_stock(rows)

    def ingest_sales_file(self, source: Path | str | BinaryIO, suffix: str | None = None) -> IngestResult:
        """Decode an order export and replace the ledger with its delivered lines."""
        sheets = self.loader.load_sheets(source, suffix)
        return self.ingest_sales(sheets)

    def clear_catalog(self) -> None:
        with self._ingest_lock:
            self.catalog.delete_all()
        logger.info("Catalog cleared")

    # --- Queries ---

    def list_products(self) -> list[Product]:
        return self.catalog.find_all()

    def list_sales(self) -> list[SaleEvent]:
        """Ledger, newest first."""
        return self.ledger.find_sorted_by_date_desc()

    def get_stats(self) -> SalesStats:
        return compute_stats(self.ledger.find_all())

    def get_capital_split(self) -> CapitalSplit:
        return compute_capital_split(self.catalog.find_all())

    def analyze_inventory(self) -> InventoryReport:
        return analyze_inventory(
            self.catalog.find_all(), self.ledger.find_all(), self.settings.analyzer
        )
